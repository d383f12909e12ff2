"""
Base Model Components and Mixins

Common functionality shared by the user models:

- DateTimeMixin: accepts ISO strings (``Z`` or ``+00:00`` suffix) for every
  ``datetime`` field and normalizes them to UTC.
- DynamoDBMixin: canonical conversion between a model and the flat attribute
  map stored in DynamoDB.

## Stored attribute names

Models declare their stored attribute names as pydantic aliases
(``Field(..., alias="UserId")``). The same aliases are used on the wire, so a
model renders identically to API callers and to DynamoDB, minus the key
attributes, which only exist in storage.

## Reading items

``from_dynamodb_item`` is strict about ``required_attributes`` and permissive
about everything else:

```python
class User(DynamoDBMixin, DateTimeMixin, BaseModel):
    required_attributes: ClassVar[Tuple[str, ...]] = ("PK", "SK", "UserId", ...)

User.from_dynamodb_item({"PK": ..., "UserId": ...})   # MissingFieldError('Email')
```

Optional attributes that are missing or stored as an empty string both come
back as ``None``.
"""

import logging
from datetime import datetime
from typing import Any, ClassVar, Dict, Tuple, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError as PydanticValidationError, field_validator

from ..exceptions import MissingFieldError, ValidationError
from ..utils import format_timestamp, to_utc

logger = logging.getLogger(__name__)


def _is_datetime_annotation(annotation: Any) -> bool:
    if annotation is datetime:
        return True
    if get_origin(annotation) is Union:
        return any(arg is datetime for arg in get_args(annotation))
    return False


class DateTimeMixin(BaseModel):
    """
    Mixin providing consistent datetime validation.

    Every ``datetime`` (or ``Optional[datetime]``) field accepts ISO strings with
    either a ``Z`` or an explicit offset, and is normalized to UTC. Naive values
    are assumed to be UTC already.
    """

    @field_validator('*', mode='before')
    @classmethod
    def validate_datetime_fields(cls, v, info):
        """
        Validate datetime fields consistently across all models.

        Non-datetime fields pass through unchanged.

        Raises:
            ValueError: If datetime format is invalid or type is unsupported
        """
        field = cls.model_fields.get(info.field_name)
        if field is None or not _is_datetime_annotation(field.annotation):
            return v

        if v is None:
            return v

        if isinstance(v, str):
            try:
                return to_utc(datetime.fromisoformat(v.replace('Z', '+00:00')))
            except ValueError as e:
                raise ValueError(f"Invalid datetime format: {v}. Expected ISO format.") from e

        if isinstance(v, datetime):
            return to_utc(v)

        raise ValueError(f"Invalid datetime type: {type(v)}. Expected datetime object or ISO string.")


class DynamoDBMixin(BaseModel):
    """
    Mixin providing DynamoDB serialization and deserialization.

    Subclasses list the stored attributes that must be present in
    ``required_attributes``; key attributes that are required but not part of
    the model (e.g. ``PK``) are checked and then dropped.
    """

    required_attributes: ClassVar[Tuple[str, ...]] = ()

    def to_dynamodb_item(self) -> Dict[str, Any]:
        """
        Convert model to a DynamoDB attribute map.

        - attributes are keyed by alias
        - ``None`` and empty-string values are omitted
        - ``datetime`` values become fixed-width UTC ISO strings

        Key attributes are not part of the model; callers add them.
        """
        item = {}
        for name, value in self.model_dump(by_alias=True).items():
            if value is None or value == "":
                continue
            if isinstance(value, datetime):
                value = format_timestamp(value)
            item[name] = value
        return item

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]):
        """
        Create model instance from a stored DynamoDB item.

        Raises:
            MissingFieldError: a required attribute is absent
            ValidationError: the item holds values the model rejects
        """
        key = {k: item[k] for k in ('PK', 'SK') if k in item}
        for attribute in cls.required_attributes:
            if item.get(attribute) is None:
                logger.error(f"{cls.__name__} item {key} is missing '{attribute}'")
                raise MissingFieldError(attribute, key)

        data = {}
        for name, field in cls.model_fields.items():
            alias = field.alias or name
            value = item.get(alias)
            if value is None or (value == "" and alias not in cls.required_attributes):
                continue
            data[alias] = value

        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Failed to convert DynamoDB item {key} to {cls.__name__}: {e}")
            raise ValidationError(f"Failed to convert DynamoDB item to {cls.__name__}: {e}", original_error=e) from e
