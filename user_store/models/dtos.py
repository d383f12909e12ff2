"""
Write-Optimized DTOs (Data Transfer Objects)

These models are the write side of the user store: they validate request
bodies and know how to turn themselves into DynamoDB writes.

Create and update deliberately treat a missing optional field differently:

- create: the attribute is simply not written
- update: the attribute is REMOVEd, because an update replaces every mutable
  field wholesale

Each optional field therefore resolves to an explicit AttributeAction on the
update path (PUT with a value, or DELETE), instead of collapsing "never set"
and "blanked" into the same empty string.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core import keys
from ..utils import format_timestamp
from .domain_models import OPTIONAL_ATTRIBUTES, User

EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+$'


class AttributeAction(str, Enum):
    """What an update does to a single stored attribute."""
    PUT = "PUT"
    DELETE = "DELETE"


class UserArgs(BaseModel):
    """Fields a caller may supply for a user; shared by create and update."""

    username: str = Field(..., alias="Username", min_length=1, max_length=128)
    first_name: Optional[str] = Field(None, alias="FirstName", max_length=256)
    last_name: Optional[str] = Field(None, alias="LastName", max_length=256)
    email: str = Field(..., alias="Email", min_length=3, max_length=320, pattern=EMAIL_PATTERN)
    profile_photo: Optional[str] = Field(None, alias="ProfilePhoto", max_length=2048)
    summary: Optional[str] = Field(None, alias="Summary", max_length=4000)
    phone_number: Optional[str] = Field(None, alias="PhoneNumber", max_length=32)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('first_name', 'last_name', 'profile_photo', 'summary', 'phone_number', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        """An empty optional value means the same as leaving it out."""
        if v == "":
            return None
        return v

    def optional_values(self) -> Dict[str, Optional[str]]:
        """Optional attributes keyed by stored name; unset ones map to None."""
        dumped = self.model_dump(by_alias=True)
        return {name: dumped.get(name) for name in OPTIONAL_ATTRIBUTES}


class CreateUserArgs(UserArgs):
    """Validated body of a create request."""

    def to_user(self, user_id: str, now: datetime) -> User:
        """Build the stored user; both timestamps start out equal."""
        return User(
            user_id=user_id,
            created_date=now,
            updated_date=now,
            **self.model_dump(),
        )


class UpdateUserArgs(UserArgs):
    """Validated body of an update request (full replacement of mutable fields)."""

    def attribute_actions(self) -> Dict[str, Tuple[AttributeAction, Optional[str]]]:
        """Resolve every optional attribute to PUT(value) or DELETE."""
        actions = {}
        for name, value in self.optional_values().items():
            if value is None:
                actions[name] = (AttributeAction.DELETE, None)
            else:
                actions[name] = (AttributeAction.PUT, value)
        return actions

    def to_update(self, now: datetime) -> Tuple[Dict[str, Any], List[str]]:
        """Split the replacement into attributes to SET and attributes to REMOVE.

        The GSI1 keys are recomputed from the new email/username on every call.
        """
        set_values: Dict[str, Any] = {
            "Username": self.username,
            "Email": self.email,
        }
        set_values.update(keys.index_attributes(self.email, self.username))

        remove_attributes = []
        for name, (action, value) in self.attribute_actions().items():
            if action is AttributeAction.PUT:
                set_values[name] = value
            else:
                remove_attributes.append(name)

        set_values["UpdatedDate"] = format_timestamp(now)
        return set_values, remove_attributes
