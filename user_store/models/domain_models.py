"""
Domain Models for the User Store

The User is the only entity in the users table. Its stored and wire
attribute names are the PascalCase aliases below; the derived key attributes
(PK, SK, GSI1PK, GSI1SK) are required on every stored item but never exposed
on the model.
"""

from datetime import datetime
from typing import ClassVar, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..core import keys
from .base import DateTimeMixin, DynamoDBMixin


# Optional profile attributes, in stored-name form
OPTIONAL_ATTRIBUTES: Tuple[str, ...] = (
    "FirstName",
    "LastName",
    "ProfilePhoto",
    "Summary",
    "PhoneNumber",
)


class User(DynamoDBMixin, DateTimeMixin, BaseModel):
    """
    Core domain model for a user.

    ``user_id`` is a ULID assigned once by the system at creation.
    ``created_date`` never changes; ``updated_date`` moves on every write.
    Optional profile fields are ``None`` when unset, whether the attribute was
    never written or was stored blank.
    """

    required_attributes: ClassVar[Tuple[str, ...]] = (
        keys.PARTITION_KEY,
        keys.SORT_KEY,
        "UserId",
        "Username",
        "Email",
        keys.GSI1_PARTITION_KEY,
        keys.GSI1_SORT_KEY,
        "CreatedDate",
        "UpdatedDate",
    )

    user_id: str = Field(..., alias="UserId", description="ULID of the user")
    username: str = Field(..., alias="Username")
    first_name: Optional[str] = Field(None, alias="FirstName")
    last_name: Optional[str] = Field(None, alias="LastName")
    email: str = Field(..., alias="Email")
    profile_photo: Optional[str] = Field(None, alias="ProfilePhoto", description="Profile photo URL")
    summary: Optional[str] = Field(None, alias="Summary")
    phone_number: Optional[str] = Field(None, alias="PhoneNumber")

    created_date: datetime = Field(..., alias="CreatedDate")
    updated_date: datetime = Field(..., alias="UpdatedDate")

    model_config = ConfigDict(populate_by_name=True)

    def key(self) -> dict:
        """Primary key of the stored item."""
        return keys.primary_key(self.user_id)

    def to_dynamodb_item(self) -> dict:
        """Full stored item, including the derived key attributes."""
        item = super().to_dynamodb_item()
        item.update(self.key())
        item.update(keys.index_attributes(self.email, self.username))
        return item

    def to_response(self) -> dict:
        """JSON-ready wire representation (aliases, ISO timestamps)."""
        return self.model_dump(mode="json", by_alias=True)
