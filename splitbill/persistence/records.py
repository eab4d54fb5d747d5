"""On-disk record shape for the users file.

The file is a JSON array of user objects with camelCase keys. Files
written by the earlier Node server used ``name``, ``password``,
``googleId``, ``picture`` and ``lastLogin``; those are accepted on read.
Writes always use the canonical keys.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class UserRecord(BaseModel):
    """One entry of the users file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Older files hold millisecond timestamps as ids, sometimes as numbers
    id: str
    email: str
    display_name: Optional[str] = Field(
        None,
        alias="displayName",
        validation_alias=AliasChoices("displayName", "display_name", "name"),
    )
    username: Optional[str] = None
    password_hash: Optional[str] = Field(
        None,
        alias="passwordHash",
        validation_alias=AliasChoices("passwordHash", "password_hash", "password"),
    )
    external_id: Optional[str] = Field(
        None,
        alias="externalId",
        validation_alias=AliasChoices("externalId", "external_id", "googleId"),
    )
    avatar_url: Optional[str] = Field(
        None,
        alias="avatarUrl",
        validation_alias=AliasChoices("avatarUrl", "avatar_url", "picture"),
    )
    created_at: Optional[datetime] = Field(
        None,
        alias="createdAt",
        validation_alias=AliasChoices("createdAt", "created_at"),
    )
    last_login_at: Optional[datetime] = Field(
        None,
        alias="lastLoginAt",
        validation_alias=AliasChoices("lastLoginAt", "last_login_at", "lastLogin"),
    )

    @field_validator("id", "external_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: object) -> object:
        """Accept numeric identifiers from older files."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


USERS_FILE = TypeAdapter(list[UserRecord])
