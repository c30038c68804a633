from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from eventctg.core.exceptions import ValidationError


class Role(str, Enum):
    USER = "user"
    ORGANIZER = "organizer"
    ADMIN = "admin"

    @property
    def is_admin(self) -> bool:
        return self is Role.ADMIN

    @property
    def is_organizer(self) -> bool:
        return self in (Role.ORGANIZER, Role.ADMIN)

    @classmethod
    def parse(cls, value: Any) -> "Role":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(role.value for role in cls)
            raise ValidationError(f"Invalid role '{value}'. Expected one of: {allowed}") from None


class Status(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"

    @classmethod
    def parse(cls, value: Any) -> "Status":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(status.value for status in cls)
            raise ValidationError(f"Invalid status '{value}'. Expected one of: {allowed}") from None


class UserRecord(BaseModel):
    """A stored user, keyed by email."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="_id")
    email: str
    name: str = ""
    photoURL: str = ""
    role: Role = Role.USER
    status: Status = Status.ACTIVE
    createdAt: Optional[datetime] = None
    lastLogin: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @field_validator("id", mode="before")
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    @classmethod
    def from_document(cls, document: dict) -> "UserRecord":
        return cls.model_validate(document)

    def to_response(self, **extra: Any) -> dict:
        return {**self.model_dump(mode="json", by_alias=True), **extra}


class UserUpsertRequest(BaseModel):
    """Body of PUT /users/{email}; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    photoURL: Optional[str] = None
    role: Optional[Role] = None
    isAdminRequest: bool = False


class RoleUpdateRequest(BaseModel):
    role: Any = None


class StatusUpdateRequest(BaseModel):
    status: Any = None
