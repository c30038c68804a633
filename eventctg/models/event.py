from __future__ import annotations

from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventRecord(BaseModel):
    """A stored event. Only identity and creation time are fixed; every other field is caller-defined."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(alias="_id")
    createdAt: Any = None

    @field_validator("id", mode="before")
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    @classmethod
    def from_document(cls, document: dict) -> "EventRecord":
        return cls.model_validate(document)

    def to_response(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class InsertAck(BaseModel):
    acknowledged: bool
    insertedId: str


class DeleteAck(BaseModel):
    acknowledged: bool
    deletedCount: int

    @classmethod
    def from_result(cls, result: Any) -> "DeleteAck":
        return cls(acknowledged=result.acknowledged, deletedCount=result.deleted_count)


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Return the ObjectId for a 24-hex-digit string, or None when malformed."""

    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)
