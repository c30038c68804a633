"""Data access for the events collection."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING

from eventctg.core.exceptions import NotFoundError, ValidationError
from eventctg.models import DeleteAck, EventRecord, InsertAck, parse_object_id

logger = logging.getLogger(__name__)

# MongoDB orders a missing or null start_date below every dated value, so a
# descending sort places undated events after all dated ones.
LATEST_SORT_FIELD = "start_date"


class EventService:
    def __init__(self, collection: AsyncIOMotorCollection, *, latest_limit: int = 6) -> None:
        self.collection = collection
        self.latest_limit = latest_limit

    async def list_events(self, email: Optional[str] = None) -> List[EventRecord]:
        query: Dict[str, Any] = {"email": email} if email else {}
        documents = await self.collection.find(query).to_list(length=None)
        return [EventRecord.from_document(doc) for doc in documents]

    async def latest_events(self) -> List[EventRecord]:
        cursor = self.collection.find().sort(LATEST_SORT_FIELD, DESCENDING).limit(self.latest_limit)
        documents = await cursor.to_list(length=self.latest_limit)
        return [EventRecord.from_document(doc) for doc in documents]

    async def get_event(self, event_id: str) -> EventRecord:
        object_id = _require_object_id(event_id)
        document = await self.collection.find_one({"_id": object_id})
        if document is None:
            raise NotFoundError("Event not found")
        return EventRecord.from_document(document)

    async def create_event(self, payload: Dict[str, Any]) -> InsertAck:
        document = {key: value for key, value in payload.items() if key != "_id"}
        if not document.get("createdAt"):
            document["createdAt"] = datetime.now(timezone.utc)

        result = await self.collection.insert_one(document)
        logger.info("Created event %s", result.inserted_id)
        return InsertAck(acknowledged=result.acknowledged, insertedId=str(result.inserted_id))

    async def delete_event(self, event_id: str) -> DeleteAck:
        object_id = _require_object_id(event_id)
        result = await self.collection.delete_one({"_id": object_id})
        return DeleteAck.from_result(result)


def _require_object_id(event_id: str):
    object_id = parse_object_id(event_id)
    if object_id is None:
        raise ValidationError("Invalid event id")
    return object_id
