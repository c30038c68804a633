"""Data access and account rules for the users collection."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from eventctg.core.exceptions import NotFoundError
from eventctg.models import DeleteAck, Role, Status, UserRecord, UserUpsertRequest
from eventctg.utils.audit import AuditLogger, audit_logger

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserService:
    def __init__(self, collection: AsyncIOMotorCollection, *, auditor: AuditLogger = audit_logger) -> None:
        self.collection = collection
        self.auditor = auditor

    async def get_user(self, email: str) -> UserRecord:
        document = await self.collection.find_one({"email": email})
        if document is None:
            raise NotFoundError("User not found", exists=False)
        return UserRecord.from_document(document)

    async def list_users(self) -> List[UserRecord]:
        documents = await self.collection.find().to_list(length=None)
        return [UserRecord.from_document(doc) for doc in documents]

    async def upsert_user(self, email: str, payload: UserUpsertRequest) -> Tuple[UserRecord, bool]:
        """Create the user on first sight, otherwise refresh profile fields.

        Returns the stored record and whether it was created. On an existing
        user the role only changes when the body pairs ``role`` with
        ``isAdminRequest``; a bare ``role`` is ignored.
        """

        existing = await self.collection.find_one({"email": email})
        if existing is None:
            created = await self._insert_user(email, payload)
            if created is not None:
                return created, True
            # Another request created this email between our read and insert.
            existing = await self.collection.find_one({"email": email})
            if existing is None:
                raise NotFoundError("User not found", exists=False)

        updates: Dict[str, Any] = {
            "name": payload.name if payload.name is not None else existing.get("name", ""),
            "photoURL": payload.photoURL if payload.photoURL is not None else existing.get("photoURL", ""),
            "lastLogin": _utcnow(),
        }
        if payload.role is not None and payload.isAdminRequest:
            updates["role"] = payload.role.value
        elif payload.role is not None:
            logger.warning("Ignoring role change for %s without administrative request flag", email)

        document = await self.collection.find_one_and_update(
            {"email": email},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            raise NotFoundError("User not found", exists=False)
        if "role" in updates:
            self.auditor.record("user.role_updated", email, {"role": updates["role"], "via": "upsert"})
        return UserRecord.from_document(document), False

    async def _insert_user(self, email: str, payload: UserUpsertRequest) -> Optional[UserRecord]:
        now = _utcnow()
        document = {
            "email": email,
            "name": payload.name or "",
            "photoURL": payload.photoURL or "",
            "role": (payload.role or Role.USER).value,
            "status": Status.ACTIVE.value,
            "createdAt": now,
            "lastLogin": now,
        }
        result = await self.collection.update_one(
            {"email": email},
            {"$setOnInsert": document},
            upsert=True,
        )
        if result.upserted_id is None:
            return None

        logger.info("Created user %s", email)
        self.auditor.record("user.created", email, {"role": document["role"]})
        return UserRecord.from_document({**document, "_id": result.upserted_id})

    async def update_role(self, email: str, role: Any) -> UserRecord:
        parsed = Role.parse(role)
        document = await self._set_fields(email, {"role": parsed.value})
        self.auditor.record("user.role_updated", email, {"role": parsed.value})
        return document

    async def update_status(self, email: str, status: Any) -> UserRecord:
        parsed = Status.parse(status)
        document = await self._set_fields(email, {"status": parsed.value})
        self.auditor.record("user.status_updated", email, {"status": parsed.value})
        return document

    async def _set_fields(self, email: str, fields: Dict[str, Any]) -> UserRecord:
        document = await self.collection.find_one_and_update(
            {"email": email},
            {"$set": {**fields, "updatedAt": _utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            raise NotFoundError("User not found")
        return UserRecord.from_document(document)

    async def delete_user(self, email: str) -> DeleteAck:
        result = await self.collection.delete_one({"email": email})
        if result.deleted_count:
            self.auditor.record("user.deleted", email)
        return DeleteAck.from_result(result)

    async def is_admin(self, email: str) -> bool:
        role = await self._stored_role(email)
        return role is not None and role.is_admin

    async def is_organizer(self, email: str) -> bool:
        role = await self._stored_role(email)
        return role is not None and role.is_organizer

    async def _stored_role(self, email: str) -> Optional[Role]:
        document = await self.collection.find_one({"email": email}, {"role": 1})
        if document is None:
            return None
        try:
            return Role(document.get("role"))
        except ValueError:
            return None
