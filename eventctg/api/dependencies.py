from __future__ import annotations

from fastapi import Depends, Request

from eventctg.core.config import Settings
from eventctg.core.database import Collections, DatabaseManager
from eventctg.services.events import EventService
from eventctg.services.users import UserService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> DatabaseManager:
    return request.app.state.database


async def get_collections(database: DatabaseManager = Depends(get_database)) -> Collections:
    return await database.acquire()


async def get_event_service(
    collections: Collections = Depends(get_collections),
    settings: Settings = Depends(get_app_settings),
) -> EventService:
    return EventService(collections.events, latest_limit=settings.LATEST_EVENTS_LIMIT)


async def get_user_service(collections: Collections = Depends(get_collections)) -> UserService:
    return UserService(collections.users)
