"""Event collection endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, status

from eventctg.api.dependencies import get_event_service
from eventctg.models import DeleteAck, InsertAck
from eventctg.services.events import EventService

router = APIRouter(tags=["events"])


@router.get("/events")
async def list_events(
    email: Optional[str] = None,
    service: EventService = Depends(get_event_service),
) -> List[Dict[str, Any]]:
    """List every event, or only those belonging to ``email``."""

    events = await service.list_events(email)
    return [event.to_response() for event in events]


@router.get("/latest-events")
async def latest_events(service: EventService = Depends(get_event_service)) -> List[Dict[str, Any]]:
    """Most recent events by ``start_date``; undated events sort last."""

    events = await service.latest_events()
    return [event.to_response() for event in events]


@router.get("/events/{event_id}")
async def get_event(event_id: str, service: EventService = Depends(get_event_service)) -> Dict[str, Any]:
    event = await service.get_event(event_id)
    return event.to_response()


@router.post("/events", response_model=InsertAck, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: Dict[str, Any] = Body(...),
    service: EventService = Depends(get_event_service),
) -> InsertAck:
    return await service.create_event(payload)


@router.delete("/events/{event_id}", response_model=DeleteAck)
async def delete_event(event_id: str, service: EventService = Depends(get_event_service)) -> DeleteAck:
    return await service.delete_event(event_id)
