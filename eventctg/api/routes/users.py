"""User account endpoints.

Access control is the caller's concern: every route here trusts its input,
including the ``isAdminRequest`` flag on upserts.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response, status

from eventctg.api.dependencies import get_user_service
from eventctg.models import DeleteAck, RoleUpdateRequest, StatusUpdateRequest, UserUpsertRequest
from eventctg.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/check/admin/{email}")
async def check_admin(email: str, service: UserService = Depends(get_user_service)) -> Dict[str, bool]:
    return {"isAdmin": await service.is_admin(email)}


@router.get("/check/organizer/{email}")
async def check_organizer(email: str, service: UserService = Depends(get_user_service)) -> Dict[str, bool]:
    return {"isOrganizer": await service.is_organizer(email)}


@router.get("")
async def list_users(service: UserService = Depends(get_user_service)) -> List[Dict[str, Any]]:
    users = await service.list_users()
    return [user.to_response() for user in users]


@router.get("/{email}")
async def get_user(email: str, service: UserService = Depends(get_user_service)) -> Dict[str, Any]:
    user = await service.get_user(email)
    return user.to_response(exists=True)


@router.put("/{email}")
async def upsert_user(
    email: str,
    response: Response,
    payload: Optional[UserUpsertRequest] = None,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Create the user on first login, otherwise refresh the profile."""

    user, created = await service.upsert_user(email, payload or UserUpsertRequest())
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return user.to_response()


@router.patch("/{email}/role")
async def update_role(
    email: str,
    payload: RoleUpdateRequest,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await service.update_role(email, payload.role)
    return user.to_response()


@router.patch("/{email}/status")
async def update_status(
    email: str,
    payload: StatusUpdateRequest,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await service.update_status(email, payload.status)
    return user.to_response()


@router.delete("/{email}", response_model=DeleteAck)
async def delete_user(email: str, service: UserService = Depends(get_user_service)) -> DeleteAck:
    return await service.delete_user(email)
