from .event import DeleteAck, EventRecord, InsertAck, parse_object_id
from .user import Role, RoleUpdateRequest, Status, StatusUpdateRequest, UserRecord, UserUpsertRequest

__all__ = [
    "DeleteAck",
    "EventRecord",
    "InsertAck",
    "Role",
    "RoleUpdateRequest",
    "Status",
    "StatusUpdateRequest",
    "UserRecord",
    "UserUpsertRequest",
    "parse_object_id",
]
