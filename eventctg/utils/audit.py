"""Audit logging for user account changes."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

logger = logging.getLogger("eventctg.audit")


class AuditLogger:
    """Emit one JSON line per account-affecting action."""

    def record(self, action: str, subject: str, details: Dict[str, Any] | None = None) -> None:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "subject": subject,
            "details": details or {},
        }
        logger.info(json.dumps(payload, default=str))


audit_logger = AuditLogger()

__all__ = ["audit_logger", "AuditLogger"]
