"""Process shutdown helpers."""

from __future__ import annotations

import logging
from typing import Optional

from eventctg.core.database import DatabaseManager

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


async def shutdown(database: DatabaseManager, signal_name: Optional[str] = None) -> int:
    """Close the store connection and return the process exit code."""

    logger.info("Received %s. Closing server...", signal_name or "shutdown")
    try:
        await database.close()
    except Exception:
        logger.exception("Error during shutdown")
        return EXIT_FAILURE
    return EXIT_OK
