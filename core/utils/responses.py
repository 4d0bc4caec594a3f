"""Standardized API response helpers."""

import logging
from typing import Any, Callable, Dict, Optional

from asgiref.sync import sync_to_async

from core.exceptions import SERVICE_ERRORS

logger = logging.getLogger(__name__)


def success_response(
    data: Any = None, message: str = "Success", count: Optional[int] = None
) -> Dict[str, Any]:
    """Return a standardized success response."""
    response = {"status": "success", "message": message, "data": data}
    if count is not None:
        response["count"] = count
    return response


def error_response(message: str, code: int = 400) -> Dict[str, Any]:
    """Return a standardized error response."""
    return {"status": "error", "message": message, "code": code}


async def service_response(
    func: Callable[[], Any], message: str = "Success", with_count: bool = False
) -> Dict[str, Any]:
    """
    Run a sync service call in a worker thread and wrap the outcome.

    Expected service errors become error envelopes carrying their code.
    Anything else is logged and reported as a 500.
    """
    try:
        data = await sync_to_async(func)()
    except SERVICE_ERRORS as exc:
        logger.warning("Service call rejected: %s", exc)
        return error_response(str(exc), code=exc.code)
    except Exception as exc:
        logger.exception("Service call failed")
        return error_response(f"Unexpected error: {exc}", code=500)
    count = len(data) if with_count and data is not None else None
    return success_response(data, message, count=count)
