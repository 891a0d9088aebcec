from typing import Any, Dict, List, Optional
from .models import InstagramRequest, ProfileRecord


def build_response(
    req: InstagramRequest,
    url: str,
    record: ProfileRecord,
    debug_msgs: List[str],
    debug_files: Optional[dict] = None,
) -> Dict[str, Any]:
    """Compose the public success response.

    `data` uses the legacy field names; `debug` is only present when the
    request asked for it.
    """
    resp = {
        "success": True,
        "url": url,
        "data": record.model_dump(by_alias=True),
    }
    if req.debug:
        resp["debug"] = " | ".join(debug_msgs)
    if debug_files:
        resp["debug_files"] = debug_files
    return resp


def build_error(
    req: InstagramRequest,
    url: Optional[str],
    error: str,
    message: str,
    debug_msgs: List[str],
    debug_files: Optional[dict] = None,
) -> Dict[str, Any]:
    """Build an error response carrying a message string and no traceback."""
    resp = {
        "success": False,
        "url": url,
        "error": error,
        "message": message,
    }
    if req.debug:
        resp["debug"] = " | ".join(debug_msgs)
    if debug_files:
        resp["debug_files"] = debug_files
    return resp
