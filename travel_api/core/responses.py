from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse


def envelope(message: str, data: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return body


def error_response(
    status_code: int,
    message: str,
    *,
    detail: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    include_detail: bool = False,
) -> JSONResponse:
    """Failure envelope; ``detail`` is only exposed in development."""
    body: Dict[str, Any] = {"success": False, "message": message}
    if include_detail and detail:
        body["error"] = detail
    return JSONResponse(status_code=status_code, content=body, headers=headers)
