from typing import Any, Dict, List, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    *,
    data: Optional[Any] = None,
    message: str = "Operation successful",
    status_code: int = status.HTTP_200_OK,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Single source of truth for successful API responses.
    Automatically sets status = "success" if < 400 else "error"
    """
    status_str = "success" if status_code < 400 else "error"
    data = jsonable_encoder(data) if data is not None else {}

    return JSONResponse(
        status_code=status_code,
        content={
            "status_code": status_code,
            "status": status_str,
            "message": message,
            "data": data,
        },
        headers=headers,
    )


def error_response(
    *,
    error: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    details: Optional[str] = None,
    suggestions: Optional[List[str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Error envelope: human-readable ``error`` plus optional diagnostics and hints."""
    content: Dict[str, Any] = {
        "status_code": status_code,
        "status": "error",
        "error": error,
    }
    if details:
        content["details"] = details
    if suggestions:
        content["suggestions"] = suggestions

    return JSONResponse(status_code=status_code, content=content, headers=headers)
