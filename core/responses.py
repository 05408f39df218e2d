from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def create_response(
    data: Any = None,
    error: Optional[str] = None,
    status_code: int = 200,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Wrap a payload in the ``{"data": ...}`` / ``{"error": ...}`` envelope."""
    if error is not None:
        content = {"error": error}
    else:
        content = {"data": data}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content), headers=headers)
