import uuid
from typing import Any, Optional

from .schemas import ErrorEnvelope, ErrorResponse


def new_uuid() -> str:
    return str(uuid.uuid4())


def error_body(code: str, message: str, details: Optional[dict[str, Any]] = None) -> dict:
    """Render the ``{"error": {...}}`` body sent for rejected requests."""
    envelope = ErrorEnvelope(code=code, message=message, details=details, requestId=new_uuid())
    return ErrorResponse(error=envelope).model_dump()
