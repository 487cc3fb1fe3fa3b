"""ApiResponse envelope shared by every rm_* router.

Success:
    {"code": 0, "message": "success", "data": {...}, "timestamp": "...",
     "request_id": "req_..."}
Revert:
    {"code": 3013, "message": "Already paid", "data": null, ...}

`code` and `message` on a revert are the AppError's; the message is the
contract's revert reason verbatim. `timestamp` is wall-clock UTC, not block
time. `request_id` matches the one RequestLogMiddleware logs.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def success_response(data: Any = None, request: Request | None = None) -> ApiResponse:
    return for_request(ApiResponse(data=data), request)


def error_response(code: int, message: str, request: Request | None = None) -> ApiResponse:
    return for_request(ApiResponse(code=code, message=message), request)


def for_request(resp: ApiResponse, request: Request | None) -> ApiResponse:
    """Reuse the middleware's request id so responses and log lines correlate."""
    if request is not None:
        resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
