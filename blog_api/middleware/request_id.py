"""
Blog API — Request ID Middleware
=================================

What:  Gives each request a correlation id, echoed in the X-Request-ID
       response header and in the "request_id" field of every error body.
How:   The id is stored in a ContextVar so exception handlers and the access
       logger can read it without having the request object at hand.

A client-sent X-Request-ID is reused only if it is 1-64 characters of
[A-Za-z0-9._-]. Anything else is replaced: the id ends up in log records
and JSON error bodies, which must not carry arbitrary client text.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_ACCEPTED_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


def resolve_request_id(sent: str) -> str:
    if sent and _ACCEPTED_ID.fullmatch(sent):
        return sent
    return uuid.uuid4().hex


class RequestIDMiddleware(BaseHTTPMiddleware):

    HEADER = "X-Request-ID"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(self.HEADER, ""))
        request.state.request_id = rid

        # Left set after call_next: the catch-all 500 handler runs outside
        # this middleware and still reports the id
        request_id_var.set(rid)
        response = await call_next(request)

        response.headers[self.HEADER] = rid
        return response
