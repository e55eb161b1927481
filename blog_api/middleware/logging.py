"""
Blog API — Access Log Middleware
=================================

What:  One access log line per request in Common Log Format, the layout
       Apache and most log shippers already parse:

           127.0.0.1 - - [18/Oct/2026:09:15:02 +0000] "POST /authors HTTP/1.1" 201 58

       Fields: client address, identity and user (always "-"), UTC time,
       request line, status, response Content-Length ("-" when absent).

The request id is attached as a record attribute rather than printed, so the
line stays parseable; handlers that want it can add %(request_id)s to their
format. Log level follows the status code: 5xx → ERROR, 4xx → WARNING,
everything else → INFO.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from blog_api.middleware.request_id import request_id_var

logger = logging.getLogger("blog_api.access")

CLF_TIME_FORMAT = "%d/%b/%Y:%H:%M:%S %z"


def format_common_log(
    client: str,
    method: str,
    target: str,
    http_version: str,
    status: int,
    content_length: Optional[str],
    when: Optional[datetime] = None,
) -> str:
    when = when or datetime.now(timezone.utc)
    return '%s - - [%s] "%s %s HTTP/%s" %d %s' % (
        client or "-",
        when.strftime(CLF_TIME_FORMAT),
        method,
        target,
        http_version,
        status,
        content_length or "-",
    )


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access line once the response status and headers are known."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"

        logger.log(
            _level_for(response.status_code),
            format_common_log(
                client=request.client.host if request.client else "-",
                method=request.method,
                target=target,
                http_version=request.scope.get("http_version", "1.1"),
                status=response.status_code,
                content_length=response.headers.get("content-length"),
            ),
            extra={"request_id": request_id_var.get("")},
        )
        return response
