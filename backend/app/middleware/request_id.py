"""
DevConnect Backend — Request ID Middleware
============================================

What:  Gives every request a short correlation ID, echoed as X-Request-ID.
How:   Accepts the caller's X-Request-ID if it is a plain token of at most
       64 characters, otherwise mints 8 hex chars; publishes it through a
       ContextVar so services, handlers and error bodies can read it.

The ID appears in the access log, in every error body ("request_id"), and
in service log lines that prefix it, e.g. a 409 on POST /request/send is
traceable from the client's response to the conflicting request row.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Client IDs end up in log lines: no whitespace or control characters
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        rid = incoming if _VALID_REQUEST_ID.match(incoming) else new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
