"""
ASGI request logging for FastAPI / Starlette apps.

The line is written once the response body has been sent, so durations
cover the same span as the WSGI middleware.

Usage:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
"""

from typing import AsyncIterator, Callable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from linelog.logger import Record
from linelog.middleware import ERRORED, FINISHED, finish


async def _logged_body(body: AsyncIterator, on_done: Callable[[bool], None]) -> AsyncIterator:
    failed = False
    try:
        async for chunk in body:
            yield chunk
    except Exception:
        failed = True
        raise
    finally:
        on_done(failed)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes one line per request, ``request_error`` for codes >= 400."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        finished = Record(FINISHED)
        errored = Record(ERRORED)
        path = request.url.path
        params = request.url.query

        try:
            response = await call_next(request)
        except Exception:
            finish(finished, errored, 500, path, params)
            raise

        def on_done(failed: bool) -> None:
            code = 500 if failed else response.status_code
            finish(finished, errored, code, path, params)

        body = getattr(response, 'body_iterator', None)
        if body is None:
            on_done(False)
        else:
            response.body_iterator = _logged_body(body, on_done)
        return response
