"""
WSGI middleware logging one line per request.

Usage with Flask:
    app = Flask(__name__)
    app.wsgi_app = log_requests(app.wsgi_app)
"""

from typing import Any, Callable, Iterable, Iterator, Optional

from linelog.logger import Record

FINISHED = 'request_finished'
ERRORED = 'request_error'


def describe(code: int, path: str, params: str) -> str:
    return f'code: {code}, path: {path}, params: {params}'


def wsgi_path(environ: dict) -> str:
    """Request path decoded from the latin-1 WSGI strings back to UTF-8."""
    raw = environ.get('SCRIPT_NAME', '') + environ.get('PATH_INFO', '')
    return raw.encode('latin-1', 'replace').decode('utf-8', 'replace')


def finish(finished: Record, errored: Record, code: int, path: str, params: str) -> None:
    """Log on ``errored`` for codes >= 400, otherwise on ``finished``."""
    record = errored if code >= 400 else finished
    record.log(describe(code, path, params))


class StatusRecorder:
    """
    Wraps ``start_response`` and remembers the status code it was given.

    Everything is forwarded unchanged; the code stays 200 until a status
    line is seen.
    """

    def __init__(self, start_response: Callable):
        self._start_response = start_response
        self.code = 200

    def __call__(self, status: str, headers: list, exc_info: Optional[Any] = None) -> Callable:
        try:
            self.code = int(status.split(' ', 1)[0])
        except ValueError:
            pass
        if exc_info is None:
            return self._start_response(status, headers)
        return self._start_response(status, headers, exc_info)


class _LoggedBody:
    """
    Response iterable that calls ``on_done`` once when exhausted or closed.

    ``on_done`` receives True when producing the body raised.
    """

    def __init__(self, body: Iterable[bytes], on_done: Callable[[bool], None]):
        self._body = body
        self._on_done = on_done
        self._done = False

    def __len__(self) -> int:
        # TypeError for unsized bodies, same as len() on them
        return len(self._body)  # type: ignore[arg-type]

    def __bool__(self) -> bool:
        return True

    def _finish(self, failed: bool = False) -> None:
        if not self._done:
            self._done = True
            self._on_done(failed)

    def __iter__(self) -> Iterator[bytes]:
        try:
            for chunk in self._body:
                yield chunk
        except Exception:
            self._finish(failed=True)
            raise
        self._finish()

    def close(self) -> None:
        try:
            close = getattr(self._body, 'close', None)
            if close is not None:
                close()
        finally:
            self._finish()


class RequestLogger:
    """Log request information and duration for a WSGI application."""

    def __init__(self, app: Callable):
        self.app = app

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        recorder = StatusRecorder(start_response)
        finished = Record(FINISHED)
        errored = Record(ERRORED)
        path = wsgi_path(environ)
        params = environ.get('QUERY_STRING', '')

        try:
            body = self.app(environ, recorder)
        except Exception:
            finish(finished, errored, 500, path, params)
            raise

        # returned as is so the server can still use sendfile
        file_wrapper = environ.get('wsgi.file_wrapper')
        if isinstance(file_wrapper, type) and isinstance(body, file_wrapper):
            finish(finished, errored, recorder.code, path, params)
            return body

        def on_done(failed: bool) -> None:
            code = 500 if failed else recorder.code
            finish(finished, errored, code, path, params)

        return _LoggedBody(body, on_done)


def log_requests(app: Callable) -> RequestLogger:
    """Wrap a WSGI app so every request writes one line."""
    return RequestLogger(app)
