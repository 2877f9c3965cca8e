"""
LineLog: single-line JSON records written to the configured sinks.

Line shapes:
    {"name": "job", "desc": "started", "timestamp": "2026-02-08T20:30:00Z"}
    {"error": "connection refused", "timestamp": "2026-02-08T20:30:00Z"}
    {"name": "job", "desc": "done", "duration": 8, "timestamp": "..."}
    {"name": "api", "code": 200, "uri": "/foo", "params": "bar=1", "duration": 8, "timestamp": "..."}
"""

import json
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import requests

from linelog import clock, sinks
from linelog.clock import formatted_now
from linelog.sinks import Sink, write_line


def _format(desc: str, args: tuple) -> str:
    """Apply printf-style ``args`` to ``desc``; never raises."""
    if not args:
        return desc
    try:
        return desc % args
    except (TypeError, ValueError, KeyError):
        extra = ', '.join(repr(a) for a in args)
        return f'{desc} %!(EXTRA {extra})'


def _emit(sink: Sink, fields: Dict[str, Any]) -> None:
    write_line(sink, json.dumps(fields, ensure_ascii=False, default=str))


def _message_fields(name: str, desc: str) -> Dict[str, Any]:
    return {'name': name, 'desc': desc, 'timestamp': formatted_now()}


def _error_fields(err: Any) -> Dict[str, Any]:
    text = str(err)
    if not text and isinstance(err, BaseException):
        text = type(err).__name__
    return {'error': text, 'timestamp': formatted_now()}


def _timed_fields(name: str, desc: str, ms: int) -> Dict[str, Any]:
    return {'name': name, 'desc': desc, 'duration': ms, 'timestamp': formatted_now()}


def _response_fields(name: str, res: requests.Response, ms: int) -> Dict[str, Any]:
    url = res.request.url if res.request is not None and res.request.url else res.url
    parts = urlsplit(url or '')
    return {
        'name': name,
        'code': res.status_code,
        'uri': parts.path,
        'params': parts.query,
        'duration': ms,
        'timestamp': formatted_now(),
    }


def log(name: str, desc: str, *args: Any) -> None:
    """
    Write a plain message line to the normal sink.

    Args:
        name: Event name
        desc: Description, a printf-style template when ``args`` are given
        *args: Values substituted into ``desc``

    Example:
        log('import', 'loaded %d rows from %s', 120, 'users.csv')
    """
    _emit(sinks.get_out(), _message_fields(name, _format(desc, args)))


def error(err: Optional[BaseException]) -> None:
    """Write ``err`` to the error sink. ``None`` writes nothing."""
    if err is not None:
        _emit(sinks.get_err(), _error_fields(err))


def duration(name: str, ms: int, desc: str, *args: Any) -> None:
    """Write a timed line for a duration measured elsewhere."""
    _emit(sinks.get_out(), _timed_fields(name, _format(desc, args), int(ms)))


def response(name: str, res: requests.Response, ms: int) -> None:
    """Write status code, path and query of an HTTP response to the normal sink."""
    _emit(sinks.get_out(), _response_fields(name, res, int(ms)))


class Record:
    """
    Measures the duration of an event when logged.

    The start time and both sinks are captured on construction, so swapping
    the global sinks later does not move lines of records already created.
    """

    def __init__(self, name: str):
        self._start = clock.monotonic_ns()
        self._name = name
        self._out = sinks.get_out()
        self._err = sinks.get_err()

    @property
    def name(self) -> str:
        return self._name

    @property
    def start(self) -> int:
        """Monotonic start marker in nanoseconds."""
        return self._start

    @property
    def out(self) -> Sink:
        return self._out

    @property
    def err(self) -> Sink:
        return self._err

    def elapsed(self) -> int:
        """Milliseconds since the record was created."""
        return clock.ms_since(self._start)

    def log(self, desc: str, *args: Any) -> None:
        """Write the record with its elapsed time. May be called more than once."""
        _emit(self._out, _timed_fields(self._name, _format(desc, args), self.elapsed()))

    def response(self, res: requests.Response) -> None:
        """Write an HTTP response line timed from the record's start."""
        _emit(self._out, _response_fields(self._name, res, self.elapsed()))

    def error(self, err: Optional[BaseException]) -> None:
        if err is not None:
            _emit(self._err, _error_fields(err))

    def __repr__(self) -> str:
        return f'Record(name={self._name!r})'


def new_record(name: str) -> Record:
    """Create a Record named ``name`` starting now."""
    return Record(name)
