"""
Output sink registry.

Holds the two process-wide destinations used by the top-level logging calls
(``out`` for normal lines, ``err`` for errors) and the single place where a
line is actually written to a sink.
"""

import io
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol


class Sink(Protocol):
    """Anything with a ``write`` method: text streams, binary streams, files."""

    def write(self, data: Any) -> Any: ...


class _DiscardSink:
    """Accepts any write and throws the data away."""

    def write(self, data: Any) -> int:
        return len(data)

    def flush(self) -> None:
        pass

    def __repr__(self) -> str:
        return '<linelog.NOOP>'


NOOP = _DiscardSink()


class StdStream:
    """Writes to ``sys.stdout`` or ``sys.stderr`` as bound at write time."""

    def __init__(self, name: str):
        if name not in ('stdout', 'stderr'):
            raise ValueError(f'unknown standard stream: {name!r}')
        self.name = name

    def write(self, data: str) -> int:
        return getattr(sys, self.name).write(data)

    def flush(self) -> None:
        getattr(sys, self.name).flush()

    def __repr__(self) -> str:
        return f'<linelog.StdStream {self.name}>'

# None means "the process stream", looked up when the sink is requested
_out: Optional[Sink] = None
_err: Optional[Sink] = None


def get_out() -> Sink:
    """Return the sink used for normal lines."""
    return _out if _out is not None else sys.stdout


def get_err() -> Sink:
    """Return the sink used for error lines."""
    return _err if _err is not None else sys.stderr


def set_out(sink: Sink) -> None:
    """Replace the normal sink. Not synchronised with in-flight writes."""
    global _out
    _out = sink


def set_err(sink: Sink) -> None:
    """Replace the error sink. Not synchronised with in-flight writes."""
    global _err
    _err = sink


def reset() -> None:
    """Point both sinks back at the process standard output and error."""
    global _out, _err
    _out = None
    _err = None


def silence() -> None:
    """Discard everything, useful in tests."""
    set_out(NOOP)
    set_err(NOOP)


@contextmanager
def redirect(out: Optional[Sink] = None, err: Optional[Sink] = None) -> Iterator[None]:
    """
    Temporarily swap the sinks, restoring the previous ones on exit.

    Example:
        buf = io.StringIO()
        with redirect(out=buf):
            log('job', 'done')
    """
    global _out, _err
    saved = (_out, _err)
    if out is not None:
        _out = out
    if err is not None:
        _err = err
    try:
        yield
    finally:
        _out, _err = saved


def _is_binary(sink: Sink) -> bool:
    if isinstance(sink, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return 'b' in getattr(sink, 'mode', '')


def write_line(sink: Sink, line: str) -> None:
    """
    Write ``line`` plus a newline to ``sink`` in one call.

    Characters UTF-8 cannot carry (lone surrogates from ``os.fsdecode`` and
    the like) are written as ``\\uXXXX`` escapes, which keeps the JSON valid.

    Failures of the sink are dropped: a broken destination loses lines but
    never raises into the code that is logging.
    """
    encoded = (line + '\n').encode('utf-8', 'backslashreplace')
    try:
        if _is_binary(sink):
            sink.write(encoded)
        else:
            sink.write(encoded.decode('utf-8'))
        flush = getattr(sink, 'flush', None)
        if flush is not None:
            flush()
    except Exception:
        pass
