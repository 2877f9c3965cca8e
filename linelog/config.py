"""
Sink configuration from arguments or the environment.

    LINELOG_OUT     stdout | stderr | discard | <file path>
    LINELOG_ERR     stdout | stderr | discard | <file path>
    LINELOG_SILENT  true/false, discards both sinks when true
"""

import os
from typing import IO, List, Optional

from linelog import sinks

_opened: List[IO[str]] = []


def _get_env_bool(name: str) -> Optional[bool]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return None
    normalized = raw.strip().lower()
    if normalized in {'true', '1', 'yes', 'y', 'on'}:
        return True
    if normalized in {'false', '0', 'no', 'n', 'off'}:
        return False
    raise ValueError(f'{name} must be a boolean (true/false). Got: {raw!r}')


def resolve_sink(target: str) -> sinks.Sink:
    """
    Turn a target name into a sink.

    ``stdout``/``stderr`` stay bound to the process streams, ``discard`` is
    the no-op sink, anything else is a file path opened for append.
    """
    name = target.strip()
    if name == 'stdout':
        return sinks.StdStream('stdout')
    if name == 'stderr':
        return sinks.StdStream('stderr')
    if name == 'discard':
        return sinks.NOOP

    path = os.path.expanduser(os.path.expandvars(name))
    f = open(path, 'a', encoding='utf-8')
    _opened.append(f)
    return f


def configure(
    out: Optional[str] = None,
    err: Optional[str] = None,
    silent: Optional[bool] = None
) -> None:
    """
    Point the sinks at the given targets. ``None`` leaves a sink unchanged.

    ``silent=True`` wins over ``out`` and ``err``.
    """
    if silent:
        sinks.silence()
        return
    if out:
        sinks.set_out(resolve_sink(out))
    if err:
        sinks.set_err(resolve_sink(err))


def configure_from_env() -> None:
    """Apply LINELOG_OUT, LINELOG_ERR and LINELOG_SILENT."""
    configure(
        out=os.getenv('LINELOG_OUT') or None,
        err=os.getenv('LINELOG_ERR') or None,
        silent=_get_env_bool('LINELOG_SILENT'),
    )


def close_files() -> None:
    """Close files opened by ``configure`` and reset the sinks to the defaults."""
    sinks.reset()
    while _opened:
        _opened.pop().close()
