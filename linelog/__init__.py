"""
linelog: single-line JSON logging

Writes one JSON object per line to a normal and an error sink, times events
with records, and logs HTTP requests through WSGI or ASGI middleware.
"""

from linelog.logger import Record, duration, error, log, new_record, response
from linelog.middleware import RequestLogger, log_requests
from linelog.sinks import NOOP, get_err, get_out, redirect, reset, set_err, set_out, silence

__all__ = [
    'NOOP',
    'Record',
    'RequestLogger',
    'duration',
    'error',
    'get_err',
    'get_out',
    'log',
    'log_requests',
    'new_record',
    'redirect',
    'reset',
    'response',
    'set_err',
    'set_out',
    'silence',
]
__version__ = '1.0.0'
