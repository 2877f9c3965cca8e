"""
Models of the line shapes written by linelog, used to parse and validate output.
"""

import json
from datetime import datetime
from typing import List, Type, Union

from pydantic import BaseModel, ConfigDict, StrictInt, ValidationError, field_validator


class _Line(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)

    timestamp: str

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v: str) -> str:
        """Require RFC 3339: date, time and an explicit offset."""
        try:
            parsed = datetime.fromisoformat(v.replace('Z', '+00:00'))
        except ValueError as exc:
            raise ValueError(f'timestamp is not RFC 3339: {v!r}') from exc
        if 'T' not in v or parsed.tzinfo is None:
            raise ValueError(f'timestamp is not RFC 3339: {v!r}')
        return v

    @property
    def time(self) -> datetime:
        return datetime.fromisoformat(self.timestamp.replace('Z', '+00:00'))


class MessageLine(_Line):
    name: str
    desc: str


class ErrorLine(_Line):
    error: str


class TimedLine(_Line):
    name: str
    desc: str
    duration: StrictInt


class ResponseLine(_Line):
    name: str
    code: StrictInt
    uri: str
    params: str
    duration: StrictInt


AnyLine = Union[MessageLine, ErrorLine, TimedLine, ResponseLine]

# Most specific shape first
_SHAPES: List[Type[_Line]] = [ResponseLine, TimedLine, MessageLine, ErrorLine]


def parse_line(line: str) -> AnyLine:
    """
    Parse one output line into its model.

    Raises:
        ValueError: not JSON, or not one of the known shapes
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise ValueError(f'not JSON: {exc}') from exc
    if not isinstance(data, dict):
        raise ValueError('line is not a JSON object')

    for shape in _SHAPES:
        if set(data) == set(shape.model_fields):
            try:
                return shape.model_validate(data)
            except ValidationError as exc:
                raise ValueError(str(exc)) from exc
    raise ValueError(f'unknown line shape with fields {sorted(data)}')


def parse_lines(text: str) -> List[AnyLine]:
    """Parse every non-empty line of ``text``."""
    return [parse_line(line) for line in text.splitlines() if line.strip()]


def validate_log_format(log_line: str) -> bool:
    """
    Validate that a log line is one of the linelog shapes.

    Args:
        log_line: Log line to validate

    Returns:
        True if valid, False otherwise
    """
    try:
        parse_line(log_line)
        return True
    except ValueError:
        return False
