"""
JSON token sources.

Both sources produce the same lazy, forward-only stream of ``Token``s:
- ``JsonTokenSource`` tokenizes raw JSON (file-like / bytes / str) with ijson.
- ``tokens_from_obj`` walks already-parsed Python data.

Key, string and number tokens carry text. Numbers are NOT widened here: the
text keeps the shape of the source (fraction / exponent) so literal typing can
decide between xsd:int and xsd:float.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, BinaryIO, Iterator, Optional, Union

import ijson


class Event(str, Enum):
    START_OBJECT = "start_object"
    END_OBJECT = "end_object"
    START_ARRAY = "start_array"
    END_ARRAY = "end_array"
    KEY = "key"
    STRING = "string"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"


@dataclass(frozen=True)
class Token:
    event: Event
    value: Optional[str] = None


# ijson basic_parse event -> Event (booleans are split on their value)
_IJSON_EVENTS = {
    "start_map": Event.START_OBJECT,
    "end_map": Event.END_OBJECT,
    "start_array": Event.START_ARRAY,
    "end_array": Event.END_ARRAY,
    "map_key": Event.KEY,
    "string": Event.STRING,
    "number": Event.NUMBER,
    "integer": Event.NUMBER,
    "double": Event.NUMBER,
    "null": Event.NULL,
}

Source = Union[BinaryIO, bytes, bytearray, str]


def _as_byte_stream(source: Source) -> BinaryIO:
    if isinstance(source, str):
        return io.BytesIO(source.encode("utf-8"))
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(bytes(source))
    return source


def _number_text(value: Any) -> str:
    # ijson gives int for integral tokens and Decimal otherwise
    return str(value)


def token_from_ijson(event: str, value: Any) -> Token:
    if event == "boolean":
        return Token(Event.TRUE if value else Event.FALSE)
    kind = _IJSON_EVENTS.get(event)
    if kind is None:
        raise ValueError(f"Unexpected ijson event: {event!r}")
    if kind is Event.NUMBER:
        return Token(kind, _number_text(value))
    if kind in (Event.KEY, Event.STRING):
        return Token(kind, value)
    return Token(kind)


class JsonTokenSource:
    """
    Lazy token stream over raw JSON.

    Malformed input surfaces as ``ijson.JSONError`` (``IncompleteJSONError``
    for truncated documents) at the point the tokenizer reaches it.
    """

    def __init__(self, source: Source, *, buf_size: int = 64 * 1024):
        self._events = ijson.basic_parse(_as_byte_stream(source), buf_size=buf_size)
        self._peeked: Optional[Token] = None
        self._done = False

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        if self._peeked is not None:
            tok, self._peeked = self._peeked, None
            return tok
        if self._done:
            raise StopIteration
        try:
            event, value = next(self._events)
        except StopIteration:
            self._done = True
            raise
        return token_from_ijson(event, value)

    def has_next(self) -> bool:
        if self._peeked is not None:
            return True
        try:
            self._peeked = self.__next__()
        except StopIteration:
            return False
        return True

    def next(self) -> Token:
        return self.__next__()


def tokens_from_obj(data: Any) -> Iterator[Token]:
    """Generates tokens from a python value (dict / list / scalars) in document order."""
    if isinstance(data, dict):
        yield Token(Event.START_OBJECT)
        for k, v in data.items():
            yield Token(Event.KEY, str(k))
            yield from tokens_from_obj(v)
        yield Token(Event.END_OBJECT)
    elif isinstance(data, (list, tuple)):
        yield Token(Event.START_ARRAY)
        for item in data:
            yield from tokens_from_obj(item)
        yield Token(Event.END_ARRAY)
    elif data is None:
        yield Token(Event.NULL)
    elif isinstance(data, bool):
        yield Token(Event.TRUE if data else Event.FALSE)
    elif isinstance(data, (int, float)):
        yield Token(Event.NUMBER, repr(data))
    elif isinstance(data, Decimal):
        yield Token(Event.NUMBER, str(data))
    elif isinstance(data, str):
        yield Token(Event.STRING, data)
    else:
        raise TypeError(f"Not a JSON value: {type(data)}")
