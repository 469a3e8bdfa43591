"""Wire codec shared by every MLS structure.

Integers are big-endian. Vectors carry a length prefix counting bytes,
not elements: one byte for ciphersuite lists and labels, two bytes for
key material and signatures. All decoding goes through a Cursor, which
raises DecodingError instead of reading past its end.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol, TypeVar

from .config import get_config
from .exceptions import DecodingError, EncodingError

T = TypeVar("T")
C = TypeVar("C", bound="WireEncodable")


class Cursor:
    """Read position over an immutable byte buffer.

    A cursor only ever sees the bytes between its start and its end;
    sub-cursors are bounded views that cannot read into their parent's
    remaining data.
    """

    def __init__(self, data: bytes, start: int = 0, end: int | None = None):
        self._data = bytes(data)
        self._pos = start
        self._end = len(self._data) if end is None else end

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return self._end - self._pos

    def is_empty(self) -> bool:
        return self._pos >= self._end

    def take(self, n: int) -> bytes:
        """Consume exactly n bytes."""
        if n < 0 or n > self.remaining:
            raise DecodingError(
                "Truncated input",
                {"wanted": n, "remaining": self.remaining},
            )
        chunk = self._data[self._pos : self._pos + n]
        self._pos += n
        return chunk

    def sub_cursor(self, length: int) -> Cursor:
        """Return a view over the next `length` bytes and skip past them."""
        if length > self.remaining:
            raise DecodingError(
                "Declared length exceeds remaining input",
                {"declared": length, "remaining": self.remaining},
            )
        sub = Cursor(self._data, self._pos, self._pos + length)
        self._pos += length
        return sub

    def sub_cursor_u8(self) -> Cursor:
        return self.sub_cursor(decode_u8(self))

    def sub_cursor_u16(self) -> Cursor:
        """Read a u16 byte length and return a view bounded to that many bytes."""
        return self.sub_cursor(decode_u16(self))


class WireEncodable(Protocol):
    """A structure with a bit-exact wire representation."""

    def encode(self, buffer: bytearray) -> None: ...

    @classmethod
    def decode(cls: type[C], cursor: Cursor) -> C: ...


# =============================================================================
# INTEGERS
# =============================================================================


def _encode_uint(buffer: bytearray, value: int, width: int) -> None:
    if value < 0 or value >= 1 << (8 * width):
        raise EncodingError(f"Value {value} does not fit in {width} byte(s)")
    buffer += value.to_bytes(width, "big")


def encode_u8(buffer: bytearray, value: int) -> None:
    _encode_uint(buffer, value, 1)


def encode_u16(buffer: bytearray, value: int) -> None:
    _encode_uint(buffer, value, 2)


def encode_u32(buffer: bytearray, value: int) -> None:
    _encode_uint(buffer, value, 4)


def decode_u8(cursor: Cursor) -> int:
    return cursor.take(1)[0]


def decode_u16(cursor: Cursor) -> int:
    return int.from_bytes(cursor.take(2), "big")


def decode_u32(cursor: Cursor) -> int:
    return int.from_bytes(cursor.take(4), "big")


# =============================================================================
# VECTORS
# =============================================================================


def _encode_prefixed(buffer: bytearray, payload: bytes, width: int) -> None:
    if len(payload) >= 1 << (8 * width):
        raise EncodingError(
            f"Vector of {len(payload)} bytes exceeds u{8 * width} length prefix",
            {"length": len(payload)},
        )
    _encode_uint(buffer, len(payload), width)
    buffer += payload


def encode_opaque_u8(buffer: bytearray, data: bytes) -> None:
    """Encode raw bytes behind a one-byte length."""
    _encode_prefixed(buffer, bytes(data), 1)


def encode_opaque_u16(buffer: bytearray, data: bytes) -> None:
    """Encode raw bytes behind a two-byte length."""
    _encode_prefixed(buffer, bytes(data), 2)


def decode_opaque_u8(cursor: Cursor) -> bytes:
    return cursor.take(decode_u8(cursor))


def decode_opaque_u16(cursor: Cursor) -> bytes:
    return cursor.take(decode_u16(cursor))


def _encode_items(items: Iterable[T], encode_item: Callable[[bytearray, T], None]) -> bytes:
    body = bytearray()
    for item in items:
        encode_item(body, item)
    return bytes(body)


def encode_vec_u8(
    buffer: bytearray,
    items: Iterable[T],
    encode_item: Callable[[bytearray, T], None],
) -> None:
    """Encode a list of items behind a one-byte total byte length."""
    _encode_prefixed(buffer, _encode_items(items, encode_item), 1)


def encode_vec_u16(
    buffer: bytearray,
    items: Iterable[T],
    encode_item: Callable[[bytearray, T], None],
) -> None:
    """Encode a list of items behind a two-byte total byte length."""
    _encode_prefixed(buffer, _encode_items(items, encode_item), 2)


def _decode_items(sub: Cursor, decode_item: Callable[[Cursor], T]) -> list[T]:
    items = []
    while not sub.is_empty():
        items.append(decode_item(sub))
    return items


def decode_vec_u8(cursor: Cursor, decode_item: Callable[[Cursor], T]) -> list[T]:
    return _decode_items(cursor.sub_cursor_u8(), decode_item)


def decode_vec_u16(cursor: Cursor, decode_item: Callable[[Cursor], T]) -> list[T]:
    return _decode_items(cursor.sub_cursor_u16(), decode_item)


# =============================================================================
# WHOLE-MESSAGE HELPERS
# =============================================================================


def to_bytes(value: WireEncodable) -> bytes:
    """Serialize a structure to its wire bytes."""
    buffer = bytearray()
    value.encode(buffer)
    return bytes(buffer)


def from_bytes(cls: type[C], data: bytes, strict: bool | None = None) -> C:
    """Decode a structure occupying the whole of `data`.

    Args:
        cls: Structure type to decode
        data: Wire bytes
        strict: Reject trailing bytes; defaults to the configured strict_decoding
    """
    if strict is None:
        strict = get_config().strict_decoding
    cursor = Cursor(data)
    value = cls.decode(cursor)
    if strict and not cursor.is_empty():
        raise DecodingError(
            f"{cursor.remaining} trailing byte(s) after {cls.__name__}",
            {"trailing": cursor.remaining},
        )
    return value
