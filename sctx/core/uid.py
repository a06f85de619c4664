"""Compact identifiers packing a local ID, an object type and a shard ID."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_INDEX = {char: position for position, char in enumerate(_ALPHABET)}
_UINT64_MAX = (1 << 64) - 1


def base58_encode(data: bytes) -> str:
    """Encode ``data`` with the Bitcoin base58 alphabet."""
    stripped = data.lstrip(b"\0")
    number = int.from_bytes(stripped, "big")
    digits = ""
    while number:
        number, remainder = divmod(number, 58)
        digits = _ALPHABET[remainder] + digits
    return "1" * (len(data) - len(stripped)) + digits


def base58_decode(text: str) -> bytes:
    """Decode base58 ``text``; any character outside the alphabet gives ``b""``."""
    if any(char not in _INDEX for char in text):
        return b""
    number = 0
    for char in text:
        number = number * 58 + _INDEX[char]
    body = number.to_bytes((number.bit_length() + 7) // 8, "big")
    return b"\0" * (len(text) - len(text.lstrip("1"))) + body


def _parse_int(text: str, signed: bool) -> int:
    digits = text[1:] if signed and text[:1] in "+-" and text[1:] else text
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"invalid syntax: {text!r}")
    return int(text)


@dataclass(frozen=True)
class UID:
    """A virtual unique identifier: 32 bits local ID, 10 bits type, 18 bits shard."""

    local_id: int
    object_type: int
    shard_id: int

    def __str__(self) -> str:
        packed = (self.local_id << 28 | self.object_type << 18 | self.shard_id) & _UINT64_MAX
        return base58_encode(str(packed).encode("ascii"))

    def to_json(self) -> str:
        """Return the identifier as a JSON string literal."""
        return f'"{self}"'

    @classmethod
    def from_json(cls, data: str | bytes) -> UID:
        """Parse a JSON string literal made by :meth:`to_json`."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8")
        return from_base58(data.replace('"', ""))

    def value(self) -> int:
        """Return the value stored in a database column: the local ID."""
        return self.local_id

    @classmethod
    def scan(cls, value: Any) -> UID | None:
        """Build a UID from a database column value; ``None`` stays ``None``."""
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray, memoryview)):
            value = _parse_int(bytes(value).decode("latin-1"), signed=True)
        elif isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("invalid Scan Source")
        return cls(value & 0xFFFFFFFF, 0, 1)


def decompose_uid(text: str) -> UID:
    """Split the decimal form of a packed identifier into its parts."""
    number = _parse_int(text, signed=False)
    if number > _UINT64_MAX:
        raise ValueError(f"value out of range: {text!r}")
    if number < 1 << 18:
        raise ValueError("wrong uid")
    return UID(number >> 28, (number >> 18) & 0x3FF, number & 0x3FFFF)


def from_base58(text: str) -> UID:
    """Parse the string form produced by ``str(uid)``."""
    return decompose_uid(base58_decode(text).decode("latin-1"))