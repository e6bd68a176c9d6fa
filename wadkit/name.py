"""Eight-byte, upper-case, NUL-padded lump and texture names."""

from __future__ import annotations

from functools import total_ordering

from .errors import CorruptWadError

NAME_LENGTH = 8

_ALLOWED = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_%-[]\\")


def _lossy(value: bytes) -> str:
    return bytes(value).decode("utf-8", errors="replace")


def _invalid_byte(byte: int, context: bytes) -> CorruptWadError:
    return CorruptWadError(
        f"Invalid character `{chr(byte)}` in wad name `{_lossy(context)}`."
    )


def _too_long(context: bytes) -> CorruptWadError:
    return CorruptWadError(f"Wad name too long `{_lossy(context)}`.")


def _to_upper(byte: int) -> int:
    return byte - 32 if 0x61 <= byte <= 0x7A else byte


def _parse(value: bytes) -> bytes:
    name = bytearray(NAME_LENGTH)
    nulled = False
    for position, source in enumerate(value[:NAME_LENGTH]):
        if source >= 0x80:
            raise _invalid_byte(source, value)
        byte = _to_upper(source)
        if byte == 0:
            nulled = True
            break
        if byte not in _ALLOWED:
            raise _invalid_byte(byte, value)
        name[position] = byte
    if not nulled and len(value) > NAME_LENGTH:
        raise _too_long(value)
    return bytes(name)


@total_ordering
class WadName:
    """A validated WAD name.

    Names are upper-cased on construction and padded with NUL bytes to eight
    bytes. A NUL byte in the input ends the name. A name compares equal to
    (and hashes like) its eight raw bytes, so it can be looked up by either.
    """

    __slots__ = ("_raw",)

    def __init__(self, value: bytes | bytearray | str | WadName = b"") -> None:
        if isinstance(value, WadName):
            raw = value._raw
        elif isinstance(value, str):
            raw = _parse(value.encode("utf-8"))
        else:
            raw = _parse(bytes(value))
        self._raw = raw

    @classmethod
    def from_bytes(cls, value: bytes | bytearray) -> WadName:
        """Parse a name from raw bytes, raising CorruptWadError if invalid."""
        return cls(bytes(value))

    @classmethod
    def from_str(cls, value: str) -> WadName:
        """Parse a name from text, raising CorruptWadError if invalid."""
        return cls(value)

    def pushed(self, new_byte: int | str) -> WadName:
        """Return a copy of this name with one more character appended."""
        if isinstance(new_byte, str):
            new_byte = ord(new_byte)
        byte = _to_upper(new_byte)
        if byte not in _ALLOWED:
            raise _invalid_byte(byte, self._raw)
        end = self._raw.find(0)
        if end < 0:
            raise _too_long(self._raw)
        raw = bytearray(self._raw)
        raw[end] = byte
        return WadName(bytes(raw))

    def raw(self) -> bytes:
        """The eight raw bytes, NUL padding included."""
        return self._raw

    def __bytes__(self) -> bytes:
        return self._raw

    def __str__(self) -> str:
        return self._raw.rstrip(b"\0").decode("ascii")

    def __repr__(self) -> str:
        return f"WadName({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WadName):
            return self._raw == other._raw
        if isinstance(other, (bytes, bytearray)):
            return self._raw == bytes(other)
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, WadName):
            return self._raw < other._raw
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._raw)


def to_wad_name(value: WadName | bytes | bytearray | str) -> WadName:
    """Turn bytes, text or an existing name into a WadName."""
    if isinstance(value, WadName):
        return value
    if isinstance(value, str):
        return WadName.from_str(value)
    if isinstance(value, (bytes, bytearray)):
        return WadName.from_bytes(value)
    raise TypeError(f"cannot make a wad name from {type(value).__name__}")