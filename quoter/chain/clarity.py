"""Clarity value serialization.

Read-only contract calls take their arguments as hex-serialized Clarity
values and return a hex-serialized Clarity value. ClarityValue keeps the type
tag alongside the payload so callers can tell ``(some u5)`` from ``u5`` or
``(err u1)`` from ``(ok u1)``; to_python() drops the tags.

Wire format: one type-id byte followed by the payload. Integers are 16-byte
big-endian, lengths are u32 big-endian (u8 for names), tuple entries are
sorted by key.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from quoter.chain.c32 import C32Error, c32_address, c32_address_decode
from quoter.safe_int import S, Uint128Overflow


class ClarityType(IntEnum):
    """Clarity type-id bytes."""

    INT = 0x00
    UINT = 0x01
    BUFFER = 0x02
    BOOL_TRUE = 0x03
    BOOL_FALSE = 0x04
    PRINCIPAL_STANDARD = 0x05
    PRINCIPAL_CONTRACT = 0x06
    RESPONSE_OK = 0x07
    RESPONSE_ERR = 0x08
    OPTIONAL_NONE = 0x09
    OPTIONAL_SOME = 0x0A
    LIST = 0x0B
    TUPLE = 0x0C
    STRING_ASCII = 0x0D
    STRING_UTF8 = 0x0E


class ClarityEncodingError(ValueError):
    """A Python value cannot be represented as the requested Clarity value."""

    pass


class ClarityDecodingError(ValueError):
    """Bytes are not a well-formed serialized Clarity value."""

    pass


@dataclass(frozen=True)
class ClarityValue:
    """A tagged Clarity value.

    Payload by type:
        INT, UINT: int
        BUFFER: bytes
        BOOL_*: bool
        PRINCIPAL_*: str ("ADDRESS" or "ADDRESS.name")
        RESPONSE_*, OPTIONAL_SOME: ClarityValue
        OPTIONAL_NONE: None
        LIST: tuple of ClarityValue
        TUPLE: dict of name -> ClarityValue
        STRING_*: str
    """

    type: ClarityType
    value: Any = None

    @property
    def is_none(self) -> bool:
        return self.type == ClarityType.OPTIONAL_NONE

    @property
    def is_err(self) -> bool:
        return self.type == ClarityType.RESPONSE_ERR

    @property
    def is_ok(self) -> bool:
        return self.type == ClarityType.RESPONSE_OK

    def unwrap(self) -> ClarityValue:
        """Strip one ``some``/``ok``/``err`` wrapper; other values are returned as is."""
        if self.type in (
            ClarityType.OPTIONAL_SOME,
            ClarityType.RESPONSE_OK,
            ClarityType.RESPONSE_ERR,
        ):
            inner: ClarityValue = self.value
            return inner
        return self

    def to_python(self) -> Any:
        """Recursively convert to plain Python values, discarding type tags."""
        if self.type in (
            ClarityType.OPTIONAL_SOME,
            ClarityType.RESPONSE_OK,
            ClarityType.RESPONSE_ERR,
        ):
            return self.value.to_python()
        if self.type == ClarityType.LIST:
            return [item.to_python() for item in self.value]
        if self.type == ClarityType.TUPLE:
            return {name: item.to_python() for name, item in self.value.items()}
        return self.value

    def __getitem__(self, name: str) -> ClarityValue:
        """Tuple field access, looking through optional/response wrappers."""
        target = self
        while target.type in (ClarityType.OPTIONAL_SOME, ClarityType.RESPONSE_OK):
            target = target.value
        if target.type != ClarityType.TUPLE:
            raise KeyError(f"{target.type.name} value has no field {name!r}")
        field: ClarityValue = target.value[name]
        return field


# --- Constructors ---


def uint_cv(value: int) -> ClarityValue:
    try:
        return ClarityValue(ClarityType.UINT, S(value).to_uint128())
    except (Uint128Overflow, TypeError) as e:
        raise ClarityEncodingError(f"Not a Clarity uint: {value!r}") from e


def int_cv(value: int) -> ClarityValue:
    try:
        return ClarityValue(ClarityType.INT, S(value).to_int128())
    except (Uint128Overflow, TypeError) as e:
        raise ClarityEncodingError(f"Not a Clarity int: {value!r}") from e


def bool_cv(value: bool) -> ClarityValue:
    return ClarityValue(ClarityType.BOOL_TRUE if value else ClarityType.BOOL_FALSE, bool(value))


def buffer_cv(value: bytes) -> ClarityValue:
    return ClarityValue(ClarityType.BUFFER, bytes(value))


def principal_cv(principal: str) -> ClarityValue:
    """Standard principal for ``ADDRESS``, contract principal for ``ADDRESS.name``."""
    address, sep, name = principal.partition(".")
    try:
        c32_address_decode(address)
    except C32Error as e:
        raise ClarityEncodingError(f"Invalid principal {principal!r}: {e}") from e
    if not sep:
        return ClarityValue(ClarityType.PRINCIPAL_STANDARD, address)
    if not name or len(name.encode("ascii", errors="replace")) > 128:
        raise ClarityEncodingError(f"Invalid contract name in {principal!r}")
    return ClarityValue(ClarityType.PRINCIPAL_CONTRACT, principal)


def tuple_cv(fields: dict[str, ClarityValue]) -> ClarityValue:
    return ClarityValue(ClarityType.TUPLE, dict(fields))


def list_cv(items: list[ClarityValue]) -> ClarityValue:
    return ClarityValue(ClarityType.LIST, tuple(items))


def some_cv(value: ClarityValue) -> ClarityValue:
    return ClarityValue(ClarityType.OPTIONAL_SOME, value)


def none_cv() -> ClarityValue:
    return ClarityValue(ClarityType.OPTIONAL_NONE, None)


def ok_cv(value: ClarityValue) -> ClarityValue:
    return ClarityValue(ClarityType.RESPONSE_OK, value)


def err_cv(value: ClarityValue) -> ClarityValue:
    return ClarityValue(ClarityType.RESPONSE_ERR, value)


def string_ascii_cv(value: str) -> ClarityValue:
    return ClarityValue(ClarityType.STRING_ASCII, value)


def string_utf8_cv(value: str) -> ClarityValue:
    return ClarityValue(ClarityType.STRING_UTF8, value)


# --- Serialization ---


def _serialize_principal_body(address: str) -> bytes:
    try:
        version, hash160 = c32_address_decode(address)
    except C32Error as e:
        raise ClarityEncodingError(str(e)) from e
    return bytes([version]) + hash160


def _serialize_name(name: str) -> bytes:
    raw = name.encode("ascii")
    if len(raw) > 128:
        raise ClarityEncodingError(f"Name longer than 128 bytes: {name!r}")
    return bytes([len(raw)]) + raw


def serialize(cv: ClarityValue) -> bytes:
    """Serialize a ClarityValue to its consensus byte encoding."""
    t = cv.type
    head = bytes([t])
    if t == ClarityType.UINT:
        return head + uint_cv(cv.value).value.to_bytes(16, "big")
    if t == ClarityType.INT:
        return head + int_cv(cv.value).value.to_bytes(16, "big", signed=True)
    if t == ClarityType.BUFFER:
        return head + struct.pack(">I", len(cv.value)) + cv.value
    if t in (ClarityType.BOOL_TRUE, ClarityType.BOOL_FALSE, ClarityType.OPTIONAL_NONE):
        return head
    if t == ClarityType.PRINCIPAL_STANDARD:
        return head + _serialize_principal_body(cv.value)
    if t == ClarityType.PRINCIPAL_CONTRACT:
        address, _, name = cv.value.partition(".")
        return head + _serialize_principal_body(address) + _serialize_name(name)
    if t in (ClarityType.RESPONSE_OK, ClarityType.RESPONSE_ERR, ClarityType.OPTIONAL_SOME):
        return head + serialize(cv.value)
    if t == ClarityType.LIST:
        return head + struct.pack(">I", len(cv.value)) + b"".join(serialize(i) for i in cv.value)
    if t == ClarityType.TUPLE:
        body = b"".join(
            _serialize_name(name) + serialize(cv.value[name]) for name in sorted(cv.value)
        )
        return head + struct.pack(">I", len(cv.value)) + body
    if t in (ClarityType.STRING_ASCII, ClarityType.STRING_UTF8):
        encoding = "ascii" if t == ClarityType.STRING_ASCII else "utf-8"
        try:
            raw = cv.value.encode(encoding)
        except UnicodeEncodeError as e:
            raise ClarityEncodingError(f"Cannot encode string as {encoding}") from e
        return head + struct.pack(">I", len(raw)) + raw
    raise ClarityEncodingError(f"Unsupported Clarity type: {t!r}")


def to_hex(cv: ClarityValue) -> str:
    """Serialize to a 0x-prefixed hex string, as the call-read API expects."""
    return "0x" + serialize(cv).hex()


# --- Deserialization ---


class _Reader:
    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._data)

    def read(self, n: int) -> bytes:
        end = self._pos + n
        if end > len(self._data):
            raise ClarityDecodingError(
                f"Unexpected end of data at offset {self._pos} (wanted {n} bytes)"
            )
        chunk = self._data[self._pos : end]
        self._pos = end
        return chunk

    def read_u8(self) -> int:
        return self.read(1)[0]

    def read_u32(self) -> int:
        value: int = struct.unpack(">I", self.read(4))[0]
        return value


def _read_principal_body(reader: _Reader) -> str:
    version = reader.read_u8()
    hash160 = reader.read(20)
    try:
        return c32_address(version, hash160)
    except C32Error as e:
        raise ClarityDecodingError(str(e)) from e


def _read_name(reader: _Reader) -> str:
    length = reader.read_u8()
    try:
        return reader.read(length).decode("ascii")
    except UnicodeDecodeError as e:
        raise ClarityDecodingError("Non-ascii name") from e


def _deserialize(reader: _Reader) -> ClarityValue:
    type_id = reader.read_u8()
    try:
        t = ClarityType(type_id)
    except ValueError as e:
        raise ClarityDecodingError(f"Unknown Clarity type id 0x{type_id:02x}") from e

    if t == ClarityType.UINT:
        return ClarityValue(t, int.from_bytes(reader.read(16), "big"))
    if t == ClarityType.INT:
        return ClarityValue(t, int.from_bytes(reader.read(16), "big", signed=True))
    if t == ClarityType.BUFFER:
        return ClarityValue(t, reader.read(reader.read_u32()))
    if t == ClarityType.BOOL_TRUE:
        return ClarityValue(t, True)
    if t == ClarityType.BOOL_FALSE:
        return ClarityValue(t, False)
    if t == ClarityType.OPTIONAL_NONE:
        return ClarityValue(t, None)
    if t == ClarityType.PRINCIPAL_STANDARD:
        return ClarityValue(t, _read_principal_body(reader))
    if t == ClarityType.PRINCIPAL_CONTRACT:
        address = _read_principal_body(reader)
        return ClarityValue(t, f"{address}.{_read_name(reader)}")
    if t in (ClarityType.RESPONSE_OK, ClarityType.RESPONSE_ERR, ClarityType.OPTIONAL_SOME):
        return ClarityValue(t, _deserialize(reader))
    if t == ClarityType.LIST:
        count = reader.read_u32()
        return ClarityValue(t, tuple(_deserialize(reader) for _ in range(count)))
    if t == ClarityType.TUPLE:
        count = reader.read_u32()
        fields: dict[str, ClarityValue] = {}
        for _ in range(count):
            name = _read_name(reader)
            fields[name] = _deserialize(reader)
        return ClarityValue(t, fields)
    # STRING_ASCII / STRING_UTF8
    raw = reader.read(reader.read_u32())
    try:
        return ClarityValue(t, raw.decode("ascii" if t == ClarityType.STRING_ASCII else "utf-8"))
    except UnicodeDecodeError as e:
        raise ClarityDecodingError(f"Invalid {t.name} payload") from e


def deserialize(data: bytes) -> ClarityValue:
    """Deserialize exactly one ClarityValue; trailing bytes are an error."""
    reader = _Reader(data)
    cv = _deserialize(reader)
    if not reader.exhausted:
        raise ClarityDecodingError("Trailing bytes after Clarity value")
    return cv


def from_hex(hex_str: str) -> ClarityValue:
    """Deserialize a (optionally 0x-prefixed) hex string."""
    if hex_str.startswith(("0x", "0X")):
        hex_str = hex_str[2:]
    try:
        data = bytes.fromhex(hex_str)
    except ValueError as e:
        raise ClarityDecodingError(f"Invalid hex: {hex_str[:32]!r}") from e
    return deserialize(data)


__all__ = [
    "ClarityType",
    "ClarityValue",
    "ClarityEncodingError",
    "ClarityDecodingError",
    "uint_cv",
    "int_cv",
    "bool_cv",
    "buffer_cv",
    "principal_cv",
    "tuple_cv",
    "list_cv",
    "some_cv",
    "none_cv",
    "ok_cv",
    "err_cv",
    "string_ascii_cv",
    "string_utf8_cv",
    "serialize",
    "to_hex",
    "deserialize",
    "from_hex",
]
