"""c32check address encoding used by Stacks principals.

An address is ``S`` + version character + c32(hash160 + checksum), where the
checksum is the first four bytes of sha256(sha256(version || hash160)).
"""

from __future__ import annotations

import hashlib

C32_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
HASH160_LENGTH = 20
CHECKSUM_LENGTH = 4


class C32Error(ValueError):
    """Malformed c32 string or bad checksum."""

    pass


def _normalize(text: str) -> str:
    # Crockford-style aliases
    return text.upper().replace("O", "0").replace("L", "1").replace("I", "1")


def c32_encode(data: bytes) -> str:
    """Encode bytes as c32; each leading zero byte becomes one leading '0'."""
    n = int.from_bytes(data, "big")
    chars: list[str] = []
    while n > 0:
        n, rem = divmod(n, 32)
        chars.append(C32_ALPHABET[rem])
    leading_zero_bytes = len(data) - len(data.lstrip(b"\x00"))
    return "0" * leading_zero_bytes + "".join(reversed(chars))


def c32_decode(text: str, min_length: int = 0) -> bytes:
    """Decode a c32 string, left-padding the result to min_length bytes."""
    text = _normalize(text)
    n = 0
    for ch in text:
        idx = C32_ALPHABET.find(ch)
        if idx < 0:
            raise C32Error(f"Invalid c32 character {ch!r} in {text!r}")
        n = n * 32 + idx
    body = n.to_bytes((n.bit_length() + 7) // 8, "big") if n else b""
    leading_zero_chars = len(text) - len(text.lstrip("0"))
    data = b"\x00" * leading_zero_chars + body
    if len(data) < min_length:
        data = b"\x00" * (min_length - len(data)) + data
    return data


def _checksum(version: int, data: bytes) -> bytes:
    digest = hashlib.sha256(hashlib.sha256(bytes([version]) + data).digest()).digest()
    return digest[:CHECKSUM_LENGTH]


def c32_address(version: int, hash160: bytes) -> str:
    """Build a Stacks address from its version byte and hash160."""
    if not 0 <= version < 32:
        raise C32Error(f"Address version out of range: {version}")
    if len(hash160) != HASH160_LENGTH:
        raise C32Error(f"hash160 must be {HASH160_LENGTH} bytes, got {len(hash160)}")
    return "S" + C32_ALPHABET[version] + c32_encode(hash160 + _checksum(version, hash160))


def c32_address_decode(address: str) -> tuple[int, bytes]:
    """Split a Stacks address into (version, hash160), verifying the checksum."""
    if len(address) < 3 or address[0] != "S":
        raise C32Error(f"Not a Stacks address: {address!r}")
    normalized = _normalize(address[1:])
    version = C32_ALPHABET.find(normalized[0])
    if version < 0:
        raise C32Error(f"Invalid address version character in {address!r}")

    data = c32_decode(normalized[1:])
    if len(data) < CHECKSUM_LENGTH:
        raise C32Error(f"Address too short: {address!r}")
    hash160, checksum = data[:-CHECKSUM_LENGTH], data[-CHECKSUM_LENGTH:]
    if len(hash160) < HASH160_LENGTH:
        hash160 = b"\x00" * (HASH160_LENGTH - len(hash160)) + hash160
    if len(hash160) != HASH160_LENGTH:
        raise C32Error(f"Address payload is not a hash160: {address!r}")
    if checksum != _checksum(version, hash160):
        raise C32Error(f"Invalid address checksum: {address!r}")
    return version, hash160
