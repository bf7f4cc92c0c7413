"""Shared type definitions for DEX models.

Amounts cross the JSON boundary as decimal strings so 128-bit values survive
clients that parse numbers as doubles.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

# Maximum Clarity uint value
UINT128_MAX = 2**128 - 1

# c32 alphabet (Crockford base32 without I, L, O, U)
_C32 = "0-9A-HJKMNP-TV-Z"
_ADDRESS_RE = re.compile(rf"^S[PMTN][{_C32}]{{26,40}}$")
# Contract names: letter first, then letters, digits, '-' and '_' (max 128)
_CONTRACT_NAME_RE = re.compile(r"^[a-zA-Z]([a-zA-Z0-9]|[-_])*$")


def validate_uint128(value: Any) -> str:
    """Validate that a value is a valid uint128 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint128 as decimal string

    Raises:
        ValueError: If value is not a non-negative integer within uint128 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint128 must be string or int, got bool")

    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint128 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint128 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint128 cannot be negative: {value}")
    if int_value > UINT128_MAX:
        raise ValueError(f"Uint128 overflow: {value} > 2^128-1")

    return str(int_value)


# 128-bit unsigned integer as decimal string (validated)
Uint128 = Annotated[
    str,
    BeforeValidator(validate_uint128),
    Field(description="128-bit unsigned integer as decimal string"),
]

# Stacks standard principal, e.g. SP2ZNGJ85ENDY6QRHQ5P2D4FXKGZWCKTB2T0Z55KS
StacksAddress = Annotated[str, Field(pattern=_ADDRESS_RE.pattern)]

# Stacks contract principal, e.g. SP2ZNGJ85ENDY6QRHQ5P2D4FXKGZWCKTB2T0Z55KS.wstx
ContractPrincipal = Annotated[
    str,
    Field(pattern=rf"^S[PMTN][{_C32}]{{26,40}}\.[a-zA-Z][a-zA-Z0-9_-]{{0,127}}$"),
]


def is_valid_stacks_address(address: str) -> bool:
    """Check the shape of a Stacks address (checksum is not verified here)."""
    if not isinstance(address, str):
        return False
    return _ADDRESS_RE.match(address) is not None


def split_contract_principal(principal: str) -> tuple[str, str]:
    """Split ``ADDRESS.contract-name`` into its two parts.

    Raises:
        ValueError: If the principal is malformed
    """
    address, sep, name = principal.partition(".")
    if not sep or not is_valid_stacks_address(address):
        raise ValueError(f"Invalid contract principal: {principal}")
    if len(name) > 128 or not _CONTRACT_NAME_RE.match(name):
        raise ValueError(f"Invalid contract name in principal: {principal}")
    return address, name


def is_valid_contract_principal(principal: str) -> bool:
    """Check if a string is a well-formed contract principal."""
    try:
        split_contract_principal(principal)
    except (ValueError, AttributeError):
        return False
    return True
