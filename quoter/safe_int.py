"""Safe integer wrapper for arithmetic on token amounts.

Clarity amounts are 128-bit, but intermediate products (reserve * supply)
routinely exceed that, so arithmetic is done on unbounded Python ints and
bounds are only checked when a value is handed back to the chain.

- Division by zero raises DivisionByZero
- Subtraction underflow raises Underflow
- uint128 / int128 overflow is caught on conversion

Usage pattern:
    from quoter.safe_int import S

    def withdraw(reserve: int, burned: int, supply: int) -> int:
        return (S(reserve) * S(burned) // S(supply)).value
"""

from __future__ import annotations

UINT128_MAX = 2**128 - 1
INT128_MIN = -(2**127)
INT128_MAX = 2**127 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce negative result."""

    pass


class Uint128Overflow(SafeIntError):
    """Value does not fit a Clarity uint (or int) slot."""

    pass


class SafeInt:
    """Integer with safe arithmetic operations.

    Wraps an integer and provides arithmetic operators that raise
    descriptive errors instead of producing invalid results.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Floor division, matching Clarity's unsigned `/`.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def min(self, other: SafeInt | int) -> SafeInt:
        """Return minimum of self and other."""
        return SafeInt(min(self._value, _extract_value(other)))

    def to_uint128(self) -> int:
        """Convert to int, validating Clarity uint bounds.

        Raises:
            Uint128Overflow: If value is negative or exceeds 2^128-1
        """
        if self._value < 0:
            raise Uint128Overflow(f"Negative value cannot be uint128: {self._value}")
        if self._value > UINT128_MAX:
            raise Uint128Overflow(f"Value exceeds uint128 max: {self._value}")
        return self._value

    def to_int128(self) -> int:
        """Convert to int, validating Clarity int bounds.

        Raises:
            Uint128Overflow: If value is outside [-2^127, 2^127-1]
        """
        if not INT128_MIN <= self._value <= INT128_MAX:
            raise Uint128Overflow(f"Value outside int128 range: {self._value}")
        return self._value

    def is_uint128(self) -> bool:
        """Check if value fits in uint128 without raising."""
        return 0 <= self._value <= UINT128_MAX


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
