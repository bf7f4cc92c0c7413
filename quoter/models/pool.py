"""Constant-product pool snapshot."""

from __future__ import annotations

from dataclasses import dataclass

from quoter.errors import InvalidPathError


@dataclass(frozen=True)
class Fee:
    """Fee expressed as a fraction, e.g. Fee(30, 10000) for 0.3%."""

    numerator: int
    denominator: int

    def __post_init__(self) -> None:
        if self.numerator < 0:
            raise ValueError(f"Fee numerator cannot be negative: {self.numerator}")
        if self.denominator <= 0:
            raise ValueError(f"Fee denominator must be positive: {self.denominator}")

    @property
    def as_percent(self) -> float:
        return self.numerator * 100 / self.denominator


@dataclass(frozen=True)
class Pool:
    """Immutable snapshot of a pool, fetched per call.

    reserve0/reserve1 are both zero only while lp_token_total_supply is zero.
    token0/token1 follow the contract's canonical order, which is unrelated to
    the order a caller asked for them in; use get_reserves() to orient.
    """

    id: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int
    lp_token: str
    lp_token_total_supply: int
    swap_fee: Fee
    protocol_fee: Fee | None = None
    share_fee: Fee | None = None

    @property
    def is_empty(self) -> bool:
        """True until the pool has received its first deposit."""
        return self.lp_token_total_supply == 0

    def contains(self, token: str) -> bool:
        return token in (self.token0, self.token1)

    def get_reserves(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        if token_in == self.token0:
            return self.reserve0, self.reserve1
        elif token_in == self.token1:
            return self.reserve1, self.reserve0
        else:
            raise InvalidPathError(
                f"Token {token_in} not in pool {self.id}",
                {"pool_id": self.id, "token": token_in},
            )

    def get_token_out(self, token_in: str) -> str:
        """Get the output token for a given input token."""
        if token_in == self.token0:
            return self.token1
        elif token_in == self.token1:
            return self.token0
        else:
            raise InvalidPathError(
                f"Token {token_in} not in pool {self.id}",
                {"pool_id": self.id, "token": token_in},
            )
