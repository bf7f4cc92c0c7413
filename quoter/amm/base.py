"""Interface for constant-product swap and deposit math."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from quoter.models.pool import Fee


@runtime_checkable
class PoolMath(Protocol):
    """Protocol for the integer math behind quotes.

    The production implementation delegates to the DEX's own read-only
    functions so that quotes match on-chain execution exactly, rounding
    included.
    """

    async def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee: Fee,
    ) -> int:
        """Calculate output amount for a given input.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee: Pool swap fee

        Returns:
            Output token amount
        """
        ...

    async def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
        fee: Fee,
    ) -> int:
        """Calculate required input for a desired output.

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee: Pool swap fee

        Returns:
            Required input token amount
        """
        ...

    async def add_liquidity_calc(
        self,
        pool_id: str,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
    ) -> tuple[int, int]:
        """Optimal deposit amounts for a pool at its current ratio.

        Returns:
            (amount0, amount1) actually deposited
        """
        ...
