"""Integer formulas for constant-product pools.

Everything here is pure and works on arbitrary-precision ints. Ratios are
compared through cross-products so the only float step is the final true
division.
"""

from __future__ import annotations

from quoter.constants import SHARE_PRECISION
from quoter.safe_int import S


def isqrt(n: int) -> int:
    """Floor square root by Newton's method."""
    if n < 0:
        raise ValueError("isqrt of negative number")
    if n < 2:
        return n
    x = n
    y = (x + 1) // 2
    while y < x:
        x = y
        y = (x + n // x) // 2
    return x


def price_impact(amount_in: int, amount_out: int, reserve_in: int, reserve_out: int) -> float:
    """Deviation of the execution price from the spot price, in percent.

    |(out/in - r_out/r_in) / (r_out/r_in)| * 100
      = |out * r_in - r_out * in| * 100 / (r_out * in)
    """
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        return 0.0
    numerator = abs(amount_out * reserve_in - reserve_out * amount_in) * 100
    return numerator / (reserve_out * amount_in)


def liquidity_price_impact(amount0: int, amount1: int, reserve0: int, reserve1: int) -> float:
    """How far a deposit moves the reserve ratio, in percent.

    |(r0+a0)/(r1+a1) - r0/r1| / (r0/r1) * 100
      = |a0 * r1 - r0 * a1| * 100 / (r0 * (r1 + a1))
    """
    if reserve0 == 0 or reserve1 == 0:
        return 0.0
    numerator = abs(amount0 * reserve1 - reserve0 * amount1) * 100
    return numerator / (reserve0 * (reserve1 + amount1))


def mint_amount(
    amount0: int, amount1: int, reserve0: int, reserve1: int, total_supply: int
) -> int:
    """LP tokens minted for a deposit.

    The first deposit mints sqrt(a0 * a1); later ones mint in proportion to
    the smaller of the two contributions.
    """
    if total_supply == 0:
        return isqrt(amount0 * amount1)
    share0 = S(amount0) * S(total_supply) // S(reserve0)
    share1 = S(amount1) * S(total_supply) // S(reserve1)
    return int(share0.min(share1))


def share_of_pool_after_mint(liquidity: int, total_supply: int) -> float:
    """Percent of the pool held by ``liquidity`` newly minted tokens."""
    if total_supply == 0:
        return 100.0
    scaled = liquidity * 100 * SHARE_PRECISION // (total_supply + liquidity)
    return scaled / SHARE_PRECISION


def share_of_pool_removed(liquidity: int, total_supply: int) -> float:
    """Percent of the pool represented by burning ``liquidity`` tokens."""
    scaled = S(liquidity) * S(100 * SHARE_PRECISION) // S(total_supply)
    return int(scaled) / SHARE_PRECISION


def withdrawal_amounts(
    liquidity: int, reserve0: int, reserve1: int, total_supply: int
) -> tuple[int, int]:
    """Token amounts returned for burning ``liquidity`` LP tokens."""
    supply = S(total_supply)
    return (
        int(S(reserve0) * S(liquidity) // supply),
        int(S(reserve1) * S(liquidity) // supply),
    )


__all__ = [
    "isqrt",
    "price_impact",
    "liquidity_price_impact",
    "mint_amount",
    "share_of_pool_after_mint",
    "share_of_pool_removed",
    "withdrawal_amounts",
]
