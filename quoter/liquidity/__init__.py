"""Liquidity provision and removal quoting."""

from quoter.liquidity.add import LiquidityQuoter
from quoter.liquidity.remove import RemovalQuoter, quote_removal

__all__ = ["LiquidityQuoter", "RemovalQuoter", "quote_removal"]
