"""Swap routing and quoting."""

from quoter.routing.swap import HopQuote, SwapQuoter

__all__ = ["HopQuote", "SwapQuoter"]
