"""Constant-product pool math."""

from quoter.amm.base import PoolMath
from quoter.amm.onchain import OnChainMath

__all__ = ["PoolMath", "OnChainMath"]
