"""Protocol constants for the Stacks Uniswap-V2 style DEX.

Centralizes well-known deployments, contract method names and quoting
parameters.
"""

from quoter.models.types import is_valid_stacks_address

HIRO_MAINNET_API = "https://api.mainnet.hiro.so"


def _validate_deployer(name: str, address: str) -> str:
    """Validate and return a deployer address.

    Raises:
        ValueError: If the address is not a well-formed Stacks address
    """
    if not is_valid_stacks_address(address):
        raise ValueError(f"Invalid {name} address: {address}")
    return address


# Charisma univ2 deployment (mainnet); all four contracts share a deployer
DEX_DEPLOYER = _validate_deployer("DEX deployer", "SP2ZNGJ85ENDY6QRHQ5P2D4FXKGZWCKTB2T0Z55KS")

CORE_CONTRACT = "univ2-core"
ROUTER_CONTRACT = "univ2-router"
PATH2_CONTRACT = "univ2-path2"
LIBRARY_CONTRACT = "univ2-library"

# Read-only methods
GET_POOL = "get-pool"
GET_POOL_ID = "get-pool-id"
GET_NR_POOLS = "get-nr-pools"
GET_TOTAL_SUPPLY = "get-total-supply"
GET_AMOUNT_OUT = "get-amount-out"
GET_AMOUNT_IN = "get-amount-in"
ADD_LIQUIDITY_CALC = "add-liquidity-calc"

# Methods whose output depends only on their arguments
PURE_METHODS = frozenset({GET_AMOUNT_OUT, GET_AMOUNT_IN})

# Fixed-point scale for share-of-pool percentages (6 decimals)
SHARE_PRECISION = 10**6

# Removal fractions offered by range quotes
REMOVAL_PERCENTAGES = (25, 50, 75, 100)
