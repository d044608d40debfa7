"""Pool parameters shared across the engine.

Centralizes amplification bounds, fee caps, admin delays and the
well-known native asset identifier.
"""

from stableswap.models.types import is_valid_address

# Amplification bounds
MAX_A = 10**6
# Largest factor a single ramp may move A, up or down
MAX_A_CHANGE = 10
# Minimum ramp duration and cooldown between ramp starts (1 day)
MIN_RAMP_TIME = 86400

# Fee caps, scaled by FEE_DENOMINATOR (1e10)
MAX_FEE = 5 * 10**9  # 50%
MAX_ADMIN_FEE = 10**10  # 100% of the swap fee

# Delay between committing and applying new fee parameters (3 days)
ADMIN_ACTIONS_DELAY = 3 * 86400

# The pool can only be killed during its first 60 days
KILL_DEADLINE_DT = 2 * 30 * 86400

# Gas stipend for native-asset transfers out of the pool
DEFAULT_NATIVE_TRANSFER_GAS = 2300


def _validate_asset_address(name: str, address: str) -> str:
    """Validate and return an asset address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Identifier for the chain's native asset; transfers use attached value
# instead of a token pull
NATIVE_ASSET = _validate_asset_address("NATIVE_ASSET", "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee")
