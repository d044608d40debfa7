"""Tests for PoolConfig validation and environment loading."""

import pytest
from pydantic import ValidationError

from stableswap.constants import MAX_A, NATIVE_ASSET
from stableswap.models.types import ZERO_ADDRESS
from stableswap.pool import PoolConfig
from stableswap.pool.config import DEFAULT_OWNER
from tests.helpers import DAI, OWNER, STETH, USDC, WETH

ENV_VARS = [
    "STABLESWAP_COINS",
    "STABLESWAP_DECIMALS",
    "STABLESWAP_A",
    "STABLESWAP_FEE",
    "STABLESWAP_ADMIN_FEE",
    "STABLESWAP_OWNER",
]


def make(**overrides):
    fields = {"coins": (WETH, STETH), "amplification": 100, "owner": OWNER}
    fields.update(overrides)
    return PoolConfig(**fields)


class TestPoolConfig:
    """Tests for construction-time validation."""

    def test_defaults(self):
        """Decimals and fees have sensible defaults."""
        config = make()
        assert config.decimals == (18, 18)
        assert config.fee == 4_000_000
        assert config.admin_fee == 5_000_000_000

    def test_normalizes_addresses(self):
        """Checksummed input is stored lowercase."""
        config = make(coins=(USDC.upper().replace("0X", "0x"), DAI))
        assert config.coins == (USDC, DAI)

    def test_rejects_duplicate_coins(self):
        """The two assets must differ, ignoring case."""
        with pytest.raises(ValidationError):
            make(coins=(WETH, WETH.upper().replace("0X", "0x")))

    def test_rejects_zero_address(self):
        """Neither asset nor owner can be the zero address."""
        with pytest.raises(ValidationError):
            make(coins=(ZERO_ADDRESS, STETH))
        with pytest.raises(ValidationError):
            make(owner=ZERO_ADDRESS)

    def test_rejects_malformed_address(self):
        """Addresses are 0x plus 40 hex characters."""
        with pytest.raises(ValidationError):
            make(coins=("0x1234", STETH))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"decimals": (19, 18)},
            {"decimals": (18, -1)},
            {"amplification": 0},
            {"amplification": MAX_A},
            {"fee": 5 * 10**9 + 1},
            {"admin_fee": 10**10 + 1},
        ],
    )
    def test_rejects_out_of_range(self, overrides):
        """Numeric parameters are bounded."""
        with pytest.raises(ValidationError):
            make(**overrides)

    def test_frozen(self):
        """Configs cannot be modified after construction."""
        config = make()
        with pytest.raises(ValidationError):
            config.amplification = 200


class TestFromEnv:
    """Tests for PoolConfig.from_env."""

    def test_defaults(self, monkeypatch):
        """Without environment the default native/stETH pool is built."""
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)
        config = PoolConfig.from_env()
        assert config.coins == (NATIVE_ASSET, STETH)
        assert config.amplification == 100
        assert config.owner == DEFAULT_OWNER

    def test_reads_environment(self, monkeypatch):
        """Every parameter can be set from the environment."""
        monkeypatch.setenv("STABLESWAP_COINS", f"{DAI}, {USDC}")
        monkeypatch.setenv("STABLESWAP_DECIMALS", "18,6")
        monkeypatch.setenv("STABLESWAP_A", "2000")
        monkeypatch.setenv("STABLESWAP_FEE", "1000000")
        monkeypatch.setenv("STABLESWAP_ADMIN_FEE", "0")
        monkeypatch.setenv("STABLESWAP_OWNER", OWNER)

        config = PoolConfig.from_env()
        assert config.coins == (DAI, USDC)
        assert config.decimals == (18, 6)
        assert (config.amplification, config.fee, config.admin_fee) == (2000, 1_000_000, 0)

    def test_invalid_environment(self, monkeypatch):
        """Bad values surface as validation errors."""
        monkeypatch.setenv("STABLESWAP_COINS", f"{DAI},{DAI}")
        with pytest.raises(ValidationError):
            PoolConfig.from_env()
