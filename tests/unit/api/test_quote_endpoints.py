"""Tests for the quote API."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from stableswap.api.endpoints import get_default_pool, get_pool
from stableswap.api.main import app
from stableswap.constants import NATIVE_ASSET
from tests.helpers import (
    DAI,
    ONE,
    PROVIDER,
    STETH,
    USDC,
    WETH,
    PoolHarness,
    make_config,
    make_pool,
)

ENV_VARS = [
    "STABLESWAP_COINS",
    "STABLESWAP_DECIMALS",
    "STABLESWAP_A",
    "STABLESWAP_FEE",
    "STABLESWAP_ADMIN_FEE",
    "STABLESWAP_OWNER",
]


@pytest.fixture
def client(seeded: PoolHarness) -> Iterator[TestClient]:
    """Test client serving the seeded pool."""
    app.dependency_overrides[get_pool] = lambda: seeded.pool
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def empty_client(harness: PoolHarness) -> Iterator[TestClient]:
    """Test client serving an empty pool."""
    app.dependency_overrides[get_pool] = lambda: harness.pool
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealthAndSnapshot:
    """Tests for GET /health and GET /pool."""

    def test_health(self, client):
        """Health endpoint returns ok."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_pool_snapshot(self, client):
        """Snapshot reports balances and parameters as decimal strings."""
        response = client.get("/pool")
        assert response.status_code == 200

        data = response.json()
        assert data["coins"] == [WETH, STETH]
        assert data["balances"] == [str(1000 * ONE), str(1000 * ONE)]
        assert data["amplification"] == 100
        assert data["fee"] == 4_000_000
        assert data["adminFee"] == 5_000_000_000
        assert data["totalSupply"] == str(2000 * ONE)
        assert data["virtualPrice"] == str(ONE)
        assert data["isKilled"] is False

    def test_empty_pool_has_no_virtual_price(self, empty_client):
        """Without shares the virtual price is omitted."""
        data = empty_client.get("/pool").json()
        assert data["virtualPrice"] is None
        assert data["totalSupply"] == "0"


class TestExchangeQuote:
    """Tests for POST /quote/exchange."""

    def test_quote_matches_pool(self, client, seeded):
        """The endpoint returns the pool's own quote."""
        response = client.post("/quote/exchange", json={"i": 0, "j": 1, "dx": str(100 * ONE)})
        assert response.status_code == 200

        quote = seeded.pool.quote_exchange(0, 1, 100 * ONE)
        assert response.json() == {
            "dy": str(quote.dy),
            "fee": str(quote.fee),
            "adminFee": str(quote.admin_fee),
        }

    def test_quote_does_not_trade(self, client, seeded):
        """Quoting leaves the pool untouched."""
        client.post("/quote/exchange", json={"i": 0, "j": 1, "dx": str(ONE)})
        assert seeded.pool.balances == (1000 * ONE, 1000 * ONE)
        assert len(seeded.pool.events) == 1

    def test_same_asset_is_bad_request(self, client):
        """Pool-level rejections map to 400 with a message."""
        response = client.post("/quote/exchange", json={"i": 1, "j": 1, "dx": "1"})
        assert response.status_code == 400
        assert "itself" in response.json()["detail"]

    @pytest.mark.parametrize(
        "body",
        [
            {"i": 2, "j": 0, "dx": "1"},
            {"i": 0, "j": 1, "dx": "-1"},
            {"i": 0, "j": 1, "dx": "1.5"},
            {"i": 0, "j": 1},
        ],
    )
    def test_malformed_request(self, client, body):
        """Schema violations are rejected by validation."""
        assert client.post("/quote/exchange", json=body).status_code == 422

    def test_empty_pool_is_bad_request(self, empty_client):
        """An empty pool cannot price a swap."""
        response = empty_client.post("/quote/exchange", json={"i": 0, "j": 1, "dx": str(ONE)})
        assert response.status_code == 400

    def test_fee_uses_output_asset_decimals(self):
        """fee, dy and adminFee all come back in the bought asset's own units."""
        h = make_pool(make_config(coins=(DAI, USDC), decimals=(18, 6)))
        h.fund(PROVIDER)
        h.deposit(PROVIDER, [1000 * ONE, 1000 * 10**6])
        app.dependency_overrides[get_pool] = lambda: h.pool
        try:
            response = TestClient(app).post(
                "/quote/exchange", json={"i": 0, "j": 1, "dx": str(100 * ONE)}
            )
        finally:
            app.dependency_overrides.clear()

        data = response.json()
        assert int(data["dy"]) + int(data["fee"]) <= 100 * 10**6
        assert 39_000 < int(data["fee"]) <= 40_000
        assert int(data["adminFee"]) <= int(data["fee"])


class TestTokenAmountQuote:
    """Tests for POST /quote/token-amount."""

    def test_deposit(self, client):
        """A balanced deposit quotes its share of D."""
        response = client.post(
            "/quote/token-amount",
            json={"amounts": [str(100 * ONE), str(100 * ONE)], "isDeposit": True},
        )
        assert response.status_code == 200
        assert response.json() == {"shares": str(200 * ONE)}

    def test_withdrawal_beyond_balance(self, client):
        """Withdrawing more than the pool holds is a bad request."""
        response = client.post(
            "/quote/token-amount",
            json={"amounts": [str(2000 * ONE), "0"], "isDeposit": False},
        )
        assert response.status_code == 400

    def test_wrong_length(self, client):
        """Exactly two amounts are required."""
        response = client.post("/quote/token-amount", json={"amounts": ["1"], "isDeposit": True})
        assert response.status_code == 422


class TestWithdrawOneCoinQuote:
    """Tests for POST /quote/withdraw-one-coin."""

    def test_quote_matches_pool(self, client, seeded):
        """The endpoint returns the pool's own quote."""
        response = client.post(
            "/quote/withdraw-one-coin", json={"shareAmount": str(10 * ONE), "i": 0}
        )
        assert response.status_code == 200
        assert response.json() == {"dy": str(seeded.pool.calc_withdraw_one_coin(10 * ONE, 0))}

    def test_empty_pool(self, empty_client):
        """No shares outstanding is a bad request."""
        response = empty_client.post(
            "/quote/withdraw-one-coin", json={"shareAmount": "1", "i": 0}
        )
        assert response.status_code == 400


class TestDefaultPool:
    """Tests for the environment-built pool."""

    @pytest.fixture(autouse=True)
    def fresh_default_pool(self):
        get_default_pool.cache_clear()
        yield
        get_default_pool.cache_clear()

    def test_seeded_from_environment(self, monkeypatch):
        """STABLESWAP_SEED_BALANCES bootstraps the default pool."""
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("STABLESWAP_SEED_BALANCES", f"{500 * ONE},{500 * ONE}")

        pool = get_default_pool()
        assert pool.coins[0] == NATIVE_ASSET
        assert pool.balances == (500 * ONE, 500 * ONE)
        assert pool.total_supply == 1000 * ONE

    def test_unseeded(self, monkeypatch):
        """Without seed balances the pool starts empty."""
        monkeypatch.delenv("STABLESWAP_SEED_BALANCES", raising=False)
        monkeypatch.delenv("STABLESWAP_COINS", raising=False)
        assert get_default_pool().total_supply == 0
