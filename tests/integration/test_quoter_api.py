"""Integration tests for the quoter HTTP API.

The default service is replaced with one backed by FakeChain through
``app.dependency_overrides``.
"""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from quoter import __version__
from quoter.api.endpoints import get_service
from quoter.api.main import MAX_REQUEST_SIZE, app
from quoter.errors import NetworkError
from quoter.service import DexReadService
from tests.helpers import CHA, DEPLOYER, UNLISTED, UPDOG, WELSH, WSTX, FakeChain


@pytest.fixture
def client(service: DexReadService) -> Iterator[TestClient]:
    """Test client wired to the seeded fake chain."""
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    """GET /health."""

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


class TestPoolEndpoints:
    """Pool lookups."""

    def test_pool_count(self, client: TestClient):
        response = client.get("/pools/count")
        assert response.status_code == 200
        assert response.json() == {"count": 3}

    def test_pool_by_id(self, client: TestClient):
        response = client.get("/pools/1")
        assert response.status_code == 200
        assert response.json() == {
            "id": "1",
            "token0": CHA,
            "token1": WELSH,
            "reserve0": "1000000",
            "reserve1": "2000000",
            "lpToken": f"{DEPLOYER}.univ2-lp-token-1",
            "totalSupply": "1414213",
            "swapFee": {"numerator": 30, "denominator": 10000},
            "protocolFee": {"numerator": 50, "denominator": 100},
            "shareFee": {"numerator": 0, "denominator": 100},
        }

    def test_unknown_pool_is_404(self, client: TestClient):
        response = client.get("/pools/99")
        assert response.status_code == 404
        assert response.json() == {
            "error": {
                "code": "POOL_NOT_FOUND",
                "message": "Pool not found",
                "details": {"id": "99"},
            }
        }

    def test_non_numeric_id_is_404(self, client: TestClient):
        assert client.get("/pools/abc").status_code == 404

    def test_pool_by_pair_either_order(self, client: TestClient):
        forward = client.get("/pools", params={"token0": WELSH, "token1": WSTX})
        backward = client.get("/pools", params={"token0": WSTX, "token1": WELSH})
        assert forward.status_code == backward.status_code == 200
        assert forward.json() == backward.json()
        assert forward.json()["id"] == "2"

    def test_pools_batch_omits_missing(self, client: TestClient):
        response = client.post(
            "/pools/batch",
            json={
                "pairs": [
                    {"token0": CHA, "token1": UNLISTED},
                    {"token0": WSTX, "token1": UPDOG},
                ],
                "poolIds": ["1", "42"],
            },
        )
        assert response.status_code == 200
        assert [p["id"] for p in response.json()["pools"]] == ["3", "1"]


class TestSwapEndpoints:
    """Swap quoting."""

    def test_exact_input(self, client: TestClient):
        response = client.post(
            "/quotes/swap", json={"tokenIn": CHA, "tokenOut": WELSH, "amount": "10000"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["route"] == [CHA, WELSH]
        assert data["amountIn"] == "10000"
        assert data["amountOut"] == "19743"
        assert data["priceImpact"] > 0

    def test_exact_output(self, client: TestClient):
        response = client.post(
            "/quotes/swap",
            json={"tokenIn": CHA, "tokenOut": WELSH, "amount": "19743", "exactOutput": True},
        )
        assert response.status_code == 200
        assert response.json()["amountOut"] == "19743"

    def test_multihop(self, client: TestClient):
        response = client.post(
            "/quotes/multihop", json={"path": [CHA, WELSH, WSTX], "amount": "10000"}
        )
        assert response.status_code == 200
        assert response.json()["route"] == [CHA, WELSH, WSTX]

    def test_batch_fails_as_a_whole(self, client: TestClient):
        response = client.post(
            "/quotes/batch",
            json={
                "queries": [
                    {"path": [CHA, WELSH], "amountIn": "10000"},
                    {"path": [CHA, UNLISTED], "amountIn": "10000"},
                ]
            },
        )
        assert response.status_code == 404

    def test_batch(self, client: TestClient):
        response = client.post(
            "/quotes/batch",
            json={"queries": [{"path": [CHA, WELSH], "amountIn": "10000"}]},
        )
        assert response.status_code == 200
        assert response.json()["quotes"][0]["amountOut"] == "19743"

    def test_zero_amount_is_400(self, client: TestClient):
        response = client.post(
            "/quotes/swap", json={"tokenIn": CHA, "tokenOut": WELSH, "amount": "0"}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_AMOUNTS"

    def test_short_path_is_400(self, client: TestClient):
        response = client.post("/quotes/multihop", json={"path": [CHA], "amount": "10"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PATH"

    def test_output_above_reserve_is_409(self, client: TestClient):
        response = client.post(
            "/quotes/swap",
            json={"tokenIn": CHA, "tokenOut": WELSH, "amount": "2000000", "exactOutput": True},
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INSUFFICIENT_LIQUIDITY"

    def test_network_failure_is_502(self, client: TestClient, seeded_chain: FakeChain):
        seeded_chain.fail("get-pool", NetworkError("Network request failed"))
        response = client.post(
            "/quotes/swap", json={"tokenIn": CHA, "tokenOut": WELSH, "amount": "10000"}
        )
        assert response.status_code == 502
        assert response.json()["error"]["code"] == "NETWORK_ERROR"

    @pytest.mark.parametrize("amount", ["-1", "1.5", "abc", str(2**128)])
    def test_malformed_amount_is_422(self, client: TestClient, amount: str):
        response = client.post(
            "/quotes/swap", json={"tokenIn": CHA, "tokenOut": WELSH, "amount": amount}
        )
        assert response.status_code == 422

    def test_malformed_principal_is_422(self, client: TestClient):
        response = client.post(
            "/quotes/swap", json={"tokenIn": "0xdeadbeef", "tokenOut": WELSH, "amount": "1"}
        )
        assert response.status_code == 422


class TestLiquidityEndpoints:
    """Deposit and removal quoting."""

    def test_liquidity_quote(self, client: TestClient):
        response = client.post(
            "/quotes/liquidity",
            json={"poolId": "1", "amount0Desired": "100", "amount1Desired": "500"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["poolId"] == "1"
        assert data["token0Amount"] == "100"
        assert data["token1Amount"] == "200"
        assert data["liquidityTokens"] == "141"

    def test_minimum_not_met_is_400(self, client: TestClient):
        response = client.post(
            "/quotes/liquidity",
            json={
                "poolId": "1",
                "amount0Desired": "100",
                "amount1Desired": "500",
                "amount1Min": "300",
            },
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "MINIMUM_NOT_MET"
        assert error["details"]["optimal_amount1"] == "200"

    def test_liquidity_tokens(self, client: TestClient):
        response = client.post(
            "/quotes/liquidity/tokens", json={"poolId": "3", "amount0": "9", "amount1": "16"}
        )
        assert response.status_code == 200
        assert response.json() == {"poolId": "3", "liquidityTokens": "12"}

    def test_liquidity_batch_omits_failures(self, client: TestClient):
        response = client.post(
            "/quotes/liquidity/batch",
            json={
                "queries": [
                    {"poolId": "99", "amount0Desired": "1", "amount1Desired": "1"},
                    {"poolId": "1", "amount0Desired": "100", "amount1Desired": "500"},
                ]
            },
        )
        assert response.status_code == 200
        assert [q["poolId"] for q in response.json()["quotes"]] == ["1"]

    def test_removal_quote(self, client: TestClient):
        response = client.post(
            "/quotes/removal", json={"poolId": "1", "liquidityTokens": "1414213"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token0Amount"] == "1000000"
        assert data["token1Amount"] == "2000000"
        assert data["shareOfPool"] == 100.0

    def test_removal_range(self, client: TestClient):
        response = client.post(
            "/quotes/removal", json={"poolId": "1", "liquidityTokens": "1000", "range": True}
        )
        assert response.status_code == 200
        assert [q["percentage"] for q in response.json()["quotes"]] == [25, 50, 75, 100]

    def test_removal_from_unfunded_pool_is_409(self, client: TestClient):
        response = client.post("/quotes/removal", json={"poolId": "3", "liquidityTokens": "10"})
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ZERO_LIQUIDITY"

    def test_removal_batch(self, client: TestClient):
        response = client.post(
            "/quotes/removal/batch",
            json={
                "queries": [
                    {"poolId": "1", "liquidityTokens": "1000"},
                    {"poolId": "3", "liquidityTokens": "10"},
                ]
            },
        )
        assert response.status_code == 200
        assert [q["poolId"] for q in response.json()["quotes"]] == ["1"]


class TestRequestLimits:
    """Request body size limit."""

    def test_oversized_request_returns_413(self, client: TestClient):
        response = client.post(
            "/quotes/batch",
            json={"queries": []},
            headers={"Content-Length": str(MAX_REQUEST_SIZE + 1)},
        )
        assert response.status_code == 413
        assert response.json()["detail"] == "Request too large"

    def test_normal_request_accepted(self, client: TestClient):
        response = client.post("/quotes/batch", json={"queries": []})
        assert response.status_code == 200
        assert response.json() == {"quotes": []}


class TestOpenAPI:
    """Error responses in the generated schema."""

    def test_error_model_documented(self):
        schema = app.openapi()
        assert "ErrorResponse" in schema["components"]["schemas"]
        responses = schema["paths"]["/pools/{pool_id}"]["get"]["responses"]
        for status in ("400", "404", "409", "502"):
            assert responses[status]["content"]["application/json"]["schema"] == {
                "$ref": "#/components/schemas/ErrorResponse"
            }
