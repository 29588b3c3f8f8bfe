from __future__ import annotations

from decimal import Decimal
from typing import Any

import requests
from requests import Session

from senja_tx.indexer import FALLBACK_POOLS, IndexerClient, pair_with_tokens

URL = "https://indexer.example/graphql"


class DummyResponse:
    def __init__(self, payload: Any, *, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if not (200 <= self.status_code < 300):
            raise requests.HTTPError(f"status={self.status_code}", response=self)  # type: ignore[arg-type]

    def json(self) -> Any:
        return self._payload


class DummySession(Session):
    def __init__(self, response: DummyResponse | None = None, error: Exception | None = None) -> None:
        super().__init__()
        self._response = response
        self._error = error
        self.calls: list[tuple[str, dict[str, Any], float]] = []

    def post(self, url: str, json: dict[str, Any], headers: dict[str, str], timeout: float) -> DummyResponse:  # type: ignore[override]
        self.calls.append((url, json, timeout))
        if self._error is not None:
            raise self._error
        assert self._response is not None
        return self._response


def _pools_payload(items: list[dict[str, Any]]) -> dict[str, Any]:
    return {"data": {"lendingPoolCreateds": {"items": items}}}


def test_fetch_pools() -> None:
    session = DummySession(
        DummyResponse(
            _pools_payload(
                [
                    {
                        "id": "pool-1",
                        "lendingPool": "0xabc",
                        "borrowToken": "0x32822138bc93390f236B4a629EA793dE12b92d19",
                        "collateralToken": "0xe19784dd55E2D7B610b53B5379EFf878c75A7cd4",
                        "ltv": "800000000000000000",
                    },
                    {"id": "broken", "lendingPool": "0xdef"},
                ]
            )
        )
    )
    client = IndexerClient(URL, session=session, request_timeout=3.0)

    pools = client.fetch_pools()

    assert [pool.id for pool in pools] == ["pool-1"]
    url, body, timeout = session.calls[0]
    assert url == URL
    assert "lendingPoolCreateds" in body["query"]
    assert timeout == 3.0


def test_pools_fall_back_on_transport_error() -> None:
    session = DummySession(error=requests.ConnectionError("refused"))
    assert IndexerClient(URL, session=session).fetch_pools() == list(FALLBACK_POOLS)


def test_pools_fall_back_on_http_error() -> None:
    session = DummySession(DummyResponse({}, status_code=502))
    assert IndexerClient(URL, session=session).fetch_pools() == list(FALLBACK_POOLS)


def test_pools_fall_back_on_graphql_errors_and_empty_results() -> None:
    errors = DummySession(DummyResponse({"errors": [{"message": "boom"}]}))
    empty = DummySession(DummyResponse(_pools_payload([])))

    assert IndexerClient(URL, session=errors).fetch_pools() == list(FALLBACK_POOLS)
    assert IndexerClient(URL, session=empty).fetch_pools() == list(FALLBACK_POOLS)


def test_unconfigured_url_uses_fallback_without_request() -> None:
    session = DummySession()
    assert IndexerClient(None, session=session).fetch_pools() == list(FALLBACK_POOLS)
    assert session.calls == []


def test_pool_tokens_are_paired() -> None:
    paired = pair_with_tokens(FALLBACK_POOLS, 1284)

    assert paired[0].borrow_token_info is not None
    assert paired[0].borrow_token_info.symbol == "USDT"
    assert paired[0].collateral_token_info is not None
    assert paired[0].collateral_token_info.symbol == "WGLMR"

    assert pair_with_tokens(FALLBACK_POOLS, 8453)[0].collateral_token_info is None


def test_fetch_pool_apys() -> None:
    payload = {
        "data": {
            "lendingPools": {
                "items": [
                    {"address": "0xABC", "borrowAPY": "5.25", "supplyAPY": "3.1"},
                    {"address": "0xdef", "borrowAPY": "n/a", "supplyAPY": "1"},
                    {"borrowAPY": "1"},
                ]
            }
        }
    }
    client = IndexerClient(URL, session=DummySession(DummyResponse(payload)))

    apys = client.fetch_pool_apys()

    assert list(apys) == ["0xabc"]
    assert apys["0xabc"].borrow_apy == Decimal("5.25")
    assert apys["0xabc"].supply_apy == Decimal("3.1")


def test_pool_apys_empty_on_failure() -> None:
    client = IndexerClient(URL, session=DummySession(error=requests.Timeout("slow")))
    assert client.fetch_pool_apys() == {}
    assert client.pool_apy("0xabc") is None
