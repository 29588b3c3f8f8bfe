"""Read-only client for the pool indexing service.

Every failure (transport, HTTP status, GraphQL errors, malformed payloads or
an empty result) is logged and answered with fallback data; nothing here is
fatal to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any

import requests

from .chains.registry import TokenDescriptor, find_token_by_address
from .config import DEFAULT_REQUEST_TIMEOUT
from .exceptions import NetworkError, SenjaError, ValidationError
from .types import Address

logger = logging.getLogger(__name__)

POOLS_QUERY = """
query LendingPools {
  lendingPoolCreateds {
    items {
      id
      lendingPool
      collateralToken
      borrowToken
      ltv
    }
  }
}
"""

POOL_APY_QUERY = """
query LendingPoolApy {
  lendingPools {
    items {
      borrowAPY
      supplyAPY
      address
    }
  }
}
"""


@dataclass(frozen=True)
class LendingPool:
    id: str
    lending_pool: Address
    borrow_token: Address
    collateral_token: Address
    ltv: str
    borrow_token_info: TokenDescriptor | None = None
    collateral_token_info: TokenDescriptor | None = None


@dataclass(frozen=True)
class PoolApy:
    address: Address
    borrow_apy: Decimal
    supply_apy: Decimal


FALLBACK_POOLS: tuple[LendingPool, ...] = (
    LendingPool(
        id="fallback-pool-moonbeam-1",
        lending_pool="0x8db5846dd3c3ec592d5f4421a96d6fba118a0629",
        borrow_token="0x32822138bc93390f236B4a629EA793dE12b92d19",
        collateral_token="0xe19784dd55E2D7B610b53B5379EFf878c75A7cd4",
        ltv="89",
    ),
)


def pair_with_tokens(pools: Sequence[LendingPool], chain_id: int | None = None) -> list[LendingPool]:
    """Attach registry token descriptors to each pool (None when unknown)."""
    return [
        replace(
            pool,
            borrow_token_info=find_token_by_address(pool.borrow_token, chain_id),
            collateral_token_info=find_token_by_address(pool.collateral_token, chain_id),
        )
        for pool in pools
    ]


class IndexerClient:
    """GraphQL-over-HTTP queries for pool listings and APY figures."""

    def __init__(
        self,
        url: str | None,
        *,
        session: requests.Session | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._url = url
        self._session = session or requests.Session()
        self._request_timeout = request_timeout

    def fetch_pools(self) -> list[LendingPool]:
        try:
            items = self._items(POOLS_QUERY, "lendingPoolCreateds")
        except SenjaError as exc:
            logger.warning("Pool listing unavailable (%s); using fallback pools", exc.message)
            return list(FALLBACK_POOLS)

        pools = [pool for pool in (_parse_pool(item) for item in items) if pool is not None]
        if not pools:
            logger.warning("Indexer returned no valid pools; using fallback pools")
            return list(FALLBACK_POOLS)
        return pools

    def fetch_pools_with_tokens(self, chain_id: int | None = None) -> list[LendingPool]:
        return pair_with_tokens(self.fetch_pools(), chain_id)

    def fetch_pool_apys(self) -> dict[str, PoolApy]:
        """APY figures keyed by lower-cased pool address; empty when unavailable."""
        try:
            items = self._items(POOL_APY_QUERY, "lendingPools")
        except SenjaError as exc:
            logger.warning("Pool APY unavailable (%s)", exc.message)
            return {}

        apys: dict[str, PoolApy] = {}
        for item in items:
            apy = _parse_apy(item)
            if apy is not None:
                apys[apy.address.lower()] = apy
        return apys

    def pool_apy(self, pool: Address) -> PoolApy | None:
        return self.fetch_pool_apys().get(pool.lower())

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _items(self, query: str, root: str) -> list[Any]:
        data = self._post(query)
        node = data.get(root)
        if isinstance(node, Mapping):
            node = node.get("items")
        if not isinstance(node, list):
            raise ValidationError(f"Indexer response has no {root} list", field=root, value=node)
        return node

    def _post(self, query: str) -> Mapping[str, Any]:
        if not self._url:
            raise ValidationError("Indexer URL is not configured", field="indexer_url")

        logger.debug("Querying indexer at %s", self._url)
        try:
            response = self._session.post(
                self._url,
                json={"query": query},
                headers={"Content-Type": "application/json"},
                timeout=self._request_timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise NetworkError(
                f"Indexer request failed: {exc}",
                endpoint=self._url,
                status_code=getattr(exc.response, "status_code", None),
            ) from exc
        except ValueError as exc:
            raise ValidationError("Indexer response is not JSON", field="payload") from exc

        if not isinstance(payload, Mapping):
            raise ValidationError("Indexer response is not a JSON object", field="payload")
        if payload.get("errors"):
            raise ValidationError(
                "Indexer returned GraphQL errors", field="errors", details={"errors": payload["errors"]}
            )
        data = payload.get("data")
        if not isinstance(data, Mapping):
            raise ValidationError("Indexer response has no data", field="data")
        return data


def _parse_pool(item: Any) -> LendingPool | None:
    if not isinstance(item, Mapping):
        return None
    lending_pool = item.get("lendingPool")
    borrow_token = item.get("borrowToken")
    collateral_token = item.get("collateralToken")
    if not (lending_pool and borrow_token and collateral_token):
        return None
    return LendingPool(
        id=str(item.get("id") or lending_pool),
        lending_pool=str(lending_pool),
        borrow_token=str(borrow_token),
        collateral_token=str(collateral_token),
        ltv=str(item.get("ltv") or "0"),
    )


def _parse_apy(item: Any) -> PoolApy | None:
    if not isinstance(item, Mapping) or not item.get("address"):
        return None
    try:
        borrow = Decimal(str(item.get("borrowAPY") or 0))
        supply = Decimal(str(item.get("supplyAPY") or 0))
    except InvalidOperation:
        logger.debug("Skipping APY entry with malformed figures: %s", item)
        return None
    return PoolApy(address=str(item["address"]), borrow_apy=borrow, supply_apy=supply)
