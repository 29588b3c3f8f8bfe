"""List lending pools and their APYs from the Senja indexer."""

import logging
import os

from dotenv import load_dotenv

from senja_tx import IndexerClient, OrchestratorConfig
from senja_tx.amounts import to_display
from senja_tx.constants import LTV_SCALE_DECIMALS

logging.basicConfig(level=os.getenv("LOGLEVEL", "INFO"))
logger = logging.getLogger(__name__)

load_dotenv()


def main() -> None:
    config = OrchestratorConfig.from_env()
    if not config.indexer_url:
        logger.warning("SENJA_INDEXER_URL not set; only the fallback pool will be listed")

    indexer = IndexerClient(config.indexer_url, request_timeout=config.request_timeout)
    pools = indexer.fetch_pools_with_tokens(config.target_chain_id)
    apys = indexer.fetch_pool_apys() if config.indexer_url else {}

    print("=" * 60)
    print(f"Lending pools on chain {config.target_chain_id}")
    print("=" * 60)
    for pool in pools:
        collateral = pool.collateral_token_info.symbol if pool.collateral_token_info else pool.collateral_token
        borrow = pool.borrow_token_info.symbol if pool.borrow_token_info else pool.borrow_token
        apy = apys.get(pool.lending_pool.lower())
        print(f"{collateral}/{borrow} @ {pool.lending_pool}")
        print(f"  LTV: {to_display(int(pool.ltv), LTV_SCALE_DECIMALS, 2, trim=True)}%")
        if apy is not None:
            print(f"  Supply APY: {apy.supply_apy}  Borrow APY: {apy.borrow_apy}")


if __name__ == "__main__":
    main()
