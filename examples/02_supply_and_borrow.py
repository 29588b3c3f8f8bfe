"""Supply collateral then borrow against it, driving each lifecycle to completion."""

import asyncio
import logging
import os

from dotenv import load_dotenv

from senja_tx import (
    BorrowController,
    ChainSelection,
    LocalAccountWallet,
    OrchestratorConfig,
    SqliteStore,
    SupplyCollateralController,
    TransactionRecord,
)
from senja_tx.evm import Web3Connections, Web3ContractCallClient, Web3PoolReader
from senja_tx.lifecycle import BorrowParams, SupplyCollateralParams

logging.basicConfig(level=os.getenv("LOGLEVEL", "INFO"))
logger = logging.getLogger(__name__)

load_dotenv()


def log_record(record: TransactionRecord) -> None:
    logger.info("state=%s hash=%s error=%s", record.state.value, record.submitted_hash, record.error_message)


async def main() -> None:
    private_key = os.getenv("PRIVATE_KEY")
    pool = os.getenv("POOL_ADDRESS")
    collateral_token = os.getenv("COLLATERAL_TOKEN")
    if not private_key or not pool:
        raise ValueError("PRIVATE_KEY and POOL_ADDRESS must be set in the environment")

    config = OrchestratorConfig.from_env()
    connections = Web3Connections(config)
    wallet = LocalAccountWallet(connections, private_key, initial_chain_id=config.target_chain_id)
    await wallet.connect()

    selection = ChainSelection(SqliteStore(config.storage_path), default_chain_id=config.target_chain_id)
    client = Web3ContractCallClient(connections, receipt_timeout=config.receipt_timeout)
    reader = Web3PoolReader(connections)

    supply = SupplyCollateralController(wallet, client, selection=selection, reader=reader, config=config)
    supply.subscribe(log_record)
    record = await supply.submit(
        SupplyCollateralParams(amount="1.5", decimals=18, pool=pool, collateral_token=collateral_token)
    )
    if not record.is_success:
        logger.error("Supply failed: %s", record.error_message)
        return
    logger.info("Supply confirmed: %s", supply.explorer_url)
    await supply.dismiss_success()

    borrow = BorrowController(wallet, client, selection=selection, reader=reader, config=config)
    borrow.subscribe(log_record)
    record = await borrow.submit(BorrowParams(amount="10", decimals=6, pool=pool))
    if record.is_success:
        logger.info("Borrow confirmed: %s", record.confirmed_hash)
    else:
        logger.error("Borrow failed: %s", record.error_message)

    await wallet.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
