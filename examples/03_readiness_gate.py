"""Gate an action behind wallet readiness, connecting and switching chains on demand."""

import asyncio
import logging
import os

from dotenv import load_dotenv

from senja_tx import LocalAccountWallet, OrchestratorConfig, WalletReadinessGate
from senja_tx.evm import Web3Connections

logging.basicConfig(level=os.getenv("LOGLEVEL", "INFO"))
logger = logging.getLogger(__name__)

load_dotenv()


async def main() -> None:
    private_key = os.getenv("PRIVATE_KEY")
    if not private_key:
        raise ValueError("PRIVATE_KEY not found in environment variables")

    config = OrchestratorConfig.from_env()
    wallet = LocalAccountWallet(Web3Connections(config), private_key)
    done = asyncio.Event()

    async def open_pool(pool: str | None) -> None:
        logger.info("Wallet ready on chain %s, opening pool %s", wallet.state.chain_id, pool)
        done.set()

    gate = WalletReadinessGate.from_config(wallet, config.target_chain_id, config.guard, on_ready=open_pool)
    if gate.trigger(os.getenv("POOL_ADDRESS")):
        await open_pool(gate.pending_pool)
    else:
        logger.info("Gate active in state %s", gate.state.value)
        await gate.request_connect()
        await gate.request_chain_switch()
        await asyncio.wait_for(done.wait(), timeout=10)

    gate.close()
    await wallet.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
