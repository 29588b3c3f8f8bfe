"""Per-chain Web3 providers and signing middleware for a local account."""

from __future__ import annotations

import logging
from typing import Any, cast

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import HTTPProvider, Web3
from web3.contract import Contract
from web3.middleware import SignAndSendRawMiddlewareBuilder

from ..config import OrchestratorConfig
from ..exceptions import NetworkError, ValidationError

logger = logging.getLogger(__name__)


class Web3Connections:
    """Manage the signer account and one Web3 handle per configured chain."""

    def __init__(self, config: OrchestratorConfig):
        self.config = config
        self._account: LocalAccount | None = None
        self._web3_by_chain: dict[int, Web3] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def connect(self, private_key: str) -> LocalAccount:
        """Derive the signer from ``private_key``; providers are built lazily per chain."""

        try:
            signer = cast(LocalAccount, Account.from_key(private_key))  # type: ignore[arg-type]
        except Exception as exc:
            raise ValidationError(
                "Failed to derive signer account from provided private key",
                field="private_key",
                details={"error": str(exc)},
            ) from exc

        self._account = signer
        self._web3_by_chain.clear()
        logger.info("Loaded signer %s", signer.address)
        return signer

    def disconnect(self) -> None:
        self._account = None
        self._web3_by_chain.clear()

    def is_connected(self) -> bool:
        return self._account is not None

    def ensure_connected(self) -> None:
        if not self.is_connected():
            raise NetworkError("Signer is not connected; call connect() first")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def account(self) -> LocalAccount:
        if self._account is None:
            raise NetworkError("Signer account is not initialised; call connect() first")
        return self._account

    def web3_for(self, chain_id: int) -> Web3:
        """Return (building on first use) the signing Web3 handle for ``chain_id``."""

        web3 = self._web3_by_chain.get(chain_id)
        if web3 is not None:
            return web3

        rpc_url = self.config.rpc_url_for(chain_id)
        web3 = self._build_web3(rpc_url, chain_id=chain_id)
        if self._account is not None:
            self._apply_account_middleware(web3, self._account)
        self._web3_by_chain[chain_id] = web3
        logger.info("Connected to chain %s RPC at %s", chain_id, rpc_url)
        return web3

    def contract(self, chain_id: int, address: str, abi: list[dict[str, Any]]) -> Contract:
        try:
            checksum = Web3.to_checksum_address(address)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                "Invalid contract address", field="address", value=address, details={"error": str(exc)}
            ) from exc
        return self.web3_for(chain_id).eth.contract(address=checksum, abi=abi)

    # ------------------------------------------------------------------
    # Internal wiring
    # ------------------------------------------------------------------
    def _build_web3(self, rpc_url: str, *, chain_id: int) -> Web3:
        provider = HTTPProvider(rpc_url, request_kwargs={"timeout": self.config.request_timeout})
        web3 = Web3(provider)
        if not web3.is_connected():
            raise NetworkError(f"Unable to connect to chain {chain_id} RPC", endpoint=rpc_url)
        return web3

    def _apply_account_middleware(self, web3: Web3, account: LocalAccount) -> None:
        web3.middleware_onion.add(SignAndSendRawMiddlewareBuilder.build(account))  # type: ignore[arg-type]
        web3.eth.default_account = account.address
