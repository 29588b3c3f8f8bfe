"""Static chain and token tables for the supported deployments."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..exceptions import ValidationError
from ..types import Address

MOONBEAM_CHAIN_ID = 1284
BASE_CHAIN_ID = 8453

UNKNOWN_CHAIN_NAME = "Unknown"


@dataclass(frozen=True)
class ChainContracts:
    """Per-chain contract addresses. Empty string means not deployed yet."""

    lending_pool: Address = ""
    factory: Address = ""
    position: Address = ""
    block_explorer: str = ""


@dataclass(frozen=True)
class ChainDescriptor:
    """Network metadata for one supported chain."""

    chain_id: int
    name: str
    logo: str
    contracts: ChainContracts
    destination_endpoint: int
    native_symbol: str = "ETH"
    rpc_url: str = ""


@dataclass(frozen=True)
class TokenDescriptor:
    """Token metadata with its per-chain contract addresses."""

    symbol: str
    name: str
    decimals: int
    logo: str = ""
    addresses: Mapping[int, Address] = field(default_factory=dict)
    oft_address: Address | None = None

    def address_on(self, chain_id: int) -> Address | None:
        return self.addresses.get(chain_id)


CHAINS: tuple[ChainDescriptor, ...] = (
    ChainDescriptor(
        chain_id=MOONBEAM_CHAIN_ID,
        name="Moonbeam",
        logo="/chain/moonbeam-logo.svg",
        contracts=ChainContracts(
            factory="0x46638aD472507482B7D5ba45124E93D16bc97eCE",
            block_explorer="https://moonbeam.moonscan.io",
        ),
        destination_endpoint=30126,
        native_symbol="GLMR",
        rpc_url="https://rpc.api.moonbeam.network",
    ),
    ChainDescriptor(
        chain_id=BASE_CHAIN_ID,
        name="Base",
        logo="/chain/base-logo.png",
        contracts=ChainContracts(
            factory="0x5a28316959551dA618F84070FfF70B390270185C",
            block_explorer="https://basescan.org",
        ),
        destination_endpoint=30184,
        native_symbol="ETH",
        rpc_url="https://mainnet.base.org/",
    ),
)

TOKENS: tuple[TokenDescriptor, ...] = (
    TokenDescriptor(
        symbol="WGLMR",
        name="WGLMR",
        decimals=18,
        logo="/token/wglmr-logo.png",
        addresses=MappingProxyType({MOONBEAM_CHAIN_ID: "0xe19784dd55E2D7B610b53B5379EFf878c75A7cd4"}),
        oft_address="0x15858A57854BBf0DF60A737811d50e1Ee785f9bc",
    ),
    TokenDescriptor(
        symbol="WETH",
        name="WETH.e",
        decimals=18,
        logo="/token/weth.png",
        addresses=MappingProxyType({MOONBEAM_CHAIN_ID: "0xFFffFFfF86829AFE1521ad2296719Df3acE8DEd7"}),
        oft_address="0x007F735Fd070DeD4B0B58D430c392Ff0190eC20F",
    ),
    TokenDescriptor(
        symbol="WBTC",
        name="WBTC",
        decimals=8,
        logo="/token/wbtc.png",
        addresses=MappingProxyType(
            {
                MOONBEAM_CHAIN_ID: "0xfFffFFFf1B4Bb1ac5749F73D866FfC91a3432c47",
                BASE_CHAIN_ID: "0x0555E30da8f98308EdB960aa94C0Db47230d2B9c",
            }
        ),
        oft_address="0x4Ba8D8083e7F3652CCB084C32652e68566E9Ef23",
    ),
    TokenDescriptor(
        symbol="USDT",
        name="USDT",
        decimals=6,
        logo="/token/usdt.png",
        addresses=MappingProxyType(
            {
                BASE_CHAIN_ID: "0xfde4C96c8593536E31F229EA8f37b2ADa2699bb2",
                MOONBEAM_CHAIN_ID: "0x32822138bc93390f236B4a629EA793dE12b92d19",
            }
        ),
        oft_address="0xdF05e9AbF64dA281B3cBd8aC3581022eC4841FB2",
    ),
    TokenDescriptor(
        symbol="USDC",
        name="USDC",
        decimals=6,
        logo="/token/usdc.png",
        addresses=MappingProxyType(
            {
                BASE_CHAIN_ID: "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
                MOONBEAM_CHAIN_ID: "0xFFfffffF7D2B0B761Af01Ca8e25242976ac0aD7D",
            }
        ),
        oft_address="0xdF05e9AbF64dA281B3cBd8aC3581022eC4841FB2",
    ),
)

_CHAINS_BY_ID = {chain.chain_id: chain for chain in CHAINS}
_TOKENS_BY_SYMBOL = {token.symbol.upper(): token for token in TOKENS}


def all_chains() -> tuple[ChainDescriptor, ...]:
    return CHAINS


def default_chain() -> ChainDescriptor:
    return CHAINS[0]


def get_chain(chain_id: int) -> ChainDescriptor | None:
    return _CHAINS_BY_ID.get(chain_id)


def require_chain(chain_id: int) -> ChainDescriptor:
    """Get a chain by id.

    Raises:
        ValidationError: If the chain is not registered
    """
    chain = get_chain(chain_id)
    if chain is None:
        raise ValidationError(
            f"Unsupported chain: {chain_id}. Available chains: "
            + ", ".join(str(c.chain_id) for c in CHAINS),
            field="chain_id",
            value=chain_id,
        )
    return chain


def is_chain_supported(chain_id: int) -> bool:
    return chain_id in _CHAINS_BY_ID


def chain_name(chain_id: int) -> str:
    chain = get_chain(chain_id)
    return chain.name if chain else UNKNOWN_CHAIN_NAME


def next_chain(chain_id: int) -> ChainDescriptor:
    """Chain after ``chain_id`` in registry order, wrapping around."""
    index = _index_of(chain_id)
    if index is None:
        return default_chain()
    return CHAINS[(index + 1) % len(CHAINS)]


def previous_chain(chain_id: int) -> ChainDescriptor:
    index = _index_of(chain_id)
    if index is None:
        return default_chain()
    return CHAINS[(index - 1) % len(CHAINS)]


def explorer_tx_url(chain_id: int, tx_hash: str) -> str | None:
    chain = get_chain(chain_id)
    if chain is None or not chain.contracts.block_explorer:
        return None
    return f"{chain.contracts.block_explorer.rstrip('/')}/tx/{tx_hash}"


def get_token(symbol: str) -> TokenDescriptor | None:
    return _TOKENS_BY_SYMBOL.get(symbol.upper())


def find_token_by_address(address: str | None, chain_id: int | None = None) -> TokenDescriptor | None:
    """Look up a token by contract address, optionally scoped to one chain."""
    normalized = _normalize_address(address)
    if normalized is None:
        return None

    for token in TOKENS:
        if chain_id is not None:
            candidates = [token.addresses.get(chain_id)]
        else:
            candidates = list(token.addresses.values())
        if any(_normalize_address(candidate) == normalized for candidate in candidates):
            return token
    return None


def _index_of(chain_id: int) -> int | None:
    for index, chain in enumerate(CHAINS):
        if chain.chain_id == chain_id:
            return index
    return None


def _normalize_address(address: str | None) -> str | None:
    if not address or not isinstance(address, str):
        return None
    return address.strip().lower()
