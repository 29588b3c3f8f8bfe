"""Chain registry and chain selection state."""

from .registry import (
    BASE_CHAIN_ID,
    CHAINS,
    MOONBEAM_CHAIN_ID,
    TOKENS,
    ChainContracts,
    ChainDescriptor,
    TokenDescriptor,
    all_chains,
    chain_name,
    default_chain,
    explorer_tx_url,
    find_token_by_address,
    get_chain,
    get_token,
    is_chain_supported,
    next_chain,
    previous_chain,
    require_chain,
)
from .selection import ChainSelection

__all__ = [
    "BASE_CHAIN_ID",
    "CHAINS",
    "MOONBEAM_CHAIN_ID",
    "TOKENS",
    "ChainContracts",
    "ChainDescriptor",
    "ChainSelection",
    "TokenDescriptor",
    "all_chains",
    "chain_name",
    "default_chain",
    "explorer_tx_url",
    "find_token_by_address",
    "get_chain",
    "get_token",
    "is_chain_supported",
    "next_chain",
    "previous_chain",
    "require_chain",
]
