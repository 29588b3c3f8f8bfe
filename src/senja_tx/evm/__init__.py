"""EVM plumbing: ABI fragments, RPC connections, the contract-call client and pool reads."""

from .abi import ERC20_ABI, FACTORY_ABI, LENDING_POOL_ABI, POSITION_ABI
from .client import (
    ContractCallClient,
    SigningApprover,
    Web3ContractCallClient,
    decode_revert_reason,
    serialise_receipt,
)
from .connections import Web3Connections
from .reader import PoolReader, Web3PoolReader

__all__ = [
    "ERC20_ABI",
    "FACTORY_ABI",
    "LENDING_POOL_ABI",
    "POSITION_ABI",
    "ContractCallClient",
    "PoolReader",
    "SigningApprover",
    "Web3ContractCallClient",
    "Web3Connections",
    "Web3PoolReader",
    "decode_revert_reason",
    "serialise_receipt",
]
