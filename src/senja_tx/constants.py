"""Constants and user-facing messages for the orchestration layer."""

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Contract call constants
SLIPPAGE_TOLERANCE = 10_000
EXECUTOR_LZ_RECEIVE_GAS = 6_500
LTV_SCALE_DECIMALS = 16  # LTV percent -> 1e18 fixed point

LTV_MAX = 100

APPROVAL_BUFFER_BPS = 1_000  # +10%
BPS_DENOMINATOR = 10_000

SELECTED_CHAIN_KEY = "selectedChainId"

WALLET_NOT_CONNECTED = "Please connect your wallet"
UNSUPPORTED_CHAIN = "Unsupported chain"
INVALID_AMOUNT = "Please enter a valid amount"
INVALID_SHARES = "Please enter a valid amount of shares"
INVALID_CONTRACT_ADDRESS = "Invalid contract address"
INVALID_LTV = "LTV must be greater than 0 and at most 100"
APPROVAL_REQUIRED = "Please approve token first"
ZERO_SHARES = "Calculated shares amount is zero"
DEFAULT_ERROR_MESSAGE = "An error occurred. Please try again."
