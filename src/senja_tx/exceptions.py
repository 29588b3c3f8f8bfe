"""Exception hierarchy for the Senja transaction orchestration layer."""

from typing import Any


class SenjaError(Exception):
    """Base exception for all orchestration errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(SenjaError):
    """Raised when a local precondition or input check fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class TransactionInProgressError(ValidationError):
    """Raised when an action is submitted while its previous call is still in flight."""

    def __init__(self, action: str):
        super().__init__(f"A {action} transaction is already in progress", field="action", value=action)
        self.action = action


class NetworkError(SenjaError):
    """Raised when network/connection issues occur."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class WalletError(SenjaError):
    """Raised when the wallet provider cannot complete a request."""

    pass


class UserRejectedError(WalletError):
    """Raised when the user declines a connection, signature or chain switch."""

    def __init__(self, message: str = "User rejected the request.", details: dict | None = None):
        super().__init__(message, details)


class SubmissionError(SenjaError):
    """Raised when a contract call cannot be submitted."""

    def __init__(
        self,
        message: str,
        action: str | None = None,
        function: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.action = action
        self.function = function


class ConfirmationError(SenjaError):
    """Raised when a submitted call lands but reverts or cannot be confirmed."""

    def __init__(
        self,
        message: str,
        tx_hash: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.tx_hash = tx_hash
