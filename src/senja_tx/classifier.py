"""Classify raw wallet/RPC failures into user-facing outcomes.

Structured signals (exception types, EIP-1193 error codes) are consulted
first. Substring matching on the message is only used when the failure
carries no structured information, which is the common case for
wallet-provider rejections.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

import requests
from web3.exceptions import ContractLogicError, TimeExhausted

from .constants import DEFAULT_ERROR_MESSAGE
from .exceptions import NetworkError, UserRejectedError

EIP1193_USER_REJECTED = 4001


class ErrorKind(str, Enum):
    USER_CANCELLED = "user_cancelled"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    ALLOWANCE = "allowance"
    NETWORK = "network"
    GAS = "gas"
    TIMEOUT = "timeout"
    NONCE = "nonce"
    EXECUTION_FAILED = "execution_failed"
    REVERT = "revert"
    ACTION_SPECIFIC = "action_specific"
    UNKNOWN = "unknown"


class FriendlyRule(NamedTuple):
    needle: str
    kind: ErrorKind
    message: str
    case_sensitive: bool = False


CANCELLATION_PATTERNS = (
    "user rejected",
    "user denied",
    "user cancelled",
    "user canceled",
    "request denied",
    "rejected",
    "cancelled",
    "canceled",
)

FRIENDLY_RULES = (
    FriendlyRule(
        "insufficient",
        ErrorKind.INSUFFICIENT_BALANCE,
        "Insufficient balance. Please check your token balance.",
    ),
    FriendlyRule(
        "allowance", ErrorKind.ALLOWANCE, "Insufficient allowance. Please approve more tokens."
    ),
    FriendlyRule("network", ErrorKind.NETWORK, "Network error. Please check your connection."),
    FriendlyRule("gas", ErrorKind.GAS, "Gas estimation failed. Please try again."),
    FriendlyRule("timeout", ErrorKind.TIMEOUT, "Transaction timeout. Please try again."),
    FriendlyRule("nonce", ErrorKind.NONCE, "Transaction nonce error. Please try again."),
    FriendlyRule(
        "execution reverted",
        ErrorKind.EXECUTION_FAILED,
        "Transaction execution failed. Please check your inputs.",
    ),
    FriendlyRule("revert", ErrorKind.REVERT, "Transaction reverted. Please check your inputs."),
)

_MESSAGE_BY_KIND = {rule.kind: rule.message for rule in FRIENDLY_RULES}


@dataclass(frozen=True)
class ErrorClassification:
    """Result of classifying a failure."""

    kind: ErrorKind
    message: str
    raw: str

    @property
    def cancelled(self) -> bool:
        return self.kind is ErrorKind.USER_CANCELLED


def is_user_cancellation(message: str | None) -> bool:
    """Return True when the message reads like a voluntary user decline."""
    if not message:
        return False
    lowered = message.lower()
    return any(pattern in lowered for pattern in CANCELLATION_PATTERNS)


def to_friendly_message(
    message: str | None,
    fallback: str = DEFAULT_ERROR_MESSAGE,
    extra_rules: Iterable[FriendlyRule] = (),
) -> str:
    """Map a raw failure string to remediation text, or return ``fallback``."""
    rule = _match_rule(message, extra_rules)
    return rule.message if rule is not None else fallback


def classify(
    error: BaseException | str | None,
    *,
    fallback: str = DEFAULT_ERROR_MESSAGE,
    extra_rules: Iterable[FriendlyRule] = (),
) -> ErrorClassification:
    """Classify a failure raised while submitting or confirming a call."""
    raw = _raw_message(error)
    extra_rules = tuple(extra_rules)

    if isinstance(error, BaseException) and _is_structured_rejection(error):
        return ErrorClassification(ErrorKind.USER_CANCELLED, "", raw)
    if is_user_cancellation(raw):
        return ErrorClassification(ErrorKind.USER_CANCELLED, "", raw)

    action_rule = _match_rule(raw, extra_rules, include_defaults=False)
    if action_rule is not None:
        return ErrorClassification(action_rule.kind, action_rule.message, raw)

    if isinstance(error, BaseException):
        kind = _structured_kind(error)
        if kind is not None:
            return ErrorClassification(kind, _MESSAGE_BY_KIND[kind], raw)

    rule = _match_rule(raw, ())
    if rule is None:
        return ErrorClassification(ErrorKind.UNKNOWN, fallback, raw)
    return ErrorClassification(rule.kind, to_friendly_message(raw, fallback), raw)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _match_rule(
    message: str | None,
    extra_rules: Iterable[FriendlyRule],
    *,
    include_defaults: bool = True,
) -> FriendlyRule | None:
    if not message:
        return None
    lowered = message.lower()
    rules: tuple[FriendlyRule, ...] = tuple(extra_rules)
    if include_defaults:
        rules += FRIENDLY_RULES
    for rule in rules:
        if rule.case_sensitive:
            if rule.needle in message:
                return rule
        elif rule.needle.lower() in lowered:
            return rule
    return None


def _raw_message(error: BaseException | str | None) -> str:
    if error is None:
        return ""
    if isinstance(error, str):
        return error
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error)


def _exception_chain(error: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def _rpc_error_code(error: BaseException) -> int | None:
    code = getattr(error, "code", None)
    if isinstance(code, int):
        return code

    candidates: list[Any] = [getattr(error, "rpc_response", None)]
    candidates.extend(arg for arg in error.args if isinstance(arg, Mapping))
    for payload in candidates:
        if not isinstance(payload, Mapping):
            continue
        nested = payload.get("error")
        source = nested if isinstance(nested, Mapping) else payload
        value = source.get("code")
        if isinstance(value, int):
            return value
    return None


def _is_structured_rejection(error: BaseException) -> bool:
    for link in _exception_chain(error):
        if isinstance(link, UserRejectedError):
            return True
        if _rpc_error_code(link) == EIP1193_USER_REJECTED:
            return True
    return False


def _structured_kind(error: BaseException) -> ErrorKind | None:
    for link in _exception_chain(error):
        if isinstance(link, TimeExhausted | requests.Timeout):
            return ErrorKind.TIMEOUT
        if isinstance(link, ContractLogicError):
            return ErrorKind.REVERT
        if isinstance(link, requests.ConnectionError | NetworkError):
            return ErrorKind.NETWORK
    return None
