from __future__ import annotations

import pytest
import requests
from web3.exceptions import ContractLogicError, TimeExhausted

from senja_tx import classifier
from senja_tx.classifier import (
    ErrorKind,
    FriendlyRule,
    classify,
    is_user_cancellation,
    to_friendly_message,
)
from senja_tx.constants import DEFAULT_ERROR_MESSAGE
from senja_tx.exceptions import ConfirmationError, SubmissionError, UserRejectedError


class RpcError(Exception):
    def __init__(self, message: str, code: int) -> None:
        super().__init__(message)
        self.code = code


class TestUserCancellation:
    @pytest.mark.parametrize(
        "message",
        [
            "User rejected the request.",
            "MetaMask Tx Signature: User denied transaction signature.",
            "Request cancelled by user",
            "user canceled",
        ],
    )
    def test_cancellation_phrases(self, message):
        assert is_user_cancellation(message)

    @pytest.mark.parametrize("message", ["", None, "insufficient funds for gas", "nonce too low"])
    def test_non_cancellations(self, message):
        assert not is_user_cancellation(message)


class TestFriendlyMessage:
    def test_known_substrings(self):
        assert to_friendly_message("ERC20: insufficient balance").startswith("Insufficient balance")
        assert to_friendly_message("ERC20: transfer amount exceeds allowance").startswith(
            "Insufficient allowance"
        )
        assert to_friendly_message("network changed").startswith("Network error")
        assert to_friendly_message("intrinsic gas too low").startswith("Gas estimation failed")
        assert to_friendly_message("request timeout").startswith("Transaction timeout")
        assert to_friendly_message("nonce too low").startswith("Transaction nonce error")
        assert to_friendly_message("execution reverted: paused").startswith(
            "Transaction execution failed"
        )
        assert to_friendly_message("call revert exception").startswith("Transaction reverted")

    def test_first_match_wins(self):
        message = "insufficient funds for gas * price + value"
        assert to_friendly_message(message).startswith("Insufficient balance")

    def test_unmatched_returns_fallback(self):
        assert to_friendly_message("something odd") == DEFAULT_ERROR_MESSAGE
        assert to_friendly_message("something odd", "Borrow failed: something odd") == (
            "Borrow failed: something odd"
        )
        assert to_friendly_message(None, "fallback") == "fallback"

    def test_extra_rules_checked_first(self):
        rule = FriendlyRule("LTV", ErrorKind.ACTION_SPECIFIC, "LTV exceeded")
        assert to_friendly_message("insufficient LTV", extra_rules=[rule]) == "LTV exceeded"


class TestClassify:
    def test_structured_rejection(self):
        outcome = classify(UserRejectedError())
        assert outcome.cancelled
        assert outcome.message == ""

    def test_eip1193_code(self):
        outcome = classify(RpcError("Something went wrong", 4001))
        assert outcome.kind is ErrorKind.USER_CANCELLED

    def test_rpc_response_payload_code(self):
        outcome = classify(Exception({"code": 4001, "message": "denied"}))
        assert outcome.cancelled

    def test_rejection_found_through_cause(self):
        try:
            try:
                raise UserRejectedError()
            except UserRejectedError as inner:
                raise SubmissionError("Failed to submit transaction for repay") from inner
        except SubmissionError as outer:
            outcome = classify(outer)
        assert outcome.cancelled

    def test_substring_cancellation(self):
        outcome = classify(Exception("User rejected the request."))
        assert outcome.kind is ErrorKind.USER_CANCELLED
        assert outcome.raw == "User rejected the request."

    def test_cancellation_never_maps_friendly_message(self, monkeypatch: pytest.MonkeyPatch):
        def fail(*_args, **_kwargs):
            raise AssertionError("friendly mapping must not run for cancellations")

        monkeypatch.setattr(classifier, "to_friendly_message", fail)
        assert classify("User rejected the request").cancelled

    def test_structured_timeout(self):
        try:
            try:
                raise TimeExhausted("receipt not found")
            except TimeExhausted as inner:
                raise ConfirmationError("Could not confirm", tx_hash="0x1") from inner
        except ConfirmationError as outer:
            outcome = classify(outer)
        assert outcome.kind is ErrorKind.TIMEOUT

    def test_structured_revert(self):
        outcome = classify(ContractLogicError("execution stopped"))
        assert outcome.kind is ErrorKind.REVERT

    def test_structured_network(self):
        outcome = classify(requests.ConnectionError("connection refused"))
        assert outcome.kind is ErrorKind.NETWORK

    def test_action_rule_before_structured_kind(self):
        rule = FriendlyRule("liquidity", ErrorKind.ACTION_SPECIFIC, "Not enough liquidity")
        outcome = classify(ContractLogicError("insufficient liquidity"), extra_rules=[rule])
        assert outcome.kind is ErrorKind.ACTION_SPECIFIC
        assert outcome.message == "Not enough liquidity"

    def test_unknown_uses_fallback(self):
        outcome = classify(Exception("boom"), fallback="Swap failed: boom")
        assert outcome.kind is ErrorKind.UNKNOWN
        assert outcome.message == "Swap failed: boom"

    def test_none_error(self):
        outcome = classify(None)
        assert outcome.kind is ErrorKind.UNKNOWN
        assert outcome.message == DEFAULT_ERROR_MESSAGE
