"""
Unit tests for payment data models
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from batchpay.models import (
    Asset,
    Batch,
    BatchConfig,
    BatchRunResult,
    PaymentInstruction,
    PaymentResult,
    RunState,
    RunSummary,
)


def test_instruction_accepts_address_alias(recipient):
    instruction = PaymentInstruction.model_validate(
        {"address": recipient, "amount": "1", "asset": "XLM"}
    )

    assert instruction.recipient == recipient


def test_instruction_ignores_extra_fields(recipient):
    instruction = PaymentInstruction.model_validate(
        {"recipient": recipient, "amount": "1", "asset": "XLM", "memo": "rent"}
    )

    assert not hasattr(instruction, "memo")


def test_instruction_is_frozen(recipient):
    instruction = PaymentInstruction(recipient=recipient, amount="1", asset="XLM")

    with pytest.raises(ValidationError):
        instruction.amount = "2"


def test_config_repr_hides_secret(source_keypair):
    config = BatchConfig(secret_key=source_keypair.secret)

    assert source_keypair.secret not in repr(config)
    assert config.network == "testnet"
    assert config.max_operations_per_batch == 100


def test_config_rejects_unknown_fields(source_keypair):
    with pytest.raises(ValidationError):
        BatchConfig(secret_key=source_keypair.secret, fee=100)


def test_batch_must_not_be_empty():
    with pytest.raises(ValidationError):
        Batch(index=0, payments=[])


def test_batch_index_is_non_negative(recipient):
    payment = PaymentInstruction(recipient=recipient, amount="1", asset="XLM")

    with pytest.raises(ValidationError):
        Batch(index=-1, payments=[payment])


def test_asset_str(issuer):
    assert str(Asset(code="XLM")) == "XLM"
    assert Asset(code="XLM").is_native
    assert str(Asset(code="USDC", issuer=issuer)) == f"USDC:{issuer}"


def test_issued_asset_requires_issuer():
    """An issued code without an issuer must not pass as native XLM"""
    with pytest.raises(ValidationError, match="requires an issuer"):
        Asset(code="USDC")


def test_native_asset_rejects_issuer(issuer):
    with pytest.raises(ValidationError, match="no issuer"):
        Asset(code="XLM", issuer=issuer)


def test_run_state_values():
    assert [s.value for s in RunState] == [
        "initialized",
        "account_loaded",
        "processing_batch",
        "completed",
    ]


def test_run_result_all_succeeded(recipient):
    ok = PaymentResult(
        recipient=recipient, amount="1", asset="XLM", status="success", batch_index=0
    )
    result = BatchRunResult(
        total_recipients=1,
        total_amount=Decimal("1"),
        total_batches=1,
        network="testnet",
        started_at="2026-01-01T00:00:00Z",
        results=[ok],
        summary=RunSummary(success_count=1),
    )

    assert result.all_succeeded
    assert result.model_dump(mode="json")["total_amount"] == "1"
