"""
Test Payment Orchestrator with the Mock Ledger
Validates sequencing, fail-forward behaviour and reporting without a network
"""

from decimal import Decimal

import pytest

from batchpay.exceptions import (
    AccountNotFoundError,
    ConfigurationError,
    InvalidInstructionsError,
)
from batchpay.ledger import MockLedgerClient, SubmissionOutcome
from batchpay.ledger.mock import Submission
from batchpay.models import BatchConfig, PaymentInstruction
from batchpay.orchestrator import PaymentOrchestrator


class ExplodingLedger(MockLedgerClient):
    """Raises an unexpected error for chosen batches"""

    def __init__(self, explode_on, **kwargs):
        super().__init__(**kwargs)
        self.explode_on = set(explode_on)

    def submit(self, batch, sequence, secret_key):
        if batch.index in self.explode_on:
            self.submissions.append(Submission(batch.index, sequence, len(batch)))
            raise RuntimeError("socket timeout")
        return super().submit(batch, sequence, secret_key)


# ==========================================
# CONSTRUCTION
# ==========================================


def test_invalid_config_is_fatal():
    """A bad secret key stops the orchestrator from being built"""
    with pytest.raises(ConfigurationError, match="secret key"):
        PaymentOrchestrator(BatchConfig(secret_key="INVALID"), MockLedgerClient())


def test_out_of_range_batch_size_is_fatal(make_config):
    with pytest.raises(ConfigurationError):
        PaymentOrchestrator(make_config(101), MockLedgerClient())


def test_account_id_is_derived_from_secret(make_config, source_keypair):
    orchestrator = PaymentOrchestrator(make_config(), MockLedgerClient())

    assert orchestrator.account_id == source_keypair.public_key


# ==========================================
# END-TO-END SCENARIOS
# ==========================================


def test_three_payments_two_per_batch_all_succeed(make_config, make_instructions):
    """3 instructions, batch size 2: two submissions, sequence +2, input order kept"""
    ledger = MockLedgerClient(starting_sequence=1000)
    orchestrator = PaymentOrchestrator(make_config(2), ledger)
    instructions = make_instructions(3)

    result = orchestrator.run(instructions)

    assert [(s.batch_index, s.sequence, s.size) for s in ledger.submissions] == [
        (0, 1000, 2),
        (1, 1001, 1),
    ]
    assert result.total_batches == 2
    assert result.starting_sequence == 1000
    assert result.final_sequence == 1002
    assert ledger.sequence == 1002
    assert [r.recipient for r in result.results] == [i.recipient for i in instructions]
    assert all(r.status == "success" for r in result.results)
    assert result.summary.success_count == 3
    assert result.summary.fail_count == 0
    assert result.all_succeeded


def test_first_batch_fails_second_succeeds(make_config, make_instructions):
    """Failure does not consume the sequence; the next batch reuses it"""
    ledger = MockLedgerClient(starting_sequence=500, reject_batches={0})
    orchestrator = PaymentOrchestrator(make_config(2), ledger)
    instructions = make_instructions(4)

    result = orchestrator.run(instructions)

    assert [s.sequence for s in ledger.submissions] == [500, 500]
    assert result.final_sequence == 501
    assert [r.status for r in result.results] == ["failed", "failed", "success", "success"]
    assert result.results[0].error_detail == "tx_failed, op_underfunded"
    assert result.results[0].transaction_reference is None
    assert result.results[2].transaction_reference is not None
    assert result.results[2].transaction_reference == result.results[3].transaction_reference
    assert result.summary.success_count == 2
    assert result.summary.fail_count == 2
    assert not result.all_succeeded


def test_sequence_advances_only_for_successful_batches(make_config, make_instructions):
    """+1 per success and +0 per failure, wherever the failures fall"""
    ledger = MockLedgerClient(starting_sequence=10, reject_batches={1, 3})
    orchestrator = PaymentOrchestrator(make_config(1), ledger)

    result = orchestrator.run(make_instructions(5))

    assert [s.sequence for s in ledger.submissions] == [10, 11, 11, 12, 12]
    assert result.final_sequence == 13
    assert [r.status for r in result.results] == [
        "success",
        "failed",
        "success",
        "failed",
        "success",
    ]


def test_transport_fault_is_reported_as_failed_batch(make_config, make_instructions):
    """A client exception marks the batch failed and the run carries on"""
    ledger = MockLedgerClient(starting_sequence=1, transport_fault_batches={0})
    orchestrator = PaymentOrchestrator(make_config(2), ledger)

    result = orchestrator.run(make_instructions(3))

    assert [r.status for r in result.results] == ["failed", "failed", "success"]
    assert "TransportError" in result.results[0].error_detail
    assert result.final_sequence == 2


def test_unexpected_client_error_is_contained(make_config, make_instructions):
    ledger = ExplodingLedger(explode_on={1}, starting_sequence=7)
    orchestrator = PaymentOrchestrator(make_config(1), ledger)

    result = orchestrator.run(make_instructions(3))

    assert [r.status for r in result.results] == ["success", "failed", "success"]
    assert "socket timeout" in result.results[1].error_detail
    assert result.final_sequence == 9


def test_every_batch_failing_still_reports_every_instruction(make_config, make_instructions):
    ledger = MockLedgerClient(reject_batches={0, 1, 2})
    orchestrator = PaymentOrchestrator(make_config(2), ledger)

    result = orchestrator.run(make_instructions(5))

    assert len(ledger.submissions) == 3
    assert len(result.results) == 5
    assert result.summary.fail_count == 5
    assert result.final_sequence == result.starting_sequence


def test_external_sequence_change_fails_remaining_batches(make_config, make_instructions):
    """
    Someone else uses the account mid-run: later batches are rejected with
    tx_bad_seq and reported as failures instead of aborting the run.
    """
    ledger = MockLedgerClient(starting_sequence=100)
    orchestrator = PaymentOrchestrator(make_config(1), ledger)

    def interfere(batch, outcome):
        if batch.index == 0:
            ledger.bump_sequence()

    result = orchestrator.run(make_instructions(3), on_batch=interfere)

    assert [r.status for r in result.results] == ["success", "failed", "failed"]
    assert result.results[1].error_detail == "tx_bad_seq"
    assert result.final_sequence == 101


# ==========================================
# INPUT VALIDATION GATE
# ==========================================


def test_invalid_instruction_blocks_all_submission(make_config, make_instructions, recipient):
    """Bad input is caught before the ledger is touched"""
    ledger = MockLedgerClient()
    orchestrator = PaymentOrchestrator(make_config(2), ledger)
    instructions = make_instructions(3)
    instructions[1] = PaymentInstruction(recipient=recipient, amount="-1", asset="XLM")

    with pytest.raises(InvalidInstructionsError) as exc_info:
        orchestrator.run(instructions)

    assert list(exc_info.value.errors) == [1]
    assert ledger.load_count == 0
    assert ledger.submissions == []


def test_validate_reports_without_raising(make_config, make_instructions):
    orchestrator = PaymentOrchestrator(make_config(), MockLedgerClient())
    instructions = make_instructions(2)
    instructions.append(PaymentInstruction(recipient="NOPE", amount="1", asset="XLM"))

    validation = orchestrator.validate(instructions)

    assert not validation.valid
    assert list(validation.errors) == [2]


# ==========================================
# RUN MECHANICS
# ==========================================


def test_sequence_is_loaded_once_per_run(make_config, make_instructions):
    ledger = MockLedgerClient()
    orchestrator = PaymentOrchestrator(make_config(1), ledger)

    orchestrator.run(make_instructions(4))

    assert ledger.load_count == 1


def test_runs_do_not_share_a_counter(make_config, make_instructions):
    """The second run starts from the ledger, not from the first run's counter"""
    ledger = MockLedgerClient(starting_sequence=50, reject_batches={0})
    orchestrator = PaymentOrchestrator(make_config(1), ledger)

    first = orchestrator.run(make_instructions(2))
    ledger.bump_sequence(10)
    second = orchestrator.run(make_instructions(1))

    assert first.final_sequence == 51
    assert second.starting_sequence == 61
    assert second.final_sequence == 61  # batch 0 is rejected again


def test_empty_instruction_list(make_config):
    ledger = MockLedgerClient()
    orchestrator = PaymentOrchestrator(make_config(), ledger)

    result = orchestrator.run([])

    assert result.total_batches == 0
    assert result.results == []
    assert result.total_amount == Decimal("0")
    assert ledger.submissions == []


def test_account_not_found_propagates(make_config, make_instructions):
    ledger = MockLedgerClient(known_accounts=[])
    orchestrator = PaymentOrchestrator(make_config(), ledger)

    with pytest.raises(AccountNotFoundError):
        orchestrator.run(make_instructions(2))

    assert ledger.submissions == []


def test_on_batch_callback_sees_each_outcome_in_order(make_config, make_instructions):
    ledger = MockLedgerClient(reject_batches={1})
    orchestrator = PaymentOrchestrator(make_config(2), ledger)
    seen = []

    orchestrator.run(
        make_instructions(5),
        on_batch=lambda batch, outcome: seen.append((batch.index, outcome.success)),
    )

    assert seen == [(0, True), (1, False), (2, True)]


def test_report_totals(make_config, recipient, issuer):
    instructions = [
        PaymentInstruction(recipient=recipient, amount="10.5", asset="XLM"),
        PaymentInstruction(recipient=recipient, amount="20.25", asset=f"USDC:{issuer}"),
    ]
    orchestrator = PaymentOrchestrator(make_config(network="mainnet"), MockLedgerClient())

    result = orchestrator.run(instructions)

    assert result.total_recipients == 2
    assert result.total_amount == Decimal("30.75")
    assert result.network == "mainnet"
    assert result.started_at <= result.completed_at
    assert [r.amount for r in result.results] == ["10.5", "20.25"]
    assert [r.asset for r in result.results] == ["XLM", f"USDC:{issuer}"]


def test_submission_outcome_constructors():
    assert SubmissionOutcome.succeeded("abc").reference == "abc"
    assert not SubmissionOutcome.failed("tx_bad_seq").success
