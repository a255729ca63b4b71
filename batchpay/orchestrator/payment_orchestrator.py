"""
Payment Orchestrator Module
Drives a payment run: validate, load sequence, batch, submit, report
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from stellar_sdk import Keypair

from batchpay.batching.batcher import create_batches, summarize
from batchpay.exceptions import ConfigurationError, InvalidInstructionsError
from batchpay.ledger.client import LedgerClient, SubmissionOutcome
from batchpay.models.payment import (
    Batch,
    BatchConfig,
    BatchRunResult,
    InstructionListValidation,
    PaymentInstruction,
    PaymentResult,
    PaymentStatus,
    RunState,
    RunSummary,
)
from batchpay.validation.validator import validate_config, validate_instruction_list
from batchpay.utils.logging_config import get_logger

logger = get_logger(__name__)

BatchCallback = Callable[[Batch, SubmissionOutcome], None]


class PaymentOrchestrator:
    """
    Submits a list of payments as sequentially ordered transactions.

    Workflow per run:
    1. Validate every instruction (nothing is submitted if any is invalid)
    2. Load the signing account's sequence once
    3. Partition instructions into batches
    4. Submit batches strictly in index order; a success advances the
       sequence by one, a failure leaves it untouched, and the run always
       moves on to the next batch
    5. Return a report covering every instruction in input order

    The sequence counter lives only inside run(); the orchestrator holds no
    per-run state, so each call is isolated from every other.
    """

    def __init__(self, config: BatchConfig, ledger_client: LedgerClient):
        """
        Initialize orchestrator.

        Args:
            config: Signing credential, network and batch size
            ledger_client: Ledger access (Stellar or mock)

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        logger.info("Initializing PaymentOrchestrator")

        outcome = validate_config(config)
        if not outcome.valid:
            logger.error(f"Invalid configuration: {outcome.reason}")
            raise ConfigurationError(outcome.reason)

        self.config = config
        self.ledger = ledger_client
        self.account_id = Keypair.from_secret(config.secret_key).public_key

        logger.debug(
            f"Configuration: network={config.network}, "
            f"max_operations_per_batch={config.max_operations_per_batch}, "
            f"source_account={self.account_id}"
        )

    def validate(self, instructions: Sequence[PaymentInstruction]) -> InstructionListValidation:
        """Reports every invalid instruction without raising"""
        return validate_instruction_list(instructions)

    def run(
        self,
        instructions: Sequence[PaymentInstruction],
        on_batch: Optional[BatchCallback] = None,
    ) -> BatchRunResult:
        """
        Executes one payment run.

        Args:
            instructions: Ordered payment instructions
            on_batch: Optional callback invoked after each batch outcome is known

        Returns:
            BatchRunResult with one PaymentResult per instruction

        Raises:
            InvalidInstructionsError: If any instruction fails validation
            AccountNotFoundError, TransportError: If the account cannot be loaded
        """
        started_at = datetime.now(timezone.utc)
        self._log_state(RunState.INITIALIZED, f"{len(instructions)} instruction(s)")

        validation = self.validate(instructions)
        if not validation.valid:
            logger.error(
                f"Run aborted before submission: {len(validation.errors)} invalid instruction(s)"
            )
            raise InvalidInstructionsError(validation.errors)

        starting_sequence = self.ledger.load_sequence(self.account_id)
        self._log_state(RunState.ACCOUNT_LOADED, f"sequence={starting_sequence}")

        batches = create_batches(instructions, self.config.max_operations_per_batch)

        sequence = starting_sequence
        results: List[PaymentResult] = []
        for batch in batches:
            self._log_state(
                RunState.PROCESSING_BATCH,
                f"batch {batch.index + 1}/{len(batches)} ({len(batch)} payment(s)), "
                f"sequence={sequence}",
            )
            outcome, batch_results, sequence = self._process_batch(batch, sequence)
            results.extend(batch_results)

            if on_batch is not None:
                on_batch(batch, outcome)

        summary = RunSummary(
            success_count=sum(1 for r in results if r.status == "success"),
            fail_count=sum(1 for r in results if r.status == "failed"),
        )
        self._log_state(
            RunState.COMPLETED,
            f"{summary.success_count} succeeded, {summary.fail_count} failed, "
            f"sequence {starting_sequence} -> {sequence}",
        )

        return BatchRunResult(
            total_recipients=len(instructions),
            total_amount=summarize(instructions).total_amount,
            total_batches=len(batches),
            network=self.config.network,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            starting_sequence=starting_sequence,
            final_sequence=sequence,
            results=results,
            summary=summary,
        )

    def _process_batch(
        self, batch: Batch, sequence: int
    ) -> Tuple[SubmissionOutcome, List[PaymentResult], int]:
        """
        Submits one batch and interprets the outcome.

        Returns:
            Tuple of (outcome, per-payment results, sequence for the next batch)
        """
        try:
            outcome = self.ledger.submit(batch, sequence, self.config.secret_key)
        except Exception as e:
            logger.error(
                f"Batch {batch.index} submission raised {type(e).__name__}: {e}",
                exc_info=True,
            )
            outcome = SubmissionOutcome.failed(f"{type(e).__name__}: {e}")

        if outcome.success:
            logger.info(f"Batch {batch.index} succeeded: {outcome.reference}")
            results = [
                self._payment_result(
                    payment, batch, "success", transaction_reference=outcome.reference
                )
                for payment in batch.payments
            ]
            return outcome, results, sequence + 1

        # rejected transactions do not consume a sequence number
        logger.warning(f"Batch {batch.index} failed: {outcome.detail}")
        results = [
            self._payment_result(
                payment, batch, "failed", error_detail=outcome.detail or "Unknown error"
            )
            for payment in batch.payments
        ]
        return outcome, results, sequence

    @staticmethod
    def _payment_result(
        payment: PaymentInstruction,
        batch: Batch,
        status: PaymentStatus,
        transaction_reference: Optional[str] = None,
        error_detail: Optional[str] = None,
    ) -> PaymentResult:
        return PaymentResult(
            recipient=payment.recipient,
            amount=payment.amount,
            asset=payment.asset,
            status=status,
            batch_index=batch.index,
            transaction_reference=transaction_reference,
            error_detail=error_detail,
        )

    @staticmethod
    def _log_state(state: RunState, detail: str) -> None:
        logger.info(f"[{state.value}] {detail}")
