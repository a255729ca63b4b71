"""
Result Formatter Module
Single Responsibility: Format validation errors, batch outcomes and run reports
"""

from pathlib import Path
from typing import Any, Dict, Sequence

from batchpay.ledger.client import SubmissionOutcome
from batchpay.models.payment import (
    Batch,
    BatchRunResult,
    BatchSummary,
    InstructionListValidation,
    PaymentInstruction,
)
from batchpay.utils.logging_config import get_logger

logger = get_logger(__name__)


class ResultFormatter:
    """
    Formats run results and summary reports.
    Pure formatting - no business logic.
    """

    @staticmethod
    def generate_summary(result: BatchRunResult) -> Dict[str, Any]:
        """
        Condenses a run report into summary statistics.

        Args:
            result: Completed run report

        Returns:
            Summary dictionary (amounts as exact decimal text)
        """
        failed_batches = sorted(
            {r.batch_index for r in result.results if r.status == "failed"}
        )
        return {
            "network": result.network,
            "total_recipients": result.total_recipients,
            "total_amount": str(result.total_amount),
            "total_batches": result.total_batches,
            "success_count": result.summary.success_count,
            "fail_count": result.summary.fail_count,
            "failed_batches": failed_batches,
            "starting_sequence": result.starting_sequence,
            "final_sequence": result.final_sequence,
        }

    @staticmethod
    def print_validation_errors(
        validation: InstructionListValidation,
        instructions: Sequence[PaymentInstruction],
    ):
        """
        Prints every invalid instruction with its row number.

        Args:
            validation: Result of instruction list validation
            instructions: The validated instructions
        """
        print(f"\n❌ {len(validation.errors)} invalid payment instruction(s):")
        for index in sorted(validation.errors):
            recipient = instructions[index].recipient if index < len(instructions) else "?"
            print(f"   Row {index + 1} ({recipient}): {validation.errors[index]}")

    @staticmethod
    def print_instruction_summary(summary: BatchSummary, batch_count: int):
        """Prints what a run would submit"""
        print(f"\n{'=' * 60}")
        print("📋 PAYMENT PLAN")
        print(f"{'=' * 60}")
        print(f"Recipients:   {summary.recipient_count}")
        print(f"Total amount: {summary.total_amount}")
        print(f"Transactions: {batch_count}")
        for asset, count in summary.asset_breakdown.items():
            print(f"  {asset}: {count} payment(s)")

    @staticmethod
    def print_batch_outcome(batch: Batch, outcome: SubmissionOutcome):
        """Prints one batch result as it completes"""
        if outcome.success:
            print(f"   ✅ Batch {batch.index + 1}: {len(batch)} payment(s), tx {outcome.reference}")
        else:
            print(f"   ❌ Batch {batch.index + 1}: {len(batch)} payment(s) failed - {outcome.detail}")

    @staticmethod
    def print_summary(result: BatchRunResult):
        """
        Prints formatted run summary to console.

        Args:
            result: Completed run report
        """
        summary = ResultFormatter.generate_summary(result)
        print(f"\n{'=' * 60}")
        print("📊 PAYMENT RUN SUMMARY")
        print(f"{'=' * 60}")
        print(f"Network:            {summary['network']}")
        print(f"Recipients:         {summary['total_recipients']}")
        print(f"Total amount:       {summary['total_amount']}")
        print(f"Transactions:       {summary['total_batches']}")
        print(f"  ✅ Successful:     {summary['success_count']}")
        print(f"  ❌ Failed:         {summary['fail_count']}")
        if summary["failed_batches"]:
            batches = ", ".join(str(i + 1) for i in summary["failed_batches"])
            print(f"  Failed batches:   {batches}")
        print(f"Sequence:           {summary['starting_sequence']} -> {summary['final_sequence']}")
        print(f"{'=' * 60}\n")

    @staticmethod
    def write_json(result: BatchRunResult, output_path: str) -> Path:
        """
        Writes the full run report as JSON.

        Args:
            result: Completed run report
            output_path: Destination file

        Returns:
            Path of the written file
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(result.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Run report written to {path}")
        return path
