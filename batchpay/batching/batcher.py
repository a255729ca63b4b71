"""
Batching Module
Single Responsibility: split instructions into ledger-legal transactions
"""

from collections import Counter
from decimal import Decimal
from typing import List, Sequence

from batchpay.models.payment import Batch, BatchSummary, PaymentInstruction
from batchpay.utils.logging_config import get_logger

logger = get_logger(__name__)


def create_batches(
    instructions: Sequence[PaymentInstruction], max_operations_per_batch: int
) -> List[Batch]:
    """
    Splits instructions into order-preserving batches of at most
    max_operations_per_batch payments each (one payment = one operation).

    Args:
        instructions: Validated instruction list
        max_operations_per_batch: Upper bound on payments per batch

    Returns:
        Batches indexed contiguously from 0; empty input gives no batches.
        A bound of 0 is reached as soon as a payment is added, so it
        behaves like 1.

    Raises:
        ValueError: If the bound is negative
    """
    if max_operations_per_batch < 0:
        raise ValueError(
            f"max_operations_per_batch must not be negative, got {max_operations_per_batch}"
        )

    batches: List[Batch] = []
    current: List[PaymentInstruction] = []

    for instruction in instructions:
        current.append(instruction)
        if len(current) >= max_operations_per_batch:
            batches.append(Batch(index=len(batches), payments=current))
            current = []

    if current:
        batches.append(Batch(index=len(batches), payments=current))

    logger.debug(
        f"Created {len(batches)} batch(es) from {len(instructions)} instruction(s) "
        f"(max {max_operations_per_batch} per batch)"
    )
    return batches


def summarize(instructions: Sequence[PaymentInstruction]) -> BatchSummary:
    """
    Totals amounts exactly and counts instructions per asset string.

    Amounts are summed as Decimal so that many small payments never pick up
    binary floating point error. Assets are grouped by their literal string,
    so the same code from two issuers counts separately.
    """
    total = sum((Decimal(i.amount) for i in instructions), Decimal("0"))
    breakdown = Counter(i.asset for i in instructions)

    return BatchSummary(
        recipient_count=len(instructions),
        total_amount=total,
        asset_breakdown=dict(sorted(breakdown.items())),
    )
