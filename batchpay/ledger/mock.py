"""
Mock Ledger Client
In-memory ledger for tests and dry runs (no network, no signing)
"""

import hashlib
from typing import Dict, Iterable, List, NamedTuple, Optional

from batchpay.exceptions import AccountNotFoundError, TransportError
from batchpay.ledger.client import SubmissionOutcome
from batchpay.models.payment import Batch
from batchpay.utils.logging_config import get_logger

logger = get_logger(__name__)


class Submission(NamedTuple):
    batch_index: int
    sequence: int
    size: int


class MockLedgerClient:
    """
    Tracks one account's sequence the way the ledger does: a transaction is
    accepted only if it carries the current sequence, and acceptance bumps it.
    Specific batches can be forced to be rejected or to fail in transport.
    """

    def __init__(
        self,
        starting_sequence: int = 1000,
        reject_batches: Iterable[int] = (),
        transport_fault_batches: Iterable[int] = (),
        known_accounts: Optional[Iterable[str]] = None,
    ):
        self.sequence = starting_sequence
        self.reject_batches = set(reject_batches)
        self.transport_fault_batches = set(transport_fault_batches)
        self.known_accounts = set(known_accounts) if known_accounts is not None else None
        self.submissions: List[Submission] = []
        self.accepted: Dict[str, Submission] = {}
        self.load_count = 0

    def load_sequence(self, account_id: str) -> int:
        self.load_count += 1
        if self.known_accounts is not None and account_id not in self.known_accounts:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return self.sequence

    def submit(self, batch: Batch, sequence: int, secret_key: str) -> SubmissionOutcome:
        self.submissions.append(Submission(batch.index, sequence, len(batch)))

        if batch.index in self.transport_fault_batches:
            raise TransportError(f"Simulated connection reset on batch {batch.index}")
        if batch.index in self.reject_batches:
            return SubmissionOutcome.failed("tx_failed, op_underfunded")
        if sequence != self.sequence:
            return SubmissionOutcome.failed("tx_bad_seq")

        self.sequence += 1
        reference = hashlib.sha256(f"{batch.index}:{sequence}".encode("utf-8")).hexdigest()
        self.accepted[reference] = self.submissions[-1]
        logger.debug(f"Mock ledger accepted batch {batch.index} at sequence {sequence}")
        return SubmissionOutcome.succeeded(reference)

    def bump_sequence(self, by: int = 1) -> None:
        """Simulates a transaction submitted by someone else on the same account"""
        self.sequence += by
