"""
Ledger Client Interface
Contract between the orchestrator and whatever actually talks to the ledger
"""

from typing import Optional, Protocol

from pydantic import BaseModel

from batchpay.models.payment import Batch


class SubmissionOutcome(BaseModel):
    """Result of submitting one batch as one transaction"""

    success: bool
    reference: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def succeeded(cls, reference: str) -> "SubmissionOutcome":
        return cls(success=True, reference=reference)

    @classmethod
    def failed(cls, detail: str) -> "SubmissionOutcome":
        return cls(success=False, detail=detail)


class LedgerClient(Protocol):
    """
    Loads account sequence numbers and submits one transaction per batch.

    load_sequence raises AccountNotFoundError or TransportError.
    submit returns a failed SubmissionOutcome for ledger rejections and only
    raises for transport faults.
    """

    def load_sequence(self, account_id: str) -> int:
        ...

    def submit(self, batch: Batch, sequence: int, secret_key: str) -> SubmissionOutcome:
        ...
