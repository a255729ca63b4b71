"""
BatchPay Exceptions
Fatal error channel: configuration, precondition and transport failures.
Per-instruction and per-batch problems are reported as results, not raised.
"""

from typing import Dict


class BatchPayError(Exception):
    """Base class for all batchpay errors"""


class ConfigurationError(BatchPayError, ValueError):
    """Invalid signing credential, network or batch size"""


class InvalidInstructionsError(BatchPayError, ValueError):
    """
    Raised when a run is started with instructions that failed validation.
    Carries every failing index so the caller can fix the input in one pass.
    """

    def __init__(self, errors: Dict[int, str]):
        self.errors = dict(errors)
        super().__init__(
            f"{len(self.errors)} invalid payment instruction(s) at index "
            f"{', '.join(str(i) for i in sorted(self.errors))}"
        )


class IngestionError(BatchPayError, ValueError):
    """Input file could not be decoded into payment instructions"""


class LedgerClientError(BatchPayError):
    """Base class for ledger client faults"""


class AccountNotFoundError(LedgerClientError):
    """Signing account does not exist on the ledger"""


class TransportError(LedgerClientError):
    """Network-level failure talking to the ledger"""
