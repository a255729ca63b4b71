"""
Ledger Module
"""

from .client import LedgerClient, SubmissionOutcome
from .mock import MockLedgerClient
from .stellar import StellarLedgerClient

__all__ = ["LedgerClient", "MockLedgerClient", "StellarLedgerClient", "SubmissionOutcome"]
