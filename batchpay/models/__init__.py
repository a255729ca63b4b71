"""
Stellar BatchPay - Data Models
"""

from .payment import (
    MAX_OPERATIONS_PER_TRANSACTION,
    NATIVE_ASSET,
    Asset,
    Batch,
    BatchConfig,
    BatchRunResult,
    BatchSummary,
    InstructionListValidation,
    PaymentInstruction,
    PaymentResult,
    RunState,
    RunSummary,
    ValidationOutcome,
)

__all__ = [
    "MAX_OPERATIONS_PER_TRANSACTION",
    "NATIVE_ASSET",
    "Asset",
    "Batch",
    "BatchConfig",
    "BatchRunResult",
    "BatchSummary",
    "InstructionListValidation",
    "PaymentInstruction",
    "PaymentResult",
    "RunState",
    "RunSummary",
    "ValidationOutcome",
]
