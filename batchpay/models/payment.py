"""
Payment Data Models
Pydantic v2 models for instructions, batches, configuration and run reports
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

NATIVE_ASSET = "XLM"

# Stellar's hard per-transaction operation ceiling
MAX_OPERATIONS_PER_TRANSACTION = 100

Network = Literal["testnet", "mainnet"]
PaymentStatus = Literal["success", "failed"]


# ==========================================
# INPUT: ASSETS & INSTRUCTIONS
# ==========================================


class Asset(BaseModel):
    """Currency identifier: native XLM (no issuer) or CODE issued by an account"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: str
    issuer: Optional[str] = None

    @model_validator(mode="after")
    def check_issuer(self) -> "Asset":
        if self.code == NATIVE_ASSET and self.issuer is not None:
            raise ValueError(f"{NATIVE_ASSET} is the native asset and has no issuer")
        if self.code != NATIVE_ASSET and not self.issuer:
            raise ValueError(f"Issued asset {self.code} requires an issuer")
        return self

    @property
    def is_native(self) -> bool:
        return self.issuer is None

    def __str__(self) -> str:
        return self.code if self.is_native else f"{self.code}:{self.issuer}"


class PaymentInstruction(BaseModel):
    """
    A single intended payment.
    Amount stays decimal text end to end; it is never coerced to float.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    recipient: str = Field(validation_alias=AliasChoices("recipient", "address"))
    amount: str
    asset: str


class BatchConfig(BaseModel):
    """
    Submission configuration.
    Constraints are checked by the validator, not here, so that a bad config
    yields a readable reason instead of a pydantic error.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    secret_key: str = Field(repr=False)
    network: str = "testnet"
    max_operations_per_batch: int = MAX_OPERATIONS_PER_TRANSACTION
    horizon_url: Optional[str] = None


# ==========================================
# BATCHING
# ==========================================


class Batch(BaseModel):
    """One ledger transaction worth of payments"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    index: int = Field(ge=0)
    payments: List[PaymentInstruction] = Field(min_length=1)

    def __len__(self) -> int:
        return len(self.payments)


class BatchSummary(BaseModel):
    """Aggregate view of an instruction list"""

    recipient_count: int
    total_amount: Decimal
    asset_breakdown: Dict[str, int]


# ==========================================
# VALIDATION RESULTS
# ==========================================


class ValidationOutcome(BaseModel):
    """Result of a single validation predicate"""

    valid: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return cls(valid=True)

    @classmethod
    def invalid(cls, reason: str) -> "ValidationOutcome":
        return cls(valid=False, reason=reason)


class InstructionListValidation(BaseModel):
    """Every failing list index mapped to its reason"""

    valid: bool
    errors: Dict[int, str] = Field(default_factory=dict)


# ==========================================
# RUN REPORT
# ==========================================


class RunState(str, Enum):
    INITIALIZED = "initialized"
    ACCOUNT_LOADED = "account_loaded"
    PROCESSING_BATCH = "processing_batch"
    COMPLETED = "completed"


class PaymentResult(BaseModel):
    """Outcome for one recipient"""

    recipient: str
    amount: str
    asset: str
    status: PaymentStatus
    batch_index: int
    transaction_reference: Optional[str] = None
    error_detail: Optional[str] = None


class RunSummary(BaseModel):
    success_count: int = 0
    fail_count: int = 0


class BatchRunResult(BaseModel):
    """
    Final report of a payment run.
    Results are in input order and cover every instruction exactly once.
    """

    total_recipients: int
    total_amount: Decimal
    total_batches: int
    network: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    starting_sequence: Optional[int] = None
    final_sequence: Optional[int] = None
    results: List[PaymentResult] = Field(default_factory=list)
    summary: RunSummary = Field(default_factory=RunSummary)

    @property
    def all_succeeded(self) -> bool:
        return self.summary.fail_count == 0
