"""
Payment Validation Module
Pure predicates over instructions and configuration.
Data problems come back as ValidationOutcome; nothing here raises for bad input.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Sequence

from stellar_sdk.strkey import StrKey

from batchpay.models.payment import (
    MAX_OPERATIONS_PER_TRANSACTION,
    NATIVE_ASSET,
    Asset,
    BatchConfig,
    InstructionListValidation,
    PaymentInstruction,
    ValidationOutcome,
)
from batchpay.utils.logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_NETWORKS = ("testnet", "mainnet")

# Stellar amounts are int64 stroops: 7 fractional digits
AMOUNT_DECIMAL_PLACES = 7
MAX_AMOUNT = Decimal("922337203685.4775807")

# ASCII digits only; matched with fullmatch so a trailing newline is rejected
_DECIMAL_TEXT = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)")
_ASSET_CODE = re.compile(r"[A-Za-z0-9]{1,12}")


def is_valid_account_id(value: Any) -> bool:
    """True if value is a well-formed Stellar public key (G...)"""
    return isinstance(value, str) and StrKey.is_valid_ed25519_public_key(value)


def is_valid_secret_key(value: Any) -> bool:
    """True if value is a well-formed Stellar secret seed (S...)"""
    return isinstance(value, str) and StrKey.is_valid_ed25519_secret_seed(value)


def parse_asset(asset_string: str) -> Asset:
    """
    Split an asset string into code and issuer.

    Args:
        asset_string: "XLM" or "CODE:ISSUER"

    Returns:
        Asset (issuer is None for the native asset)

    Raises:
        ValueError: If the string is neither form. Callers validate first.
    """
    if asset_string == NATIVE_ASSET:
        return Asset(code=NATIVE_ASSET)

    parts = asset_string.split(":")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Malformed asset string: {asset_string!r}")
    return Asset(code=parts[0], issuer=parts[1])


def _validate_amount(amount: Any) -> ValidationOutcome:
    if not isinstance(amount, str) or not _DECIMAL_TEXT.fullmatch(amount):
        return ValidationOutcome.invalid(f"amount {amount!r} is not a decimal number")

    try:
        value = Decimal(amount)
    except InvalidOperation:
        return ValidationOutcome.invalid(f"amount {amount!r} is not a decimal number")

    if value <= 0:
        return ValidationOutcome.invalid(f"amount must be greater than zero, got {amount}")
    if -value.as_tuple().exponent > AMOUNT_DECIMAL_PLACES:
        return ValidationOutcome.invalid(
            f"amount {amount} has more than {AMOUNT_DECIMAL_PLACES} decimal places"
        )
    if value > MAX_AMOUNT:
        return ValidationOutcome.invalid(f"amount {amount} exceeds the ledger maximum {MAX_AMOUNT}")
    return ValidationOutcome.ok()


def _validate_asset(asset: Any) -> ValidationOutcome:
    if not isinstance(asset, str) or not asset:
        return ValidationOutcome.invalid("asset is missing")
    if asset == NATIVE_ASSET:
        return ValidationOutcome.ok()

    parts = asset.split(":")
    if len(parts) != 2:
        return ValidationOutcome.invalid(
            f"asset {asset!r} must be {NATIVE_ASSET} or CODE:ISSUER"
        )
    code, issuer = parts
    if code == NATIVE_ASSET:
        return ValidationOutcome.invalid(f"asset {NATIVE_ASSET} is native and takes no issuer")
    if not _ASSET_CODE.fullmatch(code):
        return ValidationOutcome.invalid(
            f"asset code {code!r} must be 1-12 alphanumeric characters"
        )
    if not is_valid_account_id(issuer):
        return ValidationOutcome.invalid(f"asset issuer {issuer!r} is not a valid account address")
    return ValidationOutcome.ok()


def validate_instruction(instruction: PaymentInstruction) -> ValidationOutcome:
    """
    Checks recipient address, amount and asset of one instruction.

    Args:
        instruction: Payment instruction to check

    Returns:
        ValidationOutcome with the first failing reason, if any
    """
    if not is_valid_account_id(instruction.recipient):
        return ValidationOutcome.invalid(
            f"invalid recipient address: {instruction.recipient!r}"
        )

    amount_outcome = _validate_amount(instruction.amount)
    if not amount_outcome.valid:
        return amount_outcome

    return _validate_asset(instruction.asset)


def validate_config(config: BatchConfig) -> ValidationOutcome:
    """
    Checks the signing credential, network and batch size.

    Args:
        config: Submission configuration

    Returns:
        ValidationOutcome with the first failing reason, if any
    """
    if not is_valid_secret_key(config.secret_key):
        return ValidationOutcome.invalid("invalid secret key")

    if config.network not in SUPPORTED_NETWORKS:
        return ValidationOutcome.invalid(
            f"network must be one of {', '.join(SUPPORTED_NETWORKS)}, got {config.network!r}"
        )

    max_ops = config.max_operations_per_batch
    if isinstance(max_ops, bool) or not isinstance(max_ops, int):
        return ValidationOutcome.invalid("max operations per batch must be an integer")
    if not 0 < max_ops <= MAX_OPERATIONS_PER_TRANSACTION:
        return ValidationOutcome.invalid(
            f"max operations per batch must be between 1 and "
            f"{MAX_OPERATIONS_PER_TRANSACTION}, got {max_ops}"
        )

    return ValidationOutcome.ok()


def validate_instruction_list(
    instructions: Sequence[PaymentInstruction],
) -> InstructionListValidation:
    """
    Validates every instruction independently, without short-circuiting.

    Args:
        instructions: Ordered instruction list (may be empty)

    Returns:
        InstructionListValidation mapping each failing index to its reason
    """
    errors: Dict[int, str] = {}

    for index, instruction in enumerate(instructions):
        outcome = validate_instruction(instruction)
        if not outcome.valid:
            errors[index] = outcome.reason or "invalid instruction"

    if errors:
        logger.info(f"{len(errors)} of {len(instructions)} instruction(s) failed validation")
    else:
        logger.debug(f"All {len(instructions)} instruction(s) passed validation")

    return InstructionListValidation(valid=not errors, errors=errors)
