"""
Validation Module
"""

from .validator import (
    SUPPORTED_NETWORKS,
    is_valid_account_id,
    is_valid_secret_key,
    parse_asset,
    validate_config,
    validate_instruction,
    validate_instruction_list,
)

__all__ = [
    "SUPPORTED_NETWORKS",
    "is_valid_account_id",
    "is_valid_secret_key",
    "parse_asset",
    "validate_config",
    "validate_instruction",
    "validate_instruction_list",
]
