"""
Configuration Module
Builds a BatchConfig from environment variables (and an optional .env file)
"""

import os
from typing import Optional

from dotenv import load_dotenv

from batchpay.exceptions import ConfigurationError
from batchpay.models.payment import MAX_OPERATIONS_PER_TRANSACTION, BatchConfig
from batchpay.utils.logging_config import get_logger

# Load environment variables
load_dotenv()

logger = get_logger(__name__)

ENV_SECRET_KEY = "STELLAR_SECRET_KEY"
ENV_NETWORK = "STELLAR_NETWORK"
ENV_MAX_OPERATIONS = "STELLAR_MAX_OPERATIONS"
ENV_HORIZON_URL = "STELLAR_HORIZON_URL"

DEFAULT_NETWORK = "testnet"


def load_batch_config(
    network: Optional[str] = None,
    max_operations: Optional[int] = None,
    secret_key: Optional[str] = None,
) -> BatchConfig:
    """
    Reads submission settings from the environment; explicit arguments win.

    Only presence and type are checked here. Semantic checks (key format,
    network name, batch size range) belong to validate_config.

    Args:
        network: Overrides STELLAR_NETWORK
        max_operations: Overrides STELLAR_MAX_OPERATIONS
        secret_key: Overrides STELLAR_SECRET_KEY

    Returns:
        BatchConfig

    Raises:
        ConfigurationError: If no secret key is available or a number is malformed
    """
    secret = secret_key or os.getenv(ENV_SECRET_KEY)
    if not secret:
        logger.error(f"{ENV_SECRET_KEY} not found in environment")
        raise ConfigurationError(
            f"{ENV_SECRET_KEY} not found. Set it in the environment or a .env file"
        )

    if max_operations is None:
        raw = os.getenv(ENV_MAX_OPERATIONS, str(MAX_OPERATIONS_PER_TRANSACTION))
        try:
            max_operations = int(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"{ENV_MAX_OPERATIONS} must be an integer, got {raw!r}"
            ) from e

    config = BatchConfig(
        secret_key=secret,
        network=network or os.getenv(ENV_NETWORK, DEFAULT_NETWORK),
        max_operations_per_batch=max_operations,
        horizon_url=os.getenv(ENV_HORIZON_URL) or None,
    )
    logger.debug(
        f"Loaded config: network={config.network}, "
        f"max_operations_per_batch={config.max_operations_per_batch}"
    )
    return config
