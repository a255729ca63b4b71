"""
Shared fixtures: fresh Stellar keypairs, configs and instruction lists
"""

import pytest
from stellar_sdk import Keypair

from batchpay.models import BatchConfig, PaymentInstruction


@pytest.fixture
def source_keypair():
    return Keypair.random()


@pytest.fixture
def issuer():
    return Keypair.random().public_key


@pytest.fixture
def recipient():
    return Keypair.random().public_key


@pytest.fixture
def make_config(source_keypair):
    """Factory for a valid BatchConfig signed by source_keypair"""

    def _make(max_operations_per_batch: int = 100, network: str = "testnet") -> BatchConfig:
        return BatchConfig(
            secret_key=source_keypair.secret,
            network=network,
            max_operations_per_batch=max_operations_per_batch,
        )

    return _make


@pytest.fixture
def make_instructions():
    """Factory for n valid instructions, each to a distinct new account"""

    def _make(count: int, amount: str = "10", asset: str = "XLM"):
        return [
            PaymentInstruction(
                recipient=Keypair.random().public_key, amount=amount, asset=asset
            )
            for _ in range(count)
        ]

    return _make
