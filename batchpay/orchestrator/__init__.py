"""
Orchestrator Module
Payment run coordination and reporting
"""

from batchpay.orchestrator.payment_orchestrator import PaymentOrchestrator
from batchpay.orchestrator.result_formatter import ResultFormatter

__all__ = ["PaymentOrchestrator", "ResultFormatter"]
