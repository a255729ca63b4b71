"""
Stellar BatchPay
Validates, batches and submits bulk payments to the Stellar network
"""

__version__ = "0.1.0"
