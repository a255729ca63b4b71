"""
Batching Module
"""

from .batcher import create_batches, summarize

__all__ = ["create_batches", "summarize"]
