"""
Ingestion Module
"""

from .parser import load_instructions, parse_csv, parse_input, parse_json

__all__ = ["load_instructions", "parse_csv", "parse_input", "parse_json"]
