"""
Instruction Ingestion Module
Decodes JSON and CSV payment files into PaymentInstruction lists.
Amounts are kept as the literal text found in the file.
"""

import io
import json
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from batchpay.exceptions import IngestionError
from batchpay.models.payment import PaymentInstruction
from batchpay.utils.logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_FORMATS = ("json", "csv")
REQUIRED_CSV_COLUMNS = ("address", "amount", "asset")


class PaymentEnvelope(BaseModel):
    """JSON document of the form {"payments": [...]}"""

    model_config = ConfigDict(extra="ignore")

    payments: List[PaymentInstruction]


# A JSON payment file is either a bare array or an envelope object
PaymentDocument = Union[List[PaymentInstruction], PaymentEnvelope]
_document_adapter = TypeAdapter(PaymentDocument)


def parse_json(content: str) -> List[PaymentInstruction]:
    """
    Parses a JSON array of instructions or an object with a "payments" array.

    Numbers are read as their source text so that 0.1 stays "0.1".

    Raises:
        IngestionError: If the content is not valid JSON or has the wrong shape
    """
    try:
        data = json.loads(content, parse_float=str, parse_int=str)
    except json.JSONDecodeError as e:
        raise IngestionError(f"Failed to parse JSON: {e}") from e

    try:
        document = _document_adapter.validate_python(data)
    except ValidationError as e:
        raise IngestionError(
            'Expected an array of payment instructions or an object with a "payments" '
            f"array: {e.error_count()} problem(s), first: {e.errors()[0]['msg']}"
        ) from e

    instructions = document.payments if isinstance(document, PaymentEnvelope) else document
    logger.debug(f"Parsed {len(instructions)} instruction(s) from JSON")
    return list(instructions)


def parse_csv(content: str) -> List[PaymentInstruction]:
    """
    Parses CSV with "address", "amount" and "asset" columns (any order, any case).
    Every cell is read as text; blank lines are skipped.

    Raises:
        IngestionError: If columns are missing, a row is short or there are no rows
    """
    try:
        df = pd.read_csv(
            io.StringIO(content),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as e:
        raise IngestionError("CSV must have a header row and at least one data row") from e
    except pd.errors.ParserError as e:
        raise IngestionError(f"Failed to parse CSV: {e}") from e

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_CSV_COLUMNS if c not in df.columns]
    if missing:
        raise IngestionError(
            'CSV must have "address", "amount", and "asset" columns '
            f"(missing: {', '.join(missing)})"
        )

    df = df[list(REQUIRED_CSV_COLUMNS)].fillna("")
    for column in REQUIRED_CSV_COLUMNS:
        df[column] = df[column].astype(str).str.strip()

    instructions = []
    for position, row in enumerate(df.itertuples(index=False), start=2):
        if not (row.address and row.amount and row.asset):
            raise IngestionError(f"Row {position} has insufficient columns")
        instructions.append(
            PaymentInstruction(recipient=row.address, amount=row.amount, asset=row.asset)
        )

    if not instructions:
        raise IngestionError("No valid payment instructions found in CSV")

    logger.debug(f"Parsed {len(instructions)} instruction(s) from CSV")
    return instructions


def parse_input(content: str, input_format: str) -> List[PaymentInstruction]:
    """Dispatches to the parser for input_format ("json" or "csv")"""
    if input_format == "json":
        return parse_json(content)
    if input_format == "csv":
        return parse_csv(content)
    raise IngestionError(f"Unknown format: {input_format}")


def load_instructions(path: str, input_format: Optional[str] = None) -> List[PaymentInstruction]:
    """
    Reads a payment file from disk.

    Args:
        path: JSON or CSV file
        input_format: Explicit format; inferred from the file extension if omitted

    Returns:
        Ordered list of payment instructions

    Raises:
        FileNotFoundError: If the file does not exist
        IngestionError: If the format is unknown or the content is malformed
    """
    file_path = Path(path)
    if not file_path.exists():
        logger.error(f"Payment file not found: {path}")
        raise FileNotFoundError(f"Payment file not found: {path}")

    fmt = (input_format or file_path.suffix.lstrip(".")).lower()
    if fmt not in SUPPORTED_FORMATS:
        raise IngestionError(
            f"Cannot determine format of {file_path.name}; use one of {', '.join(SUPPORTED_FORMATS)}"
        )

    logger.info(f"Loading payment instructions from {file_path} ({fmt})")
    instructions = parse_input(file_path.read_text(encoding="utf-8"), fmt)
    logger.info(f"Loaded {len(instructions)} instruction(s) from {file_path.name}")
    return instructions
