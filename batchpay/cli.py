"""
BatchPay Command Line Interface
Load a payment file, validate it, and submit it to Stellar in batches
"""

import argparse
import sys
from typing import List, Optional

from batchpay.batching.batcher import create_batches, summarize
from batchpay.config import load_batch_config
from batchpay.exceptions import ConfigurationError, IngestionError, LedgerClientError
from batchpay.ingestion.parser import SUPPORTED_FORMATS, load_instructions
from batchpay.ledger.mock import MockLedgerClient
from batchpay.ledger.stellar import StellarLedgerClient
from batchpay.orchestrator.payment_orchestrator import PaymentOrchestrator
from batchpay.orchestrator.result_formatter import ResultFormatter
from batchpay.utils.logging_config import get_logger, setup_logging
from batchpay.validation.validator import SUPPORTED_NETWORKS, validate_config

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_PAYMENT_ERRORS = 1
EXIT_FATAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batchpay",
        description="Bulk payments on the Stellar network",
    )
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="JSON or CSV file with address, amount and asset per payment",
    )
    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        default=None,
        help="Input format (default: inferred from the file extension)",
    )
    parser.add_argument(
        "--network",
        choices=SUPPORTED_NETWORKS,
        default=None,
        help="Target network (default: STELLAR_NETWORK or testnet)",
    )
    parser.add_argument(
        "--max-operations",
        type=int,
        default=None,
        help="Payments per transaction, 1-100 (default: STELLAR_MAX_OPERATIONS or 100)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the full JSON report to this file",
    )
    parser.add_argument(
        "--mock-ledger",
        action="store_true",
        help="Use an in-memory ledger instead of Horizon (no transactions are sent)",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate and print the payment plan without submitting",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for the rotating log file (default: logs)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(log_dir=args.log_dir)
    logger.info(
        f"Arguments: input={args.input}, format={args.format}, network={args.network}, "
        f"mock_ledger={args.mock_ledger}, validate_only={args.validate_only}"
    )

    try:
        config = load_batch_config(network=args.network, max_operations=args.max_operations)
        outcome = validate_config(config)
        if not outcome.valid:
            raise ConfigurationError(outcome.reason)
    except ConfigurationError as e:
        logger.critical(f"Configuration error: {e}")
        print(f"\n💥 CONFIGURATION ERROR: {e}")
        return EXIT_FATAL

    try:
        instructions = load_instructions(args.input, args.format)
    except (FileNotFoundError, IngestionError) as e:
        logger.error(f"Could not load {args.input}: {e}")
        print(f"\n❌ INPUT ERROR: {e}")
        return EXIT_PAYMENT_ERRORS

    if args.mock_ledger:
        logger.info("Using MockLedgerClient (no transactions are sent)")
        ledger = MockLedgerClient()
    else:
        ledger = StellarLedgerClient(network=config.network, horizon_url=config.horizon_url)

    orchestrator = PaymentOrchestrator(config, ledger)

    validation = orchestrator.validate(instructions)
    if not validation.valid:
        ResultFormatter.print_validation_errors(validation, instructions)
        return EXIT_PAYMENT_ERRORS

    batch_count = len(create_batches(instructions, config.max_operations_per_batch))
    ResultFormatter.print_instruction_summary(summarize(instructions), batch_count)

    if args.validate_only:
        print("\n✓ All payment instructions are valid (nothing submitted)")
        return EXIT_OK

    print(f"\n🚀 Submitting to {config.network} from {orchestrator.account_id}")
    try:
        result = orchestrator.run(instructions, on_batch=ResultFormatter.print_batch_outcome)
    except LedgerClientError as e:
        logger.critical(f"Fatal ledger error: {type(e).__name__}: {e}", exc_info=True)
        print(f"\n💥 FATAL ERROR: {e}")
        return EXIT_FATAL

    ResultFormatter.print_summary(result)
    if args.output:
        path = ResultFormatter.write_json(result, args.output)
        print(f"Report saved to {path}")

    if not result.all_succeeded:
        logger.warning("Payment run completed with failures")
        return EXIT_PAYMENT_ERRORS

    logger.info("Payment run completed successfully")
    return EXIT_OK


if __name__ == "__main__":
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")  # type: ignore
        sys.stderr.reconfigure(encoding="utf-8")  # type: ignore

    sys.exit(main())
