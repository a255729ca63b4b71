"""
Stellar Ledger Client
Builds, signs and submits payment transactions through Horizon using stellar-sdk
"""

from typing import Any, Dict, Optional

from stellar_sdk import Account, Keypair, Network, Server, TransactionBuilder
from stellar_sdk import Asset as StellarAsset
from stellar_sdk.exceptions import BaseHorizonError, NotFoundError
from stellar_sdk.exceptions import ConnectionError as HorizonConnectionError

from batchpay.exceptions import AccountNotFoundError, TransportError
from batchpay.ledger.client import SubmissionOutcome
from batchpay.models.payment import Batch
from batchpay.validation.validator import parse_asset
from batchpay.utils.logging_config import get_logger

logger = get_logger(__name__)

HORIZON_URLS = {
    "testnet": "https://horizon-testnet.stellar.org",
    "mainnet": "https://horizon.stellar.org",
}

NETWORK_PASSPHRASES = {
    "testnet": Network.TESTNET_NETWORK_PASSPHRASE,
    "mainnet": Network.PUBLIC_NETWORK_PASSPHRASE,
}

BASE_FEE = 100  # stroops per operation
TRANSACTION_TIMEOUT_SECONDS = 300


class StellarLedgerClient:
    """
    Ledger client backed by a Horizon server.
    Horizon rejections become failed outcomes; connection faults raise TransportError.
    """

    def __init__(
        self,
        network: str = "testnet",
        horizon_url: Optional[str] = None,
        base_fee: int = BASE_FEE,
        server: Optional[Any] = None,
    ):
        """
        Args:
            network: "testnet" or "mainnet"
            horizon_url: Override for the network's public Horizon instance
            base_fee: Fee per operation in stroops
            server: Pre-built Horizon server (mainly for tests)
        """
        if network not in NETWORK_PASSPHRASES:
            raise ValueError(f"Unknown network: {network}")

        self.network = network
        self.network_passphrase = NETWORK_PASSPHRASES[network]
        self.base_fee = base_fee
        self.horizon_url = horizon_url or HORIZON_URLS[network]
        self.server = server if server is not None else Server(horizon_url=self.horizon_url)
        logger.info(f"StellarLedgerClient using {self.horizon_url} ({network})")

    def load_sequence(self, account_id: str) -> int:
        logger.debug(f"Loading account {account_id}")
        try:
            account = self.server.load_account(account_id)
        except NotFoundError as e:
            raise AccountNotFoundError(f"Account {account_id} not found on {self.network}") from e
        except BaseHorizonError as e:
            detail = self._describe_horizon_error(e)
            raise TransportError(
                f"Horizon returned {e.status} loading account {account_id}: {detail}"
            ) from e
        except HorizonConnectionError as e:
            raise TransportError(f"Could not reach Horizon at {self.horizon_url}: {e}") from e

        logger.info(f"Account {account_id} loaded, sequence={account.sequence}")
        return account.sequence

    def submit(self, batch: Batch, sequence: int, secret_key: str) -> SubmissionOutcome:
        """
        Builds one transaction with a payment operation per instruction,
        signs it and submits it.

        Args:
            batch: Payments to include
            sequence: Current account sequence; the transaction uses sequence + 1
            secret_key: Signing secret of the source account

        Returns:
            SubmissionOutcome carrying the transaction hash or the result codes
        """
        keypair = Keypair.from_secret(secret_key)
        envelope = self._build_transaction(batch, sequence, keypair)
        envelope.sign(keypair)

        try:
            response = self.server.submit_transaction(envelope)
        except BaseHorizonError as e:
            detail = self._describe_horizon_error(e)
            logger.warning(f"Batch {batch.index} rejected by Horizon: {detail}")
            return SubmissionOutcome.failed(detail)
        except HorizonConnectionError as e:
            raise TransportError(f"Submission of batch {batch.index} failed: {e}") from e

        if not response.get("successful", True):
            extras = response.get("extras") or {}
            codes = self._format_result_codes(
                extras.get("result_codes") or response.get("result_codes") or {}
            )
            detail = codes or f"Transaction {response.get('hash')} was not successful"
            logger.warning(f"Batch {batch.index} was not successful: {detail}")
            return SubmissionOutcome.failed(detail)

        return SubmissionOutcome.succeeded(response["hash"])

    def _build_transaction(self, batch: Batch, sequence: int, keypair: Keypair):
        source = Account(keypair.public_key, sequence)
        builder = TransactionBuilder(
            source_account=source,
            network_passphrase=self.network_passphrase,
            base_fee=self.base_fee,
        )

        for payment in batch.payments:
            asset = parse_asset(payment.asset)
            stellar_asset = (
                StellarAsset.native() if asset.is_native else StellarAsset(asset.code, asset.issuer)
            )
            builder.append_payment_op(
                destination=payment.recipient,
                asset=stellar_asset,
                amount=payment.amount,
            )

        builder.set_timeout(TRANSACTION_TIMEOUT_SECONDS)
        return builder.build()

    @staticmethod
    def _describe_horizon_error(error: BaseHorizonError) -> str:
        extras: Dict[str, Any] = getattr(error, "extras", None) or {}
        codes = StellarLedgerClient._format_result_codes(extras.get("result_codes") or {})
        if codes:
            return codes
        return getattr(error, "detail", None) or getattr(error, "title", None) or "Transaction failed"

    @staticmethod
    def _format_result_codes(result_codes: Dict[str, Any]) -> str:
        """Joins transaction and operation result codes into one detail string"""
        codes = []
        if result_codes.get("transaction"):
            codes.append(result_codes["transaction"])
        codes.extend(result_codes.get("operations") or [])
        return ", ".join(codes)
