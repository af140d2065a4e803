"""
Fee verification against the installer API.

The installer checks on-chain that a transaction paid at least the minimum
PRESS amount to the outlet treasury. We only forward the question.
"""
import logging

from press_sync.config import OutletConfig
from press_sync.errors import ConfigurationError, PaymentVerificationError, PressSyncError
from press_sync.gateway_client import post_json

logger = logging.getLogger(__name__)


class FeeVerifier:
    """Client for POST {installer}/api/fees/verify."""

    def __init__(self, config: OutletConfig):
        self.config = config

    def verify(self, tx_reference: str) -> None:
        """
        Confirm that `tx_reference` paid the submission fee.

        Returns None on a verified payment.

        Raises:
            ConfigurationError: outlet payment settings are incomplete
            PaymentVerificationError: verifier unreachable, unparseable,
                or did not answer ok
        """
        missing = self.config.missing_payment_settings()
        if missing:
            raise ConfigurationError(
                "Outlet not fully configured for fee verification (missing: "
                + ", ".join(missing) + ")"
            )

        url = self.config.installer_api.rstrip("/") + "/api/fees/verify"
        payload = {
            "rpc": self.config.rpc_url,
            "txid": tx_reference,
            "press_token": self.config.press_token,
            "treasury": self.config.treasury_wallet,
            "min_amount_press": self.config.publish_fee_press,
        }

        try:
            reply = post_json(url, payload, self.config.fee_verify_seconds)
        except PressSyncError as e:
            raise PaymentVerificationError(f"Unable to verify payment at this time ({e.kind})")

        if reply.get("ok") is not True:
            logger.info("Fee verifier refused %s: %s", tx_reference, reply.get("error"))
            raise PaymentVerificationError(
                "Payment not verified on-chain (check TXID, amount, or treasury)"
            )
