"""
Console payout adapter - Implements PayoutGateway protocol.

This module provides a console-based implementation of the domain's
value-transfer port, logging payouts for demo purposes.
"""

import logging

from src.domain.exceptions import ValueTransferFailed

logger = logging.getLogger(__name__)


class ConsolePayoutGateway:
    """
    Implements PayoutGateway protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - no currency actually moves.
    """

    def send(self, recipient: str, amount: int) -> None:
        """
        Log a payout (simulates native value transfer).

        In production, this would be replaced with a ledger/wallet adapter.

        Args:
            recipient: Payout address
            amount: Amount in wei

        Raises:
            ValueTransferFailed: If the amount is negative
        """
        if amount < 0:
            raise ValueTransferFailed(f"negative amount {amount}")
        logger.info("[PAYOUT] Recipient: %s Amount: %d", recipient, amount)
