"""Booking ledger selection.

Routes lifecycle operations to the configured ledger adapter.
No business logic here - only adapter coordination.
"""

import logging

from seascape.config import settings
from seascape.ledger.base import BookingLedger, LedgerType
from seascape.ledger.memory import demo_ledger
from seascape.ledger.supabase import SupabaseLedger

logger = logging.getLogger(__name__)

_ledgers: dict[LedgerType, BookingLedger] = {}


def _assert_real_ledger_in_production(ledger_type: LedgerType) -> None:
    """Block the in-process ledger outside development and staging.

    Raises:
        RuntimeError: If the memory ledger is selected in production
    """
    if ledger_type == LedgerType.MEMORY and settings.environment == "production":
        raise RuntimeError(
            "The in-memory booking ledger cannot be used in production. "
            "Set LEDGER_BACKEND=supabase."
        )


def get_ledger(ledger_type: str | LedgerType | None = None) -> BookingLedger:
    """Get or create the ledger adapter instance."""
    ledger_type = LedgerType(ledger_type or settings.ledger_backend)
    _assert_real_ledger_in_production(ledger_type)

    if ledger_type not in _ledgers:
        if ledger_type == LedgerType.SUPABASE:
            _ledgers[ledger_type] = SupabaseLedger()
        else:
            _ledgers[ledger_type] = demo_ledger()
        logger.info(f"Booking ledger initialised: {ledger_type.value}")

    return _ledgers[ledger_type]
