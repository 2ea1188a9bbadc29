"""Domain layer for lendtrack application."""

from lendtrack.domain.ledger import Ledger
from lendtrack.domain.transaction import TransactionService
from lendtrack.domain.analytics import AnalyticsService

__all__ = [
    "Ledger",
    "TransactionService",
    "AnalyticsService",
]
