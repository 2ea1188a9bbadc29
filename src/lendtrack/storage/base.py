"""Abstract ledger storage interface."""

from abc import ABC, abstractmethod

from lendtrack.domain.ledger import Ledger


class LedgerStore(ABC):
    """Abstract persistence interface for a ledger."""

    @abstractmethod
    def load(self) -> Ledger:
        """Load the ledger. Never raises; falls back to an empty ledger."""
        pass

    @abstractmethod
    def save(self, ledger: Ledger) -> None:
        """Persist the whole ledger.

        Raises:
            StorageError: If any persistence step fails
        """
        pass
