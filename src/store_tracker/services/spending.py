"""Spending analytics over users' running totals."""

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Protocol

from store_tracker.domain.models import UserRecord


class SpendingSnapshot(Protocol):
    """Point-in-time read view of the users collection."""

    def compute_mean_spend(self) -> float | None:
        """Return the mean money spent, or None when there are no users."""

    def list_users_with_spend_above(self, threshold: float) -> list[UserRecord]:
        """Return users spending strictly more than threshold, in storage order."""


class SpendingRepository(Protocol):
    """Persistence interface for spending queries."""

    def snapshot(self) -> AbstractContextManager[SpendingSnapshot]:
        """Open a lock-free consistent read over users."""


@dataclass
class SpendingService:
    """Service for classifying users by spend."""

    repository: SpendingRepository

    def users_above_average_spend(self) -> list[UserRecord]:
        """Return users whose spend is strictly above the population mean."""
        with self.repository.snapshot() as snapshot:
            mean = snapshot.compute_mean_spend()
            if mean is None:
                return []
            return snapshot.list_users_with_spend_above(mean)
