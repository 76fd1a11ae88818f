"""Purchase recording service.

A purchase touches two documents: the buyer's running spend and a new purchase
record. Both writes happen inside one store transaction so that readers never
observe one without the other.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from store_tracker.domain.errors import NotFoundError
from store_tracker.domain.models import PurchaseRecord, UserRecord

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class PurchaseSession(Protocol):
    """Transactional handle valid only while its transaction is open."""

    def find_and_increment_user_spend(
        self, national_id: int, delta: float
    ) -> UserRecord | None:
        """Atomically add delta to the user's spend and return the new state."""

    def insert_purchase_record(
        self, national_id: int, product: str, quantity: float, cost: float
    ) -> str:
        """Insert a purchase record and return its id."""


class PurchaseRepository(Protocol):
    """Persistence interface for purchases."""

    def run_in_transaction(self, work: Callable[[PurchaseSession], T]) -> T:
        """Run work atomically: commit on return, abort on any exception."""

    def list_purchase_records(
        self, national_id: int | None = None
    ) -> list[PurchaseRecord]:
        """Return purchase records, optionally for one national id."""


@dataclass
class PurchaseService:
    """Service that records purchases against users' running spend."""

    repository: PurchaseRepository

    def record_purchase(
        self, national_id: int, product: str, quantity: float, cost: float
    ) -> PurchaseRecord:
        """Increment the user's spend and log the purchase as one unit.

        Callers are expected to pass non-negative quantity and cost. Raises
        NotFoundError when no user has the national id; in that case nothing
        is written.
        """
        delta = quantity * cost

        def work(session: PurchaseSession) -> PurchaseRecord:
            _logger.debug(
                "Incrementing spend: national_id=%s delta=%s", national_id, delta
            )
            updated = session.find_and_increment_user_spend(national_id, delta)
            if updated is None:
                raise NotFoundError(national_id)
            record_id = session.insert_purchase_record(
                national_id, product, quantity, cost
            )
            return PurchaseRecord(
                id=record_id,
                user_national_id=national_id,
                product=product,
                quantity=quantity,
                cost=cost,
            )

        try:
            record = self.repository.run_in_transaction(work)
        except NotFoundError:
            _logger.warning("User not found for purchase: national_id=%s", national_id)
            raise
        except Exception:
            _logger.exception(
                "Purchase transaction aborted: national_id=%s", national_id
            )
            raise
        _logger.info(
            "Recorded purchase: national_id=%s product=%s total=%s",
            national_id,
            product,
            record.total_cost,
        )
        return record

    def list_purchase_records(
        self, national_id: int | None = None
    ) -> list[PurchaseRecord]:
        """Return purchase records, optionally filtered by buyer."""
        return self.repository.list_purchase_records(national_id)
