"""MongoDB repository for purchases."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.client_session import ClientSession
from pymongo.database import Database
from pymongo.errors import PyMongoError

from store_tracker.adapters.mongo_database import (
    PURCHASE_RECORDS_COLLECTION,
    USERS_COLLECTION,
    user_from_document,
)
from store_tracker.domain.errors import TransactionFailure
from store_tracker.domain.models import PurchaseRecord, UserRecord
from store_tracker.services.purchases import PurchaseRepository, PurchaseSession

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_RETRYABLE_LABELS = ("TransientTransactionError", "UnknownTransactionCommitResult")


@dataclass
class MongoPurchaseSession(PurchaseSession):
    """Purchase operations bound to an open client session."""

    database: Database
    session: ClientSession

    def find_and_increment_user_spend(
        self, national_id: int, delta: float
    ) -> UserRecord | None:
        """Increment moneySpent with a single find-and-modify."""
        document = self.database[USERS_COLLECTION].find_one_and_update(
            {"nationalId": national_id},
            {"$inc": {"moneySpent": delta}},
            return_document=ReturnDocument.AFTER,
            session=self.session,
        )
        if document is None:
            return None
        return user_from_document(document)

    def insert_purchase_record(
        self, national_id: int, product: str, quantity: float, cost: float
    ) -> str:
        """Insert a purchase record document and return its id."""
        result = self.database[PURCHASE_RECORDS_COLLECTION].insert_one(
            {
                "userNationalId": national_id,
                "product": product,
                "quantity": quantity,
                "cost": cost,
            },
            session=self.session,
        )
        return str(result.inserted_id)


@dataclass
class MongoPurchaseRepository(PurchaseRepository):
    """MongoDB implementation for purchase persistence."""

    client: MongoClient
    database: Database

    def run_in_transaction(self, work: Callable[[PurchaseSession], T]) -> T:
        """Run work in a multi-document transaction without retrying."""
        with self.client.start_session() as session:
            try:
                # Exiting the block commits; an exception aborts.
                with session.start_transaction():
                    return work(MongoPurchaseSession(self.database, session))
            except PyMongoError as exc:
                if any(exc.has_error_label(label) for label in _RETRYABLE_LABELS):
                    _logger.warning("Transaction failed transiently: %s", exc)
                    raise TransactionFailure(str(exc), retryable=True) from exc
                raise

    def list_purchase_records(
        self, national_id: int | None = None
    ) -> list[PurchaseRecord]:
        """Return purchase records in insertion order."""
        query: dict[str, object] = {}
        if national_id is not None:
            query["userNationalId"] = national_id
        cursor = (
            self.database[PURCHASE_RECORDS_COLLECTION]
            .find(query)
            .sort("_id", ASCENDING)
        )
        return [_parse_record(document) for document in cursor]


def _parse_record(document: dict[str, object]) -> PurchaseRecord:
    return PurchaseRecord(
        id=str(document["_id"]),
        user_national_id=int(document["userNationalId"]),
        product=str(document.get("product", "")),
        quantity=float(document.get("quantity", 0.0)),
        cost=float(document.get("cost", 0.0)),
    )
