"""MongoDB repository for spending analytics."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from pymongo import ASCENDING, MongoClient
from pymongo.client_session import ClientSession
from pymongo.database import Database

from store_tracker.adapters.mongo_database import USERS_COLLECTION, user_from_document
from store_tracker.domain.models import UserRecord
from store_tracker.services.spending import SpendingRepository, SpendingSnapshot


@dataclass
class MongoSpendingSnapshot(SpendingSnapshot):
    """Spending queries sharing one snapshot session."""

    database: Database
    session: ClientSession

    def compute_mean_spend(self) -> float | None:
        """Average moneySpent over all users with a $group stage."""
        pipeline = [
            {"$group": {"_id": None, "averageSpent": {"$avg": "$moneySpent"}}}
        ]
        results = list(
            self.database[USERS_COLLECTION].aggregate(pipeline, session=self.session)
        )
        if not results or results[0].get("averageSpent") is None:
            return None
        return float(results[0]["averageSpent"])

    def list_users_with_spend_above(self, threshold: float) -> list[UserRecord]:
        """Return users with moneySpent strictly above threshold."""
        cursor = (
            self.database[USERS_COLLECTION]
            .find({"moneySpent": {"$gt": threshold}}, session=self.session)
            .sort("_id", ASCENDING)
        )
        return [user_from_document(document) for document in cursor]


@dataclass
class MongoSpendingRepository(SpendingRepository):
    """MongoDB implementation for spending queries."""

    client: MongoClient
    database: Database

    @contextmanager
    def snapshot(self) -> Iterator[SpendingSnapshot]:
        """Yield queries that all read at the same cluster time."""
        with self.client.start_session(snapshot=True) as session:
            yield MongoSpendingSnapshot(self.database, session)
