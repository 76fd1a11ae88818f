"""MongoDB database bootstrap."""

import logging

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from store_tracker.domain.models import UserRecord

USERS_COLLECTION = "users"
PURCHASE_RECORDS_COLLECTION = "purchaseRecords"

_logger = logging.getLogger(__name__)


def setup_database(client: MongoClient, database_name: str) -> Database:
    """Create collections and the unique national id index when missing."""
    database = client[database_name]
    existing = set(database.list_collection_names())
    for name in (USERS_COLLECTION, PURCHASE_RECORDS_COLLECTION):
        if name not in existing:
            database.create_collection(name)
            _logger.info("Created collection: %s", name)
    # Every person has exactly one national identifier.
    database[USERS_COLLECTION].create_index(
        [("nationalId", ASCENDING)], unique=True
    )
    return database


def remove_database(client: MongoClient, database_name: str) -> None:
    """Drop the whole database."""
    client.drop_database(database_name)


def user_from_document(document: dict[str, object]) -> UserRecord:
    """Build a user record from a users collection document."""
    return UserRecord(
        id=str(document["_id"]),
        national_id=int(document["nationalId"]),
        first_name=str(document.get("firstName", "")),
        last_name=str(document.get("lastName", "")),
        money_spent=float(document.get("moneySpent", 0.0)),
    )
