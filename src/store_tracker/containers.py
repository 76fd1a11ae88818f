"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass

from pymongo import MongoClient

from store_tracker.adapters.mongo_database import setup_database
from store_tracker.adapters.mongo_purchase_repository import MongoPurchaseRepository
from store_tracker.adapters.mongo_spending_repository import MongoSpendingRepository
from store_tracker.adapters.mongo_user_repository import MongoUserRepository
from store_tracker.config import Settings
from store_tracker.services.purchases import PurchaseService
from store_tracker.services.spending import SpendingService
from store_tracker.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    purchase_service: PurchaseService
    spending_service: SpendingService
    setup_storage: Callable[[], None]
    close_resources: Callable[[], None]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    # MongoClient connects lazily, so building the container needs no server.
    mongo_client: MongoClient = MongoClient(
        resolved_settings.mongodb_uri,
        serverSelectionTimeoutMS=resolved_settings.mongodb_timeout_ms,
    )
    database = mongo_client[resolved_settings.mongodb_database_name]
    user_service = UserService(MongoUserRepository(database))
    purchase_service = PurchaseService(
        MongoPurchaseRepository(client=mongo_client, database=database)
    )
    spending_service = SpendingService(
        MongoSpendingRepository(client=mongo_client, database=database)
    )

    def setup_storage() -> None:
        setup_database(mongo_client, resolved_settings.mongodb_database_name)

    def close_resources() -> None:
        mongo_client.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        purchase_service=purchase_service,
        spending_service=spending_service,
        setup_storage=setup_storage,
        close_resources=close_resources,
    )
