"""Shared test fixtures."""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import TypeVar
from uuid import uuid4

import pytest

from store_tracker.config import Settings
from store_tracker.containers import AppContainer
from store_tracker.domain.errors import ConflictError
from store_tracker.domain.models import NewUser, PurchaseRecord, UserNames, UserRecord
from store_tracker.services.purchases import (
    PurchaseRepository,
    PurchaseService,
    PurchaseSession,
)
from store_tracker.services.spending import (
    SpendingRepository,
    SpendingService,
    SpendingSnapshot,
)
from store_tracker.services.users import UserRepository, UserService

T = TypeVar("T")


@dataclass
class InMemorySpendingSnapshot(SpendingSnapshot):
    """Spending queries over a copied list of users."""

    users: list[UserRecord]

    def compute_mean_spend(self) -> float | None:
        if not self.users:
            return None
        return sum(user.money_spent for user in self.users) / len(self.users)

    def list_users_with_spend_above(self, threshold: float) -> list[UserRecord]:
        return [user for user in self.users if user.money_spent > threshold]


@dataclass
class InMemoryPurchaseSession(PurchaseSession):
    """Buffers writes until the owning transaction commits."""

    store: "InMemoryStore"
    held_locks: list[threading.Lock] = field(default_factory=list)
    spend_deltas: dict[int, float] = field(default_factory=dict)
    new_records: list[PurchaseRecord] = field(default_factory=list)

    def find_and_increment_user_spend(
        self, national_id: int, delta: float
    ) -> UserRecord | None:
        user_lock = self.store.user_lock(national_id)
        if user_lock not in self.held_locks:
            user_lock.acquire()
            self.held_locks.append(user_lock)
        with self.store.lock:
            user = self.store.users.get(national_id)
        if user is None:
            return None
        pending = self.spend_deltas.get(national_id, 0.0) + delta
        self.spend_deltas[national_id] = pending
        return replace(user, money_spent=user.money_spent + pending)

    def insert_purchase_record(
        self, national_id: int, product: str, quantity: float, cost: float
    ) -> str:
        if self.store.insert_error is not None:
            raise self.store.insert_error
        record = PurchaseRecord(
            id=uuid4().hex,
            user_national_id=national_id,
            product=product,
            quantity=quantity,
            cost=cost,
        )
        self.new_records.append(record)
        return record.id


@dataclass
class InMemoryStore(UserRepository, PurchaseRepository, SpendingRepository):
    """In-memory store with per-user locking and all-or-nothing transactions."""

    users: dict[int, UserRecord] = field(default_factory=dict)
    records: list[PurchaseRecord] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)
    user_locks: dict[int, threading.Lock] = field(default_factory=dict)
    insert_error: Exception | None = None
    commits: int = 0
    aborts: int = 0

    def user_lock(self, national_id: int) -> threading.Lock:
        with self.lock:
            return self.user_locks.setdefault(national_id, threading.Lock())

    def find_by_national_id(self, national_id: int) -> UserRecord | None:
        return self.users.get(national_id)

    def insert_user(self, user: NewUser) -> UserRecord:
        with self.lock:
            if user.national_id in self.users:
                raise ConflictError(user.national_id)
            record = UserRecord(
                id=uuid4().hex,
                national_id=user.national_id,
                first_name=user.first_name,
                last_name=user.last_name,
                money_spent=0.0,
            )
            self.users[user.national_id] = record
            return record

    def update_user_names(
        self, national_id: int, names: UserNames
    ) -> UserRecord | None:
        with self.lock:
            user = self.users.get(national_id)
            if user is None:
                return None
            updated = replace(
                user, first_name=names.first_name, last_name=names.last_name
            )
            self.users[national_id] = updated
            return updated

    def delete_by_national_id(self, national_id: int) -> UserRecord | None:
        with self.lock:
            return self.users.pop(national_id, None)

    def list_users(self) -> list[UserRecord]:
        with self.lock:
            return list(self.users.values())

    def run_in_transaction(self, work: Callable[[PurchaseSession], T]) -> T:
        session = InMemoryPurchaseSession(self)
        try:
            try:
                result = work(session)
            except Exception:
                self.aborts += 1
                raise
            with self.lock:
                for national_id, delta in session.spend_deltas.items():
                    user = self.users[national_id]
                    self.users[national_id] = replace(
                        user, money_spent=user.money_spent + delta
                    )
                self.records.extend(session.new_records)
                self.commits += 1
            return result
        finally:
            for user_lock in session.held_locks:
                user_lock.release()

    def list_purchase_records(
        self, national_id: int | None = None
    ) -> list[PurchaseRecord]:
        with self.lock:
            return [
                record
                for record in self.records
                if national_id is None or record.user_national_id == national_id
            ]

    @contextmanager
    def snapshot(self) -> Iterator[SpendingSnapshot]:
        with self.lock:
            users = list(self.users.values())
        yield InMemorySpendingSnapshot(users)


SEED_USERS = [
    NewUser(national_id=17246710, first_name="John", last_name="Smith"),
    NewUser(national_id=21698109, first_name="Hannah", last_name="Doe"),
    NewUser(national_id=10953291, first_name="Richard", last_name="Gonzalez"),
]

SEED_PURCHASES = [
    (17246710, "Cookies", 1, 3.25),
    (17246710, "Soda", 1, 5.50),
    (21698109, "Milk", 3, 3),
    (10953291, "Apples", 5, 0.75),
    (10953291, "Bananas", 3, 0.50),
    (10953291, "Pencil", 1, 1.50),
]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongodb_uri="mongodb://localhost:27017",
        mongodb_database_name="store-test",
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def user_service(store: InMemoryStore) -> UserService:
    return UserService(store)


@pytest.fixture
def purchase_service(store: InMemoryStore) -> PurchaseService:
    return PurchaseService(store)


@pytest.fixture
def spending_service(store: InMemoryStore) -> SpendingService:
    return SpendingService(store)


@pytest.fixture
def seeded_store(
    store: InMemoryStore,
    user_service: UserService,
    purchase_service: PurchaseService,
) -> InMemoryStore:
    for user in SEED_USERS:
        user_service.create_user(user)
    for national_id, product, quantity, cost in SEED_PURCHASES:
        purchase_service.record_purchase(national_id, product, quantity, cost)
    return store


@pytest.fixture
def container(
    settings: Settings,
    user_service: UserService,
    purchase_service: PurchaseService,
    spending_service: SpendingService,
) -> AppContainer:
    def setup_storage() -> None:
        return None

    def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=user_service,
        purchase_service=purchase_service,
        spending_service=spending_service,
        setup_storage=setup_storage,
        close_resources=close_resources,
    )
