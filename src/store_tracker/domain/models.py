"""Domain models for the store tracker."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: str
    national_id: int
    first_name: str
    last_name: str
    money_spent: float


@dataclass(frozen=True)
class NewUser:
    """Fields supplied by callers when creating a user."""

    national_id: int
    first_name: str
    last_name: str


@dataclass(frozen=True)
class UserNames:
    """Editable name fields of a user."""

    first_name: str
    last_name: str


@dataclass(frozen=True)
class PurchaseRecord:
    """Immutable log entry for one purchase event."""

    id: str
    user_national_id: int
    product: str
    quantity: float
    cost: float

    @property
    def total_cost(self) -> float:
        return self.cost * self.quantity
