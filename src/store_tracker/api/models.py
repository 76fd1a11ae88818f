"""Request and response payloads for the HTTP API."""

from pydantic import BaseModel, Field

from store_tracker.domain.models import PurchaseRecord, UserRecord


class CreateUserPayload(BaseModel):
    """Body of a user creation request."""

    national_id: int = Field(gt=0)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


class UpdateUserPayload(BaseModel):
    """Body of a user update request."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


class CreatePurchasePayload(BaseModel):
    """Body of a purchase request."""

    user_national_id: int = Field(gt=0)
    product: str = Field(min_length=1)
    quantity: float = Field(ge=0)
    cost: float = Field(ge=0)


class UserOut(BaseModel):
    """User as returned to clients."""

    national_id: int
    first_name: str
    last_name: str
    money_spent: float

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserOut":
        return cls(
            national_id=user.national_id,
            first_name=user.first_name,
            last_name=user.last_name,
            money_spent=user.money_spent,
        )


class PurchaseOut(BaseModel):
    """Purchase record as returned to clients."""

    id: str
    user_national_id: int
    product: str
    quantity: float
    cost: float
    total_cost: float

    @classmethod
    def from_record(cls, record: PurchaseRecord) -> "PurchaseOut":
        return cls(
            id=record.id,
            user_national_id=record.user_national_id,
            product=record.product,
            quantity=record.quantity,
            cost=record.cost,
            total_cost=record.total_cost,
        )
