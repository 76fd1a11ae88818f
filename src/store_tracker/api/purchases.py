"""Purchase API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from store_tracker.api.models import CreatePurchasePayload, PurchaseOut

if TYPE_CHECKING:
    from store_tracker.containers import AppContainer

router = APIRouter(prefix="/purchases", tags=["purchases"])


@router.post("")
def create_purchase(
    payload: CreatePurchasePayload, request: Request
) -> PurchaseOut:
    """Record a purchase for an existing user."""
    container: AppContainer = request.app.state.container
    record = container.purchase_service.record_purchase(
        national_id=payload.user_national_id,
        product=payload.product,
        quantity=payload.quantity,
        cost=payload.cost,
    )
    return PurchaseOut.from_record(record)


@router.get("")
def list_purchases(
    request: Request, national_id: int | None = None
) -> list[PurchaseOut]:
    """Return purchase records, optionally for one user."""
    container: AppContainer = request.app.state.container
    records = container.purchase_service.list_purchase_records(national_id)
    return [PurchaseOut.from_record(record) for record in records]
