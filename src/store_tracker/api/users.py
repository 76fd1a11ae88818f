"""User API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status

from store_tracker.api.models import CreateUserPayload, UpdateUserPayload, UserOut
from store_tracker.domain.models import NewUser, UserNames

if TYPE_CHECKING:
    from store_tracker.containers import AppContainer

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
def list_users(request: Request) -> list[UserOut]:
    """Return all users."""
    container: AppContainer = request.app.state.container
    return [UserOut.from_record(user) for user in container.user_service.list_users()]


@router.get("/more-than-average-spent")
def more_than_average_spent(request: Request) -> list[UserOut]:
    """Return users who spent more than the average user."""
    container: AppContainer = request.app.state.container
    users = container.spending_service.users_above_average_spend()
    return [UserOut.from_record(user) for user in users]


@router.get("/{national_id}")
def get_user(national_id: int, request: Request) -> UserOut:
    """Return a single user by national id."""
    container: AppContainer = request.app.state.container
    return UserOut.from_record(container.user_service.get_user(national_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(payload: CreateUserPayload, request: Request) -> UserOut:
    """Create a user with no money spent."""
    container: AppContainer = request.app.state.container
    user = container.user_service.create_user(
        NewUser(
            national_id=payload.national_id,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
    )
    return UserOut.from_record(user)


@router.put("/{national_id}")
def update_user(
    national_id: int, payload: UpdateUserPayload, request: Request
) -> UserOut:
    """Update a user's names."""
    container: AppContainer = request.app.state.container
    user = container.user_service.update_user(
        national_id,
        UserNames(first_name=payload.first_name, last_name=payload.last_name),
    )
    return UserOut.from_record(user)


@router.delete("/{national_id}")
def delete_user(national_id: int, request: Request) -> dict[str, str]:
    """Delete a user; their purchase records are kept."""
    container: AppContainer = request.app.state.container
    container.user_service.delete_user(national_id)
    return {"status": "ok"}
