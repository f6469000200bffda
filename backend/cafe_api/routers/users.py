"""
User router.

A "user" is a seating record: a guest at a seat, served by a maid. Guests
register and edit themselves without a key; seat lookup and the full list
are staff views.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from cafe_api.routers._common.deps import get_instax_service, get_order_service, get_user_service
from cafe_api.routers._common.forms import user_patch_from
from cafe_api.routers._common.params import seat_id_path, user_id_path
from cafe_api.services.domain import InstaxService, OrderService, UserService
from cafe_shared.security.auth import require_maid_api_key
from cafe_shared.utils.identifiers import EntityId, get_identifier_strategy
from cafe_shared.utils.responses import ApiResponse, ok
from cafe_shared.utils.schemas import InstaxOutput, OrderListOutput, UserCreateBody, UserListOutput, UserOutput

router = APIRouter(prefix="/api/users", tags=["users"])


# =============================================================================
# Staff views
# =============================================================================


@router.get(
    "",
    response_model=ApiResponse[UserListOutput],
    dependencies=[Depends(require_maid_api_key)],
)
def list_users(service: UserService = Depends(get_user_service)):
    """Every user, most recently updated first."""
    return ok(UserListOutput(users=service.list()))


@router.get(
    "/seat/{seat_id}",
    response_model=ApiResponse[UserOutput],
    dependencies=[Depends(require_maid_api_key)],
)
def get_user_by_seat(
    seat_id: int = Depends(seat_id_path),
    service: UserService = Depends(get_user_service),
):
    return ok(service.get_by_seat(seat_id))


# =============================================================================
# Guest endpoints
# =============================================================================


@router.get("/{user_id}", response_model=ApiResponse[UserOutput])
def get_user(
    user_id: EntityId = Depends(user_id_path),
    service: UserService = Depends(get_user_service),
):
    return ok(service.get(user_id))


@router.post("/{user_id}", response_model=ApiResponse[UserOutput])
def register_user(
    body: UserCreateBody,
    user_id: EntityId = Depends(user_id_path),
    service: UserService = Depends(get_user_service),
):
    """
    Seat the user with a maid. Registering a known id again re-seats it and
    keeps its name, so the answer is 200 either way.
    """
    maid_id = get_identifier_strategy().parse_field(body.maid_id, "maid_id")
    user = service.register(user_id, seat_id=body.seat_id, maid_id=maid_id, status=body.status)
    return ok(user, "User registered successfully.")


@router.patch("/{user_id}", response_model=ApiResponse[UserOutput])
def update_user(
    payload: Any = Body(...),
    user_id: EntityId = Depends(user_id_path),
    service: UserService = Depends(get_user_service),
):
    patch = user_patch_from(payload, get_identifier_strategy())
    result = service.update(user_id, patch)
    return ok(result.data, "User updated successfully." if result.changed else "No changes applied.")


@router.get("/{user_id}/orders", response_model=ApiResponse[OrderListOutput])
def list_user_orders(
    user_id: EntityId = Depends(user_id_path),
    service: OrderService = Depends(get_order_service),
):
    return ok(OrderListOutput(orders=service.list_by_user(user_id)))


@router.get("/{user_id}/instax", response_model=ApiResponse[InstaxOutput])
def get_user_instax(
    user_id: EntityId = Depends(user_id_path),
    service: InstaxService = Depends(get_instax_service),
):
    """Most recent instax taken for the user."""
    return ok(service.get_by_user(user_id))
