"""
Order router.

Guests place orders without a key; moving an order through its states is
done by staff.
"""

from fastapi import APIRouter, Depends, status

from cafe_api.routers._common.deps import get_order_service
from cafe_api.routers._common.params import order_id_path
from cafe_api.services.domain import OrderService
from cafe_shared.security.auth import require_maid_api_key
from cafe_shared.utils.identifiers import get_identifier_strategy
from cafe_shared.utils.responses import ApiResponse, ok
from cafe_shared.utils.schemas import OrderCreateBody, OrderListOutput, OrderOutput, OrderUpdateBody

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=ApiResponse[OrderListOutput])
def list_orders(service: OrderService = Depends(get_order_service)):
    """All orders, newest first."""
    return ok(OrderListOutput(orders=service.list()))


@router.get("/{order_id}", response_model=ApiResponse[OrderOutput])
def get_order(
    order_id: int = Depends(order_id_path),
    service: OrderService = Depends(get_order_service),
):
    return ok(service.get(order_id))


@router.post("", response_model=ApiResponse[OrderOutput], status_code=status.HTTP_201_CREATED)
def create_order(
    body: OrderCreateBody,
    service: OrderService = Depends(get_order_service),
):
    """New orders always start as ``pending``."""
    user_id = get_identifier_strategy().parse_field(body.user_id, "user_id")
    return ok(service.create(user_id, body.menu_id), "Order created successfully.")


@router.patch(
    "/{order_id}",
    response_model=ApiResponse[OrderOutput],
    dependencies=[Depends(require_maid_api_key)],
)
def update_order(
    body: OrderUpdateBody,
    order_id: int = Depends(order_id_path),
    service: OrderService = Depends(get_order_service),
):
    result = service.update_state(order_id, body.state)
    return ok(result.data, "Order updated successfully." if result.changed else "No changes applied.")
