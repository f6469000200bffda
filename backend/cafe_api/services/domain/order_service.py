"""
Order Domain Service.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from cafe_api.models import Order
from cafe_api.repositories import OrderFilters, OrderRepository, UserRepository
from cafe_api.services.base import LifecycleService, Mutation
from cafe_api.services.references import ReferenceValidator
from cafe_shared.config.constants import OrderState
from cafe_shared.config.logging import get_logger
from cafe_shared.utils.exceptions import ValidationError
from cafe_shared.utils.identifiers import EntityId
from cafe_shared.utils.schemas import OrderOutput

logger = get_logger(__name__)


class OrderService(LifecycleService):
    """
    Domain service for Order operations.

    Any state may follow any other; only an unchanged state is rejected as
    a no-op.
    """

    entity_name = "Order"

    def __init__(self, db: Session):
        super().__init__(db)
        self._repo = OrderRepository(db)
        self._users = UserRepository(db)
        self._references = ReferenceValidator(db)

    def list(self) -> list[OrderOutput]:
        """Every order, newest first."""
        return [self.mapper.order(o) for o in self._repo.find_all()]

    def list_by_user(self, user_id: EntityId) -> list[OrderOutput]:
        self._require(self._users, user_id, "User")
        orders = self._repo.find_all(OrderFilters(user_id=user_id))
        return [self.mapper.order(o) for o in orders]

    def get(self, order_id: int) -> OrderOutput:
        return self.mapper.order(self._require(self._repo, order_id))

    def create(self, user_id: EntityId, menu_id: int) -> OrderOutput:
        """
        Place a pending order.

        Raises:
            InvalidReferenceError: Unknown user or menu item.
        """
        self._references.require_user(user_id)
        self._references.require_menu(menu_id)

        order = self._repo.save(Order(user_id=user_id, menu_id=menu_id, state=OrderState.PENDING))
        logger.info("Order created", order_id=order.id, user_id=str(user_id), menu_id=menu_id)
        return self.mapper.order(order)

    def update_state(self, order_id: int, state: str) -> Mutation[OrderOutput]:
        if state not in OrderState.ALL:
            raise ValidationError("Invalid order state.", state=state)

        order = self._require(self._repo, order_id)
        if order.state == state:
            return Mutation(self.mapper.order(order), changed=False)

        previous = order.state
        order.state = state
        order.touch()
        order = self._repo.save(order)

        logger.info("Order state changed", order_id=order.id, previous=previous, state=state)
        return Mutation(self.mapper.order(order))
