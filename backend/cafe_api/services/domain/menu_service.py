"""
Menu Domain Service.

Menu items always start with a photo. Creation is a saga: insert the row,
store the photo, attach the key; any failure removes what was done.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.orm import Session

from cafe_api.models import Menu
from cafe_api.repositories import MenuFilters, MenuRepository
from cafe_api.services.base import LifecycleService, Mutation
from cafe_api.services.patches import MenuDraft, MenuPatch, is_set
from cafe_api.services.saga import Saga
from cafe_shared.config.constants import StoragePrefix
from cafe_shared.config.logging import get_logger
from cafe_shared.infrastructure.storage import ImageUpload, ObjectStore, delete_quietly
from cafe_shared.utils.exceptions import InternalError, ValidationError
from cafe_shared.utils.schemas import MenuOutput

logger = get_logger(__name__)


def _clean_description(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class MenuService(LifecycleService):
    """Domain service for Menu operations."""

    entity_name = "Menu"

    def __init__(self, db: Session, store: Optional[ObjectStore] = None, public_base_url: str = ""):
        super().__init__(db, store, public_base_url)
        self._repo = MenuRepository(db)

    def list(self, available_only: bool = False) -> list[MenuOutput]:
        """All menu items by id; only those with stock left when ``available_only``."""
        menus = self._repo.find_all(MenuFilters(available_only=available_only))
        return [self.mapper.menu(m) for m in menus]

    def get(self, menu_id: int) -> MenuOutput:
        return self.mapper.menu(self._require(self._repo, menu_id))

    async def create(self, draft: MenuDraft) -> MenuOutput:
        """
        Create a menu item with its photo.

        Raises:
            ValidationError: Blank name or negative stock.
            InternalError: "Failed to create menu." after compensation.
        """
        name = draft.name.strip()
        if not name:
            raise ValidationError("Name is required.")
        if draft.stock < 0:
            raise ValidationError("Stock must be a non-negative integer.")

        saga = Saga("menu.create", menu_name=name)
        saga.step(
            "insert",
            lambda _: self._repo.save(
                Menu(name=name, stock=draft.stock, description=_clean_description(draft.description))
            ),
            compensate=self._discard,
        )
        saga.step(
            "key",
            lambda r: self._new_key(f"{StoragePrefix.MENUS}/{r['insert'].id}", draft.image),
            compensate=self.store.delete,
        )
        saga.step("upload", lambda r: self._put_image(r["key"], draft.image))
        saga.step("attach", lambda r: self._apply(r["insert"], {"image_key": r["key"]}))

        try:
            results = await saga.run()
        except Exception as exc:
            raise InternalError("Failed to create menu.", error=str(exc)) from exc

        menu = results["attach"]
        logger.info("Menu created", menu_id=menu.id, stock=menu.stock)
        return self.mapper.menu(menu)

    async def update(self, menu_id: int, patch: MenuPatch) -> Mutation[MenuOutput]:
        """
        Apply a partial update; a new photo replaces and then deletes the old one.
        """
        menu = self._require(self._repo, menu_id)

        changes: dict[str, Any] = {}
        if is_set(patch.name) and patch.name is not None:
            name = patch.name.strip()
            if name and name != menu.name:
                changes["name"] = name
        if is_set(patch.stock) and patch.stock is not None:
            if patch.stock < 0:
                raise ValidationError("Stock must be a non-negative integer.")
            if patch.stock != menu.stock:
                changes["stock"] = patch.stock
        if is_set(patch.description):
            description = _clean_description(patch.description)
            if description != _clean_description(menu.description):
                changes["description"] = description
        image: Optional[ImageUpload] = patch.image if is_set(patch.image) else None

        if not changes and image is None:
            return Mutation(self.mapper.menu(menu), changed=False)

        if image is None:
            self._apply(menu, changes)
        else:
            previous_key = menu.image_key
            prefix = f"{StoragePrefix.MENUS}/{menu.id}"

            saga = Saga("menu.update", menu_id=menu.id)
            saga.step("key", lambda _: self._new_key(prefix, image), compensate=self.store.delete)
            saga.step("upload", lambda r: self._put_image(r["key"], image))
            saga.step("save", lambda r: self._apply(menu, {**changes, "image_key": r["key"]}))
            await saga.run()

            await delete_quietly(self.store, previous_key, menu_id=menu.id)

        logger.info("Menu updated", menu_id=menu.id, fields=sorted(changes) + (["image"] if image else []))
        return Mutation(self.mapper.menu(menu))

    async def delete(self, menu_id: int) -> MenuOutput:
        """Delete the record (its orders cascade), then its photo."""
        menu = self._require(self._repo, menu_id)
        output = self.mapper.menu(menu)
        image_key = menu.image_key

        self._repo.delete(menu)
        logger.info("Menu deleted", menu_id=output.id)

        await delete_quietly(self.store, image_key, menu_id=output.id)
        return output

    def _apply(self, menu: Menu, changes: dict[str, Any]) -> Menu:
        for field, value in changes.items():
            setattr(menu, field, value)
        menu.touch()
        return self._repo.save(menu)

    def _discard(self, menu: Menu) -> None:
        """Compensation for the insert step."""
        existing = self._repo.find_by_id(menu.id)
        if existing is not None:
            self._repo.delete(existing)
            logger.warning("Menu insert rolled back", menu_id=menu.id)
