"""
Service factories for routers.

Each lifecycle service gets its database session, object store and
settings through FastAPI dependencies, which tests override.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from cafe_api.services.domain import InstaxService, MaidService, MenuService, OrderService, UserService
from cafe_shared.config.settings import Settings, get_settings
from cafe_shared.infrastructure.db import get_db
from cafe_shared.infrastructure.storage import ObjectStore, get_object_store


def get_maid_service(
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
    settings: Settings = Depends(get_settings),
) -> MaidService:
    return MaidService(
        db,
        store,
        settings.public_base_url,
        default_active=settings.maid_list_default_active,
    )


def get_menu_service(
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
    settings: Settings = Depends(get_settings),
) -> MenuService:
    return MenuService(db, store, settings.public_base_url)


def get_user_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, settings.public_base_url)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


def get_instax_service(
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
    settings: Settings = Depends(get_settings),
) -> InstaxService:
    return InstaxService(db, store, settings.public_base_url)
