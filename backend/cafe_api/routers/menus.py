"""
Menu router.

Listing and lookup are public. Creating, editing and removing items is an
admin operation; create is multipart because every item needs a photo.
"""

from fastapi import APIRouter, Depends, Request, status

from cafe_api.routers._common.deps import get_menu_service
from cafe_api.routers._common.forms import menu_draft_from, menu_patch_from, read_body, read_form
from cafe_api.routers._common.params import available_only_query, menu_id_path
from cafe_api.services.domain import MenuService
from cafe_shared.config.settings import Settings, get_settings
from cafe_shared.security.auth import require_admin_api_key
from cafe_shared.utils.responses import ApiResponse, ok
from cafe_shared.utils.schemas import MenuListOutput, MenuOutput

router = APIRouter(prefix="/api/menus", tags=["menus"])


@router.get("", response_model=ApiResponse[MenuListOutput])
def list_menus(
    available_only: bool = Depends(available_only_query),
    service: MenuService = Depends(get_menu_service),
):
    """All menu items, or only those with stock left."""
    return ok(MenuListOutput(menus=service.list(available_only)))


@router.get("/{menu_id}", response_model=ApiResponse[MenuOutput])
def get_menu(
    menu_id: int = Depends(menu_id_path),
    service: MenuService = Depends(get_menu_service),
):
    return ok(service.get(menu_id))


@router.post(
    "",
    response_model=ApiResponse[MenuOutput],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_api_key)],
)
async def create_menu(
    request: Request,
    service: MenuService = Depends(get_menu_service),
    settings: Settings = Depends(get_settings),
):
    """
    Multipart fields: ``name``, ``stock``, ``image`` (required) and an
    optional ``description``.
    """
    draft = await menu_draft_from(await read_form(request), settings.max_upload_bytes)
    return ok(await service.create(draft), "Menu created successfully.")


@router.patch(
    "/{menu_id}",
    response_model=ApiResponse[MenuOutput],
    dependencies=[Depends(require_admin_api_key)],
)
async def update_menu(
    request: Request,
    menu_id: int = Depends(menu_id_path),
    service: MenuService = Depends(get_menu_service),
    settings: Settings = Depends(get_settings),
):
    patch = await menu_patch_from(await read_body(request), settings.max_upload_bytes)
    result = await service.update(menu_id, patch)
    return ok(result.data, "Menu updated successfully." if result.changed else "No changes applied.")


@router.delete(
    "/{menu_id}",
    response_model=ApiResponse[MenuOutput],
    dependencies=[Depends(require_admin_api_key)],
)
async def delete_menu(
    menu_id: int = Depends(menu_id_path),
    service: MenuService = Depends(get_menu_service),
):
    """Remove the item and its photo. Orders for it are removed by cascade."""
    return ok(await service.delete(menu_id), "Menu deleted successfully.")
