"""
Maid router.

Public listing and lookup; everything else requires the staff secret.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status

from cafe_api.routers._common.deps import get_maid_service
from cafe_api.routers._common.forms import maid_patch_from, read_body
from cafe_api.routers._common.pagination import Pagination, get_pagination
from cafe_api.routers._common.params import is_active_query, maid_id_path
from cafe_api.services.domain import MaidService
from cafe_shared.config.constants import EngagementFilter
from cafe_shared.config.settings import Settings, get_settings
from cafe_shared.security.auth import require_maid_api_key
from cafe_shared.utils.identifiers import EntityId
from cafe_shared.utils.responses import ApiResponse, ok
from cafe_shared.utils.schemas import AssignedUserOutput, MaidActiveBody, MaidCreateBody, MaidOutput

router = APIRouter(prefix="/api/maids", tags=["maids"])


# =============================================================================
# Public
# =============================================================================


@router.get("", response_model=ApiResponse[list[MaidOutput]])
def list_maids(
    pagination: Pagination = Depends(get_pagination),
    is_active: Optional[bool] = Depends(is_active_query),
    service: MaidService = Depends(get_maid_service),
):
    """Paginated list of maids ordered by id."""
    return ok(service.list(pagination.page, pagination.per_page, is_active))


@router.get("/{maid_id}", response_model=ApiResponse[MaidOutput])
def get_maid(
    maid_id: EntityId = Depends(maid_id_path),
    service: MaidService = Depends(get_maid_service),
):
    return ok(service.get(maid_id))


# =============================================================================
# Staff
# =============================================================================


@router.post(
    "",
    response_model=ApiResponse[MaidOutput],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_maid_api_key)],
)
def create_maid(
    body: MaidCreateBody,
    service: MaidService = Depends(get_maid_service),
):
    """Create a maid with a server-assigned id. A name is required."""
    maid = service.create(name=body.name, is_instax_available=body.is_instax_available)
    return ok(maid, "Maid created successfully.")


@router.post(
    "/{maid_id}",
    response_model=ApiResponse[MaidOutput],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_maid_api_key)],
)
def reserve_maid(
    maid_id: EntityId = Depends(maid_id_path),
    body: Optional[MaidCreateBody] = Body(default=None),
    service: MaidService = Depends(get_maid_service),
):
    """Create a maid under a caller-chosen id; 409 when it is taken."""
    body = body or MaidCreateBody()
    maid = service.create(name=body.name, is_instax_available=body.is_instax_available, maid_id=maid_id)
    return ok(maid, "Maid created successfully.")


@router.patch(
    "/{maid_id}",
    response_model=ApiResponse[MaidOutput],
    dependencies=[Depends(require_maid_api_key)],
)
async def update_maid(
    request: Request,
    maid_id: EntityId = Depends(maid_id_path),
    service: MaidService = Depends(get_maid_service),
    settings: Settings = Depends(get_settings),
):
    """
    Partial update from JSON (name, is_instax_available) or multipart
    (the same fields plus an ``image`` file).
    """
    patch = await maid_patch_from(await read_body(request), settings.max_upload_bytes)
    result = await service.update(maid_id, patch)
    return ok(result.data, "Maid updated successfully." if result.changed else "No changes applied.")


@router.patch(
    "/{maid_id}/active",
    response_model=ApiResponse[MaidOutput],
    dependencies=[Depends(require_maid_api_key)],
)
def set_maid_active(
    body: MaidActiveBody,
    maid_id: EntityId = Depends(maid_id_path),
    service: MaidService = Depends(get_maid_service),
):
    return ok(service.set_active(maid_id, body.is_active), "Maid active flag updated.")


@router.delete(
    "/{maid_id}",
    response_model=ApiResponse[MaidOutput],
    dependencies=[Depends(require_maid_api_key)],
)
async def delete_maid(
    maid_id: EntityId = Depends(maid_id_path),
    service: MaidService = Depends(get_maid_service),
):
    return ok(await service.delete(maid_id), "Maid deleted successfully.")


@router.get(
    "/{maid_id}/users",
    response_model=ApiResponse[list[AssignedUserOutput]],
    dependencies=[Depends(require_maid_api_key)],
)
def list_assigned_users(
    maid_id: EntityId = Depends(maid_id_path),
    status_filter: str = Query(
        default=EngagementFilter.BOTH,
        alias="status",
        description="serving, leaving or both.",
    ),
    service: MaidService = Depends(get_maid_service),
):
    """Valid users seated with the maid, filtered by engagement state."""
    return ok(service.list_assigned_users(maid_id, status_filter.strip().lower()))
