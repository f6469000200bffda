"""
Admin router.

Instax history review and cleanup. Every endpoint requires the admin key.
"""

from fastapi import APIRouter, Depends

from cafe_api.routers._common.deps import get_instax_service
from cafe_api.routers._common.params import history_id_path, user_id_path
from cafe_api.services.domain import InstaxService
from cafe_shared.security.auth import require_admin_api_key
from cafe_shared.utils.identifiers import EntityId
from cafe_shared.utils.responses import ApiResponse, ok
from cafe_shared.utils.schemas import InstaxHistoryOutput

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin_api_key)],
)


@router.get("/users/{user_id}/instax-history", response_model=ApiResponse[list[InstaxHistoryOutput]])
def list_instax_history(
    user_id: EntityId = Depends(user_id_path),
    service: InstaxService = Depends(get_instax_service),
):
    """Archived instax images of every instax taken for the user, newest first."""
    return ok(service.list_history_for_user(user_id))


@router.delete("/instax/history/{history_id}", response_model=ApiResponse[InstaxHistoryOutput])
async def delete_instax_history(
    history_id: int = Depends(history_id_path),
    service: InstaxService = Depends(get_instax_service),
):
    return ok(await service.delete_history(history_id), "Instax history deleted successfully.")
