"""
Instax router.

Staff attach instant photos to seated users. Every endpoint is multipart
except the lookup; the photo travels in the ``instax`` field.
"""

from fastapi import APIRouter, Depends, Request, status

from cafe_api.routers._common.deps import get_instax_service
from cafe_api.routers._common.forms import form_image, read_form, require_form_text
from cafe_api.routers._common.params import instax_id_path
from cafe_api.services.domain import InstaxService
from cafe_shared.config.settings import Settings, get_settings
from cafe_shared.security.auth import require_maid_api_key
from cafe_shared.utils.identifiers import get_identifier_strategy, positive_int_ids
from cafe_shared.utils.responses import ApiResponse, ok
from cafe_shared.utils.schemas import InstaxOutput

router = APIRouter(
    prefix="/api/instax",
    tags=["instax"],
    dependencies=[Depends(require_maid_api_key)],
)

INSTAX_FIELD = "instax"
INSTAX_REQUIRED = "instax file is required."


@router.get("/{instax_id}", response_model=ApiResponse[InstaxOutput])
def get_instax(
    instax_id: int = Depends(instax_id_path),
    service: InstaxService = Depends(get_instax_service),
):
    return ok(service.get(instax_id))


@router.post("", response_model=ApiResponse[InstaxOutput], status_code=status.HTTP_201_CREATED)
async def create_instax(
    request: Request,
    service: InstaxService = Depends(get_instax_service),
    settings: Settings = Depends(get_settings),
):
    """Multipart fields: ``user_id``, ``maid_id`` and the ``instax`` file."""
    form = await read_form(request)
    ids = get_identifier_strategy()
    user_id = ids.parse_field(require_form_text(form, "user_id"), "user_id")
    maid_id = ids.parse_field(require_form_text(form, "maid_id"), "maid_id")
    image = await form_image(form, INSTAX_FIELD, settings.max_upload_bytes, required_message=INSTAX_REQUIRED)

    return ok(await service.create(user_id, maid_id, image), "Instax created successfully.")


@router.post("/by-seat", response_model=ApiResponse[InstaxOutput], status_code=status.HTTP_201_CREATED)
async def create_instax_by_seat(
    request: Request,
    service: InstaxService = Depends(get_instax_service),
    settings: Settings = Depends(get_settings),
):
    """Same as create, but the user is whoever currently sits at ``seat_id``."""
    form = await read_form(request)
    seat_id = positive_int_ids.parse_field(require_form_text(form, "seat_id"), "seat_id")
    maid_id = get_identifier_strategy().parse_field(require_form_text(form, "maid_id"), "maid_id")
    image = await form_image(form, INSTAX_FIELD, settings.max_upload_bytes, required_message=INSTAX_REQUIRED)

    return ok(await service.create_by_seat(seat_id, maid_id, image), "Instax created successfully.")


@router.patch("", response_model=ApiResponse[InstaxOutput])
async def update_instax(
    request: Request,
    service: InstaxService = Depends(get_instax_service),
    settings: Settings = Depends(get_settings),
):
    """Replace the photo of ``instax_id``; the previous image goes to history."""
    form = await read_form(request)
    instax_id = positive_int_ids.parse_field(require_form_text(form, "instax_id"), "instax_id")
    image = await form_image(form, INSTAX_FIELD, settings.max_upload_bytes, required_message=INSTAX_REQUIRED)

    return ok(await service.update(instax_id, image), "Instax updated successfully.")
