"""
Request body resolution for image-bearing endpoints.

Update endpoints accept either ``application/json`` or
``multipart/form-data``. The body is read once into a tagged variant
(``JsonBody`` or ``FormBody``) and then converted into the normalized patch
struct the service expects. Uploaded files are read into ``ImageUpload``
here and nowhere else.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar, Union

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import FormData, UploadFile

from cafe_api.services.patches import UNSET, MaidPatch, MenuDraft, MenuPatch, UserPatch
from cafe_shared.config.constants import FALSE_STRINGS, TRUE_STRINGS
from cafe_shared.infrastructure.storage import ImageUpload
from cafe_shared.utils.exceptions import ValidationError
from cafe_shared.utils.identifiers import IdentifierStrategy
from cafe_shared.utils.responses import flatten_validation_errors
from cafe_shared.utils.schemas import MaidUpdateBody, MenuUpdateBody, UserUpdateBody

ModelT = TypeVar("ModelT", bound=BaseModel)

_STOCK_RE = re.compile(r"^\d+$")


# =============================================================================
# Body variants
# =============================================================================


@dataclass(frozen=True)
class JsonBody:
    data: Any


@dataclass(frozen=True)
class FormBody:
    form: FormData


RequestBody = Union[JsonBody, FormBody]


def is_multipart(request: Request) -> bool:
    return "multipart/form-data" in request.headers.get("content-type", "").lower()


async def read_body(request: Request) -> RequestBody:
    """Multipart bodies become ``FormBody``; everything else is parsed as JSON."""
    if is_multipart(request):
        return FormBody(await request.form())
    try:
        return JsonBody(await request.json())
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid request body.") from None


async def read_form(request: Request) -> FormData:
    """
    Multipart-only endpoints.

    Raises:
        ValidationError: "Content-Type must be multipart/form-data."
    """
    if not is_multipart(request):
        raise ValidationError("Content-Type must be multipart/form-data.")
    return await request.form()


def validate_model(model: Type[ModelT], data: Any) -> ModelT:
    """Validate a JSON payload, mapping failures to "Invalid request body."."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid request body.",
            details=flatten_validation_errors(exc.errors(include_url=False)),
        ) from None


# =============================================================================
# Field readers
# =============================================================================


def form_text(form: FormData, field: str) -> Optional[str]:
    """String value of ``field``; None when absent or a file."""
    value = form.get(field)
    return value if isinstance(value, str) else None


def form_flag(form: FormData, field: str) -> Optional[bool]:
    raw = form_text(form, field)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in TRUE_STRINGS:
        return True
    if value in FALSE_STRINGS:
        return False
    raise ValidationError(f"Invalid {field} value. Use true or false.", field=field)


def form_stock(form: FormData, field: str = "stock") -> Optional[int]:
    raw = form_text(form, field)
    if raw is None or not raw.strip():
        return None
    if not _STOCK_RE.match(raw.strip()):
        raise ValidationError("Stock must be a non-negative integer.")
    return int(raw.strip())


async def form_image(
    form: FormData,
    field: str,
    max_bytes: int,
    required_message: Optional[str] = None,
) -> Optional[ImageUpload]:
    """
    Read an uploaded image.

    An absent or empty file yields None, or raises ``required_message``
    when one is given.

    Raises:
        ValidationError: Not an image, larger than ``max_bytes``, or missing
            while required.
    """
    value = form.get(field)
    upload: Optional[ImageUpload] = None

    if isinstance(value, UploadFile):
        data = await value.read()
        if data:
            content_type = (value.content_type or "").lower()
            if not content_type.startswith("image/"):
                raise ValidationError(f"{field} must be an image file.", content_type=content_type)
            if len(data) > max_bytes:
                raise ValidationError(
                    f"{field} exceeds the maximum upload size of {max_bytes} bytes.",
                    size=len(data),
                )
            upload = ImageUpload(filename=value.filename or field, content_type=content_type, data=data)

    if upload is None and required_message:
        raise ValidationError(required_message)
    return upload


def _present(value: Any) -> Any:
    return UNSET if value is None else value


# =============================================================================
# Patch builders
# =============================================================================


async def maid_patch_from(body: RequestBody, max_bytes: int) -> MaidPatch:
    if isinstance(body, FormBody):
        name = form_text(body.form, "name")
        patch = MaidPatch(
            name=name.strip() if name and name.strip() else UNSET,
            is_instax_available=_present(form_flag(body.form, "is_instax_available")),
            image=_present(await form_image(body.form, "image", max_bytes)),
        )
        if patch.is_empty():
            raise ValidationError("No updatable fields provided.")
        return patch

    parsed = validate_model(MaidUpdateBody, body.data)
    values = parsed.model_dump(include=parsed.model_fields_set)
    return MaidPatch(**values)


async def menu_patch_from(body: RequestBody, max_bytes: int) -> MenuPatch:
    if isinstance(body, FormBody):
        form = body.form
        name = form_text(form, "name")
        description = form_text(form, "description")
        patch = MenuPatch(
            name=name.strip() if name and name.strip() else UNSET,
            stock=_present(form_stock(form)),
            description=UNSET if description is None else (description.strip() or None),
            image=_present(await form_image(form, "image", max_bytes)),
        )
        if patch.is_empty():
            raise ValidationError("No updatable fields provided.")
        return patch

    parsed = validate_model(MenuUpdateBody, body.data)
    values = parsed.model_dump(include=parsed.model_fields_set)
    return MenuPatch(**values)


async def menu_draft_from(form: FormData, max_bytes: int) -> MenuDraft:
    name = form_text(form, "name")
    if name is None or not name.strip():
        raise ValidationError("Name is required.")

    raw_stock = form_text(form, "stock")
    if raw_stock is None or not raw_stock.strip():
        raise ValidationError("Stock is required.")
    stock = form_stock(form)

    image = await form_image(form, "image", max_bytes, required_message="Image file is required.")
    description = form_text(form, "description")

    return MenuDraft(
        name=name.strip(),
        stock=stock,
        image=image,
        description=(description.strip() or None) if description is not None else None,
    )


def user_patch_from(data: Any, ids: IdentifierStrategy) -> UserPatch:
    parsed = validate_model(UserUpdateBody, data)
    values = parsed.model_dump(include=parsed.model_fields_set)
    for field in ("maid_id", "instax_maid_id"):
        if values.get(field) is not None:
            values[field] = ids.parse_field(values[field], field)
    return UserPatch(**values)


def require_form_text(form: FormData, field: str) -> str:
    value = form_text(form, field)
    if value is None:
        raise ValidationError(f"{field} must be provided.", field=field)
    return value
