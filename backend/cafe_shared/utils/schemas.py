"""
Shared Pydantic schemas used across the application.

Output models describe the API shape of each record; body models validate
JSON request payloads before they reach a lifecycle service.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, field_validator, model_validator

from cafe_shared.config.constants import Limits

# =============================================================================
# Common Types
# =============================================================================

OrderStateValue = Literal["pending", "preparing", "served"]
EngagementStateValue = Literal["serving", "leaving"]
EntityIdValue = Union[StrictInt, str]


def _status_text(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("status must not be empty when provided.")
    return value


class _AtLeastOneField(BaseModel):
    """Body model that rejects an empty object."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def _require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided.")
        return self


# =============================================================================
# Maid Schemas
# =============================================================================


class MaidOutput(BaseModel):
    """Maid resource representation."""

    id: EntityIdValue
    name: str
    image_url: Optional[str] = None
    is_active: bool
    is_instax_available: bool


class MaidCreateBody(BaseModel):
    """Payload to create a maid. All fields are optional when the id is reserved."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    is_instax_available: Optional[StrictBool] = None


class MaidUpdateBody(_AtLeastOneField):
    """JSON payload for updating a maid."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    is_instax_available: Optional[StrictBool] = None


class MaidActiveBody(BaseModel):
    """Payload to change the maid active flag."""

    is_active: StrictBool


# =============================================================================
# User Schemas
# =============================================================================


class UserOutput(BaseModel):
    """User (seating record) representation."""

    id: EntityIdValue
    name: Optional[str] = None
    status: Optional[str] = None
    maid_id: Optional[EntityIdValue] = None
    instax_maid_id: Optional[EntityIdValue] = None
    seat_id: Optional[int] = None
    is_valid: bool
    created_at: str
    updated_at: str


class AssignedUserOutput(UserOutput):
    """User as seen by the maid serving them."""

    engagement_state: EngagementStateValue
    latest_instax_id: Optional[int] = None


class UserListOutput(BaseModel):
    users: list[UserOutput]


class UserCreateBody(BaseModel):
    """Payload for registering a user into the cafe."""

    model_config = ConfigDict(extra="ignore")

    seat_id: StrictInt = Field(ge=1)
    maid_id: EntityIdValue
    status: Optional[str] = Field(default=None, max_length=Limits.MAX_STATUS_LENGTH)

    _check_status = field_validator("status")(_status_text)


class UserUpdateBody(_AtLeastOneField):
    """Payload for updating user details. Explicit nulls clear a field."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    maid_id: Optional[EntityIdValue] = None
    instax_maid_id: Optional[EntityIdValue] = None
    seat_id: Optional[StrictInt] = Field(default=None, ge=1)
    status: Optional[str] = Field(default=None, max_length=Limits.MAX_STATUS_LENGTH)
    is_valid: Optional[StrictBool] = None

    _check_status = field_validator("status")(_status_text)

    @model_validator(mode="after")
    def _reject_null_flags(self):
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name must not be null.")
        if "is_valid" in self.model_fields_set and self.is_valid is None:
            raise ValueError("is_valid must not be null.")
        return self


# =============================================================================
# Menu Schemas
# =============================================================================


class MenuOutput(BaseModel):
    """Menu item representation."""

    id: int
    name: str
    description: Optional[str] = None
    stock: int
    image_url: Optional[str] = None
    created_at: str
    updated_at: str


class MenuListOutput(BaseModel):
    menus: list[MenuOutput]


class MenuUpdateBody(_AtLeastOneField):
    """JSON payload for updating a menu item."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    stock: Optional[StrictInt] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)

    @model_validator(mode="after")
    def _reject_null_fields(self):
        for field in ("name", "stock"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} must not be null.")
        return self


# =============================================================================
# Order Schemas
# =============================================================================


class OrderOutput(BaseModel):
    """Order representation."""

    id: int
    user_id: EntityIdValue
    menu_id: int
    state: OrderStateValue
    created_at: str
    updated_at: str


class OrderListOutput(BaseModel):
    orders: list[OrderOutput]


class OrderCreateBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: EntityIdValue
    menu_id: StrictInt = Field(ge=1)


class OrderUpdateBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    state: OrderStateValue


# =============================================================================
# Instax Schemas
# =============================================================================


class InstaxOutput(BaseModel):
    """Instax (instant photo) representation."""

    id: int
    user_id: EntityIdValue
    maid_id: EntityIdValue
    image_url: Optional[str] = None
    created_at: str


class InstaxHistoryOutput(BaseModel):
    """Archived instax image."""

    id: int
    instax_id: int
    user_id: EntityIdValue
    maid_id: EntityIdValue
    image_url: str
    archived_at: str


# =============================================================================
# Health
# =============================================================================


class HealthOutput(BaseModel):
    status: str
    service: str
    environment: str
    database: str
