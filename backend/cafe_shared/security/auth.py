"""
Shared-secret authentication for privileged endpoints.

Two tiers exist. Staff endpoints (maid management, user listings, instax)
accept the maid secret or the admin secret; admin endpoints (menus, instax
history) accept only the admin secret. The secret travels in the header
named by ``settings.api_key_header``.

Usage:
    @router.delete("/{maid_id}", dependencies=[Depends(require_maid_api_key)])
    def delete_maid(...): ...
"""

from __future__ import annotations

import hmac

from fastapi import Depends, Request

from cafe_shared.config.constants import ApiTier
from cafe_shared.config.logging import audit_auth_event
from cafe_shared.config.settings import Settings, get_settings
from cafe_shared.utils.exceptions import ConfigurationError, UnauthorizedError


def _matches(provided: str | None, expected: str) -> bool:
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def verify_api_key(
    request: Request,
    settings: Settings,
    tier: str,
) -> None:
    """
    Check the shared-secret header for ``tier``.

    Raises:
        ConfigurationError: No secret accepted by the tier is configured (500).
        UnauthorizedError: Header missing or wrong (401).
    """
    if tier == ApiTier.ADMIN:
        expected = [settings.admin_api_password]
        label = "Admin"
    else:
        expected = [settings.maid_api_password, settings.admin_api_password]
        label = "Maid"

    expected = [secret for secret in expected if secret]
    if not expected:
        raise ConfigurationError(f"{label} API password is not configured on the server.", tier=tier)

    provided = request.headers.get(settings.api_key_header)
    client_ip = request.client.host if request.client else None

    if any(_matches(provided, secret) for secret in expected):
        audit_auth_event("API_KEY_ACCEPTED", tier, path=request.url.path, ip_address=client_ip)
        return

    audit_auth_event(
        "API_KEY_REJECTED",
        tier,
        success=False,
        reason="missing" if not provided else "mismatch",
        path=request.url.path,
        ip_address=client_ip,
    )
    raise UnauthorizedError(header=settings.api_key_header, tier=tier)


def require_maid_api_key(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """FastAPI dependency guarding staff-tier endpoints."""
    verify_api_key(request, settings, ApiTier.MAID)


def require_admin_api_key(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """FastAPI dependency guarding admin-tier endpoints."""
    verify_api_key(request, settings, ApiTier.ADMIN)
