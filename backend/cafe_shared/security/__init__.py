"""
Security module: shared-secret header authentication.
"""

from cafe_shared.security.auth import require_admin_api_key, require_maid_api_key, verify_api_key

__all__ = ["require_admin_api_key", "require_maid_api_key", "verify_api_key"]
