"""
Shared module for cross-cutting concerns of the cafe backend.

STRUCTURE:
- cafe_shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging, auth audit events
  - constants.py: Order states, engagement states, limits

- cafe_shared.infrastructure: Database, storage, request context
  - db.py: SQLAlchemy sessions, safe_commit()
  - storage.py: Object store adapter, key and URL helpers
  - correlation.py: X-Request-ID middleware and log filter

- cafe_shared.security: Shared-secret header checks
  - auth.py: require_maid_api_key, require_admin_api_key

- cafe_shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - identifiers.py: UUID / integer id strategies
  - responses.py: Success and error envelopes
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from cafe_shared.config.settings import settings
    from cafe_shared.infrastructure.db import get_db
    from cafe_shared.infrastructure.storage import get_object_store
    from cafe_shared.security.auth import require_maid_api_key
    from cafe_shared.utils.exceptions import NotFoundError, ValidationError
"""
