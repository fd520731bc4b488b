"""
API Dependencies
Atlas SSO authentication for employees/admins and API-key authentication for station displays
"""
from typing import Optional

from fastapi import Header
from atams.sso import create_atlas_client, create_auth_dependencies
from atams.exceptions import ForbiddenException
from app.core.config import settings

# Initialize Atlas SSO client using factory
atlas_client = create_atlas_client(settings)

# Create auth dependencies using factory
get_current_user, require_auth, require_min_role_level, require_role_level = create_auth_dependencies(atlas_client)


def require_display_key(x_display_key: Optional[str] = Header(None, alias="X-Display-Key")) -> None:
    """Validate X-Display-Key header against DISPLAY_API_KEY"""
    if not x_display_key or x_display_key != settings.DISPLAY_API_KEY:
        raise ForbiddenException("Invalid display API key")


__all__ = [
    "atlas_client",
    "get_current_user",
    "require_auth",
    "require_min_role_level",
    "require_role_level",
    "require_display_key",
]
