"""
Request middleware: authentication and role checks.
"""
from .auth import (
    create_access_token,
    create_refresh_token,
    decode_token,
    revoke_token,
    get_bearer_token,
    get_current_user,
    require_auth,
    require_role,
    require_admin,
    require_full_admin,
    ensure_region_access,
    ensure_user_access,
)
