"""
Bearer-token authentication and role gating.

Access and refresh tokens are PyJWT HS256 tokens carrying ``user_id``,
``role``, ``type`` and a ``jti``. Logging out revokes the token's ``jti`` in
the cache until the token would have expired anyway.
"""
import time
import uuid
from datetime import datetime, timedelta
from functools import wraps
from typing import Optional

import jwt
from flask import current_app, g, request

from ..models import User, ADMIN_ROLES, FULL_ADMIN_ROLES
from ..utils.cache import cache, cache_key
from ..utils.errors import ErrorCode, forbidden, unauthorized
from ..utils.exceptions import AuthorizationError


def _encode(user: User, token_type: str, lifetime: timedelta) -> str:
    now = datetime.utcnow()
    payload = {
        'user_id': user.id,
        'role': user.role,
        'type': token_type,
        'jti': uuid.uuid4().hex,
        'iat': now,
        'exp': now + lifetime,
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET_KEY'],
        algorithm=current_app.config['JWT_ALGORITHM'],
    )


def create_access_token(user: User) -> str:
    """Create a short-lived access token."""
    hours = current_app.config['JWT_ACCESS_EXPIRY_HOURS']
    return _encode(user, 'access', timedelta(hours=hours))


def create_refresh_token(user: User) -> str:
    """Create a long-lived refresh token."""
    days = current_app.config['JWT_REFRESH_EXPIRY_DAYS']
    return _encode(user, 'refresh', timedelta(days=days))


def decode_token(token: str) -> dict:
    """Decode and verify a JWT token. Raises ValueError when unusable."""
    try:
        payload = jwt.decode(
            token,
            current_app.config['JWT_SECRET_KEY'],
            algorithms=[current_app.config['JWT_ALGORITHM']],
        )
    except jwt.ExpiredSignatureError:
        raise ValueError('Token has expired')
    except jwt.InvalidTokenError:
        raise ValueError('Invalid token')

    if is_token_revoked(payload.get('jti')):
        raise ValueError('Token has been revoked')
    return payload


def revoke_token(payload: dict) -> None:
    """Blocklist a decoded token until its natural expiry."""
    jti = payload.get('jti')
    if not jti:
        return
    remaining = int(payload.get('exp', 0) - time.time())
    # SimpleCache treats 0 as "never expire", so keep at least one second
    cache.set(cache_key('revoked', jti=jti), True, timeout=max(remaining, 1))


def is_token_revoked(jti: Optional[str]) -> bool:
    if not jti:
        return False
    return bool(cache.get(cache_key('revoked', jti=jti)))


def get_bearer_token() -> Optional[str]:
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    return auth_header.split(' ', 1)[1].strip() or None


def get_current_user() -> Optional[User]:
    """Get the current user from the Authorization header, or None."""
    token = get_bearer_token()
    if not token:
        return None

    try:
        payload = decode_token(token)
    except ValueError:
        return None

    if payload.get('type') != 'access':
        return None

    g.token_payload = payload
    return User.query.get(payload['user_id'])


def require_auth(f):
    """
    Decorator requiring a valid access token for an active user.

    Sets g.current_user.

    Usage:
        @require_auth
        def my_endpoint():
            user = g.current_user
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_current_user()
        if not user:
            return unauthorized('Not authenticated')
        if not user.is_active:
            return unauthorized('Account inactive', ErrorCode.ACCOUNT_INACTIVE)

        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles: str):
    """
    Decorator requiring one of ``roles``. Unauthenticated callers get 401,
    authenticated callers without the role get 403.
    """
    def decorator(f):
        @wraps(f)
        @require_auth
        def decorated_function(*args, **kwargs):
            if g.current_user.role not in roles:
                return forbidden('You do not have permission to perform this action')
            return f(*args, **kwargs)

        return decorated_function

    return decorator


require_admin = require_role(*ADMIN_ROLES)
require_full_admin = require_role(*FULL_ADMIN_ROLES)


def ensure_region_access(admin: User, region: Optional[str]) -> None:
    """Raise AuthorizationError when a region-scoped admin reaches outside their region."""
    scope = admin.scope_region
    if scope is not None and region != scope:
        raise AuthorizationError('You can only manage records in your assigned region')


def ensure_user_access(admin: User, target: User) -> None:
    ensure_region_access(admin, target.region)
