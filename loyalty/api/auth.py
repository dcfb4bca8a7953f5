"""
Authentication API endpoints.
Handles login, self-registration, invite acceptance, JWT tokens, and password reset.
"""
from flask import Blueprint, g, jsonify

from ..middleware.auth import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_bearer_token,
    require_auth,
    revoke_token,
)
from ..models import User
from ..schemas import (
    ForgotPasswordSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    RegisterWithTokenSchema,
    ResetPasswordSchema,
    parse_body,
)
from ..services.auth_service import auth_service
from ..services.invitation_service import invitation_service
from ..utils.errors import ErrorCode, unauthorized
from ..utils.exceptions import InvalidTokenError

auth_bp = Blueprint('auth', __name__)


def _token_response(user: User, status_code: int = 200):
    return jsonify({
        'user': user.to_dict(),
        'access_token': create_access_token(user),
        'refresh_token': create_refresh_token(user),
    }), status_code


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Log in with username or email.

    Request body:
        username: string (required) - username or email
        password: string (required)

    Returns:
        User data and auth tokens
    """
    data = parse_body(LoginSchema)
    user = auth_service.authenticate(data.username, data.password)
    return _token_response(user)


@auth_bp.route('/register', methods=['POST'])
def register():
    """
    Self-register a partner account. The account must be approved by an
    administrator before it can log in.

    Request body:
        username, email, password, firstName, lastName, country (required)
        region: NOLA | SOLA | BRASIL | MEXICO (optional)
    """
    data = parse_body(RegisterSchema)
    user = auth_service.register(data.model_dump())
    return jsonify({
        'message': 'Registration successful. Your account is pending approval by an administrator.',
        'user': user.to_dict(),
    }), 201


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Revoke the presented token. Always succeeds."""
    token = get_bearer_token()
    if token:
        try:
            revoke_token(decode_token(token))
        except ValueError:
            pass  # Already unusable
    return jsonify({'message': 'Logged out successfully'})


@auth_bp.route('/me', methods=['GET'])
@require_auth
def me():
    """Get the current user's profile."""
    return jsonify(g.current_user.to_dict())


@auth_bp.route('/refresh', methods=['POST'])
def refresh():
    """
    Exchange a refresh token for a new access token.

    Request body:
        refresh_token: string (required)
    """
    data = parse_body(RefreshSchema)
    try:
        payload = decode_token(data.refresh_token)
    except ValueError as e:
        return unauthorized(str(e), ErrorCode.INVALID_TOKEN)

    if payload.get('type') != 'refresh':
        return unauthorized('Invalid token type', ErrorCode.INVALID_TOKEN)

    user = User.query.get(payload['user_id'])
    if not user or not user.is_active:
        return unauthorized('User not found or inactive', ErrorCode.INVALID_TOKEN)

    return jsonify({'access_token': create_access_token(user)})


@auth_bp.route('/verify-invite/<token>', methods=['GET'])
def verify_invite(token):
    """
    Check an invitation token before showing the registration form.

    Returns:
        {valid: true, user} or 400 {valid: false, message}
    """
    try:
        user = invitation_service.verify_invite(token)
    except InvalidTokenError as e:
        return jsonify({'valid': False, 'message': e.message, 'code': e.code}), 400

    return jsonify({
        'valid': True,
        'user': {
            'email': user.email,
            'first_name': user.first_name,
            'last_name': user.last_name,
            'country': user.country,
            'region': user.region,
        }
    })


@auth_bp.route('/register-with-token', methods=['POST'])
def register_with_token():
    """
    Complete an invited account.

    Request body:
        inviteToken: string (required)
        username: string (required, min 3)
        password: string (required, min 6)

    Returns:
        User data and auth tokens
    """
    data = parse_body(RegisterWithTokenSchema)
    user = invitation_service.complete_registration(data.invite_token, data.username, data.password)
    return _token_response(user, 201)


@auth_bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    """
    Email a password reset link.

    Always answers 200 so the endpoint cannot be used to discover accounts.
    """
    data = parse_body(ForgotPasswordSchema)
    auth_service.request_password_reset(data.email)
    return jsonify({'message': 'If an account exists with this email, a reset link has been sent.'})


@auth_bp.route('/reset-password', methods=['POST'])
def reset_password():
    """
    Reset the password with a token from the reset email.

    Request body:
        token: string (required)
        password: string (required, min 6)
    """
    data = parse_body(ResetPasswordSchema)
    auth_service.reset_password(data.token, data.password)
    return jsonify({'message': 'Password reset successfully'})
