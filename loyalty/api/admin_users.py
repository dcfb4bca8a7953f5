"""
Admin user management.

Handles:
- User listing (region-scoped for regional admins)
- Registration approval and rejection
- Invitations (single and bulk)
- Profile edits, role changes and deactivation (full admins)
"""
from flask import Blueprint, g, jsonify, request

from ..middleware.auth import require_admin, require_full_admin
from ..schemas import (
    AdminUserCreateSchema,
    AdminUserUpdateSchema,
    BulkInviteSchema,
    InviteSchema,
    RoleUpdateSchema,
    parse_body,
)
from ..services.invitation_service import invitation_service
from ..services.user_service import user_service

admin_users_bp = Blueprint('admin_users', __name__)


@admin_users_bp.route('', methods=['GET'])
@require_admin
def list_users():
    """
    List users in the admin's scope.

    Query params:
        region: filter by region
        role: filter by role
        include_inactive: false to hide deactivated accounts (default true)
    """
    include_inactive = request.args.get('include_inactive', 'true').lower() != 'false'
    users = user_service.list_users(
        g.current_user,
        region=request.args.get('region'),
        role=request.args.get('role'),
        include_inactive=include_inactive
    )
    return jsonify([u.to_dict(include_admin_fields=True) for u in users])


@admin_users_bp.route('', methods=['POST'])
@require_full_admin
def create_user():
    """
    Create an approved account directly.

    Request body:
        username, email, password, firstName, lastName, country (required)
        role, region, regionCategory, regionSubcategory (optional)
    """
    data = parse_body(AdminUserCreateSchema)
    user = user_service.create_user(data.model_dump(), approved_by=g.current_user.id)
    return jsonify(user.to_dict(include_admin_fields=True)), 201


@admin_users_bp.route('/pending', methods=['GET'])
@require_admin
def pending_users():
    """Self-registered users waiting for approval."""
    users = user_service.list_pending(g.current_user)
    return jsonify([u.to_dict(include_admin_fields=True) for u in users])


@admin_users_bp.route('/<int:user_id>', methods=['PATCH'])
@require_full_admin
def update_user(user_id):
    data = parse_body(AdminUserUpdateSchema)
    user = user_service.update_user(
        g.current_user,
        user_id,
        data.changes(nullable=('region', 'region_category', 'region_subcategory'))
    )
    return jsonify(user.to_dict(include_admin_fields=True))


@admin_users_bp.route('/<int:user_id>/role', methods=['PATCH'])
@require_full_admin
def change_role(user_id):
    """
    Change a user's role.

    Request body:
        role: user | admin | regional-admin | super-admin (required)
        adminRegionId: region config id (regional-admin only)
    """
    data = parse_body(RoleUpdateSchema)
    user = user_service.change_role(g.current_user, user_id, data.role, data.admin_region_id)
    return jsonify(user.to_dict(include_admin_fields=True))


@admin_users_bp.route('/<int:user_id>', methods=['DELETE'])
@require_full_admin
def deactivate_user(user_id):
    """Deactivate an account. Admins cannot deactivate themselves."""
    user_service.deactivate(g.current_user, user_id)
    return jsonify({'message': 'User deactivated'})


@admin_users_bp.route('/<int:user_id>/approve', methods=['PUT'])
@require_admin
def approve_user(user_id):
    """
    Approve a pending registration and send the approval email.

    Returns:
        {message, user, email_sent}; a failed email does not undo the approval
    """
    result = user_service.approve(g.current_user, user_id)
    return jsonify({
        'message': 'User approved',
        'user': result['user'].to_dict(include_admin_fields=True),
        'email_sent': result['email_sent'],
    })


@admin_users_bp.route('/<int:user_id>/reject', methods=['PUT'])
@require_admin
def reject_user(user_id):
    user = user_service.reject(g.current_user, user_id)
    return jsonify({'message': 'User rejected', 'user': user.to_dict(include_admin_fields=True)})


@admin_users_bp.route('/invite', methods=['POST'])
@require_admin
def invite_user():
    """
    Invite a partner by email.

    Request body:
        email, firstName, lastName, country (required)
        region: optional; regional admins always invite into their own region

    Returns:
        Invited user (201) and whether the email went out
    """
    data = parse_body(InviteSchema)
    result = invitation_service.create_invite(g.current_user, data.model_dump())
    return jsonify({
        'message': 'Invitation sent' if result['email_sent'] else 'Invitation created but the email could not be sent',
        'user': result['user'].to_dict(include_admin_fields=True),
        'email_sent': result['email_sent'],
    }), 201


@admin_users_bp.route('/invite-bulk', methods=['POST'])
@require_admin
def invite_bulk():
    """
    Invite several partners at once.

    Request body:
        users: list of invite objects (same fields as /invite)

    Returns:
        {invited, success_count, error_count, errors}
    """
    data = parse_body(BulkInviteSchema)
    result = invitation_service.create_bulk_invites(g.current_user, data.users)
    return jsonify(result)
