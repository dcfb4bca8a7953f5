"""
Support ticket endpoints for partners and admins.
"""
from flask import Blueprint, g, jsonify, request

from ..middleware.auth import require_admin, require_auth
from ..schemas import SupportTicketCreateSchema, SupportTicketUpdateSchema, parse_body
from ..services.support_service import support_service

support_bp = Blueprint('support', __name__)
admin_support_bp = Blueprint('admin_support', __name__)


@support_bp.route('', methods=['POST'])
@require_auth
def create_ticket():
    """
    Open a support ticket. Admins responsible for the user's region are emailed.

    Request body:
        subject: string (required, min 5)
        message: string (required, min 10)
        priority: low | medium | high (default medium)
    """
    data = parse_body(SupportTicketCreateSchema)
    ticket = support_service.create_ticket(g.current_user, data.model_dump())
    return jsonify(ticket.to_dict()), 201


@support_bp.route('', methods=['GET'])
@require_auth
def list_tickets():
    tickets = support_service.list_for_user(g.current_user.id)
    return jsonify([t.to_dict() for t in tickets])


@admin_support_bp.route('', methods=['GET'])
@require_admin
def admin_list_tickets():
    """
    List tickets in the admin's scope.

    Query params:
        status: open | in_progress | resolved | closed
    """
    tickets = support_service.list_for_admin(g.current_user, status=request.args.get('status'))
    return jsonify([t.to_dict(include_user=True) for t in tickets])


@admin_support_bp.route('/<int:ticket_id>', methods=['PATCH'])
@require_admin
def admin_update_ticket(ticket_id):
    """
    Update a ticket.

    Request body:
        status: next status (open -> in_progress -> resolved -> closed)
        adminResponse: reply shown to the user
        priority: low | medium | high
        assignedTo: admin user id (null to unassign)
    """
    data = parse_body(SupportTicketUpdateSchema)
    ticket = support_service.update_ticket(g.current_user, ticket_id, data.changes(nullable=('assigned_to',)))
    return jsonify(ticket.to_dict(include_user=True))
