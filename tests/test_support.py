"""
Tests for support tickets and in-app notifications.
"""
from unittest.mock import patch

import pytest

from loyalty.extensions import db
from loyalty.models import SupportTicket, TicketStatus
from loyalty.services.notification_service import notification_service
from loyalty.services.support_service import support_service


@pytest.fixture
def ticket(partner):
    return support_service.create_ticket(partner, {
        'subject': 'Missing points',
        'message': 'My January deal was approved but I see no points.',
    })


class TestCreateTicket:
    """Tests for POST /api/support-tickets."""

    def test_create_ticket(self, client, partner, auth_headers_for):
        response = client.post('/api/support-tickets', headers=auth_headers_for(partner), json={
            'subject': 'Cannot redeem',
            'message': 'The redeem button does nothing for me.',
            'priority': 'high',
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['status'] == 'open'
        assert data['priority'] == 'high'
        assert data['user_id'] == partner.id

    def test_default_priority(self, ticket):
        assert ticket.priority == 'medium'

    def test_validation(self, client, partner, auth_headers_for):
        response = client.post('/api/support-tickets', headers=auth_headers_for(partner), json={
            'subject': 'Hi',
            'message': 'short',
            'priority': 'urgent',
        })

        assert response.status_code == 400
        fields = {error['field'] for error in response.get_json()['errors']}
        assert fields == {'subject', 'message', 'priority'}

    def test_admins_are_emailed(self, partner, admin, regional_admin):
        with patch('loyalty.services.support_service.email_service') as mock_email:
            support_service.create_ticket(partner, {
                'subject': 'Missing points',
                'message': 'My January deal was approved but I see no points.',
            })

        admins = mock_email.send_support_ticket_to_admins.call_args[0][0]
        assert {a.id for a in admins} == {admin.id, regional_admin.id}

    def test_user_lists_own_tickets(self, client, partner, make_user, ticket, auth_headers_for):
        other = make_user()

        response = client.get('/api/support-tickets', headers=auth_headers_for(partner))
        assert [t['id'] for t in response.get_json()] == [ticket.id]

        response = client.get('/api/support-tickets', headers=auth_headers_for(other))
        assert response.get_json() == []


class TestUpdateTicket:
    """Tests for PATCH /api/admin/support-tickets/<id>."""

    def test_first_reply_moves_to_in_progress(self, client, admin, ticket, auth_headers_for):
        response = client.patch(f'/api/admin/support-tickets/{ticket.id}', headers=auth_headers_for(admin), json={
            'adminResponse': 'Looking into it.',
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'in_progress'
        assert data['admin_response'] == 'Looking into it.'
        assert data['responded_by'] == admin.id
        assert notification_service.unread_count(ticket.user_id) == 1

    def test_resolve_and_close(self, client, admin, ticket, auth_headers_for):
        url = f'/api/admin/support-tickets/{ticket.id}'

        response = client.patch(url, headers=auth_headers_for(admin), json={'status': 'resolved'})
        assert response.get_json()['status'] == 'resolved'

        response = client.patch(url, headers=auth_headers_for(admin), json={'status': 'closed'})
        assert response.get_json()['status'] == 'closed'

    def test_closed_is_terminal(self, client, admin, ticket, auth_headers_for):
        url = f'/api/admin/support-tickets/{ticket.id}'
        client.patch(url, headers=auth_headers_for(admin), json={'status': 'closed'})

        response = client.patch(url, headers=auth_headers_for(admin), json={'status': 'open'})

        assert response.status_code == 409
        assert SupportTicket.query.get(ticket.id).status == TicketStatus.CLOSED.value

    def test_in_progress_cannot_reopen(self, client, admin, ticket, auth_headers_for):
        url = f'/api/admin/support-tickets/{ticket.id}'
        client.patch(url, headers=auth_headers_for(admin), json={'status': 'in_progress'})

        response = client.patch(url, headers=auth_headers_for(admin), json={'status': 'open'})
        assert response.status_code == 409

    def test_resolved_cannot_go_back_to_in_progress(self, client, admin, ticket, auth_headers_for):
        url = f'/api/admin/support-tickets/{ticket.id}'
        client.patch(url, headers=auth_headers_for(admin), json={'status': 'resolved'})

        response = client.patch(url, headers=auth_headers_for(admin), json={'status': 'in_progress'})

        assert response.status_code == 409
        assert SupportTicket.query.get(ticket.id).status == TicketStatus.RESOLVED.value

    def test_assign_and_unassign(self, client, admin, ticket, auth_headers_for):
        url = f'/api/admin/support-tickets/{ticket.id}'

        response = client.patch(url, headers=auth_headers_for(admin), json={'assignedTo': admin.id})
        assert response.get_json()['assigned_to'] == admin.id

        response = client.patch(url, headers=auth_headers_for(admin), json={'assignedTo': None})
        assert response.get_json()['assigned_to'] is None

    def test_regional_admin_scope(self, client, make_user, regional_admin, auth_headers_for):
        sola_user = make_user(region='SOLA')
        sola_ticket = support_service.create_ticket(sola_user, {
            'subject': 'Question about rates',
            'message': 'How are hardware points computed?',
        })

        response = client.get('/api/admin/support-tickets', headers=auth_headers_for(regional_admin))
        assert response.get_json() == []

        response = client.patch(f'/api/admin/support-tickets/{sola_ticket.id}',
                                headers=auth_headers_for(regional_admin), json={'status': 'resolved'})
        assert response.status_code == 403

    def test_filter_by_status(self, client, admin, ticket, auth_headers_for):
        response = client.get('/api/admin/support-tickets?status=closed', headers=auth_headers_for(admin))
        assert response.get_json() == []

        response = client.get('/api/admin/support-tickets?status=open', headers=auth_headers_for(admin))
        assert [t['id'] for t in response.get_json()] == [ticket.id]


class TestNotifications:
    """Tests for /api/notifications."""

    def test_list_and_mark_read(self, client, partner, auth_headers_for):
        first = notification_service.notify(partner.id, 'One', 'First message')
        notification_service.notify(partner.id, 'Two', 'Second message')
        db.session.commit()

        response = client.get('/api/notifications', headers=auth_headers_for(partner))
        data = response.get_json()
        assert data['unread_count'] == 2
        assert len(data['notifications']) == 2

        response = client.post(f'/api/notifications/{first.id}/read', headers=auth_headers_for(partner))
        assert response.get_json()['is_read'] is True

        response = client.get('/api/notifications?unread_only=true', headers=auth_headers_for(partner))
        data = response.get_json()
        assert data['unread_count'] == 1
        assert [n['title'] for n in data['notifications']] == ['Two']

        response = client.post('/api/notifications/read-all', headers=auth_headers_for(partner))
        assert response.get_json() == {'updated': 1}

    def test_cannot_read_other_users_notification(self, client, partner, make_user, auth_headers_for):
        other = make_user()
        notification = notification_service.notify(other.id, 'Private', 'Not yours')
        db.session.commit()

        response = client.post(f'/api/notifications/{notification.id}/read', headers=auth_headers_for(partner))
        assert response.status_code == 404
