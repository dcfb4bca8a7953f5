"""
Tests for deal registration and approval.

Covers:
- POST /api/deals registers a pending deal with 0 points
- Approval credits floor(value / rate) points to the ledger once
- Rejection and double approval are refused
- Admin edits only while pending
- Points recalculation writes adjustment rows
"""
from decimal import Decimal

import pytest

from loyalty.extensions import db
from loyalty.models import Deal, DealStatus, PointsHistory
from loyalty.services.deal_service import deal_service
from loyalty.services.notification_service import notification_service
from loyalty.services.points_config_service import points_config_service
from loyalty.services.points_service import points_service
from loyalty.utils.exceptions import InvalidStatusTransitionError


class TestCreateDeal:
    """Tests for POST /api/deals."""

    def test_create_deal_is_pending_with_no_points(self, client, partner, auth_headers_for):
        response = client.post('/api/deals', headers=auth_headers_for(partner), json={
            'productType': 'software',
            'productName': 'Endpoint Suite',
            'dealValue': '25000.00',
            'closeDate': '2025-01-15T00:00:00',
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['status'] == 'pending'
        assert data['points_earned'] == 0
        assert data['deal_value'] == '25000.00'
        assert data['deal_type'] == 'new_customer'
        assert points_service.get_balance(partner.id) == 0

    def test_client_cannot_set_status_or_points(self, client, partner, auth_headers_for):
        """Server-controlled fields in the body are ignored."""
        response = client.post('/api/deals', headers=auth_headers_for(partner), json={
            'productType': 'hardware',
            'productName': 'Firewall',
            'dealValue': 5000,
            'closeDate': '2025-02-01T00:00:00',
            'status': 'approved',
            'pointsEarned': 999,
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['status'] == 'pending'
        assert data['points_earned'] == 0

    def test_create_deal_validation(self, client, partner, auth_headers_for):
        response = client.post('/api/deals', headers=auth_headers_for(partner), json={
            'productType': 'services',
            'productName': '',
            'dealValue': -5,
        })

        assert response.status_code == 400
        data = response.get_json()
        assert data['code'] == 'VALIDATION_ERROR'
        fields = {error['field'] for error in data['errors']}
        assert {'productType', 'productName', 'dealValue', 'closeDate'} <= fields

    def test_create_deal_requires_auth(self, client):
        response = client.post('/api/deals', json={})
        assert response.status_code == 401

    def test_list_and_recent(self, client, partner, make_deal, auth_headers_for):
        for value in ('1000.00', '2000.00', '3000.00'):
            make_deal(partner, value=value)

        response = client.get('/api/deals', headers=auth_headers_for(partner))
        assert response.status_code == 200
        assert len(response.get_json()) == 3

        response = client.get('/api/deals/recent?limit=2', headers=auth_headers_for(partner))
        assert len(response.get_json()) == 2

    def test_other_partner_cannot_view_deal(self, client, partner, make_user, make_deal, auth_headers_for):
        deal = make_deal(partner)
        other = make_user()

        response = client.get(f'/api/deals/{deal.id}', headers=auth_headers_for(other))
        assert response.status_code == 404


class TestApproveDeal:
    """Tests for deal approval and rejection."""

    def test_approve_credits_points(self, client, admin, partner, make_deal, auth_headers_for):
        deal = make_deal(partner, value='25000.00', product_type='software')

        response = client.post(f'/api/deals/{deal.id}/approve', headers=auth_headers_for(admin))

        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'approved'
        # NOLA default software rate: $1,000 per point
        assert data['points_earned'] == 25
        assert data['approved_by'] == admin.id

        entries = PointsHistory.query.filter_by(user_id=partner.id).all()
        assert len(entries) == 1
        assert entries[0].points == 25
        assert entries[0].deal_id == deal.id
        assert points_service.get_balance(partner.id) == 25

    def test_points_use_region_rates(self, admin, make_user, make_deal):
        points_config_service.update_config('SOLA', {'hardware_rate': 2500})
        partner = make_user(region='SOLA')
        deal = make_deal(partner, value='9999.99', product_type='hardware')

        deal_service.approve(admin, deal.id)

        assert Deal.query.get(deal.id).points_earned == 3

    def test_double_approve_conflicts(self, client, admin, partner, make_deal, auth_headers_for):
        deal = make_deal(partner)
        client.post(f'/api/deals/{deal.id}/approve', headers=auth_headers_for(admin))

        response = client.post(f'/api/deals/{deal.id}/approve', headers=auth_headers_for(admin))

        assert response.status_code == 409
        assert response.get_json()['code'] == 'INVALID_STATUS_TRANSITION'
        assert PointsHistory.query.filter_by(user_id=partner.id).count() == 1

    def test_reject_gives_no_points(self, client, admin, partner, make_deal, auth_headers_for):
        deal = make_deal(partner)

        response = client.post(f'/api/deals/{deal.id}/reject', headers=auth_headers_for(admin))

        assert response.status_code == 200
        assert response.get_json()['status'] == 'rejected'
        assert points_service.get_balance(partner.id) == 0

        response = client.post(f'/api/deals/{deal.id}/approve', headers=auth_headers_for(admin))
        assert response.status_code == 409

    def test_partner_cannot_approve(self, client, partner, make_deal, auth_headers_for):
        deal = make_deal(partner)
        response = client.post(f'/api/deals/{deal.id}/approve', headers=auth_headers_for(partner))
        assert response.status_code == 403

    def test_approval_notifies_user(self, admin, partner, make_deal):
        deal = make_deal(partner)
        deal_service.approve(admin, deal.id)

        stats = points_service.get_user_stats(partner.id)
        assert stats['total_deals'] == 1
        assert stats['pending_deals'] == 0
        assert notification_service.unread_count(partner.id) == 1


class TestAdminDealEdits:
    """Tests for PATCH /api/admin/deals/<id>."""

    def test_edit_pending_deal(self, client, admin, partner, make_deal, auth_headers_for):
        deal = make_deal(partner, value='1000.00')

        response = client.patch(f'/api/admin/deals/{deal.id}', headers=auth_headers_for(admin), json={
            'dealValue': '4000.00',
            'productName': 'Corrected name',
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['deal_value'] == '4000.00'
        assert data['product_name'] == 'Corrected name'
        assert data['status'] == 'pending'

    def test_edit_approved_deal_conflicts(self, admin, partner, make_deal):
        deal = make_deal(partner)
        deal_service.approve(admin, deal.id)

        with pytest.raises(InvalidStatusTransitionError) as exc:
            deal_service.update(admin, deal.id, {'deal_value': Decimal('1.00')})
        assert exc.value.from_status == 'approved'

    def test_status_change_goes_through_approval(self, client, admin, partner, make_deal, auth_headers_for):
        deal = make_deal(partner, value='3000.00')

        response = client.patch(f'/api/admin/deals/{deal.id}', headers=auth_headers_for(admin), json={
            'status': 'approved',
        })

        assert response.status_code == 200
        assert response.get_json()['points_earned'] == 3
        assert points_service.get_balance(partner.id) == 3

    def test_pending_list(self, client, admin, partner, make_deal, auth_headers_for):
        make_deal(partner)
        make_deal(partner, status=DealStatus.REJECTED.value)

        response = client.get('/api/admin/deals/pending', headers=auth_headers_for(admin))

        assert response.status_code == 200
        deals = response.get_json()
        assert len(deals) == 1
        assert deals[0]['user_first_name'] == partner.first_name


class TestRecalculatePoints:
    """Tests for DealService.recalculate_points."""

    def test_recalculation_writes_adjustments(self, admin, partner, make_deal):
        deal = make_deal(partner, value='10000.00', product_type='software')
        deal_service.approve(admin, deal.id)
        assert points_service.get_balance(partner.id) == 10

        points_config_service.update_config('NOLA', {'software_rate': 500})
        result = deal_service.recalculate_points()

        assert result == {'updated_deals': 1, 'points_delta': 10}
        assert points_service.get_balance(partner.id) == 20
        assert PointsHistory.query.filter_by(user_id=partner.id).count() == 2
        db.session.refresh(deal)
        assert deal.points_earned == 20

    def test_recalculation_without_changes(self, admin, partner, make_deal):
        deal = make_deal(partner)
        deal_service.approve(admin, deal.id)

        assert deal_service.recalculate_points() == {'updated_deals': 0, 'points_delta': 0}
