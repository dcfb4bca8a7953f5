"""
Tests for admin reports and CSV exports.
"""
import csv
import io

import pytest

from loyalty.services.deal_service import deal_service
from loyalty.services.redemption_service import redemption_service


@pytest.fixture
def activity(admin, make_user, make_deal, make_reward):
    """Two partners with approved deals and one approved redemption."""
    nola = make_user(username='nola_partner', region='NOLA')
    sola = make_user(username='sola_partner', region='SOLA', country='Chile')

    deal_service.approve(admin, make_deal(nola, value='25000.00', product_type='software').id)
    make_deal(nola, value='1000.00')
    deal_service.approve(admin, make_deal(sola, value='10000.00', product_type='hardware').id)

    reward = make_reward(points_cost=10)
    redemption = redemption_service.redeem(nola, reward.id)
    redemption_service.approve(admin, redemption.id)
    return {'nola': nola, 'sola': sola}


class TestSummary:
    """Tests for GET /api/admin/reports."""

    def test_summary(self, client, admin, activity, auth_headers_for):
        response = client.get('/api/admin/reports', headers=auth_headers_for(admin))

        assert response.status_code == 200
        assert response.get_json() == {
            'user_count': 3,
            'deal_count': 2,
            'total_revenue': 35000.0,
            'redeemed_rewards': 1,
        }

    def test_summary_by_region(self, client, admin, activity, auth_headers_for):
        response = client.get('/api/admin/reports?region=NOLA', headers=auth_headers_for(admin))

        data = response.get_json()
        assert data['user_count'] == 1
        assert data['deal_count'] == 1
        assert data['total_revenue'] == 25000.0
        assert data['redeemed_rewards'] == 1

    def test_summary_by_country(self, client, admin, activity, auth_headers_for):
        response = client.get('/api/admin/reports?country=Chile', headers=auth_headers_for(admin))

        data = response.get_json()
        assert data['user_count'] == 1
        assert data['total_revenue'] == 10000.0
        assert data['redeemed_rewards'] == 0

    def test_date_range_excludes_activity(self, client, admin, activity, auth_headers_for):
        response = client.get('/api/admin/reports?startDate=2000-01-01&endDate=2000-12-31',
                              headers=auth_headers_for(admin))

        data = response.get_json()
        assert data['deal_count'] == 0
        assert data['redeemed_rewards'] == 0

    def test_invalid_date(self, client, admin, auth_headers_for):
        response = client.get('/api/admin/reports?startDate=yesterday', headers=auth_headers_for(admin))

        assert response.status_code == 400
        assert response.get_json()['errors'][0]['field'] == 'startDate'

    def test_regional_admin_forbidden(self, client, regional_admin, auth_headers_for):
        response = client.get('/api/admin/reports', headers=auth_headers_for(regional_admin))
        assert response.status_code == 403


class TestRankings:
    """Tests for ranking and per-user reports."""

    def test_user_ranking_counts_earned_points(self, client, admin, activity, auth_headers_for):
        response = client.get('/api/admin/reports/user-ranking', headers=auth_headers_for(admin))

        assert response.status_code == 200
        rows = response.get_json()
        assert [r['username'] for r in rows] == ['nola_partner', 'sola_partner']
        # Redemption debits do not lower the ranking
        assert rows[0]['total_points'] == 25
        assert rows[0]['total_deals'] == 1
        assert rows[0]['total_sales'] == 25000.0
        assert rows[1]['total_points'] == 2

    def test_user_ranking_by_region(self, client, admin, activity, auth_headers_for):
        response = client.get('/api/admin/reports/user-ranking?region=SOLA', headers=auth_headers_for(admin))
        assert [r['username'] for r in response.get_json()] == ['sola_partner']

    def test_deals_per_user(self, client, admin, activity, auth_headers_for):
        response = client.get('/api/admin/reports/deals-per-user', headers=auth_headers_for(admin))

        rows = response.get_json()
        assert rows[0]['username'] == 'nola_partner'
        assert rows[0]['average_deal_size'] == 25000.0
        assert rows[1]['total_sales'] == 10000.0

    def test_reward_redemptions(self, client, admin, activity, auth_headers_for):
        response = client.get('/api/admin/reports/reward-redemptions', headers=auth_headers_for(admin))

        rows = response.get_json()
        assert len(rows) == 1
        assert rows[0]['username'] == 'nola_partner'
        assert rows[0]['status'] == 'approved'
        assert rows[0]['points_cost'] == 10


class TestExports:
    """CSV exports."""

    def test_user_ranking_export(self, client, admin, activity, auth_headers_for):
        response = client.get('/api/admin/reports/user-ranking/export', headers=auth_headers_for(admin))

        assert response.status_code == 200
        assert response.mimetype == 'text/csv'
        assert response.headers['Content-Disposition'].startswith('attachment; filename=user_ranking_')

        rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
        assert rows[0][:3] == ['User ID', 'Username', 'First Name']
        assert rows[1][1] == 'nola_partner'
        assert len(rows) == 3

    def test_redemptions_export(self, client, admin, activity, auth_headers_for):
        response = client.get('/api/admin/reports/reward-redemptions/export', headers=auth_headers_for(admin))

        rows = list(csv.DictReader(io.StringIO(response.get_data(as_text=True))))
        assert rows[0]['Reward'] == 'Reward 10'
        assert rows[0]['Status'] == 'approved'

    def test_deals_export_when_empty(self, client, admin, auth_headers_for):
        response = client.get('/api/admin/reports/deals-per-user/export', headers=auth_headers_for(admin))

        rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
        assert rows == [['User ID', 'Username', 'First Name', 'Last Name', 'Email', 'Country', 'Region',
                         'Total Deals', 'Total Sales', 'Average Deal Size']]
