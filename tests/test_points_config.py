"""
Tests for the per-region points configuration.
"""
from datetime import date
from decimal import Decimal

import pytest

from loyalty.models import PointsConfig
from loyalty.services.points_config_service import (
    calculate_deal_points,
    is_redemption_open,
    normalize_region,
    points_config_service,
)
from loyalty.utils.exceptions import ValidationError


class TestCalculateDealPoints:
    """Tests for calculate_deal_points."""

    def test_default_rates(self, app):
        assert calculate_deal_points(Decimal('25000'), 'software', 'NOLA') == 25
        assert calculate_deal_points(Decimal('24999.99'), 'hardware', 'NOLA') == 4
        assert calculate_deal_points(Decimal('9999'), 'equipment', 'NOLA') == 0

    def test_region_is_case_insensitive(self, app):
        assert calculate_deal_points(Decimal('3000'), 'software', 'nola') == 3

    def test_unknown_product_type(self, app):
        with pytest.raises(ValidationError):
            calculate_deal_points(Decimal('3000'), 'services', 'NOLA')

    def test_configured_rates(self, app):
        points_config_service.update_config('MEXICO', {'software_rate': 250})
        assert calculate_deal_points(Decimal('1000'), 'software', 'MEXICO') == 4
        # Other regions keep the defaults
        assert calculate_deal_points(Decimal('1000'), 'software', 'NOLA') == 1

    def test_unknown_region(self, app):
        with pytest.raises(ValidationError):
            normalize_region('EUROPE')


class TestRedemptionWindow:

    def test_open_without_dates(self, app):
        assert is_redemption_open('NOLA') is True

    def test_window_bounds(self, app):
        points_config_service.update_config('SOLA', {
            'redemption_start_date': date(2025, 3, 1),
            'redemption_end_date': date(2025, 3, 31),
        })
        assert is_redemption_open('SOLA', date(2025, 2, 28)) is False
        assert is_redemption_open('SOLA', date(2025, 3, 1)) is True
        assert is_redemption_open('SOLA', date(2025, 3, 31)) is True
        assert is_redemption_open('SOLA', date(2025, 4, 1)) is False


class TestPointsConfigApi:
    """Tests for /api/admin/points-config and /api/points-config."""

    def test_get_defaults_for_unconfigured_region(self, client, admin, auth_headers_for):
        response = client.get('/api/admin/points-config?region=brasil', headers=auth_headers_for(admin))

        assert response.status_code == 200
        data = response.get_json()
        assert data['id'] is None
        assert data['region'] == 'BRASIL'
        assert data['software_rate'] == 1000
        assert data['hardware_rate'] == 5000
        assert data['equipment_rate'] == 10000

    def test_update_creates_row(self, client, admin, auth_headers_for):
        response = client.patch('/api/admin/points-config?region=NOLA', headers=auth_headers_for(admin), json={
            'softwareRate': 800,
            'redemptionStartDate': '2025-11-01',
            'redemptionEndDate': '2026-04-30',
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['software_rate'] == 800
        assert data['hardware_rate'] == 5000
        assert data['redemption_start_date'] == '2025-11-01'
        assert data['updated_by'] == admin.id
        assert PointsConfig.query.filter_by(region='NOLA').count() == 1

    def test_update_rejects_invalid_rates(self, client, admin, auth_headers_for):
        response = client.patch('/api/admin/points-config?region=NOLA', headers=auth_headers_for(admin), json={
            'softwareRate': 0,
            'grandPrizeThreshold': 20_000_000,
        })

        assert response.status_code == 400
        fields = {error['field'] for error in response.get_json()['errors']}
        assert fields == {'softwareRate', 'grandPrizeThreshold'}

    def test_update_rejects_end_before_start(self, client, admin, auth_headers_for):
        response = client.patch('/api/admin/points-config?region=NOLA', headers=auth_headers_for(admin), json={
            'redemptionStartDate': '2025-11-01',
            'redemptionEndDate': '2025-10-01',
        })
        assert response.status_code == 400

    def test_partial_update_cannot_invert_window(self, client, admin, auth_headers_for):
        points_config_service.update_config('NOLA', {
            'redemption_start_date': date(2025, 11, 1),
            'redemption_end_date': date(2026, 4, 30),
        })

        response = client.patch('/api/admin/points-config?region=NOLA', headers=auth_headers_for(admin), json={
            'redemptionEndDate': '2025-01-01',
        })

        assert response.status_code == 400
        assert response.get_json()['errors'][0]['field'] == 'redemption_end_date'
        assert points_config_service.get_config('NOLA')['redemption_end_date'] == '2026-04-30'

    def test_unknown_region(self, client, admin, auth_headers_for):
        response = client.get('/api/admin/points-config?region=ASIA', headers=auth_headers_for(admin))
        assert response.status_code == 400

    def test_regional_admin_defaults_to_own_region(self, client, regional_admin, auth_headers_for):
        response = client.get('/api/admin/points-config', headers=auth_headers_for(regional_admin))

        assert response.status_code == 200
        assert response.get_json()['region'] == 'NOLA'

    def test_regional_admin_cannot_touch_other_region(self, client, regional_admin, auth_headers_for):
        response = client.patch('/api/admin/points-config?region=SOLA', headers=auth_headers_for(regional_admin),
                                json={'softwareRate': 1})

        assert response.status_code == 403
        assert PointsConfig.query.filter_by(region='SOLA').count() == 0

    def test_partner_reads_own_region(self, client, partner, auth_headers_for):
        points_config_service.update_config('NOLA', {'grand_prize_threshold': 75000})

        response = client.get('/api/points-config', headers=auth_headers_for(partner))

        assert response.status_code == 200
        assert response.get_json()['grand_prize_threshold'] == 75000

    def test_partner_without_region(self, client, make_user, auth_headers_for):
        user = make_user(region=None)
        response = client.get('/api/points-config', headers=auth_headers_for(user))
        assert response.status_code == 404

    def test_partner_cannot_edit(self, client, partner, auth_headers_for):
        response = client.patch('/api/admin/points-config?region=NOLA', headers=auth_headers_for(partner),
                                json={'softwareRate': 1})
        assert response.status_code == 403
