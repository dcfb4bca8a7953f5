"""
Tests for region configs, monthly prizes and seeding.
"""
from datetime import date

from loyalty.models import MonthlyRegionPrize, RegionConfig, User, UserRole
from loyalty.services.region_service import (
    DEFAULT_MONTHLY_PRIZES,
    DEFAULT_REGION_CONFIGS,
    current_season_year,
    region_service,
)


class TestSeasonYear:

    def test_november_starts_season(self):
        assert current_season_year(date(2025, 11, 3)) == 2025
        assert current_season_year(date(2025, 12, 31)) == 2025

    def test_spring_belongs_to_previous_season(self):
        assert current_season_year(date(2026, 1, 1)) == 2025
        assert current_season_year(date(2026, 4, 30)) == 2025
        assert current_season_year(date(2026, 10, 31)) == 2025


class TestSeeding:
    """Tests for RegionService.seed_defaults."""

    def test_seed_creates_configs_and_prizes(self, app):
        result = region_service.seed_defaults(2025)

        assert result == {
            'configs': len(DEFAULT_REGION_CONFIGS),
            'prizes': len(DEFAULT_REGION_CONFIGS) * len(DEFAULT_MONTHLY_PRIZES),
        }
        config = RegionConfig.query.filter_by(name='NOLA MSSP').one()
        years = {p.month: p.year for p in config.prizes}
        assert years[11] == 2025
        assert years[12] == 2025
        assert years[1] == 2026
        assert years[4] == 2026

    def test_seed_is_idempotent(self, app):
        region_service.seed_defaults(2025)

        assert region_service.seed_defaults(2025) == {'configs': 0, 'prizes': 0}
        assert RegionConfig.query.count() == len(DEFAULT_REGION_CONFIGS)

    def test_assign_regional_admins(self, app, make_user):
        region_service.seed_defaults(2025)
        make_user(username='admin_nola', email='admin@nola.com', role=UserRole.USER.value)

        results = {r['email']: r for r in region_service.assign_regional_admins()}

        assert results['admin@nola.com']['assigned'] is True
        assert results['admin@sola.com'] == {
            'email': 'admin@sola.com', 'region': 'SOLA', 'assigned': False, 'reason': 'User not found',
        }
        config = RegionConfig.query.filter_by(region='NOLA').order_by(RegionConfig.id).first()
        user = User.query.filter_by(email='admin@nola.com').one()
        assert user.admin_region_id == config.id
        assert user.role == UserRole.REGIONAL_ADMIN.value
        assert user.scope_region == 'NOLA'


class TestRegionConfigApi:
    """Tests for /api/admin/region-configs and /api/admin/regions."""

    def test_list_regions(self, client, admin, auth_headers_for):
        response = client.get('/api/admin/regions', headers=auth_headers_for(admin))

        assert response.get_json() == {
            'regions': ['NOLA', 'SOLA', 'BRASIL', 'MEXICO'],
            'categories': ['ENTERPRISE', 'SMB', 'MSSP'],
        }

    def test_seed_endpoint(self, client, admin, auth_headers_for):
        response = client.post('/api/admin/region-configs/seed?season_year=2024', headers=auth_headers_for(admin))

        assert response.status_code == 200
        assert response.get_json()['configs'] == len(DEFAULT_REGION_CONFIGS)
        assert MonthlyRegionPrize.query.filter_by(month=1, year=2025).count() == len(DEFAULT_REGION_CONFIGS)

    def test_create_and_update_config(self, client, admin, auth_headers_for):
        response = client.post('/api/admin/region-configs', headers=auth_headers_for(admin), json={
            'region': 'SOLA',
            'category': 'MSSP',
            'name': 'SOLA MSSP',
            'monthlyGoalTarget': 4,
        })
        assert response.status_code == 201
        config_id = response.get_json()['id']

        response = client.patch(f'/api/admin/region-configs/{config_id}', headers=auth_headers_for(admin), json={
            'renewalGoalRate': 2500,
            'monthlyGoalTarget': None,
        })
        data = response.get_json()
        assert data['renewal_goal_rate'] == 2500
        assert data['monthly_goal_target'] is None
        assert data['name'] == 'SOLA MSSP'

    def test_duplicate_config(self, client, admin, auth_headers_for):
        body = {'region': 'SOLA', 'category': 'MSSP', 'name': 'SOLA MSSP'}
        client.post('/api/admin/region-configs', headers=auth_headers_for(admin), json=body)

        response = client.post('/api/admin/region-configs', headers=auth_headers_for(admin), json=body)

        assert response.status_code == 409

    def test_filter_by_region(self, client, admin, auth_headers_for):
        region_service.seed_defaults(2025)

        response = client.get('/api/admin/region-configs?region=brasil', headers=auth_headers_for(admin))

        assert {c['region'] for c in response.get_json()} == {'BRASIL'}


class TestMonthlyPrizeApi:
    """Tests for /api/admin/monthly-prizes."""

    def test_prize_lifecycle(self, client, admin, auth_headers_for):
        config = region_service.create_config({'region': 'NOLA', 'category': 'SMB', 'name': 'NOLA SMB'})

        response = client.post('/api/admin/monthly-prizes', headers=auth_headers_for(admin), json={
            'regionConfigId': config.id,
            'month': 2,
            'year': 2026,
            'prizeName': 'Jersey',
            'goalTarget': 6,
        })
        assert response.status_code == 201
        prize = response.get_json()
        assert prize['region'] == 'NOLA'

        response = client.patch(f"/api/admin/monthly-prizes/{prize['id']}", headers=auth_headers_for(admin),
                                json={'prizeName': 'Signed jersey'})
        assert response.get_json()['prize_name'] == 'Signed jersey'

        response = client.get('/api/admin/monthly-prizes?month=2&year=2026', headers=auth_headers_for(admin))
        assert len(response.get_json()) == 1

        client.delete(f"/api/admin/monthly-prizes/{prize['id']}", headers=auth_headers_for(admin))
        response = client.get('/api/admin/monthly-prizes', headers=auth_headers_for(admin))
        assert response.get_json() == []
        response = client.get('/api/admin/monthly-prizes?include_inactive=true', headers=auth_headers_for(admin))
        assert response.get_json()[0]['is_active'] is False

    def test_prize_needs_existing_config(self, client, admin, auth_headers_for):
        response = client.post('/api/admin/monthly-prizes', headers=auth_headers_for(admin), json={
            'regionConfigId': 999, 'month': 2, 'year': 2026, 'prizeName': 'Jersey',
        })
        assert response.status_code == 404

    def test_invalid_month(self, client, admin, auth_headers_for):
        response = client.post('/api/admin/monthly-prizes', headers=auth_headers_for(admin), json={
            'regionConfigId': 1, 'month': 13, 'year': 2026, 'prizeName': 'Jersey',
        })
        assert response.status_code == 400
