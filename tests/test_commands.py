"""
Tests for the Flask CLI commands.
"""
from loyalty.models import Deal, MonthlyRegionPrize, PointsConfig, PointsHistory, RegionConfig, User, UserRole
from loyalty.services.deal_service import deal_service
from loyalty.services.points_config_service import points_config_service


class TestSeedCommands:

    def test_points_config_seed(self, runner):
        result = runner.invoke(args=['points-config', 'seed'])

        assert result.exit_code == 0
        assert 'Points configs created: 4' in result.output
        assert PointsConfig.query.count() == 4

        result = runner.invoke(args=['points-config', 'seed'])
        assert 'Points configs created: 0' in result.output

    def test_regions_seed(self, runner):
        result = runner.invoke(args=['regions', 'seed', '--season-year', '2025'])

        assert result.exit_code == 0
        assert 'Season 2025-2026' in result.output
        assert 'Region configs created: 14' in result.output
        assert RegionConfig.query.count() == 14
        assert MonthlyRegionPrize.query.filter_by(month=11, year=2025).count() == 14
        assert MonthlyRegionPrize.query.filter_by(month=3, year=2026).count() == 14

    def test_assign_admins(self, runner):
        runner.invoke(args=['regions', 'seed', '--season-year', '2025'])
        runner.invoke(args=['users', 'create-test-users'])

        result = runner.invoke(args=['regions', 'assign-admins'])

        assert result.exit_code == 0
        assert 'admin@mexico.com -> MÉXICO ENTERPRISE PLATINUM' in result.output
        admin = User.query.filter_by(username='admin_sola').one()
        assert admin.admin_region.name == 'SOLA ENTERPRISE'

    def test_assign_admins_without_configs(self, runner):
        result = runner.invoke(args=['regions', 'assign-admins'])

        assert 'Skipped admin@nola.com (NOLA): No region config found' in result.output


class TestUserCommands:

    def test_create_test_users(self, runner):
        result = runner.invoke(args=['users', 'create-test-users'])

        assert result.exit_code == 0
        assert 'Created 13 users. Password for all: password123' in result.output
        assert User.query.filter_by(role=UserRole.REGIONAL_ADMIN.value).count() == 4
        assert User.query.filter_by(role=UserRole.USER.value).count() == 8
        partner = User.query.filter_by(username='user_brasil_2').one()
        assert partner.is_approved is True
        assert partner.check_password('password123')

        result = runner.invoke(args=['users', 'create-test-users'])
        assert 'Created 0 users' in result.output

    def test_create_admin(self, runner):
        result = runner.invoke(args=[
            'users', 'create-admin',
            '--username', 'ops', '--email', 'ops@example.com',
            '--password', 's3cret!!', '--role', 'super-admin',
        ])

        assert result.exit_code == 0
        user = User.query.filter_by(username='ops').one()
        assert user.role == UserRole.SUPER_ADMIN.value
        assert user.is_approved is True
        assert user.check_password('s3cret!!')

    def test_create_admin_duplicate(self, runner, admin):
        result = runner.invoke(args=[
            'users', 'create-admin', '--username', 'admin', '--email', 'other@example.com', '--password', 'x',
        ])

        assert result.exit_code == 0
        assert result.output.startswith('Admin not created')
        assert User.query.filter_by(username='admin').count() == 1


class TestRecalculatePointsCommand:

    def test_recalculate_writes_adjustments(self, runner, admin, partner, make_deal):
        deal = make_deal(partner, value='20000.00', product_type='software')
        deal_service.approve(admin, deal.id)
        assert Deal.query.get(deal.id).points_earned == 20

        points_config_service.update_config('NOLA', {'software_rate': 500})
        result = runner.invoke(args=['deals', 'recalculate-points'])

        assert result.exit_code == 0
        assert 'Deals updated: 1' in result.output
        assert 'Net points change: +20' in result.output
        assert Deal.query.get(deal.id).points_earned == 40
        points = [e.points for e in PointsHistory.query.filter_by(user_id=partner.id).order_by(PointsHistory.id)]
        assert points == [20, 20]
