"""
Shared pytest fixtures.

Every test gets a fresh app on an in-memory SQLite database with an app
context pushed for the whole test, so fixtures and requests share one
session. Email goes through the simulated (no API key) Brevo path unless a
test patches the sender.
"""
import itertools
from datetime import datetime
from decimal import Decimal

import pytest

from loyalty import create_app
from loyalty.extensions import db
from loyalty.middleware.auth import create_access_token
from loyalty.models import Deal, DealStatus, PointsHistory, RegionConfig, Reward, User, UserRole
from loyalty.services.emblue_service import emblue_service

_counter = itertools.count(1)


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

    emblue_service.reset()


@pytest.fixture
def client(app):
    """Test client."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """CLI runner."""
    return app.test_cli_runner()


@pytest.fixture
def make_user(app):
    """Factory for approved, active users."""
    def _make_user(role=UserRole.USER.value, region='NOLA', password='password123', **fields):
        n = next(_counter)
        user = User(
            username=fields.pop('username', f'user{n}'),
            email=fields.pop('email', f'user{n}@example.com'),
            first_name=fields.pop('first_name', 'Test'),
            last_name=fields.pop('last_name', f'User {n}'),
            country=fields.pop('country', 'Colombia'),
            role=role,
            region=region,
            **fields
        )
        user.set_password(password)
        user.approve()
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def partner(make_user):
    return make_user(username='partner', email='partner@example.com', region='NOLA')


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN.value, username='admin', email='admin@example.com', region=None)


@pytest.fixture
def super_admin(make_user):
    return make_user(role=UserRole.SUPER_ADMIN.value, username='superadmin', email='super@example.com', region=None)


@pytest.fixture
def regional_admin(make_user):
    """Regional admin assigned to a NOLA region config."""
    config = RegionConfig(region='NOLA', category='ENTERPRISE', subcategory='COLOMBIA',
                          name='NOLA ENTERPRISE COLOMBIA', is_active=True)
    db.session.add(config)
    db.session.commit()
    return make_user(role=UserRole.REGIONAL_ADMIN.value, username='admin_nola', email='admin@nola.com',
                     region='NOLA', admin_region_id=config.id)


@pytest.fixture
def auth_headers_for():
    """Build bearer headers for a user."""
    def _headers(user):
        return {
            'Authorization': f'Bearer {create_access_token(user)}',
            'Content-Type': 'application/json'
        }

    return _headers


@pytest.fixture
def make_deal():
    def _make_deal(user, value='10000.00', product_type='software', status=DealStatus.PENDING.value, **fields):
        deal = Deal(
            user_id=user.id,
            product_type=product_type,
            product_name=fields.pop('product_name', f'{product_type.title()} License'),
            deal_value=Decimal(value),
            quantity=1,
            close_date=fields.pop('close_date', datetime(2025, 1, 15)),
            status=status,
            points_earned=fields.pop('points_earned', 0),
            **fields
        )
        db.session.add(deal)
        db.session.commit()
        return deal

    return _make_deal


@pytest.fixture
def make_reward():
    def _make_reward(points_cost=50, **fields):
        reward = Reward(
            name=fields.pop('name', f'Reward {points_cost}'),
            points_cost=points_cost,
            category=fields.pop('category', 'merch'),
            is_active=fields.pop('is_active', True),
            **fields
        )
        db.session.add(reward)
        db.session.commit()
        return reward

    return _make_reward


@pytest.fixture
def grant_points():
    """Credit a user's ledger directly."""
    def _grant(user, points, description='Test credit'):
        entry = PointsHistory(user_id=user.id, points=points, description=description)
        db.session.add(entry)
        db.session.commit()
        return entry

    return _grant
