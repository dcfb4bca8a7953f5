"""
Tests for the Auth API endpoints.

Covers login (username or email), registration pending approval, logout
revocation, token refresh and password reset.
"""
from datetime import datetime, timedelta
from unittest.mock import patch

from loyalty.extensions import db
from loyalty.middleware.auth import create_refresh_token
from loyalty.models import User


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_login_with_username(self, client, partner):
        response = client.post('/api/auth/login', json={'username': 'partner', 'password': 'password123'})

        assert response.status_code == 200
        data = response.get_json()
        assert data['user']['id'] == partner.id
        assert data['access_token']
        assert data['refresh_token']
        assert 'password_hash' not in data['user']

    def test_login_with_email_any_case(self, client, partner):
        response = client.post('/api/auth/login', json={'username': 'Partner@Example.com', 'password': 'password123'})
        assert response.status_code == 200

    def test_wrong_password(self, client, partner):
        response = client.post('/api/auth/login', json={'username': 'partner', 'password': 'nope'})

        assert response.status_code == 401
        assert response.get_json()['code'] == 'INVALID_CREDENTIALS'

    def test_unknown_user(self, client):
        response = client.post('/api/auth/login', json={'username': 'ghost', 'password': 'password123'})
        assert response.status_code == 401

    def test_pending_account(self, client, partner):
        partner.is_approved = False
        db.session.commit()

        response = client.post('/api/auth/login', json={'username': 'partner', 'password': 'password123'})

        assert response.status_code == 401
        assert response.get_json()['code'] == 'ACCOUNT_PENDING'

    def test_inactive_account(self, client, partner):
        partner.is_active = False
        db.session.commit()

        response = client.post('/api/auth/login', json={'username': 'partner', 'password': 'password123'})

        assert response.status_code == 401
        assert response.get_json()['code'] == 'ACCOUNT_INACTIVE'

    def test_missing_fields(self, client):
        response = client.post('/api/auth/login', json={})
        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'


class TestRegister:
    """Tests for POST /api/auth/register."""

    def test_register_is_pending(self, client):
        response = client.post('/api/auth/register', json={
            'username': 'newpartner',
            'email': 'New@Partner.com',
            'password': 'secret123',
            'firstName': 'New',
            'lastName': 'Partner',
            'country': 'Chile',
            'region': 'SOLA',
        })

        assert response.status_code == 201
        user = response.get_json()['user']
        assert user['is_approved'] is False
        assert user['role'] == 'user'
        assert user['email'] == 'new@partner.com'

        response = client.post('/api/auth/login', json={'username': 'newpartner', 'password': 'secret123'})
        assert response.status_code == 401
        assert response.get_json()['code'] == 'ACCOUNT_PENDING'

    def test_register_cannot_choose_role(self, client):
        response = client.post('/api/auth/register', json={
            'username': 'sneaky',
            'email': 'sneaky@example.com',
            'password': 'secret123',
            'first_name': 'Sneaky',
            'last_name': 'User',
            'country': 'Peru',
            'role': 'super-admin',
        })

        assert response.status_code == 201
        assert response.get_json()['user']['role'] == 'user'

    def test_duplicate_username(self, client, partner):
        response = client.post('/api/auth/register', json={
            'username': 'PARTNER',
            'email': 'other@example.com',
            'password': 'secret123',
            'firstName': 'Other',
            'lastName': 'Partner',
            'country': 'Chile',
        })

        assert response.status_code == 409
        assert response.get_json()['code'] == 'DUPLICATE_ENTRY'

    def test_invalid_email_and_short_password(self, client):
        response = client.post('/api/auth/register', json={
            'username': 'newpartner',
            'email': 'not-an-email',
            'password': '123',
            'firstName': 'New',
            'lastName': 'Partner',
            'country': 'Chile',
        })

        assert response.status_code == 400
        fields = {error['field'] for error in response.get_json()['errors']}
        assert fields == {'email', 'password'}


class TestTokens:
    """Tests for /me, /logout and /refresh."""

    def test_me(self, client, partner, auth_headers_for):
        response = client.get('/api/auth/me', headers=auth_headers_for(partner))

        assert response.status_code == 200
        assert response.get_json()['username'] == 'partner'

    def test_me_requires_token(self, client):
        response = client.get('/api/auth/me')

        assert response.status_code == 401
        assert response.get_json()['code'] == 'AUTH_REQUIRED'

    def test_garbage_token(self, client):
        response = client.get('/api/auth/me', headers={'Authorization': 'Bearer not-a-jwt'})
        assert response.status_code == 401

    def test_logout_revokes_token(self, client, partner, auth_headers_for):
        headers = auth_headers_for(partner)

        response = client.post('/api/auth/logout', headers=headers)
        assert response.status_code == 200

        response = client.get('/api/auth/me', headers=headers)
        assert response.status_code == 401

    def test_logout_without_token(self, client):
        response = client.post('/api/auth/logout')
        assert response.status_code == 200

    def test_refresh(self, client, partner):
        refresh_token = create_refresh_token(partner)

        response = client.post('/api/auth/refresh', json={'refreshToken': refresh_token})

        assert response.status_code == 200
        access_token = response.get_json()['access_token']
        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {access_token}'})
        assert response.status_code == 200

    def test_refresh_token_is_not_an_access_token(self, client, partner):
        refresh_token = create_refresh_token(partner)
        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {refresh_token}'})
        assert response.status_code == 401

    def test_access_token_cannot_refresh(self, client, partner, auth_headers_for):
        access_token = auth_headers_for(partner)['Authorization'].split(' ', 1)[1]

        response = client.post('/api/auth/refresh', json={'refresh_token': access_token})

        assert response.status_code == 401
        assert response.get_json()['code'] == 'INVALID_TOKEN'

    def test_deactivated_user_is_locked_out(self, client, partner, auth_headers_for):
        headers = auth_headers_for(partner)
        partner.is_active = False
        db.session.commit()

        response = client.get('/api/auth/me', headers=headers)

        assert response.status_code == 401
        assert response.get_json()['code'] == 'ACCOUNT_INACTIVE'


class TestPasswordReset:
    """Tests for forgot-password and reset-password."""

    def test_forgot_password_sends_email(self, client, partner):
        with patch('loyalty.services.auth_service.email_service') as mock_email:
            response = client.post('/api/auth/forgot-password', json={'email': 'partner@example.com'})

        assert response.status_code == 200
        user, token = mock_email.send_password_reset_email.call_args[0]
        assert user.id == partner.id
        assert token == User.query.get(partner.id).reset_token

    def test_forgot_password_unknown_email(self, client):
        with patch('loyalty.services.auth_service.email_service') as mock_email:
            response = client.post('/api/auth/forgot-password', json={'email': 'nobody@example.com'})

        assert response.status_code == 200
        mock_email.send_password_reset_email.assert_not_called()

    def test_reset_password(self, client, partner):
        token = partner.issue_reset_token(60)
        db.session.commit()

        response = client.post('/api/auth/reset-password', json={'token': token, 'password': 'brandnew1'})
        assert response.status_code == 200

        response = client.post('/api/auth/login', json={'username': 'partner', 'password': 'brandnew1'})
        assert response.status_code == 200

        # Single use
        response = client.post('/api/auth/reset-password', json={'token': token, 'password': 'again123'})
        assert response.status_code == 400
        assert response.get_json()['code'] == 'INVALID_TOKEN'

    def test_expired_reset_token(self, client, partner):
        token = partner.issue_reset_token(60)
        partner.reset_token_expiry = datetime.utcnow() - timedelta(minutes=1)
        db.session.commit()

        response = client.post('/api/auth/reset-password', json={'token': token, 'password': 'brandnew1'})

        assert response.status_code == 400
