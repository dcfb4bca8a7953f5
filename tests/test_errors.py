"""
Tests for the JSON error helpers and app-level error handlers.
"""
from sqlalchemy.exc import IntegrityError

from loyalty.utils import ErrorCode, conflict


class TestErrorHelpers:

    def test_conflict_defaults(self, app):
        with app.test_request_context():
            response, status = conflict()

        assert status == 409
        assert response.get_json() == {'message': 'Resource already exists', 'code': 'DUPLICATE_ENTRY'}

    def test_conflict_custom_code(self, app):
        with app.test_request_context():
            response, status = conflict('Deal already decided', ErrorCode.INVALID_STATUS_TRANSITION)

        assert status == 409
        assert response.get_json()['code'] == 'INVALID_STATUS_TRANSITION'


class TestErrorHandlers:

    def test_integrity_error_is_conflict(self, app, client):
        def duplicate():
            raise IntegrityError('INSERT INTO users ...', {}, Exception('UNIQUE constraint failed: users.email'))

        app.add_url_rule('/duplicate', 'duplicate', duplicate)

        response = client.get('/duplicate')

        assert response.status_code == 409
        assert response.get_json()['code'] == 'DUPLICATE_ENTRY'

    def test_unknown_route_is_json(self, client):
        response = client.get('/api/does-not-exist')

        assert response.status_code == 404
        assert response.get_json()['code'] == 'NOT_FOUND'
