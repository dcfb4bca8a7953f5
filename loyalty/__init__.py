"""
Partner Loyalty Platform
Flask application factory
"""
import os
import logging
from flask import Flask
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .extensions import db, migrate, cors
from .config import get_config, validate_config
from .utils.cache import init_cache
from .utils.errors import ErrorCode, bad_request, conflict, error_response, internal_error, validation_errors
from .utils.exceptions import LoyaltyError
from .utils.logging_config import setup_logging, init_request_id_tracking

logger = logging.getLogger(__name__)


def create_app(config_name: str = None) -> Flask:
    """
    Application factory for creating Flask app instances.

    Args:
        config_name: Configuration environment (development, production, testing)

    Returns:
        Configured Flask application
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    # Setup logging before anything else
    setup_logging()
    validate_config(config_name)

    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    app.url_map.strict_slashes = False

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Initialize caching (Redis with SimpleCache fallback)
    init_cache(app)

    # Configure CORS for the frontend origins
    cors.init_app(
        app,
        origins=app.config['CORS_ORIGINS'],
        supports_credentials=True,
        allow_headers=['Content-Type', 'Authorization', 'X-Request-ID']
    )

    # Initialize request ID tracking for request tracing
    init_request_id_tracking(app)

    # Register blueprints
    register_blueprints(app)

    # Register CLI commands
    from .commands import init_app as init_commands
    init_commands(app)

    # Register error handlers
    register_error_handlers(app)

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return {'status': 'healthy', 'service': 'loyalty'}

    logger.info('Loyalty app created (%s)', config_name)
    return app


def register_blueprints(app: Flask) -> None:
    """Register all API blueprints."""
    # Auth and current user
    from .api.auth import auth_bp
    from .api.users import users_bp
    from .api.notifications import notifications_bp

    # Deals and points
    from .api.deals import deals_bp
    from .api.points import points_bp
    from .api.points_config import points_config_bp, admin_points_config_bp

    # Rewards and redemptions
    from .api.rewards import rewards_bp, user_rewards_bp

    # Support
    from .api.support import support_bp, admin_support_bp

    # Admin API
    from .api.admin_users import admin_users_bp
    from .api.admin_deals import admin_deals_bp
    from .api.admin_rewards import admin_rewards_bp
    from .api.regions import regions_bp, region_configs_bp, monthly_prizes_bp
    from .api.reports import reports_bp
    from .api.csv_import import csv_import_bp
    from .api.campaigns import campaigns_bp

    # Auth and current user routes
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')

    # Deals and points routes
    app.register_blueprint(deals_bp, url_prefix='/api/deals')
    app.register_blueprint(points_bp, url_prefix='/api/points')
    app.register_blueprint(points_config_bp, url_prefix='/api/points-config')

    # Rewards routes
    app.register_blueprint(rewards_bp, url_prefix='/api/rewards')
    app.register_blueprint(user_rewards_bp, url_prefix='/api/user-rewards')

    # Support routes
    app.register_blueprint(support_bp, url_prefix='/api/support-tickets')

    # Admin API routes
    app.register_blueprint(admin_users_bp, url_prefix='/api/admin/users')
    app.register_blueprint(admin_deals_bp, url_prefix='/api/admin/deals')
    app.register_blueprint(admin_rewards_bp, url_prefix='/api/admin/rewards')
    app.register_blueprint(admin_points_config_bp, url_prefix='/api/admin/points-config')
    app.register_blueprint(admin_support_bp, url_prefix='/api/admin/support-tickets')
    app.register_blueprint(regions_bp, url_prefix='/api/admin/regions')
    app.register_blueprint(region_configs_bp, url_prefix='/api/admin/region-configs')
    app.register_blueprint(monthly_prizes_bp, url_prefix='/api/admin/monthly-prizes')
    app.register_blueprint(reports_bp, url_prefix='/api/admin/reports')
    app.register_blueprint(csv_import_bp, url_prefix='/api/admin/csv')
    app.register_blueprint(campaigns_bp, url_prefix='/api/admin/campaigns')


def register_error_handlers(app: Flask) -> None:
    """Register error handlers. Every error body is {message, code, errors?}."""

    @app.errorhandler(LoyaltyError)
    def loyalty_error(error):
        db.session.rollback()
        field = getattr(error, 'field', None)
        errors = [{'field': field, 'message': error.message}] if field else None
        return error_response(error.message, error.code, error.status_code, log_error=False, errors=errors)

    @app.errorhandler(SchemaValidationError)
    def schema_error(error):
        return bad_request('Validation failed', ErrorCode.VALIDATION_ERROR, errors=validation_errors(error))

    @app.errorhandler(IntegrityError)
    def integrity_error(error):
        # Unique constraints raced past a service-level duplicate check
        db.session.rollback()
        logger.warning('Integrity error: %s', error.orig)
        return conflict()

    @app.errorhandler(400)
    def bad_request_error(error):
        return bad_request(error.description or 'Bad request')

    @app.errorhandler(401)
    def unauthorized_error(error):
        return error_response('Authentication required', ErrorCode.AUTH_REQUIRED, 401, log_error=False)

    @app.errorhandler(403)
    def forbidden_error(error):
        return error_response('Permission denied', ErrorCode.PERMISSION_DENIED, 403, log_error=False)

    @app.errorhandler(404)
    def not_found_error(error):
        return error_response('Not found', ErrorCode.NOT_FOUND, 404, log_error=False)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response('Method not allowed', ErrorCode.INVALID_REQUEST, 405, log_error=False)

    @app.errorhandler(500)
    def server_error(error):
        db.session.rollback()
        return internal_error()

    @app.errorhandler(Exception)
    def unhandled_error(error):
        if isinstance(error, HTTPException):
            return error_response(error.description or error.name, ErrorCode.INVALID_REQUEST, error.code, log_error=False)
        db.session.rollback()
        logger.exception('Unhandled error: %s', error)
        return internal_error()
