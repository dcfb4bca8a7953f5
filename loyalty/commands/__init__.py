"""
CLI Commands for the loyalty platform.

Provides Flask CLI commands for seeding and administration.

Usage:
    flask regions seed                    # Default region configs + monthly prizes
    flask regions assign-admins           # Point regional admins at their region config
    flask points-config seed              # One default points config per region
    flask users create-admin              # Create an admin account
    flask users create-test-users         # Super admin, regional admins, partners
    flask deals recalculate-points        # Re-price approved deals with current rates
"""
from .regions import init_app as init_region_commands
from .points_config import init_app as init_points_config_commands
from .users import init_app as init_user_commands
from .deals import init_app as init_deal_commands


def init_app(app):
    """Register all CLI commands with the Flask app."""
    init_region_commands(app)
    init_points_config_commands(app)
    init_user_commands(app)
    init_deal_commands(app)
