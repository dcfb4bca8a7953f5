"""
CLI commands for the per-region points configuration.
"""
import click
from flask.cli import with_appcontext

from ..services.points_config_service import points_config_service


@click.group('points-config')
def points_config_cli():
    """Points configuration commands."""
    pass


@points_config_cli.command('seed')
@with_appcontext
def seed_points_config():
    """Create a default points config for every region that has none."""
    created = points_config_service.seed_defaults()
    click.echo(f"Points configs created: {created}")


def init_app(app):
    """Register points config commands with Flask app."""
    app.cli.add_command(points_config_cli)
