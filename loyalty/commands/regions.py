"""
CLI commands for region configs and monthly prizes.
"""
import click
from flask.cli import with_appcontext

from ..services.region_service import current_season_year, region_service


@click.group('regions')
def regions_cli():
    """Region configuration commands."""
    pass


@regions_cli.command('seed')
@click.option('--season-year', type=int, help='Year the season starts in November (default: current season)')
@with_appcontext
def seed_regions(season_year):
    """Create the default region configs and their monthly prizes."""
    season_year = season_year or current_season_year()
    result = region_service.seed_defaults(season_year)
    click.echo(f"Season {season_year}-{season_year + 1}")
    click.echo(f"  Region configs created: {result['configs']}")
    click.echo(f"  Monthly prizes created: {result['prizes']}")


@regions_cli.command('assign-admins')
@with_appcontext
def assign_admins():
    """Assign each seeded regional admin to the first config of their region."""
    for result in region_service.assign_regional_admins():
        if result['assigned']:
            click.echo(f"  {result['email']} -> {result['region_config']}")
        else:
            click.echo(f"  Skipped {result['email']} ({result['region']}): {result['reason']}")


def init_app(app):
    """Register region commands with Flask app."""
    app.cli.add_command(regions_cli)
