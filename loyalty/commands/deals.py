"""
CLI commands for deals.
"""
import click
from flask.cli import with_appcontext

from ..services.deal_service import deal_service


@click.group('deals')
def deals_cli():
    """Deal commands."""
    pass


@deals_cli.command('recalculate-points')
@with_appcontext
def recalculate_points():
    """
    Re-price every approved deal with the current region rates.

    Differences are written to the ledger as adjustment rows.
    """
    result = deal_service.recalculate_points()
    click.echo(f"Deals updated: {result['updated_deals']}")
    click.echo(f"Net points change: {result['points_delta']:+d}")


def init_app(app):
    """Register deal commands with Flask app."""
    app.cli.add_command(deals_cli)
