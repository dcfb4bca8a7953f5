"""
CLI commands for user accounts.
"""
import click
from flask.cli import with_appcontext

from ..extensions import db
from ..models import REGION_VALUES, RegionCategory, User, UserRole
from ..services.user_service import user_service
from ..utils.exceptions import DuplicateError

TEST_PASSWORD = 'password123'
TEST_USERS_PER_REGION = 2


@click.group('users')
def users_cli():
    """User account commands."""
    pass


@users_cli.command('create-admin')
@click.option('--username', default='admin', show_default=True)
@click.option('--email', default='admin@loyaltyprogram.com', show_default=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', type=click.Choice([UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value]),
              default=UserRole.ADMIN.value, show_default=True)
@with_appcontext
def create_admin(username, email, password, role):
    """Create an approved admin account."""
    try:
        user = user_service.create_user({
            'username': username,
            'email': email,
            'password': password,
            'first_name': 'Admin',
            'last_name': 'User',
            'country': 'US',
            'role': role,
        })
    except DuplicateError as e:
        click.echo(f"Admin not created: {e.message}")
        return

    click.echo(f"Created {user.role} '{user.username}' ({user.email})")


def _create_if_missing(**fields):
    if User.query.filter((User.username == fields['username']) | (User.email == fields['email'])).first():
        return None

    user = User(
        region_category=RegionCategory.ENTERPRISE.value,
        **fields
    )
    user.set_password(TEST_PASSWORD)
    user.approve()
    db.session.add(user)
    return user


@users_cli.command('create-test-users')
@with_appcontext
def create_test_users():
    """
    Create a super admin, one regional admin per region and two partners per
    region. Existing usernames/emails are skipped.
    """
    created = []

    user = _create_if_missing(
        username='superadmin',
        email='superadmin@test.com',
        first_name='Super',
        last_name='Admin',
        country='Global',
        role=UserRole.SUPER_ADMIN.value,
        region='NOLA',
    )
    if user:
        created.append(user)

    for region in REGION_VALUES:
        user = _create_if_missing(
            username=f'admin_{region.lower()}',
            email=f'admin@{region.lower()}.com',
            first_name='Admin',
            last_name=region,
            country=region,
            role=UserRole.REGIONAL_ADMIN.value,
            region=region,
        )
        if user:
            created.append(user)

        for i in range(1, TEST_USERS_PER_REGION + 1):
            username = f'user_{region.lower()}_{i}'
            user = _create_if_missing(
                username=username,
                email=f'{username}@test.com',
                first_name='User',
                last_name=f'{region} {i}',
                country=region,
                role=UserRole.USER.value,
                region=region,
            )
            if user:
                created.append(user)

    db.session.commit()

    for user in created:
        click.echo(f"  {user.role:<15} {user.username:<20} {user.email}")
    click.echo(f"Created {len(created)} users. Password for all: {TEST_PASSWORD}")


def init_app(app):
    """Register user commands with Flask app."""
    app.cli.add_command(users_cli)
