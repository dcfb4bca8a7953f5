"""Initial schema: users, regions, deals, points ledger, rewards, support,
campaigns

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2025-10-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create all loyalty platform tables."""
    op.create_table(
        'region_configs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('region', sa.String(20), nullable=False),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('subcategory', sa.String(100), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('new_customer_goal_rate', sa.Integer(), nullable=False),
        sa.Column('renewal_goal_rate', sa.Integer(), nullable=False),
        sa.Column('monthly_goal_target', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('region', 'category', 'subcategory', name='uq_region_category_subcategory')
    )
    op.create_index('ix_region_configs_region', 'region_configs', ['region'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(100), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('country', sa.String(100), nullable=False),
        sa.Column('region', sa.String(20), nullable=True),
        sa.Column('region_category', sa.String(20), nullable=True),
        sa.Column('region_subcategory', sa.String(100), nullable=True),
        sa.Column('admin_region_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_approved', sa.Boolean(), nullable=False),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('invite_token', sa.String(64), nullable=True),
        sa.Column('invite_token_expires_at', sa.DateTime(), nullable=True),
        sa.Column('invite_accepted_at', sa.DateTime(), nullable=True),
        sa.Column('invited_by', sa.Integer(), nullable=True),
        sa.Column('reset_token', sa.String(64), nullable=True),
        sa.Column('reset_token_expiry', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['admin_region_id'], ['region_configs.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id'], ),
        sa.ForeignKeyConstraint(['invited_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_region', 'users', ['region'])
    op.create_index('ix_users_invite_token', 'users', ['invite_token'], unique=True)
    op.create_index('ix_users_reset_token', 'users', ['reset_token'], unique=True)

    op.create_table(
        'monthly_region_prizes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('region_config_id', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('prize_name', sa.String(255), nullable=False),
        sa.Column('prize_description', sa.Text(), nullable=True),
        sa.Column('goal_target', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['region_config_id'], ['region_configs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_monthly_region_prizes_region_config_id', 'monthly_region_prizes', ['region_config_id'])

    op.create_table(
        'points_config',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('region', sa.String(20), nullable=False),
        sa.Column('software_rate', sa.Integer(), nullable=False),
        sa.Column('hardware_rate', sa.Integer(), nullable=False),
        sa.Column('equipment_rate', sa.Integer(), nullable=False),
        sa.Column('grand_prize_threshold', sa.Integer(), nullable=False),
        sa.Column('default_new_customer_goal_rate', sa.Integer(), nullable=False),
        sa.Column('default_renewal_goal_rate', sa.Integer(), nullable=False),
        sa.Column('redemption_start_date', sa.Date(), nullable=True),
        sa.Column('redemption_end_date', sa.Date(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['updated_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('region')
    )

    op.create_table(
        'deals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('product_type', sa.String(20), nullable=False),
        sa.Column('product_name', sa.String(255), nullable=False),
        sa.Column('deal_value', sa.Numeric(12, 2), nullable=False),
        sa.Column('deal_type', sa.String(20), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('close_date', sa.DateTime(), nullable=False),
        sa.Column('client_info', sa.Text(), nullable=True),
        sa.Column('license_agreement_number', sa.String(100), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('points_earned', sa.Integer(), nullable=False),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_deals_user_id', 'deals', ['user_id'])
    op.create_index('ix_deals_status', 'deals', ['status'])

    op.create_table(
        'rewards',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('points_cost', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('region', sa.String(20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('stock_quantity', sa.Integer(), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'user_rewards',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('reward_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('shipment_status', sa.String(20), nullable=False),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('delivery_address', sa.Text(), nullable=True),
        sa.Column('redeemed_at', sa.DateTime(), nullable=True),
        sa.Column('shipped_at', sa.DateTime(), nullable=True),
        sa.Column('shipped_by', sa.Integer(), nullable=True),
        sa.Column('delivered_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reward_id'], ['rewards.id'], ),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id'], ),
        sa.ForeignKeyConstraint(['shipped_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_user_rewards_user_id', 'user_rewards', ['user_id'])
    op.create_index('ix_user_rewards_reward_id', 'user_rewards', ['reward_id'])
    op.create_index('ix_user_rewards_status', 'user_rewards', ['status'])

    op.create_table(
        'points_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('deal_id', sa.Integer(), nullable=True),
        sa.Column('reward_id', sa.Integer(), nullable=True),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['deal_id'], ['deals.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['reward_id'], ['rewards.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_points_history_user_id', 'points_history', ['user_id'])
    op.create_index('ix_points_history_created_at', 'points_history', ['created_at'])

    op.create_table(
        'support_tickets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(10), nullable=False),
        sa.Column('assigned_to', sa.Integer(), nullable=True),
        sa.Column('admin_response', sa.Text(), nullable=True),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        sa.Column('responded_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['assigned_to'], ['users.id'], ),
        sa.ForeignKeyConstraint(['responded_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_support_tickets_user_id', 'support_tickets', ['user_id'])
    op.create_index('ix_support_tickets_status', 'support_tickets', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    op.create_table(
        'campaigns',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('multiplier', sa.Numeric(3, 2), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade():
    """Drop all loyalty platform tables."""
    op.drop_table('campaigns')
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_support_tickets_status', table_name='support_tickets')
    op.drop_index('ix_support_tickets_user_id', table_name='support_tickets')
    op.drop_table('support_tickets')
    op.drop_index('ix_points_history_created_at', table_name='points_history')
    op.drop_index('ix_points_history_user_id', table_name='points_history')
    op.drop_table('points_history')
    op.drop_index('ix_user_rewards_status', table_name='user_rewards')
    op.drop_index('ix_user_rewards_reward_id', table_name='user_rewards')
    op.drop_index('ix_user_rewards_user_id', table_name='user_rewards')
    op.drop_table('user_rewards')
    op.drop_table('rewards')
    op.drop_index('ix_deals_status', table_name='deals')
    op.drop_index('ix_deals_user_id', table_name='deals')
    op.drop_table('deals')
    op.drop_table('points_config')
    op.drop_index('ix_monthly_region_prizes_region_config_id', table_name='monthly_region_prizes')
    op.drop_table('monthly_region_prizes')
    op.drop_index('ix_users_reset_token', table_name='users')
    op.drop_index('ix_users_invite_token', table_name='users')
    op.drop_index('ix_users_region', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
    op.drop_index('ix_region_configs_region', table_name='region_configs')
    op.drop_table('region_configs')
