"""Create subscription tables

Revision ID: a1f3c9d2e7b4
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f3c9d2e7b4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Subscriptions table
    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('stripe_customer_id', sa.String(255), nullable=True),
        sa.Column('stripe_subscription_id', sa.String(255), nullable=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='inactive'),
        sa.Column('plan_name', sa.String(100), nullable=True),
        sa.Column('plan_type', sa.String(20), nullable=True),
        sa.Column('price_id', sa.String(255), nullable=True),
        sa.Column('current_period_start', sa.DateTime(), nullable=True),
        sa.Column('current_period_end', sa.DateTime(), nullable=True),
        sa.Column('next_billing_date', sa.DateTime(), nullable=True),
        sa.Column('cancel_at_period_end', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('cancellation_requested_at', sa.DateTime(), nullable=True),
        sa.Column('cancellation_reason', sa.String(500), nullable=True),
        sa.Column('canceled_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "status IN ('active', 'trialing', 'past_due', 'incomplete', 'inactive', "
            "'cancellation_requested', 'canceled')",
            name='ck_subscriptions_status',
        ),
    )
    op.create_index('ix_subscriptions_user_id', 'subscriptions', ['user_id'], unique=True)
    op.create_index('ix_subscriptions_stripe_customer_id', 'subscriptions', ['stripe_customer_id'])
    op.create_index('ix_subscriptions_stripe_subscription_id', 'subscriptions', ['stripe_subscription_id'])

    # Subscription history table
    op.create_table(
        'subscription_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('stripe_customer_id', sa.String(255), nullable=True),
        sa.Column('stripe_subscription_id', sa.String(255), nullable=True),
        sa.Column('stripe_checkout_session_id', sa.String(255), nullable=True),
        sa.Column('event_type', sa.String(32), nullable=False),
        sa.Column('status', sa.String(32), nullable=True),
        sa.Column('plan_name', sa.String(100), nullable=True),
        sa.Column('price_id', sa.String(255), nullable=True),
        sa.Column('amount_paid', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False, server_default='BRL'),
        sa.Column('billing_cycle', sa.String(20), nullable=True),
        sa.Column('stripe_event_id', sa.String(255), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "event_type IN ('created', 'updated', 'cancellation_requested', 'cancelled')",
            name='ck_subscription_history_event_type',
        ),
    )
    op.create_index('ix_subscription_history_user_id', 'subscription_history', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_subscription_history_user_id', table_name='subscription_history')
    op.drop_table('subscription_history')
    op.drop_index('ix_subscriptions_stripe_subscription_id', table_name='subscriptions')
    op.drop_index('ix_subscriptions_stripe_customer_id', table_name='subscriptions')
    op.drop_index('ix_subscriptions_user_id', table_name='subscriptions')
    op.drop_table('subscriptions')
