"""Initial schema: settings singleton and users

Revision ID: 20261018_000001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '20261018_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # === SETTINGS ===
    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), nullable=False),
        # General
        sa.Column('site_name', sa.String(length=100), nullable=False),
        sa.Column('site_url', sa.String(length=255), nullable=False),
        sa.Column('site_description', sa.String(length=500), nullable=False),
        sa.Column('maintenance_mode', sa.Boolean(), nullable=False),
        sa.Column('allow_registration', sa.Boolean(), nullable=False),
        # Security
        sa.Column('session_timeout', sa.Integer(), nullable=False),
        sa.Column('max_login_attempts', sa.Integer(), nullable=False),
        sa.Column('require_email_verification', sa.Boolean(), nullable=False),
        sa.Column('enable_2fa', sa.Boolean(), nullable=False),
        sa.Column('password_min_length', sa.Integer(), nullable=False),
        # Storage
        sa.Column('storage_provider', sa.String(length=20), nullable=False),
        sa.Column('storage_local_path', sa.String(length=200), nullable=False),
        sa.Column('r2_account_id', sa.String(length=255), nullable=True),
        sa.Column('r2_bucket_name', sa.String(length=255), nullable=True),
        sa.Column('r2_public_url', sa.String(length=500), nullable=True),
        # Email notifications
        sa.Column('email_enabled', sa.Boolean(), nullable=False),
        sa.Column('email_from', sa.String(length=255), nullable=False),
        sa.Column('email_host', sa.String(length=200), nullable=False),
        sa.Column('email_port', sa.Integer(), nullable=False),
        sa.Column('email_user', sa.String(length=255), nullable=True),
        sa.Column('email_password', sa.String(length=255), nullable=True),
        sa.Column('notification_on_user_registration', sa.Boolean(), nullable=False),
        sa.Column('notification_on_user_status_change', sa.Boolean(), nullable=False),
        # Stripe
        sa.Column('stripe_enabled', sa.Boolean(), nullable=False),
        sa.Column('stripe_secret_key', sa.String(length=255), nullable=True),
        sa.Column('stripe_publishable_key', sa.String(length=255), nullable=True),
        sa.Column('stripe_webhook_secret', sa.String(length=255), nullable=True),
        # Bakong
        sa.Column('bakong_enabled', sa.Boolean(), nullable=False),
        sa.Column('bakong_access_token', sa.String(length=1000), nullable=True),
        sa.Column('bakong_merchant_account_id', sa.String(length=255), nullable=True),
        sa.Column('bakong_webhook_secret', sa.String(length=255), nullable=True),
        sa.Column('bakong_api_url', sa.String(length=500), nullable=True),
        sa.Column('bakong_environment', sa.String(length=20), nullable=False),
        # Telegram bot
        sa.Column('telegram_bot_enabled', sa.Boolean(), nullable=False),
        sa.Column('telegram_bot_token', sa.String(length=255), nullable=True),
        sa.Column('telegram_chat_id', sa.String(length=100), nullable=True),
        sa.Column('telegram_notify_on_guest_check_in', sa.Boolean(), nullable=False),
        sa.Column('telegram_notify_on_new_guest', sa.Boolean(), nullable=False),
        sa.Column('telegram_notify_on_event_created', sa.Boolean(), nullable=False),
        sa.Column('telegram_notify_on_gift_added', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('id = 1', name='ck_settings_singleton'),
        sa.PrimaryKeyConstraint('id'),
    )

    # === USERS ===
    op.create_table(
        'users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_telegram_bot', sa.Boolean(), nullable=False),
        sa.Column('telegram_chat_id', sa.String(length=100), nullable=True),
        sa.Column('telegram_bot_token', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index(op.f('ix_users_telegram_chat_id'), 'users', ['telegram_chat_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_users_telegram_chat_id'), table_name='users')
    op.drop_table('users')
    op.drop_table('settings')
