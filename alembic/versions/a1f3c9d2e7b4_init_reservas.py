"""init reservas

Revision ID: a1f3c9d2e7b4
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = 'a1f3c9d2e7b4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MYSQL_OPTS = dict(mysql_engine='InnoDB', mysql_charset='utf8mb4', mysql_collate='utf8mb4_unicode_ci')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # === users ===
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('apartment_number', sa.Integer(), nullable=True),
        # True sólo para role=user; NULL no colisiona en el UNIQUE
        sa.Column('resident_slot', sa.Boolean(), nullable=True),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('apartment_number', 'resident_slot', name='uq_users_resident_apartment'),
        **MYSQL_OPTS
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    # === bookings ===
    op.create_table(
        'bookings',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('apartment_number', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('meal_type', sa.String(10), nullable=False),
        sa.Column('number_of_people', sa.Integer(), nullable=False),
        sa.Column('preparar_fuego', sa.Boolean(), nullable=False),
        sa.Column('reserva_horno', sa.Boolean(), nullable=False),
        sa.Column('reserva_brasa', sa.Boolean(), nullable=False),
        sa.Column('no_cleaning_service', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('final_attendees', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        **MYSQL_OPTS
    )
    op.create_index('ix_bookings_slot', 'bookings', ['date', 'meal_type'])
    op.create_index('ix_bookings_apartment_number', 'bookings', ['apartment_number'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])
    op.create_index('ix_bookings_user_id', 'bookings', ['user_id'])

    # === booking_tables ===
    op.create_table(
        'booking_tables',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('booking_id', sa.BigInteger(), sa.ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('meal_type', sa.String(10), nullable=False),
        sa.Column('table_number', sa.Integer(), nullable=False),
        # True mientras la reserva ocupa la mesa, NULL al cancelarse
        sa.Column('hold', sa.Boolean(), nullable=True),
        sa.UniqueConstraint('date', 'meal_type', 'table_number', 'hold', name='uq_booking_tables_slot'),
        sa.UniqueConstraint('booking_id', 'table_number', name='uq_booking_tables_booking'),
        **MYSQL_OPTS
    )
    op.create_index('ix_booking_tables_booking_id', 'booking_tables', ['booking_id'])

    # === blocked_dates ===
    op.create_table(
        'blocked_dates',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('meal_type', sa.String(10), nullable=False),
        sa.Column('reason', sa.String(50), nullable=False),
        sa.Column('preparar_fuego', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        **MYSQL_OPTS
    )
    op.create_index('ix_blocked_dates_slot', 'blocked_dates', ['date', 'meal_type'])

    # === feedback ===
    op.create_table(
        'feedback',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('apartment_number', sa.Integer(), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        **MYSQL_OPTS
    )
    op.create_index('ix_feedback_status', 'feedback', ['status'])

    # === login_events ===
    op.create_table(
        'login_events',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('ip_address', sa.String(64), nullable=False),
        sa.Column('user_agent', sa.String(512), nullable=False),
        sa.Column('browser', sa.String(50), nullable=False),
        sa.Column('device_type', sa.String(10), nullable=False),
        sa.Column('location', sa.String(150), nullable=False),
        sa.Column('geo_data', sa.JSON(), nullable=True),
        sa.Column('success', sa.Boolean(), nullable=False),
        sa.Column('failure_reason', sa.String(100), nullable=True),
        **MYSQL_OPTS
    )
    op.create_index('ix_login_events_user_id', 'login_events', ['user_id'])
    op.create_index('ix_login_events_timestamp', 'login_events', ['timestamp'])
    op.create_index('ix_login_events_success', 'login_events', ['success'])

    # === notification_logs ===
    op.create_table(
        'notification_logs',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('tag', sa.String(100), nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        **MYSQL_OPTS
    )
    op.create_index('ix_notification_logs_sent_at', 'notification_logs', ['sent_at'])

    # === password_resets ===
    op.create_table(
        'password_resets',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.String(64), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        **MYSQL_OPTS
    )
    op.create_index('ix_password_resets_user_id', 'password_resets', ['user_id'])
    op.create_index('ix_password_resets_token', 'password_resets', ['token'])
    op.create_index('ix_password_resets_expires_at', 'password_resets', ['expires_at'])

    # === push_subscriptions ===
    op.create_table(
        'push_subscriptions',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('endpoint', sa.String(767), nullable=False, unique=True),
        sa.Column('p256dh', sa.String(255), nullable=False),
        sa.Column('auth', sa.String(255), nullable=False),
        *_timestamps(),
        **MYSQL_OPTS
    )
    op.create_index('ix_push_subscriptions_user_id', 'push_subscriptions', ['user_id'])

    # === activity_logs ===
    op.create_table(
        'activity_logs',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('action', sa.String(20), nullable=False),
        sa.Column('apartment_number', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('target_user_id', sa.BigInteger(), nullable=True),
        sa.Column('details', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        **MYSQL_OPTS
    )
    op.create_index('ix_activity_logs_action', 'activity_logs', ['action'])
    op.create_index('ix_activity_logs_timestamp', 'activity_logs', ['timestamp'])


def downgrade() -> None:
    for table in (
        'activity_logs',
        'push_subscriptions',
        'password_resets',
        'notification_logs',
        'login_events',
        'feedback',
        'blocked_dates',
        'booking_tables',
        'bookings',
        'users',
    ):
        op.drop_table(table)
