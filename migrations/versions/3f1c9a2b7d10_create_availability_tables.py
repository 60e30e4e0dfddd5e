"""Create plot availability tables

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3f1c9a2b7d10'
down_revision = None
branch_labels = None
depends_on = None

booking_status = sa.Enum('PENDING', 'CONFIRMED', 'CANCELLED', 'REJECTED', name='bookingstatus')


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('plots',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('price_per_month', sa.Numeric(10, 2), nullable=False),
        sa.Column('minimum_lease', sa.Integer(), nullable=True),
        sa.Column('instant_book', sa.Boolean(), nullable=False),
        sa.Column('availability_version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('plot_id', sa.Integer(), nullable=False),
        sa.Column('renter_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', booking_status, nullable=False),
        sa.Column('monthly_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('months', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('start_date <= end_date', name='ck_bookings_range'),
        sa.ForeignKeyConstraint(['plot_id'], ['plots.id'], ),
        sa.ForeignKeyConstraint(['renter_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('blocked_dates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('plot_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('start_date <= end_date', name='ck_blocked_dates_range'),
        sa.ForeignKeyConstraint(['plot_id'], ['plots.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    # Range lookups by plot drive every availability query
    op.create_index('ix_bookings_plot_range', 'bookings', ['plot_id', 'start_date', 'end_date'])
    op.create_index('ix_blocked_dates_plot_range', 'blocked_dates', ['plot_id', 'start_date', 'end_date'])


def downgrade():
    op.drop_index('ix_blocked_dates_plot_range', table_name='blocked_dates')
    op.drop_index('ix_bookings_plot_range', table_name='bookings')
    op.drop_table('blocked_dates')
    op.drop_table('bookings')
    booking_status.drop(op.get_bind(), checkfirst=True)
    op.drop_table('plots')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
