"""Create owners, properties, tenants, leases, payments, expenses,
notifications and report_snapshots tables

Revision ID: 20261001_000001
Revises: None
Create Date: 2026-10-01

Enum columns store lowercase values ("house", "active", ...).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261001_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'owners',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_owners_name', 'owners', ['name'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('id_document', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tenants_name', 'tenants', ['name'])

    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column(
            'type',
            sa.Enum('house', 'shop', 'room', 'store', name='property_type', create_constraint=True),
            nullable=False
        ),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('monthly_rent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('commission_percent', sa.Numeric(precision=5, scale=2), nullable=False, server_default='10'),
        sa.Column(
            'status',
            sa.Enum('available', 'occupied', name='property_status', create_constraint=True),
            nullable=False,
            server_default='available'
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['owners.id'], name='fk_properties_owner_id'),
    )
    op.create_index('ix_properties_owner_id', 'properties', ['owner_id'])
    op.create_index('ix_properties_status', 'properties', ['status'])

    op.create_table(
        'leases',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('monthly_rent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('deposit', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('advance_months', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('active', 'ended', name='lease_status', create_constraint=True),
            nullable=False,
            server_default='active'
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], name='fk_leases_tenant_id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_leases_property_id'),
    )
    op.create_index('ix_leases_tenant_id', 'leases', ['tenant_id'])
    op.create_index('ix_leases_property_id', 'leases', ['property_id'])
    op.create_index('ix_leases_status', 'leases', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lease_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'type',
            sa.Enum('rent', 'advance', 'deposit', name='payment_type', create_constraint=True),
            nullable=False
        ),
        sa.Column('target_month', sa.Date(), nullable=True),
        sa.Column('paid_date', sa.Date(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('paid', 'pending', 'late', name='payment_status', create_constraint=True),
            nullable=False,
            server_default='paid'
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['lease_id'], ['leases.id'], name='fk_payments_lease_id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], name='fk_payments_tenant_id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_payments_property_id'),
    )
    op.create_index('ix_payments_lease_id', 'payments', ['lease_id'])
    op.create_index('ix_payments_tenant_id', 'payments', ['tenant_id'])
    op.create_index('ix_payments_property_id', 'payments', ['property_id'])
    op.create_index('ix_payments_type', 'payments', ['type'])
    op.create_index('ix_payments_target_month', 'payments', ['target_month'])
    op.create_index('ix_payments_paid_date', 'payments', ['paid_date'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'category',
            sa.Enum('repair', 'electricity', 'water', 'drainage', 'other',
                    name='expense_category', create_constraint=True),
            nullable=False,
            server_default='other'
        ),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('receipt_url', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_expenses_property_id'),
    )
    op.create_index('ix_expenses_property_id', 'expenses', ['property_id'])
    op.create_index('ix_expenses_expense_date', 'expenses', ['expense_date'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.Column(
            'type',
            sa.Enum('rent_reminder', 'confirmation', name='notification_type', create_constraint=True),
            nullable=False
        ),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('channel', sa.String(length=30), nullable=False, server_default='app'),
        sa.Column(
            'status',
            sa.Enum('pending', 'sent', 'failed', 'received', name='notification_status', create_constraint=True),
            nullable=False,
            server_default='pending'
        ),
        sa.Column('period', sa.String(length=7), nullable=True),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        sa.Column('received_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['tenant_id'],
            ['tenants.id'],
            name='fk_notifications_tenant_id',
            ondelete='SET NULL'
        ),
    )
    op.create_index('ix_notifications_tenant_id', 'notifications', ['tenant_id'])
    op.create_index('ix_notifications_type', 'notifications', ['type'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])
    # At most one rent reminder per tenant and month
    op.create_index(
        'uq_notifications_tenant_type_period',
        'notifications',
        ['tenant_id', 'type', 'period'],
        unique=True,
        mssql_where=sa.text('period IS NOT NULL'),
        postgresql_where=sa.text('period IS NOT NULL'),
        sqlite_where=sa.text('period IS NOT NULL'),
    )

    op.create_table(
        'report_snapshots',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('month', sa.String(length=7), nullable=False),
        sa.Column('total_revenue', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('total_expenses', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('net_profit', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('detail_payload', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_report_snapshots_month', 'report_snapshots', ['month'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_report_snapshots_month', table_name='report_snapshots')
    op.drop_table('report_snapshots')

    op.drop_index('uq_notifications_tenant_type_period', table_name='notifications')
    op.drop_index('ix_notifications_created_at', table_name='notifications')
    op.drop_index('ix_notifications_type', table_name='notifications')
    op.drop_index('ix_notifications_tenant_id', table_name='notifications')
    op.drop_table('notifications')

    op.drop_index('ix_expenses_expense_date', table_name='expenses')
    op.drop_index('ix_expenses_property_id', table_name='expenses')
    op.drop_table('expenses')

    for column in ('paid_date', 'target_month', 'type', 'property_id', 'tenant_id', 'lease_id'):
        op.drop_index(f'ix_payments_{column}', table_name='payments')
    op.drop_table('payments')

    op.drop_index('ix_leases_status', table_name='leases')
    op.drop_index('ix_leases_property_id', table_name='leases')
    op.drop_index('ix_leases_tenant_id', table_name='leases')
    op.drop_table('leases')

    op.drop_index('ix_properties_status', table_name='properties')
    op.drop_index('ix_properties_owner_id', table_name='properties')
    op.drop_table('properties')

    op.drop_index('ix_tenants_name', table_name='tenants')
    op.drop_table('tenants')

    op.drop_index('ix_owners_name', table_name='owners')
    op.drop_table('owners')
