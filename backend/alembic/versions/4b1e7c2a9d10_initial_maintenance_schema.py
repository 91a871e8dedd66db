"""initial_maintenance_schema

Revision ID: 4b1e7c2a9d10
Revises:
Create Date: 2026-10-19 09:12:44.503117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b1e7c2a9d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID = sa.String(20)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'id_sequences',
        sa.Column('prefix', sa.String(10), nullable=False),
        sa.Column('last_value', sa.Integer(), server_default=sa.text('0'), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('prefix'),
    )

    op.create_table(
        'users',
        sa.Column('id', ID, nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('avatar', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('specialization', sa.String(100), nullable=True),
        sa.Column('experience_years', sa.Integer(), nullable=True),
        sa.Column('supervisor_id', ID, nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'customers',
        sa.Column('id', ID, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('zip_code', sa.String(20), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('industry', sa.String(100), nullable=True),
        sa.Column('contact_person', sa.String(255), nullable=True),
        sa.Column('contract_start_date', sa.Date(), nullable=True),
        sa.Column('contract_end_date', sa.Date(), nullable=True),
        sa.Column('monthly_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_customers_name', 'customers', ['name'])

    op.create_table(
        'assets',
        sa.Column('id', ID, nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('make', sa.String(100), nullable=True),
        sa.Column('model', sa.String(100), nullable=True),
        sa.Column('serial_number', sa.String(100), nullable=True),
        sa.Column('manufacturer', sa.String(255), nullable=True),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('customer_id', ID, sa.ForeignKey('customers.id'), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('location_type', sa.String(20), nullable=False),
        sa.Column('condition', sa.String(20), nullable=False),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('purchase_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('current_value', sa.Numeric(12, 2), nullable=True),
        sa.Column('warranty_start', sa.Date(), nullable=True),
        sa.Column('warranty_end', sa.Date(), nullable=True),
        sa.Column('warranty_provider', sa.String(255), nullable=True),
        sa.Column('last_service_date', sa.Date(), nullable=True),
        sa.Column('next_service_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('serial_number', name='uq_assets_serial_number'),
    )
    op.create_index('ix_assets_customer_id', 'assets', ['customer_id'])

    op.create_table(
        'leases',
        sa.Column('id', ID, nullable=False),
        sa.Column('customer_id', ID, sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('asset_id', ID, sa.ForeignKey('assets.id'), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('monthly_payment', sa.Numeric(12, 2), nullable=False),
        sa.Column('deposit', sa.Numeric(12, 2), nullable=True),
        sa.Column('next_payment_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('terms', sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leases_customer_id', 'leases', ['customer_id'])
    op.create_index('ix_leases_asset_id', 'leases', ['asset_id'])

    op.create_table(
        'lease_payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('lease_id', ID, sa.ForeignKey('leases.id'), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_lease_payments_lease_id', 'lease_payments', ['lease_id'])

    op.create_table(
        'maintenance_schedules',
        sa.Column('id', ID, nullable=False),
        sa.Column('asset_id', ID, sa.ForeignKey('assets.id'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('service_type', sa.String(20), nullable=False),
        sa.Column('scheduled_date', sa.Date(), nullable=True),
        sa.Column('completed_date', sa.Date(), nullable=True),
        sa.Column('frequency', sa.String(50), nullable=True),
        sa.Column('priority', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('assigned_to', sa.String(255), nullable=True),
        sa.Column('estimated_duration', sa.Integer(), nullable=True),
        sa.Column('actual_duration', sa.Integer(), nullable=True),
        sa.Column('work_carried_out', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_maintenance_schedules_asset_id', 'maintenance_schedules', ['asset_id'])

    op.create_table(
        'maintenance_parts',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('schedule_id', ID, sa.ForeignKey('maintenance_schedules.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('cost', sa.Numeric(12, 2), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_maintenance_parts_schedule_id', 'maintenance_parts', ['schedule_id'])

    op.create_table(
        'work_orders',
        sa.Column('id', ID, nullable=False),
        sa.Column('asset_id', ID, sa.ForeignKey('assets.id'), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('service_type', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=True),
        sa.Column('contact_person', sa.String(255), nullable=True),
        sa.Column('contact_phone', sa.String(50), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('assigned_to', sa.String(255), nullable=True),
        sa.Column('requested_by', sa.String(255), nullable=True),
        sa.Column('supervisor_name', sa.String(255), nullable=True),
        sa.Column('scheduled_date', sa.Date(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('completed_date', sa.Date(), nullable=True),
        sa.Column('next_service_date', sa.Date(), nullable=True),
        sa.Column('fault_description', sa.Text(), nullable=True),
        sa.Column('work_carried_out', sa.Text(), nullable=True),
        sa.Column('page_count', sa.Integer(), nullable=True),
        sa.Column('estimated_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('actual_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('cancel_reason', sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_work_orders_asset_id', 'work_orders', ['asset_id'])

    op.create_table(
        'consumable_parts',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('work_order_id', ID, sa.ForeignKey('work_orders.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('cost', sa.Numeric(12, 2), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_consumable_parts_work_order_id', 'consumable_parts', ['work_order_id'])

    op.create_table(
        'contract_templates',
        sa.Column('id', ID, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('size', sa.String(20), nullable=False),
        sa.Column('version', sa.String(20), nullable=False),
        sa.Column('author', sa.String(255), nullable=False),
        sa.Column('tags', sa.Text(), nullable=False),
        sa.Column('elements', sa.Text(), nullable=False),
        sa.Column('folder_path', sa.String(500), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'sla_agreements',
        sa.Column('id', ID, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('customer_id', ID, sa.ForeignKey('customers.id'), nullable=True),
        sa.Column('customer_name', sa.String(255), nullable=True),
        sa.Column('service_level', sa.String(20), nullable=False),
        sa.Column('response_time', sa.String(100), nullable=True),
        sa.Column('resolution_time', sa.String(100), nullable=True),
        sa.Column('availability', sa.String(50), nullable=True),
        sa.Column('penalties', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('terms', sa.Text(), nullable=False),
        sa.Column('folder_path', sa.String(500), nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_sla_agreements_customer_id', 'sla_agreements', ['customer_id'])

    op.create_table(
        'reports',
        sa.Column('id', ID, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('format', sa.String(20), nullable=False),
        sa.Column('file_size', sa.String(20), nullable=False),
        sa.Column('file_path', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('generated_by', sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reports_type', 'reports', ['type'])

    op.create_table(
        'activity_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('user_id', ID, sa.ForeignKey('users.id'), nullable=True),
        sa.Column('user_name', sa.String(255), nullable=False),
        sa.Column('action', sa.String(20), nullable=False),
        sa.Column('module', sa.String(50), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', ID, nullable=True),
        sa.Column('entity_name', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('ip_address', sa.String(50), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('metadata', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_activity_logs_user_id', 'activity_logs', ['user_id'])
    op.create_index('ix_activity_logs_action', 'activity_logs', ['action'])
    op.create_index('ix_activity_logs_entity_id', 'activity_logs', ['entity_id'])
    op.create_index('ix_activity_logs_created_at', 'activity_logs', ['created_at'])


def downgrade() -> None:
    for table in (
        'activity_logs',
        'reports',
        'sla_agreements',
        'contract_templates',
        'consumable_parts',
        'work_orders',
        'maintenance_parts',
        'maintenance_schedules',
        'lease_payments',
        'leases',
        'assets',
        'customers',
        'users',
        'id_sequences',
    ):
        op.drop_table(table)
