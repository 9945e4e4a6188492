"""create fleet tables

Revision ID: fleet_tables_001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'fleet_tables_001'
down_revision = None
branch_labels = None
depends_on = None

userstatus = sa.Enum('ACTIVE', 'INACTIVE', name='userstatus')
tokentype = sa.Enum('ACCESS', 'REFRESH', name='tokentype')
fueltype = sa.Enum('CNG', 'DIESEL', 'BIO_DIESEL', 'OTHER', name='fueltype')
vehiclestatus = sa.Enum('ACTIVE', 'MAINTENANCE', 'INACTIVE', name='vehiclestatus')
driverstatus = sa.Enum('ACTIVE', 'INACTIVE', 'SUSPENDED', 'ON_LEAVE', name='driverstatus')
tripstatus = sa.Enum('ACTIVE', 'COMPLETED', 'CANCELLED', name='tripstatus')
expensetype = sa.Enum('FUEL', 'MAINTENANCE', 'INSURANCE', 'TOLLS', 'OTHER', name='expensetype')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _sub_trip_table(name):
    op.create_table(
        name,
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('trip_id', sa.String(), sa.ForeignKey('trips.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('source', sa.String(), nullable=False),
        sa.Column('destination', sa.String(), nullable=False),
        sa.Column('total_weight', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_fare', sa.Numeric(12, 2), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index(f'ix_{name}_trip_id', name, ['trip_id'])
    op.create_index(f'ix_{name}_date', name, ['date'])


def _item_table(name, parent_table, parent_column):
    op.create_table(
        name,
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column(parent_column, sa.String(), sa.ForeignKey(f'{parent_table}.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sr_no', sa.Integer(), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=False, server_default=''),
        sa.Column('receiver_name', sa.String(), nullable=False, server_default=''),
        sa.Column('goods_type_id', sa.String(), sa.ForeignKey('goods_types.id', ondelete='SET NULL'), nullable=True),
        sa.Column('total_weight', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('fare_per_piece', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index(f'ix_{name}_{parent_column}', name, [parent_column])


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False, server_default=''),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('company_name', sa.String(), nullable=True),
        sa.Column('status', userstatus, nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'api_tokens',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token_hash', sa.String(), nullable=False),
        sa.Column('token_type', tokentype, nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_api_tokens_user_id', 'api_tokens', ['user_id'])
    op.create_index('ix_api_tokens_token_hash', 'api_tokens', ['token_hash'], unique=True)

    op.create_table(
        'vehicles',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('license_plate', sa.String(20), nullable=False),
        sa.Column('vehicle_owner', sa.String(), nullable=False),
        sa.Column('fuel_type', fueltype, nullable=False),
        sa.Column('financed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('emi_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('emi_date', sa.Date(), nullable=True),
        sa.Column('permit_expiry', sa.Date(), nullable=True),
        sa.Column('national_permit_expiry', sa.Date(), nullable=True),
        sa.Column('pucc_expiry', sa.Date(), nullable=True),
        sa.Column('insurance_expiry', sa.Date(), nullable=True),
        sa.Column('status', vehiclestatus, nullable=False),
        sa.Column('mileage', sa.Integer(), nullable=True),
        sa.Column('last_service', sa.Date(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'license_plate', name='uq_vehicles_user_plate'),
    )
    op.create_index('ix_vehicles_user_id', 'vehicles', ['user_id'])
    op.create_index('ix_vehicles_license_plate', 'vehicles', ['license_plate'])
    op.create_index('ix_vehicles_status', 'vehicles', ['status'])

    op.create_table(
        'drivers',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False, server_default=''),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('license_number', sa.String(), nullable=False),
        sa.Column('joining_date', sa.Date(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('salary', sa.Numeric(12, 2), nullable=True),
        sa.Column('experience', sa.Integer(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('status', driverstatus, nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_drivers_user_id', 'drivers', ['user_id'])
    op.create_index('ix_drivers_status', 'drivers', ['status'])

    op.create_table(
        'goods_types',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'name', name='uq_goods_types_user_name'),
    )
    op.create_index('ix_goods_types_user_id', 'goods_types', ['user_id'])

    op.create_table(
        'trips',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('trip_number', sa.String(), nullable=False),
        sa.Column('vehicle_id', sa.String(), sa.ForeignKey('vehicles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('local_driver_id', sa.String(), sa.ForeignKey('drivers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('route_driver_id', sa.String(), sa.ForeignKey('drivers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', tripstatus, nullable=False),
        sa.Column('completed_steps', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_trips_user_id', 'trips', ['user_id'])
    op.create_index('ix_trips_trip_number', 'trips', ['trip_number'])
    op.create_index('ix_trips_vehicle_id', 'trips', ['vehicle_id'])
    op.create_index('ix_trips_status', 'trips', ['status'])

    _sub_trip_table('inbound_trips')
    _sub_trip_table('outbound_trips')
    _item_table('inbound_trip_items', 'inbound_trips', 'inbound_trip_id')
    _item_table('outbound_trip_items', 'outbound_trips', 'outbound_trip_id')

    op.create_table(
        'expenses',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('vehicle_id', sa.String(), sa.ForeignKey('vehicles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('type', expensetype, nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('receipt', sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_expenses_user_id', 'expenses', ['user_id'])
    op.create_index('ix_expenses_vehicle_id', 'expenses', ['vehicle_id'])
    op.create_index('ix_expenses_type', 'expenses', ['type'])
    op.create_index('ix_expenses_date', 'expenses', ['date'])


def downgrade():
    for table in (
        'expenses',
        'outbound_trip_items',
        'inbound_trip_items',
        'outbound_trips',
        'inbound_trips',
        'trips',
        'goods_types',
        'drivers',
        'vehicles',
        'api_tokens',
        'users',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (expensetype, tripstatus, driverstatus, vehiclestatus, fueltype, tokentype, userstatus):
        enum_type.drop(bind, checkfirst=True)
