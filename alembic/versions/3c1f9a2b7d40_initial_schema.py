"""initial_schema

Revision ID: 3c1f9a2b7d40
Revises:
Create Date: 2026-10-19 09:12:31.418207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f9a2b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create reference, business and school tables."""
    op.create_table(
        'us_states',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('code', sa.String(length=2), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code'),
    )

    op.create_table(
        'addresses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('street_address', sa.String(length=255), nullable=False),
        sa.Column('address_line_2', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('state_id', sa.Integer(), nullable=False),
        sa.Column('zip_code', sa.String(length=10), nullable=False),
        sa.Column('latitude', sa.Numeric(precision=10, scale=7), nullable=True),
        sa.Column('longitude', sa.Numeric(precision=10, scale=7), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['state_id'], ['us_states.id']),
        sa.PrimaryKeyConstraint('id'),
    )

    for table_name in ('business_types', 'incentive_types'):
        op.create_table(
            table_name,
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('description', sa.String(length=255), nullable=True),
            sa.Column('display_order', sa.Integer(), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )

    op.create_table(
        'businesses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('business_type_id', sa.Integer(), nullable=False),
        sa.Column('submitted_by_user_id', sa.Integer(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['business_type_id'], ['business_types.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_business_deleted_at', 'businesses', ['deleted_at'])

    op.create_table(
        'business_locations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('address_id', sa.Integer(), nullable=True),
        sa.Column('location_name', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('hours_of_operation', sa.String(length=255), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id']),
        sa.ForeignKeyConstraint(['address_id'], ['addresses.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_business_location_business', 'business_locations', ['business_id'])

    op.create_table(
        'incentives',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('discount_amount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('discount_percentage', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('terms_and_conditions', sa.Text(), nullable=True),
        sa.Column('verification_required', sa.String(length=255), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('submitted_by_user_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_incentive_business_active', 'incentives', ['business_id', 'is_active']
    )

    op.create_table(
        'business_incentive_types',
        sa.Column('incentive_id', sa.Integer(), nullable=False),
        sa.Column('incentive_type_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['incentive_id'], ['incentives.id']),
        sa.ForeignKeyConstraint(['incentive_type_id'], ['incentive_types.id']),
        sa.PrimaryKeyConstraint('incentive_id', 'incentive_type_id'),
    )

    op.create_table(
        'schools',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('domain', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    # Domains are unique among live schools only
    op.create_index(
        'uq_school_domain_live',
        'schools',
        ['domain'],
        unique=True,
        sqlite_where=sa.text('deleted_at IS NULL'),
        postgresql_where=sa.text('deleted_at IS NULL'),
    )

    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('school_id', sa.Integer(), nullable=False),
        sa.Column('parent_location_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('latitude', sa.Numeric(precision=10, scale=7), nullable=True),
        sa.Column('longitude', sa.Numeric(precision=10, scale=7), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id']),
        sa.ForeignKeyConstraint(['parent_location_id'], ['locations.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_location_school', 'locations', ['school_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_location_school', table_name='locations')
    op.drop_table('locations')
    op.drop_index('uq_school_domain_live', table_name='schools')
    op.drop_table('schools')
    op.drop_table('business_incentive_types')
    op.drop_index('ix_incentive_business_active', table_name='incentives')
    op.drop_table('incentives')
    op.drop_index('ix_business_location_business', table_name='business_locations')
    op.drop_table('business_locations')
    op.drop_index('ix_business_deleted_at', table_name='businesses')
    op.drop_table('businesses')
    op.drop_table('incentive_types')
    op.drop_table('business_types')
    op.drop_table('addresses')
    op.drop_table('us_states')
