"""create warranty tables

Revision ID: 3f9a2c71d4b8
Revises: 
Create Date: 2026-10-18 10:12:44.183201

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '3f9a2c71d4b8'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ---------- ENUM DEFINITIONS ----------
    # SQLAlchemy persists enum member names, not values
    cameratype = sa.Enum('ip', 'analog', 'wifi', name='cameratype')
    warrantystatus = sa.Enum('active', 'expired', 'voided', name='warrantystatus')
    claimstatus = sa.Enum('pending', 'approved', 'rejected', name='claimstatus')
    adminrole = sa.Enum('super_admin', 'staff', name='adminrole')

    op.create_table(
        'products',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('product_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('product_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('brand', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('camera_type', cameratype, nullable=False),
        sa.Column('resolution', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('warranty_months', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('in_stock', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_products_product_name'), 'products', ['product_name'], unique=True)

    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('username', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('phone', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('role', adminrole, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('password_hash', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('refresh_token', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_admins_username'), 'admins', ['username'], unique=True)
    op.create_index(op.f('ix_admins_email'), 'admins', ['email'], unique=True)

    op.create_table(
        'warranty_records',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('warranty_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('customer_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('phone_number', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('customer_address', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('quantity_purchased', sa.Integer(), nullable=False),
        sa.Column('purchase_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('warranty_valid_until', sa.DateTime(timezone=True), nullable=False),
        sa.Column('warranty_status', warrantystatus, nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_warranty_records_warranty_id'), 'warranty_records', ['warranty_id'], unique=True)
    op.create_index(op.f('ix_warranty_records_phone_number'), 'warranty_records', ['phone_number'], unique=False)
    op.create_index(op.f('ix_warranty_records_product_id'), 'warranty_records', ['product_id'], unique=False)
    op.create_index(op.f('ix_warranty_records_warranty_valid_until'), 'warranty_records', ['warranty_valid_until'], unique=False)
    op.create_index(op.f('ix_warranty_records_warranty_status'), 'warranty_records', ['warranty_status'], unique=False)

    # No FK to warranty_records: claims survive a record's deletion
    op.create_table(
        'warranty_claims',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('claim_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('warranty_record_id', sa.Uuid(), nullable=False),
        sa.Column('customer_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('phone_number', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('issue_description', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('claim_status', claimstatus, nullable=False),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_warranty_claims_claim_id'), 'warranty_claims', ['claim_id'], unique=True)
    op.create_index(op.f('ix_warranty_claims_warranty_record_id'), 'warranty_claims', ['warranty_record_id'], unique=False)
    op.create_index(op.f('ix_warranty_claims_phone_number'), 'warranty_claims', ['phone_number'], unique=False)
    op.create_index(op.f('ix_warranty_claims_claim_status'), 'warranty_claims', ['claim_status'], unique=False)


def downgrade() -> None:
    op.drop_table('warranty_claims')
    op.drop_table('warranty_records')
    op.drop_table('admins')
    op.drop_table('products')

    bind = op.get_bind()
    for name in ['claimstatus', 'warrantystatus', 'adminrole', 'cameratype']:
        sa.Enum(name=name).drop(bind, checkfirst=True)
