"""create admins and clients

Revision ID: 3f9a2c1d7b44
Revises:
Create Date: 2026-10-19 10:12:41.518203
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a2c1d7b44'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_admins_id'), 'admins', ['id'], unique=False)
    op.create_index(op.f('ix_admins_username'), 'admins', ['username'], unique=True)

    op.create_table(
        'clients',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('mobile', sa.String(length=20), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('application_no', sa.String(length=50), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('relation', sa.String(length=100), nullable=True),
        sa.Column('permanent_address', sa.String(length=500), nullable=True),
        sa.Column('temporary_address', sa.String(length=500), nullable=True),
        sa.Column('dob', sa.Date(), nullable=True),
        sa.Column('photo', sa.String(length=500), nullable=True),
        sa.Column('license_file', sa.String(length=500), nullable=True),
        sa.Column('class_of_vehicle', sa.String(length=50), nullable=True),
        sa.Column('date_of_enrolment', sa.Date(), nullable=True),
        sa.Column('learners_license_no', sa.String(length=50), nullable=True),
        sa.Column('expiry_of_ll', sa.Date(), nullable=True),
        sa.Column('main_test_date', sa.Date(), nullable=True),
        sa.Column('total_fee', sa.Numeric(precision=12, scale=2), server_default='0', nullable=True),
        sa.Column('paid_fee', sa.Numeric(precision=12, scale=2), server_default='0', nullable=True),
        sa.Column('fee_discount', sa.Numeric(precision=12, scale=2), server_default='0', nullable=True),
        sa.Column('total_classes', sa.Integer(), server_default='0', nullable=True),
        sa.Column('classes_attended', sa.Integer(), server_default='0', nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_clients_id'), 'clients', ['id'], unique=False)
    op.create_index(op.f('ix_clients_mobile'), 'clients', ['mobile'], unique=True)
    op.create_index(op.f('ix_clients_created_at'), 'clients', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_clients_created_at'), table_name='clients')
    op.drop_index(op.f('ix_clients_mobile'), table_name='clients')
    op.drop_index(op.f('ix_clients_id'), table_name='clients')
    op.drop_table('clients')
    op.drop_index(op.f('ix_admins_username'), table_name='admins')
    op.drop_index(op.f('ix_admins_id'), table_name='admins')
    op.drop_table('admins')
