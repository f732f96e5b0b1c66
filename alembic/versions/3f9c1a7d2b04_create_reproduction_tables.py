"""create_reproduction_tables

Revision ID: 3f9c1a7d2b04
Revises: 
Create Date: 2026-10-16 09:12:41.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f9c1a7d2b04'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, mothers, litters, offspring and reports tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('hashed_password', sa.String(1024), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('farm_name', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'mothers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('mother_id', sa.String(255), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('next_litter_sequence', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('owner_id', 'mother_id', name='uq_mothers_owner_mother'),
    )
    op.create_index('ix_mothers_owner_id', 'mothers', ['owner_id'])

    op.create_table(
        'litters',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('litter_id', sa.String(300), nullable=False),
        sa.Column('mother_id', sa.String(255), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('father_id', sa.String(255), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=False),
        sa.Column('reported_litter_size', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('owner_id', 'litter_id', name='uq_litters_owner_litter'),
        sa.UniqueConstraint('owner_id', 'mother_id', 'sequence', name='uq_litters_owner_mother_sequence'),
    )
    op.create_index('ix_litters_owner_id', 'litters', ['owner_id'])
    op.create_index('ix_litters_mother_id', 'litters', ['mother_id'])
    op.create_index('ix_litters_birth_date', 'litters', ['birth_date'])

    op.create_table(
        'offspring',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('litter_pk', sa.Integer(), sa.ForeignKey('litters.id', ondelete='CASCADE'), nullable=False),
        sa.Column('offspring_id', sa.String(255), nullable=False),
        sa.Column('sex', sa.String(20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('is_alive', sa.Boolean(), nullable=False),
        sa.Column('survived_to_weaning', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('owner_id', 'offspring_id', name='uq_offspring_owner_offspring'),
    )
    op.create_index('ix_offspring_owner_id', 'offspring', ['owner_id'])
    op.create_index('ix_offspring_litter_pk', 'offspring', ['litter_pk'])

    op.create_table(
        'reports',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('generated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('target_mothers', sa.JSON(), nullable=False),
        sa.Column('results', sa.JSON(), nullable=False),
        sa.Column('summary', sa.Text(), nullable=False),
        sa.UniqueConstraint('owner_id', 'name', name='uq_reports_owner_name'),
    )
    op.create_index('ix_reports_owner_id', 'reports', ['owner_id'])


def downgrade() -> None:
    """Drop all reproduction tracking tables."""
    op.drop_index('ix_reports_owner_id', 'reports')
    op.drop_table('reports')
    op.drop_index('ix_offspring_litter_pk', 'offspring')
    op.drop_index('ix_offspring_owner_id', 'offspring')
    op.drop_table('offspring')
    op.drop_index('ix_litters_birth_date', 'litters')
    op.drop_index('ix_litters_mother_id', 'litters')
    op.drop_index('ix_litters_owner_id', 'litters')
    op.drop_table('litters')
    op.drop_index('ix_mothers_owner_id', 'mothers')
    op.drop_table('mothers')
    op.drop_index('ix_users_email', 'users')
    op.drop_table('users')
