"""Initial schema - creates the users table with signed identity columns.

Revision ID: 001_users
Revises:
Create Date: 2026-10-17

For databases created by the API's auto_create_tables, use
`alembic stamp head` instead of running this.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_users'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the users table and its indexes."""

    # users - admin-panel users with a server-signed email identity
    op.create_table('users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('email_hash', sa.LargeBinary(), nullable=False),  # SHA-384, 48 bytes
        sa.Column('signature', sa.LargeBinary(), nullable=False),  # Ed25519, 64 bytes
        sa.Column('public_key', sa.LargeBinary(), nullable=False),  # SPKI DER, 44 bytes
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("role IN ('admin', 'user')", name='ck_users_role'),
        sa.CheckConstraint("status IN ('active', 'inactive')", name='ck_users_status'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_created_at', 'users', ['created_at'])
    op.create_index('ix_users_role_status', 'users', ['role', 'status'])


def downgrade() -> None:
    """Drop the users table."""
    op.drop_index('ix_users_role_status', table_name='users')
    op.drop_index('ix_users_created_at', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
