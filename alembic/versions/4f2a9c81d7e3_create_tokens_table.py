"""create_tokens_table

Revision ID: 4f2a9c81d7e3
Revises: 
Create Date: 2026-10-19 09:12:44.218305

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f2a9c81d7e3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'tokens',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('entity_name', sa.String(length=255), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('behavior', sa.String(length=10), nullable=False),
        sa.Column('remaining_uses', sa.SmallInteger(), nullable=True),
        # Stored as naive UTC
        sa.Column('expiration_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_tokens_owner', 'tokens', ['entity_name', 'entity_id', 'type'])
    op.create_index('ix_tokens_code', 'tokens', ['code', 'type'])
    op.create_index('ix_tokens_expiration_at', 'tokens', ['expiration_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_tokens_expiration_at', table_name='tokens')
    op.drop_index('ix_tokens_code', table_name='tokens')
    op.drop_index('ix_tokens_owner', table_name='tokens')
    op.drop_table('tokens')
