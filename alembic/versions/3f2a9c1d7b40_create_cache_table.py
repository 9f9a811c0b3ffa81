"""create cache table

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-19 10:02:11.418305

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'cache',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('type', sa.String(length=64), nullable=False),
        sa.Column('key', sa.String(length=255), nullable=False),
        sa.Column('data', sa.LargeBinary(), nullable=False),
        sa.Column('expires', sa.Integer(), nullable=False),
        sa.UniqueConstraint('type', 'key', name='uq_cache_type_key'),
    )
    op.create_index('ix_cache_expires', 'cache', ['expires'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_cache_expires', table_name='cache')
    op.drop_table('cache')
