"""add budget and cost tracking

Revision ID: 8d21f5a06e4b
Revises: 3b9e41c7a2d0
Create Date: 2025-11-14 18:42:51.207316

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '8d21f5a06e4b'
down_revision: Union[str, None] = '3b9e41c7a2d0'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Amounts are stored in cents
    op.add_column('activities', sa.Column('budget', sa.Integer(), nullable=False, server_default='0'))
    op.add_column('activities', sa.Column(
        'budget_breakdown',
        sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
        nullable=False,
        server_default='[]',
    ))
    op.add_column('activities', sa.Column('budget_buffer', sa.Integer(), nullable=False, server_default='0'))

    op.add_column('tasks', sa.Column('cost', sa.Integer(), nullable=True))
    op.add_column('tasks', sa.Column('cost_notes', sa.Text(), nullable=True))


def downgrade() -> None:
    op.drop_column('tasks', 'cost_notes')
    op.drop_column('tasks', 'cost')
    op.drop_column('activities', 'budget_buffer')
    op.drop_column('activities', 'budget_breakdown')
    op.drop_column('activities', 'budget')
