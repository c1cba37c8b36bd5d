"""Add payments.batch_ref grouping payments recorded together

Revision ID: 20261018_000002
Revises: 20261001_000001
Create Date: 2026-10-18

Existing rows keep a NULL batch_ref and get one receipt each.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018_000002'
down_revision: Union[str, None] = '20261001_000001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table('payments') as batch_op:
        batch_op.add_column(sa.Column('batch_ref', sa.String(length=32), nullable=True))
        batch_op.create_index('ix_payments_batch_ref', ['batch_ref'])


def downgrade() -> None:
    with op.batch_alter_table('payments') as batch_op:
        batch_op.drop_index('ix_payments_batch_ref')
        batch_op.drop_column('batch_ref')
