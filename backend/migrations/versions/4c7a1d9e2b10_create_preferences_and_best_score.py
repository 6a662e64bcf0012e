"""create preferences and best_score tables

Revision ID: 4c7a1d9e2b10
Revises:
Create Date: 2026-10-16 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c7a1d9e2b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    tables = set(insp.get_table_names())
    if 'preferences' not in tables:
        op.create_table(
            'preferences',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('latency_ms', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('smite_key', sa.String(length=16), nullable=False, server_default='F'),
        )
    if 'best_score' not in tables:
        op.create_table(
            'best_score',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('difficulty', sa.String(length=16), nullable=False),
            sa.Column('hp', sa.Float(), nullable=False),
            sa.Column('created_at', sa.Float(), nullable=False),
        )
        op.create_index('ix_best_score_difficulty', 'best_score', ['difficulty'])


def downgrade():
    op.drop_index('ix_best_score_difficulty', table_name='best_score')
    op.drop_table('best_score')
    op.drop_table('preferences')
