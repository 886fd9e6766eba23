"""create game_session, card and move tables

Revision ID: 4b7e9c1d2a3f
Revises:
Create Date: 2026-10-16 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b7e9c1d2a3f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'game_session',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_key', sa.String(length=64), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('completion_time', sa.Integer(), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False),
        sa.Column('matched_pairs', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game_session') as batch_op:
        batch_op.create_index('ix_game_session_session_key', ['session_key'])
        batch_op.create_index('ix_game_session_end_time', ['end_time'])
        batch_op.create_index('ix_game_session_is_completed', ['is_completed'])
    op.create_index(
        'uq_game_session_active_key', 'game_session', ['session_key'], unique=True,
        postgresql_where=sa.text('NOT is_completed'),
        sqlite_where=sa.text('is_completed = 0'),
    )

    op.create_table(
        'card',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('card_uid', sa.String(length=36), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('position', sa.String(length=2), nullable=False),
        sa.Column('is_matched', sa.Boolean(), nullable=False),
        sa.Column('is_revealed', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['game_session.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'position', name='uq_card_session_position'),
    )
    with op.batch_alter_table('card') as batch_op:
        batch_op.create_index('ix_card_session_id', ['session_id'])

    op.create_table(
        'move',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('first_position', sa.String(length=2), nullable=False),
        sa.Column('second_position', sa.String(length=2), nullable=False),
        sa.Column('first_category', sa.String(length=32), nullable=False),
        sa.Column('second_category', sa.String(length=32), nullable=False),
        sa.Column('is_match', sa.Boolean(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['game_session.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('move') as batch_op:
        batch_op.create_index('ix_move_session_id', ['session_id'])


def downgrade():
    op.drop_index('uq_game_session_active_key', table_name='game_session')
    op.drop_table('move')
    op.drop_table('card')
    op.drop_table('game_session')
