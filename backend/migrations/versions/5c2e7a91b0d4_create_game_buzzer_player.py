"""create game, buzzer_state and player tables

Revision ID: 5c2e7a91b0d4
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e7a91b0d4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'game' not in existing_tables:
        op.create_table(
            'game',
            sa.Column('id', sa.String(length=16), primary_key=True),
            sa.Column('green_team_name', sa.String(length=128), nullable=False),
            sa.Column('red_team_name', sa.String(length=128), nullable=False),
            sa.Column('current_state', sa.Text(), nullable=False),
            sa.Column('current_team', sa.String(length=8), nullable=False),
            sa.Column('winner', sa.String(length=8), nullable=True),
            sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        )

    if 'buzzer_state' not in existing_tables:
        op.create_table(
            'buzzer_state',
            sa.Column('game_id', sa.String(length=16),
                      sa.ForeignKey('game.id', ondelete='CASCADE'), primary_key=True),
            sa.Column('active', sa.Boolean(), nullable=False),
            sa.Column('buzzed_team', sa.String(length=8), nullable=True),
            sa.Column('buzzed_player', sa.String(length=128), nullable=True),
            sa.Column('buzzed_at', sa.String(length=40), nullable=True),
            sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        )

    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_id', sa.String(length=16),
                      sa.ForeignKey('game.id', ondelete='CASCADE'), nullable=False),
            sa.Column('username', sa.String(length=128), nullable=False),
            sa.Column('team', sa.String(length=8), nullable=False),
            sa.UniqueConstraint('game_id', 'username', name='uq_player_game_username'),
        )
        op.create_index('ix_player_game_id', 'player', ['game_id'])


def downgrade():
    op.drop_index('ix_player_game_id', table_name='player')
    op.drop_table('player')
    op.drop_table('buzzer_state')
    op.drop_table('game')
