"""001_create_movies

Revision ID: 001_create_movies
Revises:
Create Date: 2026-10-18 09:12:44.201377

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_create_movies'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    # init_db puede haber creado la tabla antes de correr migraciones
    if 'movies' in inspector.get_table_names():
        return

    op.create_table(
        'movies',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('episode_id', sa.Integer(), nullable=False),
        sa.Column('opening_crawl', sa.Text(), nullable=False),
        sa.Column('director', sa.String(length=255), nullable=False),
        sa.Column('producer', sa.String(length=255), nullable=False),
        sa.Column('release_date', sa.Date(), nullable=False),
        sa.Column('character_names', sa.JSON(), nullable=False),
        sa.Column('planet_names', sa.JSON(), nullable=False),
        sa.Column('starship_names', sa.JSON(), nullable=False),
        sa.Column('vehicle_names', sa.JSON(), nullable=False),
        sa.Column('species_names', sa.JSON(), nullable=False),
        sa.Column('external_id', sa.String(length=512), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f('ix_movies_id'), 'movies', ['id'], unique=False)
    op.create_index(op.f('ix_movies_title'), 'movies', ['title'], unique=False)
    op.create_index(op.f('ix_movies_external_id'), 'movies', ['external_id'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_movies_external_id'), table_name='movies')
    op.drop_index(op.f('ix_movies_title'), table_name='movies')
    op.drop_index(op.f('ix_movies_id'), table_name='movies')
    op.drop_table('movies')
