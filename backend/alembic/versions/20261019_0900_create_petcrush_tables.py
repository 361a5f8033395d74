"""Create petcrush tables

Revision ID: 20261019_0900
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_0900'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def is_sqlite():
    """Check if we're running on SQLite"""
    bind = op.get_bind()
    return bind.dialect.name == 'sqlite'


def _timestamps(updated=True):
    columns = [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]
    if updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return columns


def upgrade() -> None:
    # Schema handling - SQLite doesn't support schemas
    schema = None if is_sqlite() else 'petcrush'
    prefix = '' if is_sqlite() else 'petcrush.'

    if not is_sqlite():
        op.execute("CREATE SCHEMA IF NOT EXISTS petcrush")

    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('username', sa.String(255), nullable=True, unique=True),
        sa.Column('display_name', sa.String(120), nullable=True),
        sa.Column('first_name', sa.String(120), nullable=True),
        sa.Column('last_name', sa.String(120), nullable=True),
        sa.Column('profile_image_url', sa.String(1000), nullable=True),
        sa.Column('whatsapp', sa.String(32), nullable=True),
        sa.Column('region', sa.String(160), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('onboarding_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        schema=schema
    )
    op.create_index('ix_users_email', 'users', ['email'], schema=schema)

    op.create_table(
        'pets',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('owner_id', sa.String(36), sa.ForeignKey(f'{prefix}users.id'), nullable=False),
        sa.Column('display_name', sa.String(120), nullable=False),
        sa.Column('species', sa.String(40), nullable=False),
        sa.Column('breed', sa.String(120), nullable=False),
        sa.Column('gender', sa.String(10), nullable=False),
        sa.Column('size', sa.String(10), nullable=True),
        sa.Column('colors', sa.JSON(), nullable=False),
        sa.Column('age_months', sa.Integer(), nullable=False),
        sa.Column('pedigree', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('vaccinated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('trained', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('neutered', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('health_notes', sa.Text(), nullable=True),
        sa.Column('objective', sa.String(20), nullable=False),
        sa.Column('is_donation', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('region', sa.String(160), nullable=False),
        sa.Column('country', sa.String(80), nullable=True),
        sa.Column('state', sa.String(80), nullable=True),
        sa.Column('city', sa.String(120), nullable=True),
        sa.Column('neighborhood', sa.String(120), nullable=True),
        sa.Column('about', sa.Text(), nullable=False),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('video_url', sa.String(1000), nullable=False),
        sa.Column('video_duration', sa.Float(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint('age_months >= 0', name='ck_pets_age_months'),
        schema=schema
    )
    op.create_index('idx_pets_owner', 'pets', ['owner_id'], schema=schema)
    op.create_index('idx_pets_feed', 'pets', ['species', 'gender', 'objective'], schema=schema)
    # At most one active pet per owner
    op.create_index(
        'uq_pets_owner_active', 'pets', ['owner_id'],
        unique=True,
        schema=schema,
        postgresql_where=sa.text('is_active'),
        sqlite_where=sa.text('is_active = 1'),
    )

    op.create_table(
        'likes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('liker_pet_id', sa.Integer(), sa.ForeignKey(f'{prefix}pets.id'), nullable=False),
        sa.Column('target_pet_id', sa.Integer(), sa.ForeignKey(f'{prefix}pets.id'), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint('liker_pet_id', 'target_pet_id', name='uq_likes_liker_target'),
        sa.CheckConstraint('liker_pet_id <> target_pet_id', name='ck_likes_not_self'),
        schema=schema
    )
    op.create_index('idx_likes_target', 'likes', ['target_pet_id'], schema=schema)

    op.create_table(
        'matches',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('pet_low_id', sa.Integer(), sa.ForeignKey(f'{prefix}pets.id'), nullable=False),
        sa.Column('pet_high_id', sa.Integer(), sa.ForeignKey(f'{prefix}pets.id'), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint('pet_low_id', 'pet_high_id', name='uq_matches_pair'),
        sa.CheckConstraint('pet_low_id < pet_high_id', name='ck_matches_canonical'),
        schema=schema
    )
    op.create_index('idx_matches_high', 'matches', ['pet_high_id'], schema=schema)

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('match_id', sa.Integer(), sa.ForeignKey(f'{prefix}matches.id'), nullable=False),
        sa.Column('sender_id', sa.String(36), sa.ForeignKey(f'{prefix}users.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        *_timestamps(updated=False),
        schema=schema
    )
    op.create_index('idx_messages_match_created', 'messages', ['match_id', 'created_at'], schema=schema)

    op.create_table(
        'reports',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('reporter_id', sa.String(36), sa.ForeignKey(f'{prefix}users.id'), nullable=False),
        sa.Column('target_pet_id', sa.Integer(), sa.ForeignKey(f'{prefix}pets.id'), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        *_timestamps(),
        schema=schema
    )
    op.create_index('idx_reports_target', 'reports', ['target_pet_id'], schema=schema)
    op.create_index('idx_reports_status', 'reports', ['status'], schema=schema)

    op.create_table(
        'adoption_posts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('owner_id', sa.String(36), sa.ForeignKey(f'{prefix}users.id'), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('species', sa.String(40), nullable=False),
        sa.Column('breed', sa.String(120), nullable=False),
        sa.Column('age_label', sa.String(60), nullable=False),
        sa.Column('country', sa.String(80), nullable=False),
        sa.Column('state', sa.String(80), nullable=False),
        sa.Column('city', sa.String(120), nullable=False),
        sa.Column('pedigree', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('neutered', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('contact', sa.String(200), nullable=False),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='DISPONIVEL'),
        *_timestamps(),
        schema=schema
    )
    op.create_index('idx_adoption_posts_owner', 'adoption_posts', ['owner_id'], schema=schema)
    op.create_index('idx_adoption_posts_status', 'adoption_posts', ['status'], schema=schema)

    op.create_table(
        'otp_codes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('code_hash', sa.String(64), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('used_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
        schema=schema
    )
    op.create_index('idx_otp_codes_email', 'otp_codes', ['email'], schema=schema)


def downgrade() -> None:
    schema = None if is_sqlite() else 'petcrush'

    for table in ('otp_codes', 'adoption_posts', 'reports', 'messages', 'matches', 'likes', 'pets', 'users'):
        op.drop_table(table, schema=schema)
