"""initial accounts, subscriptions, videos and watch history

Revision ID: 4b1e0c7d92a3
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '4b1e0c7d92a3'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return (
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def upgrade():
    op.create_table(
        'accounts',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('refresh_token', sa.String(length=1024), nullable=True),
        sa.Column('avatar', sa.String(length=1024), nullable=False),
        sa.Column('avatar_public_id', sa.String(length=255), nullable=True),
        sa.Column('cover_image', sa.String(length=1024), nullable=False),
        sa.Column('cover_public_id', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_accounts'),
        sa.UniqueConstraint('email', name='uq_accounts_email'),
        sa.UniqueConstraint('username', name='uq_accounts_username'),
    )
    op.create_index('ix_accounts_username', 'accounts', ['username'])
    op.create_index('ix_accounts_full_name', 'accounts', ['full_name'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('subscriber_id', sa.String(length=32), nullable=False),
        sa.Column('channel_id', sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['subscriber_id'], ['accounts.id'],
            name='fk_subscriptions_subscriber_id_accounts', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['channel_id'], ['accounts.id'],
            name='fk_subscriptions_channel_id_accounts', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_subscriptions'),
        sa.UniqueConstraint('subscriber_id', 'channel_id', name='uq_subscriptions_subscriber_channel'),
    )
    op.create_index('ix_subscriptions_channel', 'subscriptions', ['channel_id'])

    op.create_table(
        'videos',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('video_file', sa.String(length=1024), nullable=False),
        sa.Column('thumbnail', sa.String(length=1024), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('duration', sa.Float(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('owner_id', sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_videos'),
    )
    op.create_index('ix_videos_owner_id', 'videos', ['owner_id'])

    op.create_table(
        'watch_history_entries',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('account_id', sa.String(length=32), nullable=False),
        sa.Column('video_id', sa.String(length=32), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'],
            name='fk_watch_history_entries_account_id_accounts', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_watch_history_entries'),
        sa.UniqueConstraint('account_id', 'position', name='uq_watch_history_account_position'),
    )


def downgrade():
    op.drop_table('watch_history_entries')
    op.drop_index('ix_videos_owner_id', table_name='videos')
    op.drop_table('videos')
    op.drop_index('ix_subscriptions_channel', table_name='subscriptions')
    op.drop_table('subscriptions')
    op.drop_index('ix_accounts_full_name', table_name='accounts')
    op.drop_index('ix_accounts_username', table_name='accounts')
    op.drop_table('accounts')
