"""Create users and comments tables

Revision ID: 3f2a7c1d9e40
Revises:
Create Date: 2026-01-12 10:04:31.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f2a7c1d9e40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'comments',
        sa.Column('comment_id', sa.String(length=36), nullable=False),
        sa.Column('centre_id', sa.String(length=200), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('text', sa.String(length=500), nullable=False),
        sa.Column('parent_comment_id', sa.String(length=36), nullable=True),
        sa.Column('level', sa.String(length=50), nullable=True),
        sa.Column('subject', sa.String(length=100), nullable=True),
        sa.Column('hidden', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['parent_comment_id'], ['comments.comment_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('comment_id')
    )
    op.create_index('ix_comments_centre_id', 'comments', ['centre_id'])
    op.create_index('ix_comments_parent_comment_id', 'comments', ['parent_comment_id'])


def downgrade():
    op.drop_index('ix_comments_parent_comment_id', table_name='comments')
    op.drop_index('ix_comments_centre_id', table_name='comments')
    op.drop_table('comments')

    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
