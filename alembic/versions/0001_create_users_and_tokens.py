"""create users and tokens

Revision ID: createusersandtokens
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'createusersandtokens'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('login', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('ADMIN', 'USER', name='role'), nullable=False),
        sa.Column('activated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_users_login', 'users', ['login'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('value', sa.String(length=36), nullable=False),
        sa.Column('kind', sa.Enum('ACTIVATION', 'RESET_PASSWORD', name='tokenkind'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_tokens_user_id', 'tokens', ['user_id'])
    op.create_index('ix_tokens_value', 'tokens', ['value'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_tokens_value', table_name='tokens')
    op.drop_index('ix_tokens_user_id', table_name='tokens')
    op.drop_table('tokens')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_login', table_name='users')
    op.drop_table('users')
    sa.Enum(name='tokenkind').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='role').drop(op.get_bind(), checkfirst=True)
