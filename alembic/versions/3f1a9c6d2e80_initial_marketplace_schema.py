"""Initial marketplace schema: leads, orders, users, wishlist

Revision ID: 3f1a9c6d2e80
Revises:
Create Date: 2026-03-02 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c6d2e80'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('leads',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('websiteName', sa.Text(), nullable=True),
        sa.Column('websiteUrl', sa.Text(), nullable=True),
        sa.Column('firstName', sa.Text(), nullable=True),
        sa.Column('lastName', sa.Text(), nullable=True),
        sa.Column('jobTitle', sa.Text(), nullable=True),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('instagram', sa.Text(), nullable=True),
        sa.Column('linkedin', sa.Text(), nullable=True),
        sa.Column('industry', sa.Text(), nullable=True),
        sa.Column('location', sa.Text(), nullable=True),
        sa.Column('tiktok', sa.Text(), nullable=True),
        sa.Column('founded', sa.Text(), nullable=True),
        sa.Column('facebookPixel', sa.Text(), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('createdAt', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        # Legacy columns (records created before the import format existed)
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('company', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leads_industry', 'leads', ['industry'])
    op.create_index('ix_leads_status', 'leads', ['status'])
    op.create_index('ix_leads_createdAt', 'leads', ['createdAt'])

    op.create_table('orders',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('userId', sa.Text(), nullable=False),
        sa.Column('userEmail', sa.Text(), nullable=True),
        sa.Column('leadId', sa.Text(), nullable=False),
        sa.Column('leadData', sa.JSON(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('purchasedAt', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_userId', 'orders', ['userId'])
    op.create_index('ix_orders_purchasedAt', 'orders', ['purchasedAt'])

    op.create_table('users',
        sa.Column('uid', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('displayName', sa.Text(), nullable=True),
        sa.Column('role', sa.Text(), nullable=False),
        sa.Column('companyName', sa.Text(), nullable=True),
        sa.Column('jobTitle', sa.Text(), nullable=True),
        sa.Column('website', sa.Text(), nullable=True),
        sa.Column('professionalInterests', sa.JSON(), nullable=True),
        sa.Column('alertPreferences', sa.JSON(), nullable=True),
        sa.Column('createdAt', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('uid'),
    )

    op.create_table('wishlist',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('userId', sa.Text(), nullable=False),
        sa.Column('leadId', sa.Text(), nullable=False),
        sa.Column('createdAt', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('userId', 'leadId', name='uq_wishlist_user_lead'),
    )
    op.create_index('ix_wishlist_userId', 'wishlist', ['userId'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_wishlist_userId', table_name='wishlist')
    op.drop_table('wishlist')
    op.drop_table('users')
    op.drop_index('ix_orders_purchasedAt', table_name='orders')
    op.drop_index('ix_orders_userId', table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_leads_createdAt', table_name='leads')
    op.drop_index('ix_leads_status', table_name='leads')
    op.drop_index('ix_leads_industry', table_name='leads')
    op.drop_table('leads')
