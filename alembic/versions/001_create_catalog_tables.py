"""Create brands, categories, products and cart tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

product_status = postgresql.ENUM(
    'pending', 'draft', 'published', name='product_status', create_type=False
)


def upgrade() -> None:
    """Create catalog and cart tables."""
    product_status.create(op.get_bind(), checkfirst=True)

    # Brands table
    op.create_table(
        'brands',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.Text(), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Categories table
    op.create_table(
        'categories',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.Text(), nullable=False, unique=True),
        sa.Column('image', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Products table; category and related ids live in arrays
    op.create_table(
        'products',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.Text(), nullable=False),
        sa.Column('type', sa.String(100), nullable=True, index=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('moq', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('custom_description', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('pictures', postgresql.ARRAY(sa.Text()), nullable=False, server_default='{}'),
        sa.Column('tags', postgresql.ARRAY(sa.String(255)), nullable=False, server_default='{}'),
        sa.Column('sku', sa.String(100), nullable=False),
        sa.Column('brand_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('brands.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('category_ids', postgresql.ARRAY(postgresql.UUID(as_uuid=False)), nullable=False, server_default='{}'),
        sa.Column('status', product_status, nullable=False, server_default='pending', index=True),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('related_products', postgresql.ARRAY(postgresql.UUID(as_uuid=False)), nullable=False, server_default='{}'),
        sa.Column('meta_title', sa.String(255), nullable=False),
        sa.Column('meta_description', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'), index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
        sa.CheckConstraint('moq >= 1', name='ck_products_moq_positive'),
    )

    # Named so write conflicts can be told apart
    op.create_unique_constraint('products_slug_key', 'products', ['slug'])

    # Category membership is tested with id = ANY(category_ids)
    op.create_index(
        'ix_products_category_ids',
        'products',
        ['category_ids'],
        postgresql_using='gin',
    )

    # Cart table
    op.create_table(
        'cart',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=False), nullable=False, index=True),
        sa.Column('product_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('quantity >= 1', name='ck_cart_quantity_positive'),
    )

    # One entry per (user, product)
    op.create_unique_constraint(
        'uq_cart_user_product',
        'cart',
        ['user_id', 'product_id'],
    )


def downgrade() -> None:
    """Drop catalog and cart tables."""
    op.drop_table('cart')
    op.drop_index('ix_products_category_ids', table_name='products')
    op.drop_table('products')
    op.drop_table('categories')
    op.drop_table('brands')
    product_status.drop(op.get_bind(), checkfirst=True)
