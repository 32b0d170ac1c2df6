"""Initial Schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

创建建站底座：
- users: 站点所有者
- sites: 站点表（域名全局唯一）
- themes: 主题表
- pages: 页面表（site_id + path 唯一，组件树内嵌 JSON）
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # ==========================================
    # 1. users - 用户表
    # ==========================================
    op.create_table(
        'users',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('email', sa.String(200), nullable=False),
        sa.Column('hashed_password', sa.String(200), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('role', sa.String(20), server_default='user', nullable=False),
        sa.Column('is_active', sa.Boolean, server_default=sa.true(), nullable=False),
        sa.Column('reset_password_token', sa.String(100)),
        sa.Column('reset_password_expires', sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_reset_password_token', 'users', ['reset_password_token'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    # ==========================================
    # 2. sites - 站点表
    # ==========================================
    op.create_table(
        'sites',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('owner_id', sa.String(50), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('domain', sa.String(255)),
        sa.Column('description', sa.Text),
        sa.Column('theme_id', sa.String(50)),
        sa.Column('navigation', JSONType, nullable=False),
        sa.Column('settings', JSONType, nullable=False),
        sa.Column('status', sa.String(20), server_default='draft', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_sites_owner_id', 'sites', ['owner_id'])
    op.create_index('ix_sites_domain', 'sites', ['domain'], unique=True)
    op.create_index('ix_sites_theme_id', 'sites', ['theme_id'])
    op.create_index('ix_sites_status', 'sites', ['status'])
    op.create_index('ix_sites_created_at', 'sites', ['created_at'])

    # ==========================================
    # 3. themes - 主题表
    # ==========================================
    op.create_table(
        'themes',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('site_id', sa.String(50), sa.ForeignKey('sites.id'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('primary_color', sa.String(50)),
        sa.Column('secondary_color', sa.String(50)),
        sa.Column('accent_color', sa.String(50)),
        sa.Column('success_color', sa.String(50)),
        sa.Column('danger_color', sa.String(50)),
        sa.Column('warning_color', sa.String(50)),
        sa.Column('info_color', sa.String(50)),
        sa.Column('sale_color', sa.String(50)),
        sa.Column('star_color', sa.String(50)),
        sa.Column('font_family', sa.String(100)),
        sa.Column('heading_font_family', sa.String(100)),
        sa.Column('text_color', sa.String(50)),
        sa.Column('heading_color', sa.String(50)),
        sa.Column('link_color', sa.String(50)),
        sa.Column('link_hover_color', sa.String(50)),
        sa.Column('border_radius', sa.String(20)),
        sa.Column('header_bg_color', sa.String(50)),
        sa.Column('footer_bg_color', sa.String(50)),
        sa.Column('footer_text_color', sa.String(50)),
        sa.Column('button_styles', JSONType, nullable=False),
        sa.Column('custom_css', sa.Text),
        sa.Column('fonts', JSONType, nullable=False),
        sa.Column('is_default', sa.Boolean, server_default=sa.false(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_themes_site_id', 'themes', ['site_id'])
    op.create_index('ix_themes_is_default', 'themes', ['is_default'])
    op.create_index('ix_themes_created_at', 'themes', ['created_at'])

    # ==========================================
    # 4. pages - 页面表
    # ==========================================
    op.create_table(
        'pages',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('site_id', sa.String(50), sa.ForeignKey('sites.id'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('path', sa.String(500), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(300)),
        sa.Column('description', sa.Text),
        sa.Column('seo', JSONType, nullable=False),
        sa.Column('components', JSONType, nullable=False),
        sa.Column('is_default', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('is_published', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.UniqueConstraint('site_id', 'path', name='uq_pages_site_id_path'),
    )
    op.create_index('ix_pages_site_id', 'pages', ['site_id'])
    op.create_index('ix_pages_site_id_is_published', 'pages', ['site_id', 'is_published'])
    op.create_index('ix_pages_created_at', 'pages', ['created_at'])


def downgrade() -> None:
    op.drop_table('pages')
    op.drop_table('themes')
    op.drop_table('sites')
    op.drop_table('users')
