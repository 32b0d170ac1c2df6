"""
数据库模型

所有 SQLAlchemy 模型的统一导出
"""

from sitebuilder.database.models.user import User, UserRole
from sitebuilder.database.models.site import Site, SiteStatus
from sitebuilder.database.models.theme import Theme, STYLE_DEFAULTS
from sitebuilder.database.models.page import Page

__all__ = [
    "User",
    "UserRole",
    "Site",
    "SiteStatus",
    "Theme",
    "STYLE_DEFAULTS",
    "Page",
]
