"""
服务容器

进程启动时构建一次，挂在 app.state 上，通过依赖注入交给路由使用
"""

from dataclasses import dataclass
from typing import Optional

from sitebuilder.services.account_service import AccountService
from sitebuilder.services.notifier import Notifier, SMTPNotifier
from sitebuilder.services.page_catalog import PageCatalog
from sitebuilder.services.site_orchestrator import SiteOrchestrator
from sitebuilder.services.site_registry import SiteRegistry
from sitebuilder.services.theme_catalog import ThemeCatalog


@dataclass
class SiteBuilderServices:
    registry: SiteRegistry
    themes: ThemeCatalog
    pages: PageCatalog
    orchestrator: SiteOrchestrator
    accounts: AccountService


def build_services(notifier: Optional[Notifier] = None) -> SiteBuilderServices:
    """构建全部目录与编排服务"""
    registry = SiteRegistry()
    themes = ThemeCatalog()
    pages = PageCatalog()
    return SiteBuilderServices(
        registry=registry,
        themes=themes,
        pages=pages,
        orchestrator=SiteOrchestrator(registry, themes, pages),
        accounts=AccountService(notifier or SMTPNotifier()),
    )
