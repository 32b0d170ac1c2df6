"""
站点导航、设置与初始化默认值

- Navigation / SiteSettings: 站点 JSON 字段的结构定义
- starter_navigation / starter_settings: 新站点的初始骨架
- DEFAULT_THEME / DEFAULT_PAGES: 新站点自动创建的主题与页面
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class MenuLink(BaseModel):
    """二级菜单项"""

    label: str
    url: str
    is_external: bool = False


class MenuItem(MenuLink):
    """头部菜单项（最多一层子菜单）"""

    children: list[MenuLink] = Field(default_factory=list)


class FooterLink(BaseModel):
    text: str
    url: str
    is_external: bool = False


class FooterSection(BaseModel):
    heading: str
    links: list[FooterLink] = Field(default_factory=list)


class Navigation(BaseModel):
    """站点导航"""

    header_menu_items: list[MenuItem] = Field(default_factory=list)
    footer_sections: list[FooterSection] = Field(default_factory=list)


class SocialLink(BaseModel):
    name: str
    icon: Optional[str] = None
    url: str


class Newsletter(BaseModel):
    enabled: bool = False
    title: Optional[str] = None
    description: Optional[str] = None
    placeholder: Optional[str] = None
    button_text: Optional[str] = None
    api_endpoint: Optional[str] = None


class Analytics(BaseModel):
    google_analytics_id: Optional[str] = None
    facebook_pixel_id: Optional[str] = None


class Currency(BaseModel):
    code: str = "USD"
    symbol: str = "$"
    position: Literal["prefix", "suffix"] = "prefix"


class SiteSettings(BaseModel):
    """站点设置"""

    logo: Optional[str] = None
    favicon: Optional[str] = None
    enable_search: bool = True
    show_cart_icon: bool = True
    social_links: list[SocialLink] = Field(default_factory=list)
    newsletter: Newsletter = Field(default_factory=Newsletter)
    analytics: Analytics = Field(default_factory=Analytics)
    currency: Currency = Field(default_factory=Currency)


def starter_navigation() -> dict[str, Any]:
    """新站点的导航骨架"""
    navigation = Navigation(
        header_menu_items=[
            MenuItem(label="Home", url="/"),
            MenuItem(label="Products", url="/products"),
            MenuItem(label="About", url="/about"),
            MenuItem(label="Contact", url="/contact"),
        ],
        footer_sections=[
            FooterSection(
                heading="Company",
                links=[
                    FooterLink(text="About Us", url="/about"),
                    FooterLink(text="Contact", url="/contact"),
                ],
            ),
        ],
    )
    return navigation.model_dump()


def starter_settings(logo_url: Optional[str] = None) -> dict[str, Any]:
    """新站点的默认设置"""
    return SiteSettings(logo=logo_url or "").model_dump()


# 新站点默认主题
DEFAULT_THEME: dict[str, Any] = {
    "name": "Default Theme",
    "primary_color": "blue-600",
    "secondary_color": "purple-600",
    "accent_color": "amber-500",
    "text_color": "gray-800",
    "heading_color": "gray-900",
    "font_family": "sans",
}

# 新站点默认页面，Home 为默认页
DEFAULT_PAGES: tuple[dict[str, Any], ...] = (
    {"name": "Home", "path": "/", "page_type": "home", "is_default": True, "is_published": True},
    {"name": "Products", "path": "/products", "page_type": "product-listing", "is_published": True},
    {"name": "About", "path": "/about", "page_type": "about", "is_published": True},
    {"name": "Contact", "path": "/contact", "page_type": "contact", "is_published": True},
)
