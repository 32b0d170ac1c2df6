"""
主题 API Schemas
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ButtonState(BaseModel):
    bg: Optional[str] = None
    text: Optional[str] = None
    hover: Optional[str] = None
    active: Optional[str] = None


class ButtonStyles(BaseModel):
    primary: ButtonState = Field(default_factory=ButtonState)
    secondary: ButtonState = Field(default_factory=ButtonState)


class FontSpec(BaseModel):
    name: str
    url: Optional[str] = None
    weight: Optional[str] = None


class ThemeStyles(BaseModel):
    """样式字段；未提供的字段使用默认值"""
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    accent_color: Optional[str] = None
    success_color: Optional[str] = None
    danger_color: Optional[str] = None
    warning_color: Optional[str] = None
    info_color: Optional[str] = None
    sale_color: Optional[str] = None
    star_color: Optional[str] = None
    font_family: Optional[str] = None
    heading_font_family: Optional[str] = None
    text_color: Optional[str] = None
    heading_color: Optional[str] = None
    link_color: Optional[str] = None
    link_hover_color: Optional[str] = None
    border_radius: Optional[str] = None
    header_bg_color: Optional[str] = None
    footer_bg_color: Optional[str] = None
    footer_text_color: Optional[str] = None
    button_styles: Optional[ButtonStyles] = None
    custom_css: Optional[str] = None
    fonts: Optional[list[FontSpec]] = None


class ThemeCreate(ThemeStyles):
    """创建主题"""
    site_id: Optional[str] = Field(None, description="所属站点")
    name: Optional[str] = Field(None, max_length=200)
    is_default: bool = Field(False, description="仅初始化场景使用，切换默认主题请调用 /default")


class ThemeUpdate(ThemeStyles):
    """更新主题（site_id / is_default 不可修改）"""
    name: Optional[str] = Field(None, max_length=200)


class ThemeClone(BaseModel):
    name: Optional[str] = Field(None, max_length=200, description="新主题名称")


class ThemeResponse(BaseModel):
    """主题响应"""
    id: str
    site_id: str
    name: str
    primary_color: str
    secondary_color: str
    accent_color: str
    success_color: str
    danger_color: str
    warning_color: str
    info_color: str
    sale_color: str
    star_color: str
    font_family: str
    heading_font_family: str
    text_color: str
    heading_color: str
    link_color: str
    link_hover_color: str
    border_radius: str
    header_bg_color: str
    footer_bg_color: str
    footer_text_color: str
    button_styles: dict[str, Any]
    custom_css: Optional[str]
    fonts: list[dict[str, Any]]
    is_default: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ThemeSummary(BaseModel):
    """主题列表项"""
    id: str
    name: str
    primary_color: str
    secondary_color: str
    is_default: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
