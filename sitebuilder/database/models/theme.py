"""
主题模型

一组样式变量（颜色、字体、圆角、按钮状态色），归属于某个站点。
同一站点最多只有一个 is_default=True 的主题
"""

from typing import Any, Optional

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sitebuilder.database.base import Base, JSONType, TimestampMixin, generate_prefixed_id

# 样式变量及默认值
STYLE_DEFAULTS: dict[str, str] = {
    "primary_color": "blue-600",
    "secondary_color": "gray-700",
    "accent_color": "amber-400",
    "success_color": "green-500",
    "danger_color": "red-500",
    "warning_color": "yellow-500",
    "info_color": "blue-400",
    "sale_color": "red-600",
    "star_color": "yellow-400",
    "font_family": "sans",
    "heading_font_family": "sans",
    "text_color": "gray-800",
    "heading_color": "gray-900",
    "link_color": "blue-600",
    "link_hover_color": "blue-700",
    "border_radius": "md",
    "header_bg_color": "white",
    "footer_bg_color": "gray-900",
    "footer_text_color": "white",
}

# 除样式变量外，可被复制的自由字段
EXTRA_STYLE_FIELDS = ("button_styles", "custom_css", "fonts")


def _empty_button_styles() -> dict[str, Any]:
    state = {"bg": None, "text": None, "hover": None, "active": None}
    return {"primary": dict(state), "secondary": dict(state)}


class Theme(Base, TimestampMixin):
    """主题实体"""

    __tablename__ = "themes"

    id: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        default=lambda: generate_prefixed_id("thm"),
    )

    # 所属站点，创建后不可变
    site_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("sites.id"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # 颜色
    primary_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["primary_color"])
    secondary_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["secondary_color"])
    accent_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["accent_color"])
    success_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["success_color"])
    danger_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["danger_color"])
    warning_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["warning_color"])
    info_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["info_color"])
    sale_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["sale_color"])
    star_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["star_color"])

    # 字体与文字
    font_family: Mapped[str] = mapped_column(String(100), default=STYLE_DEFAULTS["font_family"])
    heading_font_family: Mapped[str] = mapped_column(
        String(100), default=STYLE_DEFAULTS["heading_font_family"]
    )
    text_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["text_color"])
    heading_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["heading_color"])
    link_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["link_color"])
    link_hover_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["link_hover_color"])

    # 布局
    border_radius: Mapped[str] = mapped_column(String(20), default=STYLE_DEFAULTS["border_radius"])
    header_bg_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["header_bg_color"])
    footer_bg_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["footer_bg_color"])
    footer_text_color: Mapped[str] = mapped_column(String(50), default=STYLE_DEFAULTS["footer_text_color"])

    # 按钮状态色: {"primary": {bg, text, hover, active}, "secondary": {...}}
    button_styles: Mapped[dict[str, Any]] = mapped_column(
        JSONType, default=_empty_button_styles, nullable=False
    )
    custom_css: Mapped[Optional[str]] = mapped_column(Text)
    # [{"name", "url", "weight"}]
    fonts: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list, nullable=False)

    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    def style_fields(self) -> dict[str, Any]:
        """导出全部样式字段（用于复制）"""
        data = {field: getattr(self, field) for field in STYLE_DEFAULTS}
        for field in EXTRA_STYLE_FIELDS:
            data[field] = getattr(self, field)
        return data

    def __repr__(self) -> str:
        return f"<Theme(id={self.id}, site_id={self.site_id}, name={self.name}, is_default={self.is_default})>"
