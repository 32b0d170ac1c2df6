"""
领域异常

所有核心操作失败时抛出 SiteBuilderError 的子类，
由 API 层统一转换为 HTTP 响应，核心层不做任何重试
"""

from typing import Any, Optional


class SiteBuilderError(Exception):
    """站点构建器异常基类"""

    code: str = "site_builder_error"
    status_code: int = 500

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code}


class ValidationError(SiteBuilderError):
    """必填字段缺失或格式错误"""

    code = "validation_error"
    status_code = 400


class InvalidComponent(ValidationError):
    """组件树结构不合法"""

    code = "invalid_component"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, path=path)
        self.path = path


class DuplicatePath(SiteBuilderError):
    """同一站点下页面路径重复"""

    code = "duplicate_path"
    status_code = 409

    def __init__(self, site_id: str, path: Optional[str] = None):
        super().__init__(
            "A page with this path already exists for this site",
            site_id=site_id,
            path=path,
        )


class DuplicateDomain(SiteBuilderError):
    """域名已被其他站点占用"""

    code = "duplicate_domain"
    status_code = 409

    def __init__(self, domain: str):
        super().__init__("A site with this domain already exists", domain=domain)


class DefaultPageProtected(SiteBuilderError):
    """默认页面不可删除"""

    code = "default_page_protected"
    status_code = 400

    def __init__(self, page_id: str):
        super().__init__(
            "Cannot delete a default page. Please set another page as default first.",
            page_id=page_id,
        )


class DefaultThemeProtected(SiteBuilderError):
    """默认主题或站点正在使用的主题不可删除"""

    code = "default_theme_protected"
    status_code = 400

    def __init__(self, theme_id: str, message: Optional[str] = None):
        super().__init__(
            message or "Cannot delete the default theme. Please set another theme as default first.",
            theme_id=theme_id,
        )


class NotFound(SiteBuilderError):
    """引用的实体不存在"""

    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} not found", entity=entity, key=key)
        self.entity = entity
        self.key = key


class Unauthenticated(SiteBuilderError):
    """未认证或令牌无效"""

    code = "unauthenticated"
    status_code = 401


class Forbidden(SiteBuilderError):
    """当前用户不是站点所有者"""

    code = "forbidden"
    status_code = 403
