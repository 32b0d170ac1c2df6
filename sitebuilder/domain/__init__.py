"""
领域模型

与持久化无关的纯数据结构
"""

from sitebuilder.domain.component_tree import (
    BreakpointLayout,
    ComponentInstance,
    ComponentLayout,
    clone_tree,
    count_nodes,
    iter_nodes,
    tree_shape,
    validate_component,
    validate_components,
)
from sitebuilder.domain.site_config import (
    Navigation,
    MenuItem,
    SiteSettings,
    DEFAULT_PAGES,
    DEFAULT_THEME,
    starter_navigation,
    starter_settings,
)

__all__ = [
    "BreakpointLayout",
    "ComponentInstance",
    "ComponentLayout",
    "clone_tree",
    "count_nodes",
    "iter_nodes",
    "tree_shape",
    "validate_component",
    "validate_components",
    "Navigation",
    "MenuItem",
    "SiteSettings",
    "DEFAULT_PAGES",
    "DEFAULT_THEME",
    "starter_navigation",
    "starter_settings",
]
