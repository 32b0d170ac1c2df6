"""
组件树模型

页面内嵌的递归组件实例 {type, props, children, layout}。
纯数据结构，不感知持久化；校验与复制都以迭代方式遍历，
树的深度和分支数不设上限。
"""

import copy
from collections.abc import Mapping
from typing import Any, Iterator, Optional, Union

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from sitebuilder.core.exceptions import InvalidComponent


class BreakpointLayout(BaseModel):
    """断点布局覆盖"""

    x: int = 0
    y: int = 0
    w: int = 12
    h: int = 1


class ComponentLayout(BaseModel):
    """栅格布局"""

    x: int = 0
    y: int = 0
    w: int = 12
    h: int = 1
    order: Optional[int] = None
    # 断点名 -> 布局覆盖，如 {"md": {...}, "sm": {...}}
    breakpoint: dict[str, BreakpointLayout] = Field(default_factory=dict)


class ComponentInstance(BaseModel):
    """组件实例（递归）"""

    type: str
    props: dict[str, Any] = Field(default_factory=dict)
    children: list["ComponentInstance"] = Field(default_factory=list)
    layout: ComponentLayout = Field(default_factory=ComponentLayout)


ComponentInstance.model_rebuild()

NodeLike = Union[ComponentInstance, Mapping]

_ENTER = 0
_EXIT = 1


def _field(node: NodeLike, name: str) -> Any:
    if isinstance(node, Mapping):
        return node.get(name)
    return getattr(node, name, None)


def _normalize_layout(raw: Any, path: str) -> dict[str, Any]:
    if raw is None:
        layout = ComponentLayout()
    elif isinstance(raw, ComponentLayout):
        layout = raw
    elif isinstance(raw, Mapping):
        try:
            layout = ComponentLayout.model_validate(dict(raw))
        except PydanticValidationError as e:
            raise InvalidComponent(f"Invalid layout at {path}: {e.errors()[0]['msg']}", path=path)
    else:
        raise InvalidComponent(f"Invalid layout at {path}: expected an object", path=path)

    if layout.w <= 0 or layout.h <= 0:
        raise InvalidComponent(f"Layout width and height must be positive at {path}", path=path)
    for name, override in layout.breakpoint.items():
        if override.w <= 0 or override.h <= 0:
            raise InvalidComponent(
                f"Layout width and height must be positive at {path} (breakpoint '{name}')",
                path=path,
            )

    return layout.model_dump(exclude_none=True)


def _normalize_node(node: Any, path: str) -> tuple[dict[str, Any], list[Any]]:
    """校验单个节点，返回 (不含子节点的存储形式, 原始子节点列表)"""
    if not isinstance(node, (Mapping, ComponentInstance)):
        raise InvalidComponent(f"Component at {path} must be an object", path=path)

    node_type = _field(node, "type")
    if not isinstance(node_type, str) or not node_type.strip():
        raise InvalidComponent(f"Component type is required at {path}", path=path)

    props = _field(node, "props")
    if props is None:
        props = {}
    elif not isinstance(props, Mapping):
        raise InvalidComponent(f"Component props must be an object at {path}", path=path)

    children = _field(node, "children")
    if children is None:
        children = []
    elif not isinstance(children, (list, tuple)):
        raise InvalidComponent(f"Component children must be a list at {path}", path=path)

    stored = {
        "type": node_type.strip(),
        "props": copy.deepcopy(dict(props)),
        "children": [],
        "layout": _normalize_layout(_field(node, "layout"), path),
    }
    return stored, list(children)


def validate_components(nodes: Optional[Any], root: str = "components") -> list[dict[str, Any]]:
    """
    校验组件树序列并返回全新的存储形式

    失败抛出 InvalidComponent：
    - type 为空
    - layout 的 w/h（含断点覆盖）非正数
    - 节点成为自身的后代（环）

    返回的节点与输入不共享任何对象。
    """
    if nodes is None:
        return []
    if not isinstance(nodes, (list, tuple)):
        raise InvalidComponent(f"{root} must be a list", path=root)

    result: list[dict[str, Any]] = []
    on_path: set[int] = set()
    stack: list[tuple] = [
        (_ENTER, node, result, f"{root}[{i}]") for i, node in reversed(list(enumerate(nodes)))
    ]

    while stack:
        action, node, out, path = stack.pop()
        if action == _EXIT:
            on_path.discard(id(node))
            continue

        if id(node) in on_path:
            raise InvalidComponent(f"Component at {path} contains itself", path=path)

        stored, children = _normalize_node(node, path)
        out.append(stored)

        on_path.add(id(node))
        stack.append((_EXIT, node, None, path))
        for i in range(len(children) - 1, -1, -1):
            stack.append((_ENTER, children[i], stored["children"], f"{path}.children[{i}]"))

    return result


def validate_component(node: NodeLike) -> dict[str, Any]:
    """校验单个组件节点（含整棵子树）"""
    return validate_components([node], root="component")[0]


def clone_tree(nodes: Optional[list[dict[str, Any]]]) -> list[dict[str, Any]]:
    """深拷贝组件树，生成全新节点"""
    return validate_components(nodes)


def iter_nodes(nodes: Optional[list[Any]]) -> Iterator[tuple[int, dict[str, Any]]]:
    """按先序遍历已存储的组件树，产出 (深度, 节点)"""
    stack = [(0, node) for node in reversed(nodes or [])]
    while stack:
        depth, node = stack.pop()
        yield depth, node
        for child in reversed(node.get("children") or []):
            stack.append((depth + 1, child))


def count_nodes(nodes: Optional[list[Any]]) -> int:
    return sum(1 for _ in iter_nodes(nodes))


def tree_shape(node: Any) -> tuple:
    """
    组件树的结构签名 (type, props, [子节点签名...])

    不含 layout，用于比较两棵树的内容是否一致
    """
    shapes: dict[int, tuple] = {}
    stack: list[tuple[int, Any]] = [(_ENTER, node)]
    while stack:
        action, current = stack.pop()
        children = _field(current, "children") or []
        if action == _ENTER:
            stack.append((_EXIT, current))
            for child in reversed(children):
                stack.append((_ENTER, child))
            continue
        props = _field(current, "props") or {}
        shapes[id(current)] = (
            _field(current, "type"),
            dict(props),
            [shapes[id(child)] for child in children],
        )
    return shapes[id(node)]
