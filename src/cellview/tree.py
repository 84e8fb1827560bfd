"""Collapsible tree model over a parsed JSON value."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple, Union

# Containers shallower than this start expanded; deeper ones start collapsed.
DEFAULT_EXPAND_DEPTH = 2

PathPart = Union[str, int]
NodePath = Tuple[PathPart, ...]


class NodeKind(Enum):
    """Kind of JSON container a node represents."""

    OBJECT = "object"
    ARRAY = "array"

    @property
    def open_char(self) -> str:
        return "{" if self is NodeKind.OBJECT else "["

    @property
    def close_char(self) -> str:
        return "}" if self is NodeKind.OBJECT else "]"


@dataclass
class LeafNode:
    """A scalar: null, boolean, number or string."""

    value: Any
    key: Optional[str] = None
    needs_separator: bool = False
    depth: int = 0
    path: NodePath = ()


@dataclass
class EmptyNode:
    """An object or array without entries, shown as ``{}`` or ``[]``."""

    kind: NodeKind
    key: Optional[str] = None
    needs_separator: bool = False
    depth: int = 0
    path: NodePath = ()

    @property
    def brackets(self) -> str:
        return self.kind.open_char + self.kind.close_char


@dataclass
class ContainerNode:
    """A non-empty object or array with a toggleable expansion state.

    ``item_count`` is fixed at build time. ``expanded`` starts from the depth
    policy and afterwards changes only through :meth:`toggle`.
    """

    kind: NodeKind
    children: List["TreeNode"] = field(default_factory=list)
    key: Optional[str] = None
    needs_separator: bool = False
    depth: int = 0
    path: NodePath = ()
    item_count: int = 0
    expanded: bool = True

    @property
    def placeholder(self) -> str:
        """Summary shown in place of the children while collapsed."""
        noun = "keys" if self.kind is NodeKind.OBJECT else "items"
        return f"...{self.item_count} {noun}"

    def toggle(self) -> bool:
        """Flip this node's expansion state and return the new state."""
        self.expanded = not self.expanded
        return self.expanded


TreeNode = Union[LeafNode, EmptyNode, ContainerNode]


def build_tree(value: Any, depth: int = 0) -> TreeNode:
    """Build the display tree for a parsed JSON value.

    The root carries no key and no trailing separator. The value is only read,
    never modified. Nesting depth is limited only by memory.
    """
    roots: List[TreeNode] = []
    # (value, key, needs_separator, depth, path, list the node is appended to)
    stack = [(value, None, False, depth, (), roots)]
    while stack:
        value, key, needs_separator, depth, path, siblings = stack.pop()
        node, entries = _make_node(value, key, needs_separator, depth, path)
        siblings.append(node)
        if not isinstance(node, ContainerNode):
            continue
        count = len(entries)
        for index in reversed(range(count)):
            child_key, part, child_value = entries[index]
            stack.append(
                (child_value, child_key, index < count - 1, depth + 1, path + (part,), node.children)
            )
    return roots[0]


def _make_node(
    value: Any,
    key: Optional[str],
    needs_separator: bool,
    depth: int,
    path: NodePath,
) -> Tuple[TreeNode, List[Tuple[Optional[str], PathPart, Any]]]:
    """Create the node for value without its children, and list its entries."""
    if isinstance(value, dict):
        kind = NodeKind.OBJECT
        entries: List[Tuple[Optional[str], PathPart, Any]] = [
            (k, k, v) for k, v in value.items()
        ]
    elif isinstance(value, list):
        kind = NodeKind.ARRAY
        entries = [(None, i, v) for i, v in enumerate(value)]
    else:
        leaf = LeafNode(
            value=value,
            key=key,
            needs_separator=needs_separator,
            depth=depth,
            path=path,
        )
        return leaf, []

    count = len(entries)
    if count == 0:
        empty = EmptyNode(
            kind=kind,
            key=key,
            needs_separator=needs_separator,
            depth=depth,
            path=path,
        )
        return empty, []

    container = ContainerNode(
        kind=kind,
        key=key,
        needs_separator=needs_separator,
        depth=depth,
        path=path,
        item_count=count,
        expanded=depth < DEFAULT_EXPAND_DEPTH,
    )
    return container, entries


def iter_nodes(root: TreeNode) -> Iterator[TreeNode]:
    """Walk every node in document order, collapsed or not."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, ContainerNode):
            stack.extend(reversed(node.children))


def iter_containers(root: TreeNode) -> Iterator[ContainerNode]:
    for node in iter_nodes(root):
        if isinstance(node, ContainerNode):
            yield node


def find_node(root: TreeNode, path: NodePath) -> Optional[TreeNode]:
    """Return the node at path, or None if the path does not exist."""
    node = root
    for part in path:
        if not isinstance(node, ContainerNode):
            return None
        node = next((child for child in node.children if child.path[-1] == part), None)
        if node is None:
            return None
    return node
