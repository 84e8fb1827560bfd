"""Render display trees as styled Rich text and format values as pretty JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Optional, Union

from rich.text import Text

from .tree import EmptyNode, LeafNode, NodeKind, NodePath, TreeNode

EXPANDED_GLYPH = "▼ "
COLLAPSED_GLYPH = "▶ "

STYLES = {
    "key": "bold cyan",
    "string": "green",
    "number": "magenta",
    "boolean": "yellow",
    "null": "dim italic",
    "brace": "bold",
    "bracket": "bold",
    "toggle": "bright_blue",
    "placeholder": "dim",
}


@dataclass
class RenderedLine:
    """One visible line of a rendered tree.

    ``path`` is set on the opening line of a container and names the node a
    click on that line toggles.
    """

    text: Text
    depth: int
    path: Optional[NodePath] = None


def format_scalar(value: Any) -> str:
    """JSON text of a scalar, keeping every digit of Decimal numbers."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, Decimal)):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    return json.dumps(value, ensure_ascii=False)


def _scalar_style(value: Any) -> str:
    if value is None:
        return STYLES["null"]
    if isinstance(value, bool):
        return STYLES["boolean"]
    if isinstance(value, (int, float, Decimal)):
        return STYLES["number"]
    return STYLES["string"]


def _bracket_style(node) -> str:
    return STYLES["brace"] if node.kind is NodeKind.OBJECT else STYLES["bracket"]


def render_lines(root: TreeNode) -> List[RenderedLine]:
    """Render the currently visible lines of a tree.

    Collapsed containers render as one line with an item summary; their
    children are skipped.
    """
    lines: List[RenderedLine] = []
    base_depth = root.depth
    # Nodes still to render, or closing lines already built
    stack: List[Union[TreeNode, RenderedLine]] = [root]
    while stack:
        item = stack.pop()
        if isinstance(item, RenderedLine):
            lines.append(item)
            continue
        closing = _render_node(item, base_depth, lines)
        if closing is not None:
            stack.append(closing)
            stack.extend(reversed(item.children))
    return lines


def _render_node(
    node: TreeNode, base_depth: int, lines: List[RenderedLine]
) -> Optional[RenderedLine]:
    """Append the opening line of node. Returns the closing line of an expanded container."""
    depth = node.depth - base_depth
    separator = "," if node.needs_separator else ""
    line = Text()
    if node.key is not None:
        line.append(json.dumps(node.key, ensure_ascii=False), style=STYLES["key"])
        line.append(": ")

    if isinstance(node, LeafNode):
        line.append(format_scalar(node.value), style=_scalar_style(node.value))
        line.append(separator)
        lines.append(RenderedLine(line, depth))
        return None

    if isinstance(node, EmptyNode):
        line.append(node.brackets + separator, style=_bracket_style(node))
        lines.append(RenderedLine(line, depth))
        return None

    bracket_style = _bracket_style(node)
    line.append(EXPANDED_GLYPH if node.expanded else COLLAPSED_GLYPH, style=STYLES["toggle"])
    line.append(node.kind.open_char, style=bracket_style)
    if not node.expanded:
        line.append(node.placeholder, style=STYLES["placeholder"])
        line.append(node.kind.close_char + separator, style=bracket_style)
        lines.append(RenderedLine(line, depth, node.path))
        return None

    lines.append(RenderedLine(line, depth, node.path))
    return RenderedLine(Text(node.kind.close_char + separator, style=bracket_style), depth)


def render_text(root: TreeNode, indent: int = 2) -> Text:
    """Render the visible tree as one indented Text block."""
    lines = render_lines(root)
    output = Text()
    for index, rendered in enumerate(lines):
        if index:
            output.append("\n")
        output.append(" " * (indent * rendered.depth))
        output.append_text(rendered.text)
    return output


def format_json(value: Any, indent: int = 2) -> str:
    """Pretty-print a parsed value as JSON.

    Decimal numbers are written with their exact digits, which the json
    module cannot do.
    """
    parts: List[str] = []
    # Plain strings are output text; (value, level) pairs are values to format
    stack: List[Any] = [(value, 0)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        value, level = item
        if isinstance(value, (dict, list)) and value:
            stack.extend(reversed(_container_parts(value, indent, level)))
        elif isinstance(value, dict):
            parts.append("{}")
        elif isinstance(value, list):
            parts.append("[]")
        else:
            parts.append(format_scalar(value))
    return "".join(parts)


def _container_parts(value, indent: int, level: int) -> List[Any]:
    inner = " " * (indent * (level + 1))
    if isinstance(value, dict):
        open_char, close_char = "{", "}"
        entries = [(f"{inner}{json.dumps(key, ensure_ascii=False)}: ", item) for key, item in value.items()]
    else:
        open_char, close_char = "[", "]"
        entries = [(inner, item) for item in value]

    parts: List[Any] = [open_char + "\n"]
    for index, (prefix, item) in enumerate(entries):
        parts.append((",\n" if index else "") + prefix)
        parts.append((item, level + 1))
    parts.append("\n" + " " * (indent * level) + close_char)
    return parts
