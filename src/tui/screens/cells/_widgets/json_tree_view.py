"""Keyboard and mouse navigable view of a collapsible JSON tree."""

from __future__ import annotations

from typing import List

from rich.console import RenderableType
from rich.text import Text
from textual import events
from textual.binding import Binding
from textual.containers import ScrollableContainer
from textual.geometry import Region
from textual.reactive import reactive
from textual.widget import Widget

from cellview.pipeline import BeautifyResult
from cellview.render import RenderedLine, render_lines
from cellview.tree import ContainerNode, find_node

INDENT = "  "


class JsonTreeView(Widget, can_focus=True):
    """Shows the visible lines of a cell's tree with a line cursor.

    Toggling mutates the node's expansion flag in place; the tree is never
    rebuilt here.
    """

    BINDINGS = [
        Binding("up,k", "cursor_up", "Up", show=False),
        Binding("down,j", "cursor_down", "Down", show=False),
        Binding("enter,space", "toggle", "Expand/Collapse"),
        Binding("c", "copy", "Copy JSON"),
    ]

    DEFAULT_CSS = """
    JsonTreeView {
        height: auto;
    }
    """

    cursor = reactive(0)

    def __init__(self, result: BeautifyResult, **kwargs):
        super().__init__(**kwargs)
        self.result = result
        self.lines: List[RenderedLine] = render_lines(result.tree)

    def render(self) -> RenderableType:
        output = Text(no_wrap=True, overflow="ellipsis")
        for index, line in enumerate(self.lines):
            if index:
                output.append("\n")
            output.append(INDENT * line.depth)
            text = line.text.copy()
            if self.has_focus and index == self.cursor:
                text.stylize("reverse")
            output.append_text(text)
        return output

    def on_focus(self) -> None:
        self.refresh()

    def on_blur(self) -> None:
        self.refresh()

    def watch_cursor(self, cursor: int) -> None:
        self.scroll_to_cursor()

    def scroll_to_cursor(self) -> None:
        """Scroll the enclosing container so the cursor line is on screen."""
        container = next(
            (node for node in self.ancestors if isinstance(node, ScrollableContainer)), None
        )
        if container is None or not self.is_mounted:
            return
        line_y = self.content_region.y + self.cursor
        y = line_y - container.content_region.y + container.scroll_offset.y
        container.scroll_to_region(Region(0, y, 1, 1), animate=False)

    def action_cursor_up(self) -> None:
        self.cursor = max(self.cursor - 1, 0)

    def action_cursor_down(self) -> None:
        self.cursor = min(self.cursor + 1, len(self.lines) - 1)

    def action_toggle(self) -> None:
        self.toggle_line(self.cursor)

    def action_copy(self) -> None:
        self.app.copy_to_clipboard(self.result.copy_text())
        self.app.notify("JSON copied!")

    def on_click(self, event: events.Click) -> None:
        offset = event.get_content_offset(self)
        if offset is None:
            return
        self.cursor = min(offset.y, len(self.lines) - 1)
        self.toggle_line(offset.y)

    def toggle_line(self, index: int) -> bool:
        """Toggle the container opened on the given line, if there is one."""
        if not 0 <= index < len(self.lines):
            return False
        path = self.lines[index].path
        if path is None:
            return False
        node = find_node(self.result.tree, path)
        if not isinstance(node, ContainerNode):
            return False
        node.toggle()
        self.lines = render_lines(self.result.tree)
        self.cursor = min(self.cursor, len(self.lines) - 1)
        self.refresh(layout=True)
        return True
