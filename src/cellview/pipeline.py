"""Parse-then-repair pipeline turning cell text into a display tree."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .parsing import NOT_JSON, try_parse
from .render import format_json
from .repair import try_repair
from .tree import TreeNode, build_tree

logger = logging.getLogger(__name__)


@dataclass
class BeautifyResult:
    """A cell value ready for display.

    ``repaired`` is True when the value came from the repair engine; such
    values may have lost trailing data and are flagged by every renderer.
    """

    value: Any
    repaired: bool = False
    tree: TreeNode = field(init=False)

    def __post_init__(self) -> None:
        self.tree = build_tree(self.value)

    def rebuild(self) -> TreeNode:
        """Rebuild the tree from scratch, resetting every toggle."""
        self.tree = build_tree(self.value)
        return self.tree

    def copy_text(self) -> str:
        """Pretty JSON for the clipboard."""
        return format_json(self.value)


def beautify(text: str, repair_enabled: bool = False) -> Optional[BeautifyResult]:
    """Parse cell text, falling back to repair when enabled.

    Returns None when the text is not JSON or when it is an empty object or
    array, which have nothing worth showing as a tree.
    """
    if not text:
        return None

    value = try_parse(text)
    repaired = False
    if value is NOT_JSON and repair_enabled:
        outcome = try_repair(text)
        if outcome:
            value = outcome.value
            repaired = True

    if value is NOT_JSON:
        return None
    if isinstance(value, (dict, list)) and not value:
        return None

    if repaired:
        logger.info("Showing repaired JSON for truncated text (%d chars)", len(text))
    return BeautifyResult(value=value, repaired=repaired)
