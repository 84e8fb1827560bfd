"""Truncated-JSON repair and collapsible tree model for table cells."""

from .parsing import NOT_JSON, try_parse
from .pipeline import BeautifyResult, beautify
from .repair import FAILED, Recovered, try_repair
from .tree import ContainerNode, EmptyNode, LeafNode, build_tree

__all__ = [
    "BeautifyResult",
    "ContainerNode",
    "EmptyNode",
    "FAILED",
    "LeafNode",
    "NOT_JSON",
    "Recovered",
    "beautify",
    "build_tree",
    "try_parse",
    "try_repair",
]

__version__ = "0.1.0"
