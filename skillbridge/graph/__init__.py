"""Roadmap graph core: layout, progress rules and editing state."""

from skillbridge.graph.layout import layout_roadmap
from skillbridge.graph.store import GraphStore

__all__ = ["GraphStore", "layout_roadmap"]
