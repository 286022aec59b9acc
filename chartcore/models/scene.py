"""Scene graph records.

Nodes own their children; ``parent_id`` is only a lookup key into
``SceneGraph.nodes`` and never an object reference.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, Field


class NodeType(str, enum.Enum):
    ROOT = "ROOT"
    RING = "RING"
    SLICE_GROUP = "SLICE_GROUP"
    ARC = "ARC"
    PERCENTAGE_LABEL = "PERCENTAGE_LABEL"
    LABEL_LAYER = "LABEL_LAYER"
    LABEL = "LABEL"
    LEADER_LINE = "LEADER_LINE"
    CENTER_CONTAINER = "CENTER_CONTAINER"
    CENTER_CONTENT = "CENTER_CONTENT"
    ANNOTATION_ROOT = "ANNOTATION_ROOT"
    CIRCLE = "CIRCLE"
    RECT = "RECT"
    TEXT = "TEXT"
    ICON = "ICON"
    IMAGE = "IMAGE"


ANNOTATION_NODE_TYPES = frozenset({
    NodeType.CIRCLE,
    NodeType.RECT,
    NodeType.TEXT,
    NodeType.ICON,
    NodeType.IMAGE,
})


class Transform(BaseModel):
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0
    rotate: float = 0.0


class AnnotationPayload(BaseModel):
    """Per-leaf data carried by annotation nodes."""

    width: float | None = None
    height: float | None = None
    radius: float | None = None
    text: str | None = None
    icon_name: str | None = None
    image_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class SceneNode(BaseModel):
    id: str
    type: NodeType
    parent_id: str | None = None
    children: list[SceneNode] = Field(default_factory=list)
    data_id: str | None = None
    transform: Transform | None = None
    interactive: bool = False
    visible: bool = True
    payload: AnnotationPayload | None = None


class SceneGraph(BaseModel):
    root: SceneNode
    # Flat id -> node lookup over the same node objects as the tree
    nodes: dict[str, SceneNode] = Field(default_factory=dict)

    def get(self, node_id: str) -> SceneNode | None:
        return self.nodes.get(node_id)

    def parent_of(self, node_id: str) -> SceneNode | None:
        node = self.nodes.get(node_id)
        if node is None or node.parent_id is None:
            return None
        return self.nodes.get(node.parent_id)

    def ancestors(self, node_id: str) -> list[SceneNode]:
        """Parents from nearest to the root."""
        chain: list[SceneNode] = []
        parent = self.parent_of(node_id)
        while parent is not None:
            chain.append(parent)
            parent = self.parent_of(parent.id)
        return chain

    def walk(self) -> Iterator[SceneNode]:
        """Depth-first pre-order over the tree."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
