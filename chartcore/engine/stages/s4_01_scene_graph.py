"""S4.01 - Scene graph.

Builds the fixed pie hierarchy from geometry:

    chart-root
    +-- main-ring
    |   +-- <slice>-group  (arc, pct label)
    +-- labels-layer       (labels, leader lines)
    +-- center-container   (donuts only; center-content)
    +-- annotations-layer  (one leaf per annotation)

Node ids derive from slice/annotation ids plus a role suffix, so the same
inputs always produce the same ids. Theme transform overrides are merged in a
second traversal that also fills the flat id -> node lookup.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from chartcore.engine.context import PipelineContext
from chartcore.engine.registry import StageKind, stage
from chartcore.models.geometry import Annotation, AnnotationType, PieGeometryState
from chartcore.models.scene import AnnotationPayload, NodeType, SceneGraph, SceneNode, Transform
from chartcore.models.styles import ChartTheme, NodeTransform

logger = logging.getLogger(__name__)

ROOT_ID = "chart-root"
RING_ID = "main-ring"
LABELS_LAYER_ID = "labels-layer"
CENTER_CONTAINER_ID = "center-container"
CENTER_CONTENT_ID = "center-content"
ANNOTATIONS_LAYER_ID = "annotations-layer"

ANNOTATION_NODE_TYPE: dict[AnnotationType, NodeType] = {
    "CIRCLE": NodeType.CIRCLE,
    "RECT": NodeType.RECT,
    "TEXT": NodeType.TEXT,
    "ICON": NodeType.ICON,
    "IMAGE": NodeType.IMAGE,
}


def slice_group_id(slice_id: str) -> str:
    return f"{slice_id}-group"


def arc_id(slice_id: str) -> str:
    return f"{slice_id}-arc"


def percentage_label_id(slice_id: str) -> str:
    return f"{slice_id}-pct"


def leader_line_id(slice_id: str, label_index: int) -> str:
    return f"leader-line-{slice_id}-{label_index}"


def _annotation_node(anno: Annotation, parent_id: str) -> SceneNode:
    return SceneNode(
        id=anno.id,
        type=ANNOTATION_NODE_TYPE[anno.type],
        parent_id=parent_id,
        transform=Transform(x=anno.x, y=anno.y),
        interactive=True,
        payload=AnnotationPayload(
            width=anno.width,
            height=anno.height,
            radius=anno.radius,
            text=anno.text,
            icon_name=anno.icon_name,
            image_url=anno.image_url,
            metadata=dict(anno.metadata),
        ),
    )


def build_pie_scene_graph(geometry: PieGeometryState) -> SceneNode:
    """Construct the node tree. No transform overrides applied yet."""
    center = geometry.config.center
    root = SceneNode(
        id=ROOT_ID,
        type=NodeType.ROOT,
        transform=Transform(x=center.x, y=center.y),
        interactive=True,
    )
    used_ids = {ROOT_ID}

    ring = SceneNode(id=RING_ID, type=NodeType.RING, parent_id=ROOT_ID)
    root.children.append(ring)
    used_ids.add(RING_ID)

    for slice_id in geometry.slices:
        group_id = slice_group_id(slice_id)
        group = SceneNode(
            id=group_id,
            type=NodeType.SLICE_GROUP,
            parent_id=RING_ID,
            data_id=slice_id,
            interactive=True,
        )
        group.children.append(
            SceneNode(id=arc_id(slice_id), type=NodeType.ARC, parent_id=group_id, data_id=slice_id)
        )
        group.children.append(
            SceneNode(
                id=percentage_label_id(slice_id),
                type=NodeType.PERCENTAGE_LABEL,
                parent_id=group_id,
                data_id=slice_id,
                interactive=True,
            )
        )
        ring.children.append(group)
        used_ids.update(child.id for child in group.children)
        used_ids.add(group_id)

    label_layer = SceneNode(id=LABELS_LAYER_ID, type=NodeType.LABEL_LAYER, parent_id=ROOT_ID)
    root.children.append(label_layer)
    used_ids.add(LABELS_LAYER_ID)

    for label in geometry.labels:
        label_layer.children.append(
            SceneNode(
                id=label.label_id,
                type=NodeType.LABEL,
                parent_id=LABELS_LAYER_ID,
                data_id=label.slice_id,
                interactive=True,
            )
        )
    for line in geometry.leader_lines:
        label_layer.children.append(
            SceneNode(
                id=leader_line_id(line.slice_id, line.label_index),
                type=NodeType.LEADER_LINE,
                parent_id=LABELS_LAYER_ID,
                data_id=line.slice_id,
            )
        )
    used_ids.update(child.id for child in label_layer.children)

    if geometry.config.inner_radius > 0:
        center_node = SceneNode(id=CENTER_CONTAINER_ID, type=NodeType.CENTER_CONTAINER, parent_id=ROOT_ID)
        center_node.children.append(
            SceneNode(id=CENTER_CONTENT_ID, type=NodeType.CENTER_CONTENT, parent_id=CENTER_CONTAINER_ID)
        )
        root.children.append(center_node)
        used_ids.update({CENTER_CONTAINER_ID, CENTER_CONTENT_ID})

    if geometry.annotations:
        anno_layer = SceneNode(id=ANNOTATIONS_LAYER_ID, type=NodeType.ANNOTATION_ROOT, parent_id=ROOT_ID)
        used_ids.add(ANNOTATIONS_LAYER_ID)
        for anno in geometry.annotations:
            if anno.id in used_ids:
                logger.warning("Annotation %r collides with an existing node id, skipping", anno.id)
                continue
            anno_layer.children.append(_annotation_node(anno, ANNOTATIONS_LAYER_ID))
            used_ids.add(anno.id)
        root.children.append(anno_layer)

    return root


def merge_transform(base: Transform | None, override: NodeTransform) -> Transform:
    """Set override fields win; unset ones keep the base (0/1 defaults without a base)."""
    base = base or Transform()
    return Transform(
        x=base.x if override.x is None else override.x,
        y=base.y if override.y is None else override.y,
        scale=base.scale if override.scale is None else override.scale,
        rotate=base.rotate if override.rotate is None else override.rotate,
    )


def resolve_scene_graph(
    geometry: PieGeometryState,
    theme: ChartTheme | None = None,
    node_transforms: Mapping[str, NodeTransform] | None = None,
) -> SceneGraph:
    """Build the tree, apply transform overrides and index every node by id."""
    if node_transforms is None:
        node_transforms = theme.node_transforms if theme is not None else {}

    root = build_pie_scene_graph(geometry)
    nodes: dict[str, SceneNode] = {}

    stack = [root]
    while stack:
        node = stack.pop()
        override = node_transforms.get(node.id)
        if override is not None:
            node.transform = merge_transform(node.transform, override)
        nodes[node.id] = node
        stack.extend(reversed(node.children))

    logger.debug("Scene graph: %d nodes", len(nodes))
    return SceneGraph(root=root, nodes=nodes)


def diff_scene_graphs(old: SceneGraph, new: SceneGraph) -> tuple[set[str], set[str], set[str]]:
    """(added, removed, kept) node ids between two runs."""
    old_ids = set(old.nodes)
    new_ids = set(new.nodes)
    return new_ids - old_ids, old_ids - new_ids, old_ids & new_ids


@stage(
    id="S4.01",
    kind=StageKind.SCENE,
    dependencies=["S3.01"],
    description="Build the scene graph and apply transform overrides",
)
def scene_graph(ctx: PipelineContext) -> None:
    ctx.scene = resolve_scene_graph(ctx.geometry, ctx.theme)
