"""Override and theme updates as pure functions.

Each helper returns a new container with the change merged in; the argument is
left untouched, so a pipeline run holding the old snapshot is unaffected.
"""

from __future__ import annotations

from typing import Any

from chartcore.models.geometry import (
    Annotation,
    GeometryOverrides,
    LabelGeometryOverride,
    SliceGeometryOverride,
)
from chartcore.models.styles import ChartTheme, NodeStyle, NodeTransform


def _merged(model_cls, current, update: dict[str, Any]):
    data = current.model_dump(exclude_unset=True) if current is not None else {}
    data.update(update)
    return model_cls.model_validate(data)


def update_slice_override(overrides: GeometryOverrides, slice_id: str, **update: Any) -> GeometryOverrides:
    slices = dict(overrides.slices)
    slices[slice_id] = _merged(SliceGeometryOverride, slices.get(slice_id), update)
    return overrides.model_copy(update={"slices": slices})


def update_label_override(overrides: GeometryOverrides, label_id: str, **update: Any) -> GeometryOverrides:
    labels = dict(overrides.labels)
    labels[label_id] = _merged(LabelGeometryOverride, labels.get(label_id), update)
    return overrides.model_copy(update={"labels": labels})


def add_annotation(overrides: GeometryOverrides, annotation: Annotation) -> GeometryOverrides:
    """Insert or replace the annotation under its own id."""
    annotations = dict(overrides.annotations)
    annotations[annotation.id] = annotation
    return overrides.model_copy(update={"annotations": annotations})


def remove_annotation(overrides: GeometryOverrides, annotation_id: str) -> GeometryOverrides:
    annotations = {k: v for k, v in overrides.annotations.items() if k != annotation_id}
    return overrides.model_copy(update={"annotations": annotations})


def update_node_style(theme: ChartTheme, node_id: str, **update: Any) -> ChartTheme:
    node_overrides = dict(theme.node_overrides)
    node_overrides[node_id] = _merged(NodeStyle, node_overrides.get(node_id), update)
    return theme.model_copy(update={"node_overrides": node_overrides})


def update_node_transform(theme: ChartTheme, node_id: str, **update: Any) -> ChartTheme:
    node_transforms = dict(theme.node_transforms)
    node_transforms[node_id] = _merged(NodeTransform, node_transforms.get(node_id), update)
    return theme.model_copy(update={"node_transforms": node_transforms})
