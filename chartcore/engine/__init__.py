"""Chartcore pie pipeline engine."""

from chartcore.engine.registry import stage, StageKind, get_registry, register_stages
from chartcore.engine.context import PipelineContext
from chartcore.engine.pipeline import Pipeline, compute_chart, create_pipeline

__all__ = [
    "stage",
    "StageKind",
    "get_registry",
    "register_stages",
    "PipelineContext",
    "Pipeline",
    "compute_chart",
    "create_pipeline",
]
