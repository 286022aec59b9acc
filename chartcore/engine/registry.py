"""Stage registry. Every pipeline stage is a standalone function registered via decorator.

Usage:
    @stage(id="S2.01", kind=StageKind.GEOMETRY, dependencies=["S1.01"])
    def slice_geometry(ctx: PipelineContext) -> None:
        ctx.geometry = compute_pie_geometry(ctx.processed, ctx.geometry_config, ctx.overrides)

A stage reads its inputs from the context and stores a freshly built output on it.
"""

from __future__ import annotations

import enum
import graphlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from chartcore.engine.context import PipelineContext

logger = logging.getLogger(__name__)


class StageKind(enum.IntEnum):
    DATA = 1
    GEOMETRY = 2
    LABELS = 3
    SCENE = 4
    STYLES = 5


@dataclass
class StageSpec:
    id: str
    kind: StageKind
    fn: Callable[["PipelineContext"], None]
    dependencies: list[str] = field(default_factory=list)
    description: str = ""


def _chain_position(spec: StageSpec) -> tuple[StageKind, str]:
    return (spec.kind, spec.id)


class StageRegistry:
    """Pipeline stages by id; each lists the earlier stages whose outputs it reads."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.kind.name)

    def get(self, stage_id: str) -> StageSpec:
        return self._stages[stage_id]

    def get_kind(self, kind: StageKind) -> list[StageSpec]:
        specs = [s for s in self._stages.values() if s.kind == kind]
        return sorted(specs, key=_chain_position)

    def all(self) -> list[StageSpec]:
        return sorted(self._stages.values(), key=_chain_position)

    def upstream(self, stage_id: str) -> set[str]:
        """``stage_id`` plus every stage it transitively depends on."""
        if stage_id not in self._stages:
            raise KeyError(f"Unknown stage: {stage_id}")
        needed: set[str] = set()
        pending = [stage_id]
        while pending:
            sid = pending.pop()
            if sid not in needed:
                needed.add(sid)
                pending.extend(self._stages[sid].dependencies)
        return needed

    def resolve_order(self, target: str | None = None) -> list[StageSpec]:
        """Stages in run order: everything, or ``target`` and its upstream stages.

        Ready stages are taken in chain position (kind, then id), so the order is
        deterministic even when a kind holds several independent stages.
        """
        ids = set(self._stages) if target is None else self.upstream(target)
        sorter: graphlib.TopologicalSorter[str] = graphlib.TopologicalSorter()
        for sid in ids:
            spec = self._stages[sid]
            missing = [d for d in spec.dependencies if d not in self._stages]
            if missing:
                raise ValueError(f"Stage {sid} depends on unregistered stage(s): {', '.join(missing)}")
            sorter.add(sid, *spec.dependencies)

        try:
            sorter.prepare()
        except graphlib.CycleError as e:
            raise ValueError(f"Circular dependency detected among: {e.args[1]}") from e

        ordered: list[StageSpec] = []
        while sorter.is_active():
            ready = sorted((self._stages[sid] for sid in sorter.get_ready()), key=_chain_position)
            ordered.extend(ready)
            sorter.done(*(spec.id for spec in ready))
        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


# Module-level singleton
_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    kind: StageKind,
    dependencies: list[str] | None = None,
    description: str = "",
):
    """Decorator to register a stage function."""

    def decorator(fn: Callable[["PipelineContext"], None]):
        spec = StageSpec(
            id=id,
            kind=kind,
            fn=fn,
            dependencies=dependencies or [],
            description=description,
        )
        _registry.register(spec)
        return fn

    return decorator


def register_stages() -> None:
    """Import all stage modules so @stage decorators fire."""
    import importlib
    import pkgutil

    package = importlib.import_module("chartcore.engine.stages")
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"chartcore.engine.stages.{module_name}")
