"""Board-state persistence and the validation boundary in front of the pipeline."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from chartcore.models.board import BoardState

logger = logging.getLogger(__name__)

V = TypeVar("V")


class BoardValidationError(ValueError):
    """Malformed board input, rejected before any stage runs."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        summary = "; ".join(f"{e['loc']}: {e['msg']}" for e in errors[:5])
        super().__init__(f"{len(errors)} validation error(s): {summary}")


def _structured(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "loc": ".".join(str(part) for part in err["loc"]),
            "msg": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


def map_to_record(mapping: Mapping[str, V] | None) -> dict[str, Any]:
    """Plain JSON-compatible record from a keyed mapping, models dumped to dicts."""
    if not mapping:
        return {}
    return {
        key: value.model_dump(mode="json", exclude_none=True) if isinstance(value, BaseModel) else value
        for key, value in mapping.items()
    }


def record_to_map(record: Mapping[str, Any] | None, model_cls: type[BaseModel] | None = None) -> dict[str, Any]:
    """Lookup dict from a plain record, validating each value as ``model_cls`` if given."""
    if not record:
        return {}
    if model_cls is None:
        return dict(record)
    return {key: model_cls.model_validate(value) for key, value in record.items()}


def validate_board_state(raw: Mapping[str, Any] | BoardState) -> BoardState:
    if isinstance(raw, BoardState):
        return raw
    try:
        return BoardState.model_validate(raw)
    except ValidationError as e:
        errors = _structured(e)
        logger.warning("Board state rejected: %d error(s)", len(errors))
        raise BoardValidationError(errors) from e


def load_board_state(json_text: str) -> BoardState:
    try:
        raw = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise BoardValidationError([{"loc": "", "msg": str(e), "type": "json_invalid"}]) from e
    if not isinstance(raw, dict):
        raise BoardValidationError([{"loc": "", "msg": "board state must be an object", "type": "dict_type"}])
    return validate_board_state(raw)


def dump_board_state(board: BoardState, indent: int | None = 2) -> str:
    return board.model_dump_json(indent=indent)


def read_board_state(path: Path) -> BoardState:
    """Load a board from disk; an unreadable file is reported like any other invalid input."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BoardValidationError([{"loc": str(path), "msg": str(e), "type": "file_unreadable"}]) from e
    return load_board_state(text)
