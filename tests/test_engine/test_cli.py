"""Tests for the command-line entry point."""

import json

from chartcore.main import EXIT_INVALID, build_parser, main
from tests.conftest import POLAR_CORE_BOARD


def _write(tmp_path, payload) -> str:
    path = tmp_path / "board.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return str(path)


def test_render_to_file(tmp_path):
    out = tmp_path / "chart.json"
    assert main(["render", _write(tmp_path, POLAR_CORE_BOARD), "-o", str(out)]) == 0

    result = json.loads(out.read_text(encoding="utf-8"))
    assert result["stages_completed"] == 5
    assert result["errors"] == {}
    assert "slice-item-01-arc" in result["styles"]
    assert result["scene"]["root"]["id"] == "chart-root"


def test_render_to_stdout(tmp_path, capsys):
    assert main(["render", _write(tmp_path, POLAR_CORE_BOARD), "--indent", "0"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert len(result["processed"]["slices"]) == 5


def test_validate(tmp_path):
    assert main(["validate", _write(tmp_path, POLAR_CORE_BOARD)]) == 0


def test_invalid_board_exits_with_errors(tmp_path, capsys):
    board = json.loads(json.dumps(POLAR_CORE_BOARD))
    board["geometry_config"]["outer_radius"] = -1

    assert main(["validate", _write(tmp_path, board)]) == EXIT_INVALID
    err = capsys.readouterr().err
    payload, _ = json.JSONDecoder().raw_decode(err, err.index("{"))
    errors = payload["errors"]
    assert errors[0]["loc"] == "geometry_config.outer_radius"


def test_malformed_json_exits_with_errors(tmp_path):
    assert main(["render", _write(tmp_path, "{oops")]) == EXIT_INVALID


def test_parser_requires_command():
    args = build_parser().parse_args(["render", "board.json", "-o", "out.json"])
    assert args.command == "render"
    assert str(args.output) == "out.json"


def test_missing_board_file_exits_with_errors(tmp_path, capsys):
    missing = tmp_path / "nope.json"
    assert main(["render", str(missing)]) == EXIT_INVALID
    err = capsys.readouterr().err
    payload, _ = json.JSONDecoder().raw_decode(err, err.index("{"))
    assert payload["errors"][0]["type"] == "file_unreadable"


def test_undecodable_board_file_exits_with_errors(tmp_path):
    path = tmp_path / "board.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    assert main(["validate", str(path)]) == EXIT_INVALID


def test_render_until_stage(tmp_path):
    out = tmp_path / "chart.json"
    assert main(["render", _write(tmp_path, POLAR_CORE_BOARD), "-o", str(out), "--until", "S2.01"]) == 0

    result = json.loads(out.read_text(encoding="utf-8"))
    assert result["stages_completed"] == 2
    assert result["scene"] is None
    assert result["geometry"]["labels"] == []
