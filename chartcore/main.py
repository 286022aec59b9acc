"""Command-line entry point: validate a board state or render it to resolved chart JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from chartcore.config import get_settings
from chartcore.engine.pipeline import compute_chart
from chartcore.engine.registry import get_registry, register_stages
from chartcore.engine.serialization import BoardValidationError, read_board_state

logger = logging.getLogger(__name__)

EXIT_INVALID = 2


def configure_logging() -> None:
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, get_settings().chartcore_log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    register_stages()
    parser = argparse.ArgumentParser(prog="chartcore", description="Pie/donut chart scene engine")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Run the pipeline and write the resolved chart as JSON")
    render.add_argument("board", type=Path, help="Board state JSON file")
    render.add_argument("-o", "--output", type=Path, default=None, help="Output file (default: stdout)")
    render.add_argument("--indent", type=int, default=2)
    render.add_argument(
        "--until",
        choices=[spec.id for spec in get_registry().all()],
        default=None,
        help="Stop after this stage (its upstream stages still run)",
    )

    validate = sub.add_parser("validate", help="Validate a board state without rendering")
    validate.add_argument("board", type=Path, help="Board state JSON file")
    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        board = read_board_state(args.board)
    except BoardValidationError as e:
        print(json.dumps({"errors": e.errors}, indent=2), file=sys.stderr)
        return EXIT_INVALID

    if args.command == "validate":
        logger.info("%s is a valid board state", args.board)
        return 0

    output = compute_chart(board, until=args.until)
    text = output.model_dump_json(indent=args.indent)
    if args.output is None:
        sys.stdout.write(text + "\n")
    else:
        args.output.write_text(text, encoding="utf-8")
        logger.info("Wrote %s (%d nodes)", args.output, len(output.styles))
    return 1 if output.errors else 0


if __name__ == "__main__":
    sys.exit(main())
