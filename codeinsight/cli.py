"""CLI entrypoints for codeinsight commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from .anomalies.smells import SMELL_KINDS
from .config import EngineConfig, load_config
from .engine import InsightEngine
from .errors import ConfigError, InsightError
from .logging import configure_logging
from .report.render import ReportRenderer


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_source_argument(parser: argparse.ArgumentParser, name: str = "source") -> None:
    parser.add_argument(
        name,
        help="Path to a source file, or '-' to read from stdin.",
    )


def _add_format_option(parser: argparse.ArgumentParser, *, markdown: bool = False) -> None:
    choices = ["json", "markdown"] if markdown else ["json"]
    parser.add_argument(
        "--format",
        choices=choices,
        default="json",
        help="Output format (defaults to json).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codeinsight",
        description="Infer purpose, goals, anomalies, smells and design archetypes from source code.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .codeinsight.yml (or a directory containing it).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs (with thread names) to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("understand", "Run every analysis layer and synthesize a report."),
        ("deep", "Synthesize a report with purpose/archetype relationships."),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        _add_verbose_option(sub, suppress_default=True)
        _add_source_argument(sub)
        _add_format_option(sub, markdown=True)

    purpose_parser = subparsers.add_parser("purpose", help="Classify the purpose of a snippet.")
    _add_verbose_option(purpose_parser, suppress_default=True)
    _add_source_argument(purpose_parser)
    purpose_parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Rank categories below this confidence last.",
    )

    goals_parser = subparsers.add_parser("goals", help="List TODO/FIXME/NOTE style goals.")
    _add_verbose_option(goals_parser, suppress_default=True)
    _add_source_argument(goals_parser)

    align_parser = subparsers.add_parser("align", help="Score how well a goal is reflected in code.")
    _add_verbose_option(align_parser, suppress_default=True)
    align_parser.add_argument("goal", help="Natural-language goal to check.")
    _add_source_argument(align_parser)

    smells_parser = subparsers.add_parser("smells", help="List code smells and complexity issues.")
    _add_verbose_option(smells_parser, suppress_default=True)
    _add_source_argument(smells_parser)
    smells_parser.add_argument(
        "--kind",
        action="append",
        choices=SMELL_KINDS,
        default=None,
        help="Only report this smell kind (repeatable).",
    )

    archetypes_parser = subparsers.add_parser("archetypes", help="Match structural archetypes.")
    _add_verbose_option(archetypes_parser, suppress_default=True)
    _add_source_argument(archetypes_parser)

    similarity_parser = subparsers.add_parser("similarity", help="Compare two snippets.")
    _add_verbose_option(similarity_parser, suppress_default=True)
    _add_source_argument(similarity_parser, "left")
    _add_source_argument(similarity_parser, "right")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codeinsight commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        engine = InsightEngine(_load_config(args.config))
    except (ConfigError, ValueError) as exc:
        parser.exit(1, f"{exc}\n")
    renderer = ReportRenderer()

    try:
        output = _run(args, engine, renderer)
    except (OSError, UnicodeDecodeError, InsightError) as exc:
        parser.exit(1, f"codeinsight {args.command} failed: {exc}\n")
    print(output)


def _run(args: argparse.Namespace, engine: InsightEngine, renderer: ReportRenderer) -> str:
    command = args.command
    if command in {"understand", "deep"}:
        code = _read_source(args.source)
        report = engine.understand(code) if command == "understand" else engine.analyze_deep(code)
        if args.format == "markdown":
            return renderer.render_markdown(report).rstrip("\n")
        return renderer.render_json(report)
    if command == "purpose":
        return renderer.render_json(engine.classify_purpose(_read_source(args.source), args.threshold))
    if command == "goals":
        return _dump([goal.to_dict() for goal in engine.extract_goals(_read_source(args.source))])
    if command == "align":
        return renderer.render_json(engine.score_alignment(args.goal, _read_source(args.source)))
    if command == "smells":
        return renderer.render_json(engine.detect_smells(_read_source(args.source), args.kind))
    if command == "archetypes":
        matches = engine.match_archetypes(_read_source(args.source))
        return _dump([match.to_dict() for match in matches])
    if command == "similarity":
        return renderer.render_json(
            engine.similarity(_read_source(args.left), _read_source(args.right))
        )
    raise InsightError(f"Unknown command {command}")  # pragma: no cover - argparse enforces choices


def _load_config(path: Path | None) -> EngineConfig | None:
    if path is None:
        return None
    return load_config(path)


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True)


if __name__ == "__main__":
    main(sys.argv[1:])
