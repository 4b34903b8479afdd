"""Command-line front door for lazyfindings.

Parses CLI options, loads a findings report, resolves theme and config,
and hands the findings to the interactive browser.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .config import load_code_style, load_flash_seconds, load_left_pane_max, load_theme_name
from .highlight import normalize_code_style
from .log import configure_logging
from .models import ReportError, load_report
from .session import SessionOptions, browse_findings
from .terminal import MIN_COLUMNS, MIN_ROWS, can_use_tui
from .ui_theme import available_theme_names, resolve_theme

CHECK_SCOPE_LABELS: dict[str, str] = {
    "dockerfile": "Dockerfile",
    "compose": "Compose",
    "secrets": "Secrets",
    "lineendings": "Line Endings",
    "dockerignore": "Dockerignore",
    "build": "Build",
    "startup": "Startup",
    "network": "Network",
    "performance": "Performance",
    "image": "Image",
    "cleanup": "Cleanup",
}
ALL_CHECKS_LABEL = "All checks"


def describe_check_scope(categories: list[str] | None) -> str:
    """Return the header label for the requested check categories."""
    if not categories:
        return ALL_CHECKS_LABEL
    return ", ".join(CHECK_SCOPE_LABELS.get(category, category) for category in categories)


def _scope_list(value: str) -> list[str]:
    """argparse type for comma-separated check categories."""
    return [part.strip() for part in value.split(",") if part.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyfindings",
        description="Browse diagnostic findings and their fixes in a split-screen terminal view.",
    )
    parser.add_argument("report", help="Path to a JSON findings report.")
    parser.add_argument("--dir", dest="scan_dir", default=None, help="Scanned directory label. Defaults to cwd.")
    parser.add_argument(
        "--scope",
        type=_scope_list,
        default=None,
        help="Comma-separated check categories that produced the report.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default=None, help="Pygments style for language-tagged snippets.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write diagnostic logs to this file.")
    parser.add_argument("--verbose", action="store_true", help="Log debug detail (requires --log-file).")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, load the report, and launch the browser."""
    args = build_parser().parse_args(argv)
    logger = configure_logging(args.log_file, verbose=args.verbose)

    report_path = Path(args.report)
    if not report_path.is_file():
        raise SystemExit(f"Report not found: {report_path}")
    try:
        findings = load_report(report_path)
    except (OSError, ReportError) as exc:
        raise SystemExit(f"Cannot read report {report_path}: {exc}") from exc
    logger.info("loaded %d findings from %s", len(findings), report_path)

    if not findings:
        print("No findings.")
        return
    if not can_use_tui(sys.stdin, sys.stdout):
        raise SystemExit(f"An interactive terminal of at least {MIN_COLUMNS}x{MIN_ROWS} is required.")

    no_color = args.no_color or bool(os.environ.get("NO_COLOR"))
    options = SessionOptions(
        theme=resolve_theme(args.theme or load_theme_name(), no_color=no_color),
        code_style=normalize_code_style(args.style or load_code_style()),
        flash_seconds=load_flash_seconds(),
        left_pane_max=load_left_pane_max(),
    )
    scan_dir = args.scan_dir if args.scan_dir is not None else str(Path.cwd())
    browse_findings(findings, scan_dir, describe_check_scope(args.scope), options=options)


if __name__ == "__main__":
    main()
