"""CLI entry point: reverse-make.

Usage:
    reverse-make build.log              # text report to stdout
    reverse-make -f build.log --format json
    reverse-make build.log --keep-going # report failed targets instead of stopping
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import structlog

from reverse_make.analyzer import BuildLogAnalyzer
from reverse_make.core.config import load_settings
from reverse_make.core.logging import setup_logging
from reverse_make.exceptions import ReverseMakeError
from reverse_make.report import render_text, report_to_dict

log = structlog.get_logger("reverse_make.cli")

EXIT_UNREADABLE_INPUT = 1
EXIT_ANALYSIS_ERROR = 3

_STATUS_ICONS = {
    "completed": "+",
    "failed": "!",
    "skipped": "-",
    "running": "~",
}


def _read_log(path: str) -> str | None:
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


def _echo_summary(analyzer: BuildLogAnalyzer) -> None:
    summary = analyzer.progress.get_summary()
    click.echo(f"\nPipeline summary (total: {summary['total_duration']}s):", err=True)
    for p in summary["phases"]:
        status_icon = _STATUS_ICONS.get(p["status"], "?")
        duration = f" ({p['duration']}s)" if p["duration"] is not None else ""
        detail = f" - {p['detail']}" if p["detail"] else ""
        click.echo(f"  [{status_icon}] {p['phase']}{duration}{detail}", err=True)


@click.command()
@click.argument("input_file", required=False)
@click.option("-f", "--file", "file_option", default=None, help="The input build log.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Report format",
)
@click.option(
    "--keep-going",
    is_flag=True,
    help="Report targets whose inputs cannot be grouped instead of stopping.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    input_file: str | None,
    file_option: str | None,
    output_format: str,
    keep_going: bool,
    verbose: bool,
) -> None:
    """reverse-make: partially generate makefiles from build logs."""
    try:
        settings = load_settings()
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    setup_logging(settings, verbose=verbose)

    path = file_option or input_file or settings.input_file
    text = _read_log(path)
    if text is None:
        click.echo(f"Unable to open file: {path}", err=True)
        sys.exit(EXIT_UNREADABLE_INPUT)

    analyzer = BuildLogAnalyzer(keep_going=keep_going)
    try:
        result = analyzer.analyze(text)
    except ReverseMakeError as e:
        click.echo(f"Error: {e}", err=True)
        if verbose:
            _echo_summary(analyzer)
        sys.exit(EXIT_ANALYSIS_ERROR)

    if output_format == "json":
        payload = {
            "input": path,
            "targets": [report_to_dict(r) for r in result.reports],
            "skipped": [
                {"line": s.line, "command": s.command, "reason": s.reason}
                for s in result.skipped
            ],
        }
        click.echo(json.dumps(payload, indent=2))
    elif result.reports:
        click.echo(render_text(result.reports))

    log.info(
        "analysis.completed",
        input=path,
        targets=len(result.reports),
        failed=result.failed,
        skipped=len(result.skipped),
    )
    if verbose:
        _echo_summary(analyzer)


if __name__ == "__main__":
    main()
