"""Report rendering for grouped targets (plain text and JSON-ready dicts)."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from reverse_make.models.invocation import CompilerInvocation, FlagSet
from reverse_make.models.report import DependencyGroup, TargetReport

SEPARATOR = "-" * 52

_LINK_BUCKETS = ("link_options", "link_search_dirs", "link_libraries")


def _format_set(values: Iterable[str]) -> str:
    return "{" + ", ".join(f'"{v}"' for v in sorted(values)) + "}"


def _header(report: TargetReport) -> str:
    inv = report.invocation
    if report.kind == "archive":
        label = "ar archive target"
    else:
        label = f"{inv.toolchain.value} link target"
    return f"{label}: {inv.output} has {len(inv.inputs)} dependencies: {', '.join(inv.inputs)}"


def _render_group(number: int, group: DependencyGroup) -> list[str]:
    rep = group.representative
    lines = [
        f"    Group {number} depending on {len(group.sources)} source dependencies: "
        f"{', '.join(group.sources)}",
        "    Compiled with the following flags:",
        f"      compiler: {rep.toolchain.value}",
        f"      command: {rep.action.value}",
    ]
    for name in FlagSet.bucket_names():
        lines.append(f"      {name}: {_format_set(getattr(rep.flags, name))}")
    return lines


def render_report(report: TargetReport) -> str:
    """Render one target report as text."""
    lines = [SEPARATOR, _header(report), SEPARATOR]

    if isinstance(report.invocation, CompilerInvocation):
        lines.append("  Linked with the following flags:")
        for name in _LINK_BUCKETS:
            lines.append(f"    {name}: {_format_set(getattr(report.invocation.flags, name))}")

    if report.error is not None:
        lines.append(f"  Grouping failed: {report.error}")
        return "\n".join(lines)

    lines.append("  Found the following group(s) of matching source dependencies:")
    for number, group in enumerate(report.groups):
        lines.extend(_render_group(number, group))
    return "\n".join(lines)


def render_text(reports: Iterable[TargetReport]) -> str:
    """Render all target reports, archives and links in the order given."""
    return "\n".join(render_report(r) for r in reports)


def _invocation_to_dict(inv: CompilerInvocation) -> dict[str, Any]:
    return {
        "toolchain": inv.toolchain.value,
        "action": inv.action.value,
        "output": inv.output,
        "inputs": list(inv.inputs),
        "flags": inv.flags.as_dict(),
    }


def report_to_dict(report: TargetReport) -> dict[str, Any]:
    """JSON-serializable form of one target report."""
    inv = report.invocation
    data: dict[str, Any] = {
        "kind": report.kind,
        "target": inv.output,
        "inputs": list(inv.inputs),
        "groups": [
            {
                "sources": list(g.sources),
                "flags": _invocation_to_dict(g.representative),
            }
            for g in report.groups
        ],
        "error": report.error,
    }
    if isinstance(inv, CompilerInvocation):
        data["toolchain"] = inv.toolchain.value
        data["link_flags"] = {name: sorted(getattr(inv.flags, name)) for name in _LINK_BUCKETS}
    return data
