"""Data models for grouping results and target reports."""

from __future__ import annotations

from dataclasses import dataclass, field

from reverse_make.models.invocation import ArchiveInvocation, CompilerInvocation


@dataclass
class DependencyGroup:
    """Sources of one inferred build rule and the invocation whose flags they share."""

    sources: list[str]
    representative: CompilerInvocation


@dataclass
class SkippedCommand:
    """A logical line that was reported and left out of the index."""

    line: int
    command: str
    reason: str


@dataclass
class TargetReport:
    """Grouping result for one archive or link target."""

    kind: str  # "archive" | "link"
    invocation: CompilerInvocation | ArchiveInvocation
    groups: list[DependencyGroup] = field(default_factory=list)
    error: str | None = None  # set when grouping failed and the run kept going

    @property
    def target(self) -> str:
        return self.invocation.output

    @property
    def ok(self) -> bool:
        return self.error is None
