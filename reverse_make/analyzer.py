"""Build log analyzer — index the log, then group every archive and link target."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from reverse_make.exceptions import ReverseMakeError
from reverse_make.grouping import find_dependency_groups
from reverse_make.index import InvocationIndex, build_index
from reverse_make.models.invocation import ArchiveInvocation, CompilerInvocation
from reverse_make.models.report import SkippedCommand, TargetReport
from reverse_make.progress import PhaseProgress, ProgressTracker

logger = logging.getLogger(__name__)


@dataclass
class AnalysisOutput:
    """Analyzer return value."""

    index: InvocationIndex
    reports: list[TargetReport] = field(default_factory=list)

    @property
    def skipped(self) -> list[SkippedCommand]:
        return self.index.skipped

    @property
    def failed(self) -> int:
        return sum(1 for r in self.reports if not r.ok)


class BuildLogAnalyzer:
    """
    Run the three-phase pipeline over one build log.

    Phase ``index``: tokenize and classify every line into an InvocationIndex.
    Phase ``archives``: one grouping pass per ar target.
    Phase ``links``: one grouping pass per gcc/g++ link target.

    Indexing always finishes before grouping starts, since a target may
    depend on outputs that appear later in the log.
    """

    def __init__(self, keep_going: bool = False) -> None:
        self.keep_going = keep_going
        self.progress = self._new_progress()

    def _new_progress(self) -> ProgressTracker:
        """Create a fresh ProgressTracker for each analysis call."""
        tracker = ProgressTracker()
        tracker.callbacks.append(self._log_phase)
        return tracker

    def _log_phase(self, phase: PhaseProgress) -> None:
        if phase.status == "completed":
            logger.debug("Phase %s completed in %ss: %s", phase.phase, phase.duration, phase.detail)
        elif phase.status == "failed":
            logger.debug("Phase %s failed: %s", phase.phase, phase.error)

    def analyze(self, text: str) -> AnalysisOutput:
        """
        Analyze a whole build log.

        Raises:
            ClassificationError: a line could not be classified. Always fatal.
            GroupingError: a target could not be grouped and keep_going is off.
        """
        self.progress = self._new_progress()  # expose last run's progress for callers

        self.progress.start_phase("index")
        try:
            index = build_index(text)
        except ReverseMakeError as e:
            self.progress.fail_phase("index", str(e))
            raise
        counts = index.counts()
        self.progress.complete_phase(
            "index",
            detail=", ".join(f"{kind}={n}" for kind, n in counts.items()),
        )

        output = AnalysisOutput(index=index)
        output.reports.extend(
            self._group_targets("archives", "archive", index.archive_targets(), index)
        )
        output.reports.extend(self._group_targets("links", "link", index.link_targets(), index))
        return output

    def _group_targets(
        self,
        phase: str,
        kind: str,
        targets: Iterable[CompilerInvocation | ArchiveInvocation],
        index: InvocationIndex,
    ) -> list[TargetReport]:
        targets = list(targets)
        if not targets:
            self.progress.skip_phase(phase, f"no {kind} targets")
            return []

        reports: list[TargetReport] = []
        self.progress.start_phase(phase)

        for invocation in targets:
            report = self._group_one(phase, kind, invocation, index)
            reports.append(report)

        p = self.progress.get_phase(phase)
        self.progress.complete_phase(phase, detail=f"{p.items} targets, {p.failed_items} failed")
        return reports

    def _group_one(
        self,
        phase: str,
        kind: str,
        invocation: CompilerInvocation | ArchiveInvocation,
        index: InvocationIndex,
    ) -> TargetReport:
        try:
            groups = find_dependency_groups(invocation.inputs, index)
        except ReverseMakeError as e:
            self.progress.record_item(phase, failed=True)
            if not self.keep_going:
                self.progress.fail_phase(phase, f"{invocation.output}: {e}")
                raise
            logger.error("Cannot group %s target %s: %s", kind, invocation.output, e)
            return TargetReport(kind=kind, invocation=invocation, error=str(e))

        self.progress.record_item(phase)
        logger.info(
            "%s target %s: %d inputs in %d group(s)",
            kind,
            invocation.output,
            len(invocation.inputs),
            len(groups),
        )
        return TargetReport(kind=kind, invocation=invocation, groups=groups)
