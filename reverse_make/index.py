"""Invocation index — output path to the invocation that produced it."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from reverse_make.exceptions import ClassificationError
from reverse_make.models.invocation import Action, ArchiveInvocation, CompilerInvocation
from reverse_make.models.report import SkippedCommand
from reverse_make.parsing.classifier import classify
from reverse_make.parsing.tokenizer import tokenize

logger = logging.getLogger(__name__)

COMPILED = "compiled"
LINKED = "linked"
ARCHIVE = "archive"


@dataclass
class InvocationIndex:
    """
    Build-wide table of classified invocations, keyed by output path.

    Partitioned by kind. A later invocation with the same output path
    replaces the earlier one, so a target rebuilt several times in one log
    resolves to its final recipe.
    """

    compiled: dict[str, CompilerInvocation] = field(default_factory=dict)
    linked: dict[str, CompilerInvocation] = field(default_factory=dict)
    archives: dict[str, ArchiveInvocation] = field(default_factory=dict)
    skipped: list[SkippedCommand] = field(default_factory=list)

    def add(self, invocation: CompilerInvocation | ArchiveInvocation, line: int = 0) -> bool:
        """
        Insert one invocation. Returns False if its kind is not indexed
        (-S and -E compiler runs), which is recorded as a skipped command.
        """
        if isinstance(invocation, ArchiveInvocation):
            table: dict = self.archives
        elif invocation.action is Action.COMPILE:
            table = self.compiled
        elif invocation.action is Action.LINK:
            table = self.linked
        else:
            logger.warning(
                "Skipping %s command on line %d: action %s is not indexed",
                invocation.toolchain.value,
                line,
                invocation.action.value,
            )
            self.skipped.append(
                SkippedCommand(
                    line=line,
                    command=invocation.toolchain.value,
                    reason=f"unsupported action {invocation.action.value}",
                )
            )
            return False

        if invocation.output in table:
            logger.debug("Line %d overwrites earlier recipe for %s", line, invocation.output)
        table[invocation.output] = invocation
        return True

    def resolve(self, path: str) -> tuple[str, CompilerInvocation | ArchiveInvocation] | None:
        """Look ``path`` up in compiled, then linked, then archive outputs."""
        if path in self.compiled:
            return COMPILED, self.compiled[path]
        if path in self.linked:
            return LINKED, self.linked[path]
        if path in self.archives:
            return ARCHIVE, self.archives[path]
        return None

    def archive_targets(self) -> Iterator[ArchiveInvocation]:
        for output in sorted(self.archives):
            yield self.archives[output]

    def link_targets(self) -> Iterator[CompilerInvocation]:
        for output in sorted(self.linked):
            yield self.linked[output]

    def counts(self) -> dict[str, int]:
        return {
            COMPILED: len(self.compiled),
            LINKED: len(self.linked),
            ARCHIVE: len(self.archives),
            "skipped": len(self.skipped),
        }


def build_index(text: str) -> InvocationIndex:
    """
    Tokenize and classify a whole build log in one pass.

    Empty lines are ignored. Lines that are not gcc, g++ or ar are logged
    and skipped. Classification errors propagate with the logical line
    number attached.
    """
    index = InvocationIndex()

    for line, parts in tokenize(text):
        if not parts:
            logger.debug("Skipping empty line %d", line)
            continue

        try:
            invocation = classify(parts)
        except ClassificationError as e:
            e.at_line(line)
            raise

        if invocation is None:
            logger.warning('Skipping unrecognized command "%s" on line %d', parts[0], line)
            index.skipped.append(
                SkippedCommand(line=line, command=parts[0], reason="unrecognized command")
            )
            continue

        index.add(invocation, line)

    logger.info(
        "Indexed %d compiled, %d linked, %d archive outputs (%d lines skipped)",
        len(index.compiled),
        len(index.linked),
        len(index.archives),
        len(index.skipped),
    )
    return index
