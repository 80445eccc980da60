"""Data models for classified compiler and archiver invocations."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum


class Toolchain(Enum):
    """Compiler driver that produced an invocation."""

    GCC = "gcc"
    GPP = "g++"


class Action(Enum):
    """What a compiler invocation does. LINK unless -c, -S or -E is given."""

    COMPILE = "COMPILE"  # -c
    COMPILE_NO_ASSEMBLE = "COMPILE_NO_ASSEMBLE"  # -S
    PREPROCESS_ONLY = "PREPROCESS_ONLY"  # -E
    LINK = "LINK"


@dataclass(frozen=True)
class FlagSet:
    """
    Flag buckets of one compiler invocation.

    Each bucket holds raw flag text. Buckets are sets: order and duplicates
    on the command line do not matter, so two invocations with the same
    flags in a different order compare equal.
    """

    defines: frozenset[str] = frozenset()  # -D
    includes: frozenset[str] = frozenset()  # -I
    cflags: frozenset[str] = frozenset()  # -f, -std, -ansi
    warnings: frozenset[str] = frozenset()  # -W, -w, -pedantic
    target_options: frozenset[str] = frozenset()  # -m
    optimizations: frozenset[str] = frozenset()  # -O
    debug_flags: frozenset[str] = frozenset()  # -g
    link_options: frozenset[str] = frozenset()
    link_search_dirs: frozenset[str] = frozenset()  # -L
    link_libraries: frozenset[str] = frozenset()  # -l

    @classmethod
    def bucket_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def as_dict(self) -> dict[str, list[str]]:
        """Buckets as sorted lists, in declaration order."""
        return {name: sorted(getattr(self, name)) for name in self.bucket_names()}


@dataclass(frozen=True)
class CompilerInvocation:
    """One gcc/g++ command line."""

    toolchain: Toolchain
    action: Action = Action.LINK
    flags: FlagSet = field(default_factory=FlagSet)
    inputs: tuple[str, ...] = ()
    output: str = ""

    @property
    def fingerprint(self) -> tuple[Action, FlagSet]:
        # toolchain is not part of the fingerprint: gcc and g++ objects built with
        # the same flags group together.
        return (self.action, self.flags)

    def flags_match(self, other: CompilerInvocation) -> bool:
        return self.fingerprint == other.fingerprint


@dataclass(frozen=True)
class ArchiveInvocation:
    """One ``ar cr|rc <output> <inputs...>`` command line."""

    output: str
    inputs: tuple[str, ...] = ()
