"""Flag classifier — maps gcc/g++/ar token lists onto invocation models.

Compiler flags are sorted into buckets by their textual prefix. The rules
below are checked in order and the first match wins, since several prefixes
overlap (``-fuse`` before ``-f``, ``-MT`` before ``-M``, ``-l`` before
``-l*``). Flags that GCC understands but that would change how a log should
be read (preprocessor passthrough, driver overrides, response files) are
rejected rather than silently misfiled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from reverse_make.exceptions import (
    MissingArgument,
    UnhandledArgument,
    UnsupportedArchiveForm,
    UnsupportedCommand,
)
from reverse_make.models.invocation import (
    Action,
    ArchiveInvocation,
    CompilerInvocation,
    FlagSet,
    Toolchain,
)

logger = logging.getLogger(__name__)

COMPILER_COMMANDS: dict[str, Toolchain] = {
    "gcc": Toolchain.GCC,
    "g++": Toolchain.GPP,
}
ARCHIVE_COMMAND = "ar"
ARCHIVE_OPERATIONS = frozenset({"cr", "rc"})

_ACTION_FLAGS: dict[str, Action] = {
    "-c": Action.COMPILE,
    "-S": Action.COMPILE_NO_ASSEMBLE,
    "-E": Action.PREPROCESS_ONLY,
}

_CFLAGS_EXACT = frozenset({"-p", "-pg", "--coverage", "-undef"})
_WARNING_EXACT = frozenset({"-w", "-pedantic", "-pedantic-errors"})

_LINK_ONLY_EXACT = frozenset(
    {
        "-lobj",
        "-nodefaultlibs",
        "-nolibc",
        "-nostdlib",
        "-pie",
        "-no-pie",
        "-static-pie",
        "-pthread",
        "-r",
        "-rdynamic",
        "-s",
        "-symbolic",
    }
)
_LINK_ONLY_PREFIXES = ("-shared", "-static")

# Two-token flags kept verbatim as "<flag> <arg>" link options
_LINK_PAIR_FLAGS = frozenset({"-Xlinker", "-l"})

# Dependency-file flags whose following token is a make target or file name
_DEPFILE_PREFIXES = ("-MT", "-MQ", "-MF")

_IGNORED_EXACT = frozenset({"-v", "-###", "-pipe"})

# GCC flags that are recognized but not supported
_UNSUPPORTED_EXACT = frozenset(
    {
        "--version",
        "-pass-exit-codes",
        "-wrapper",
        "-aux-info",
        "-gen-decls",
        "-print-objc-runtime-info",
        "--param",
        "-include",
        "-imacros",
        "-A",
        "-C",
        "-CC",
        "-P",
        "-traditional",
        "-traditional-cpp",
        "-trigraphs",
        "-remap",
        "-H",
        "-Xpreprocessor",
        "-no-integrated-cpp",
        "-Xassembler",
        "-T",
        "-e",
        "-u",
        "-z",
        "-iquote",
        "-isystem",
        "-idirafter",
        "-I-",
        "-iprefix",
        "-iwithprefix",
        "-iwithprefixbefore",
        "-isysroot",
        "-imultilib",
        "-nostdinc",
        "-nostdinc++",
        "-no-canonical-prefixes",
        "--no-sysroot-suffix",
    }
)
_UNSUPPORTED_PREFIXES = (
    "-x",
    "--help",
    "--target-help",
    "-specs",
    "@",
    "-d",
    "--entry",
    "-iplugindir",
    "-B",
    "--sysroot",
)


@dataclass
class _InvocationBuilder:
    """Mutable accumulator, frozen into a CompilerInvocation once all tokens are read."""

    toolchain: Toolchain
    action: Action = Action.LINK
    buckets: dict[str, set[str]] = field(
        default_factory=lambda: {name: set() for name in FlagSet.bucket_names()}
    )
    inputs: list[str] = field(default_factory=list)
    output: str = ""

    def add(self, bucket: str, flag: str) -> None:
        self.buckets[bucket].add(flag)

    def freeze(self) -> CompilerInvocation:
        flags = FlagSet(**{name: frozenset(values) for name, values in self.buckets.items()})
        return CompilerInvocation(
            toolchain=self.toolchain,
            action=self.action,
            flags=flags,
            inputs=tuple(self.inputs),
            output=self.output,
        )


def _next_token(parts: list[str], i: int) -> str:
    if i + 1 >= len(parts):
        raise MissingArgument(parts[i])
    return parts[i + 1]


def classify_compiler_command(parts: list[str]) -> CompilerInvocation:
    """
    Build a CompilerInvocation from a gcc/g++ token list.

    Raises:
        UnsupportedCommand: parts[0] is neither gcc nor g++.
        UnhandledArgument: bare -D or a flag on the unsupported list.
        MissingArgument: a two-token flag ends the line.
    """
    toolchain = COMPILER_COMMANDS.get(parts[0])
    if toolchain is None:
        raise UnsupportedCommand(parts[0])

    builder = _InvocationBuilder(toolchain=toolchain)

    i = 1
    while i < len(parts):
        part = parts[i]

        if part in _ACTION_FLAGS:
            builder.action = _ACTION_FLAGS[part]
        elif part == "-D":
            raise UnhandledArgument(part)
        elif part.startswith("-D"):
            builder.add("defines", part)
        elif part.startswith("-I"):
            builder.add("includes", part)
        elif part.startswith("-fuse"):
            builder.add("link_options", f"{part} {_next_token(parts, i)}")
            i += 1
        elif part.startswith("-f") or part in _CFLAGS_EXACT:
            builder.add("cflags", part)
        elif part.startswith("-W") or part in _WARNING_EXACT:
            builder.add("warnings", part)
        elif part.startswith("-m"):
            builder.add("target_options", part)
        elif part.startswith("-O"):
            builder.add("optimizations", part)
        elif part.startswith("-L"):
            builder.add("link_search_dirs", part)
        elif part in _LINK_ONLY_EXACT or part.startswith(_LINK_ONLY_PREFIXES):
            builder.add("link_options", part)
        elif part in _LINK_PAIR_FLAGS:
            builder.add("link_options", f"{part} {_next_token(parts, i)}")
            i += 1
        elif part.startswith("-l"):
            # Link order between libraries and objects is lost here.
            builder.add("link_libraries", part)
        elif part.startswith("-std") or part == "-ansi":
            builder.add("cflags", part)
        elif part.startswith("-g"):
            builder.add("debug_flags", part)
        elif part.startswith(_DEPFILE_PREFIXES):
            i += 1
        elif part.startswith("-M") or part in _IGNORED_EXACT:
            pass
        elif part in _UNSUPPORTED_EXACT or part.startswith(_UNSUPPORTED_PREFIXES):
            raise UnhandledArgument(part)
        elif part == "-o":
            builder.output = _next_token(parts, i)
            i += 1
        elif part.startswith(">") or part == "2>&1":
            pass
        else:
            builder.inputs.append(part)
        i += 1

    return builder.freeze()


def classify_archive_command(parts: list[str]) -> ArchiveInvocation:
    """
    Build an ArchiveInvocation from an ``ar cr|rc <output> <inputs...>`` token list.

    Raises:
        UnsupportedArchiveForm: fewer than one member or another operation.
    """
    if len(parts) < 4 or parts[1] not in ARCHIVE_OPERATIONS:
        raise UnsupportedArchiveForm(" ".join(parts[:2]))
    return ArchiveInvocation(output=parts[2], inputs=tuple(parts[3:]))


def classify(parts: list[str]) -> CompilerInvocation | ArchiveInvocation | None:
    """Dispatch on the first token. Returns None for commands that are neither compiler nor ar."""
    if not parts:
        return None
    if parts[0] in COMPILER_COMMANDS:
        return classify_compiler_command(parts)
    if parts[0] == ARCHIVE_COMMAND:
        return classify_archive_command(parts)
    logger.debug("Not a compiler or archiver command: %s", parts[0])
    return None
