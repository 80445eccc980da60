"""reverse-make: recover build rules from captured gcc/g++/ar logs."""

__version__ = "0.1.0"

from reverse_make.analyzer import AnalysisOutput, BuildLogAnalyzer
from reverse_make.grouping import find_dependency_groups
from reverse_make.index import InvocationIndex, build_index
from reverse_make.models.invocation import (
    Action,
    ArchiveInvocation,
    CompilerInvocation,
    FlagSet,
    Toolchain,
)
from reverse_make.models.report import DependencyGroup, SkippedCommand, TargetReport
from reverse_make.parsing.classifier import (
    classify,
    classify_archive_command,
    classify_compiler_command,
)
from reverse_make.parsing.tokenizer import split_string_into_parts, split_unescaped_newlines

__all__ = [
    "Action",
    "AnalysisOutput",
    "ArchiveInvocation",
    "BuildLogAnalyzer",
    "CompilerInvocation",
    "DependencyGroup",
    "FlagSet",
    "InvocationIndex",
    "SkippedCommand",
    "TargetReport",
    "Toolchain",
    "build_index",
    "classify",
    "classify_archive_command",
    "classify_compiler_command",
    "find_dependency_groups",
    "split_string_into_parts",
    "split_unescaped_newlines",
]
