"""Tests for InvocationIndex and build_index."""

from __future__ import annotations

import logging

import pytest

from reverse_make.exceptions import UnhandledArgument, UnsupportedArchiveForm
from reverse_make.index import ARCHIVE, COMPILED, LINKED, InvocationIndex, build_index
from reverse_make.models.invocation import Action
from reverse_make.parsing.classifier import classify


class TestBuildIndex:
    def test_routes_by_kind(self, project_log):
        index = build_index(project_log)
        assert sorted(index.compiled) == [
            "build/app.o",
            "build/debug.o",
            "build/main.o",
            "build/str.o",
            "build/util.o",
        ]
        assert list(index.linked) == ["build/app"]
        assert list(index.archives) == ["build/libutil.a"]

    def test_line_continuation(self, project_log):
        index = build_index(project_log)
        assert index.compiled["build/main.o"].inputs == ("src/main.cc",)

    def test_unrecognized_command_skipped(self, project_log):
        index = build_index(project_log)
        assert len(index.skipped) == 1
        skipped = index.skipped[0]
        assert skipped.command == "echo"
        assert skipped.line == 7
        assert skipped.reason == "unrecognized command"

    def test_empty_lines_ignored(self):
        index = build_index("\n\n   \n")
        assert index.counts() == {COMPILED: 0, LINKED: 0, ARCHIVE: 0, "skipped": 0}

    def test_empty_lines_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="reverse_make.index"):
            index = build_index("\ngcc -c a.c -o a.o\n")
        assert "a.o" in index.compiled
        assert "Skipping empty line 1" in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_preprocess_and_assembly_not_indexed(self):
        index = build_index("gcc -E a.c -o a.i\ngcc -S a.c -o a.s\n")
        assert index.compiled == {}
        assert index.linked == {}
        assert [s.reason for s in index.skipped] == [
            "unsupported action PREPROCESS_ONLY",
            "unsupported action COMPILE_NO_ASSEMBLE",
        ]

    def test_last_writer_wins(self):
        index = build_index(
            "gcc -c -O0 a.c -o a.o\n"
            "gcc -c -O2 a.c -o a.o\n"
            "ar cr lib.a a.o\n"
            "ar cr lib.a a.o b.o\n"
        )
        assert index.compiled["a.o"].flags.optimizations == frozenset({"-O2"})
        assert index.archives["lib.a"].inputs == ("a.o", "b.o")

    def test_classification_error_carries_line(self):
        with pytest.raises(UnhandledArgument) as exc:
            build_index("gcc -c a.c -o a.o\ngcc -c -include x.h b.c -o b.o\n")
        assert exc.value.line == 2
        assert str(exc.value).startswith("line 2:")

    def test_archive_error_carries_line(self):
        with pytest.raises(UnsupportedArchiveForm) as exc:
            build_index("ar x lib.a a.o\n")
        assert exc.value.line == 1


class TestInvocationIndex:
    def test_add_and_resolve(self):
        index = InvocationIndex()
        assert index.add(classify(["gcc", "-c", "a.c", "-o", "a.o"]))
        assert index.add(classify(["gcc", "a.o", "-o", "app"]))
        assert index.add(classify(["ar", "cr", "lib.a", "a.o"]))

        kind, inv = index.resolve("a.o")
        assert kind == COMPILED
        assert inv.action is Action.COMPILE
        assert index.resolve("app")[0] == LINKED
        assert index.resolve("lib.a")[0] == ARCHIVE
        assert index.resolve("missing.o") is None

    def test_resolve_is_case_sensitive(self):
        index = InvocationIndex()
        index.add(classify(["gcc", "-c", "a.c", "-o", "A.o"]))
        assert index.resolve("a.o") is None

    def test_targets_in_output_order(self):
        index = build_index("ar cr z.a a.o\nar cr b.a a.o\ngcc x.o -o zz\ngcc x.o -o aa\n")
        assert [a.output for a in index.archive_targets()] == ["b.a", "z.a"]
        assert [link.output for link in index.link_targets()] == ["aa", "zz"]
