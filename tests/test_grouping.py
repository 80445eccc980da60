"""Tests for find_dependency_groups — grouping by compile-flag fingerprint."""

from __future__ import annotations

import pytest

from reverse_make.exceptions import MalformedGroupSeed, UnknownDependency
from reverse_make.grouping import find_dependency_groups
from reverse_make.index import build_index


def _sources(groups) -> list[list[str]]:
    return [g.sources for g in groups]


class TestFindDependencyGroups:
    def test_archive_scenario(self, archive_log):
        index = build_index(archive_log)
        groups = find_dependency_groups(index.archives["lib.a"].inputs, index)

        assert _sources(groups) == [["a.c", "b.c"], ["c.c"]]
        assert groups[0].representative.flags.optimizations == frozenset({"-O2"})
        assert groups[1].representative.flags.optimizations == frozenset({"-O3"})

    def test_seed_order_is_lexicographic(self):
        index = build_index(
            "gcc -c -O3 z.c -o z.o\n"
            "gcc -c -O2 m.c -o m.o\n"
            "gcc -c -O3 a.c -o a.o\n"
        )
        groups = find_dependency_groups(["z.o", "m.o", "a.o"], index)
        assert _sources(groups) == [["a.c", "z.c"], ["m.c"]]

    def test_link_target_absorbs_archive(self, project_log):
        index = build_index(project_log)
        groups = find_dependency_groups(index.linked["build/app"].inputs, index)

        assert _sources(groups) == [["src/app.cc", "src/main.cc"], ["src/debug.cc"]]
        all_sources = [s for g in groups for s in g.sources]
        assert "build/libutil.a" not in all_sources

    def test_nested_link_output_absorbed(self):
        index = build_index(
            "gcc -c a.c -o a.o\n"
            "gcc -shared a.o -o libfoo.so\n"
            "gcc -c main.c -o main.o\n"
            "gcc main.o libfoo.so -o app\n"
        )
        groups = find_dependency_groups(index.linked["app"].inputs, index)
        assert _sources(groups) == [["main.c"]]

    def test_absorbed_dependencies_not_expanded(self):
        index = build_index(
            "gcc -c a.c -o a.o\n"
            "ar cr liba.a a.o\n"
            "gcc -c b.c -o b.o\n"
            "ar cr libb.a b.o liba.a\n"
        )
        groups = find_dependency_groups(index.archives["libb.a"].inputs, index)
        assert _sources(groups) == [["b.c"]]

    def test_unknown_dependency(self):
        index = build_index("gcc -c a.c -o a.o\ngcc a.o missing.o -o app\n")
        with pytest.raises(UnknownDependency) as exc:
            find_dependency_groups(index.linked["app"].inputs, index)
        assert exc.value.path == "missing.o"

    def test_unknown_dependency_sorted_before_seed(self):
        index = build_index("gcc -c z.c -o z.o\n")
        with pytest.raises(UnknownDependency):
            find_dependency_groups(["0.o", "z.o"], index)

    def test_no_compiled_inputs_yields_no_groups(self):
        index = build_index("ar cr liba.a x.o\n")
        assert find_dependency_groups(["x.o"], index) == []

    def test_duplicate_inputs_collapse(self, archive_log):
        index = build_index(archive_log)
        groups = find_dependency_groups(["a.o", "a.o", "b.o"], index)
        assert _sources(groups) == [["a.c", "b.c"]]

    def test_malformed_seed(self):
        index = build_index("gcc -c a.c b.c -o ab.o\n")
        with pytest.raises(MalformedGroupSeed) as exc:
            find_dependency_groups(["ab.o"], index)
        assert exc.value.path == "ab.o"
        assert exc.value.input_count == 2

    def test_malformed_member(self):
        index = build_index("gcc -c -O2 a.c -o a.o\ngcc -c -O2 -o b.o\n")
        with pytest.raises(MalformedGroupSeed) as exc:
            find_dependency_groups(["a.o", "b.o"], index)
        assert exc.value.path == "b.o"
        assert exc.value.input_count == 0

    def test_index_not_mutated(self, archive_log):
        index = build_index(archive_log)
        before = dict(index.compiled)
        find_dependency_groups(index.archives["lib.a"].inputs, index)
        find_dependency_groups(index.archives["lib.a"].inputs, index)
        assert index.compiled == before
