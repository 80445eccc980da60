"""Shared pytest fixtures for reverse-make tests."""

import pytest

ARCHIVE_LOG = """\
gcc -c -O2 a.c -o a.o
gcc -c -O2 b.c -o b.o
gcc -c -O3 c.c -o c.o
ar cr lib.a a.o b.o c.o
"""

PROJECT_LOG = """\
gcc -c -O2 -Wall -Iinclude src/util.c -o build/util.o
gcc -c -O2 -Wall -Iinclude src/str.c -o build/str.o
ar rc build/libutil.a build/util.o build/str.o
g++ -c -O2 -std=c++17 -DNDEBUG \\
    src/main.cc -o build/main.o
g++ -c -O2 -std=c++17 -DNDEBUG src/app.cc -o build/app.o
g++ -c -g -std=c++17 src/debug.cc -o build/debug.o
echo "linking"
g++ build/main.o build/app.o build/debug.o build/libutil.a -Lbuild -lpthread -o build/app
"""


@pytest.fixture
def archive_log() -> str:
    return ARCHIVE_LOG


@pytest.fixture
def project_log() -> str:
    return PROJECT_LOG


@pytest.fixture
def write_log(tmp_path):
    def _write(content: str, name: str = "build.log") -> str:
        path = tmp_path / name
        path.write_text(content)
        return str(path)

    return _write
