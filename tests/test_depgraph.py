import shutil
import sys
from pathlib import Path

import pytest

from dxtci.core.depgraph.analysis import find_cycles, include_counts, render_dot, run_compiler, write_cycles
from dxtci.core.depgraph.include_tree import ROOT_NODE, parse_file, parse_include_trace, parse_trace_lines, strip_path
from dxtci.core.errors import CompilerError

TRACE = """\
. /src/dune/xt/common/memory.hh
.. /usr/include/c++/12/memory
... /usr/include/c++/12/bits/stl_algobase.h
.. /src/dune/xt/common/debug.hh
... /src/dune/xt/common/memory.hh
. /src/dune/xt/common/debug.hh
.! /src/build/pch.hh.gch
Multiple include guards may be useful for:
/src/dune/xt/common/debug.hh
"""


def test_parse_trace_lines_ignores_noise():
    lines = parse_trace_lines(TRACE)
    assert lines[0] == (1, "/src/dune/xt/common/memory.hh")
    assert lines[2] == (3, "/usr/include/c++/12/bits/stl_algobase.h")
    assert lines[-1] == (1, "/src/build/pch.hh.gch")
    assert len(lines) == 7


def test_graph_edges_and_strip_base():
    root, g = parse_include_trace(TRACE, strip_base="/src")
    assert root == ROOT_NODE
    assert g.has_edge(ROOT_NODE, "dune/xt/common/memory.hh")
    assert g.has_edge("dune/xt/common/memory.hh", "/usr/include/c++/12/memory")
    assert g.has_edge("dune/xt/common/memory.hh", "dune/xt/common/debug.hh")
    assert g.has_edge("dune/xt/common/debug.hh", "dune/xt/common/memory.hh")
    assert g.has_edge(ROOT_NODE, "build/pch.hh.gch")
    assert g.nodes["dune/xt/common/debug.hh"]["depth"] == 1


def test_repeated_includes_are_counted():
    _, g = parse_include_trace(TRACE, strip_base="/src")
    assert include_counts(g)["dune/xt/common/debug.hh"] == 2
    assert g[ROOT_NODE]["dune/xt/common/debug.hh"]["count"] == 1


def test_maxdepth_drops_deep_includes():
    _, g = parse_include_trace(TRACE, strip_base="/src", maxdepth=2)
    assert "/usr/include/c++/12/bits/stl_algobase.h" not in g
    assert not g.has_edge("dune/xt/common/debug.hh", "dune/xt/common/memory.hh")


def test_cycles_found_and_normalized():
    _, g = parse_include_trace(TRACE, strip_base="/src")
    assert find_cycles(g) == [["dune/xt/common/debug.hh", "dune/xt/common/memory.hh"]]


def test_acyclic_graph_has_no_cycles(tmp_path: Path):
    _, g = parse_include_trace(". a.hh\n.. b.hh\n. c.hh\n")
    assert find_cycles(g) == []
    assert write_cycles([], tmp_path / "x.cycles") is False
    assert not (tmp_path / "x.cycles").exists()


def test_write_cycles(tmp_path: Path):
    assert write_cycles([["a.hh", "b.hh"]], tmp_path / "x.cycles") is True
    assert (tmp_path / "x.cycles").read_text(encoding="utf-8") == "[['a.hh', 'b.hh']]\n"


def test_skipped_level_is_clamped():
    _, g = parse_include_trace(". a.hh\n... deep.hh\n")
    assert g.has_edge("a.hh", "deep.hh")


def test_strip_path():
    assert strip_path("/src/dune/x.hh", "/src") == "dune/x.hh"
    assert strip_path("/srcfoo/x.hh", "/src") == "/srcfoo/x.hh"
    assert strip_path("/usr/include/../include/vector", None) == "/usr/include/vector"


def test_render_dot():
    root, g = parse_include_trace(". a.hh\n.. b \"q\".hh\n")
    dot = render_dot(g, root)
    assert dot.startswith('digraph "includes" {')
    assert '"<root>" -> "a.hh";' in dot
    assert '"a.hh" -> "b \\"q\\".hh";' in dot
    assert dot.endswith("}\n")


def test_parse_file(tmp_path: Path):
    p = tmp_path / "tu.deps"
    p.write_text(TRACE, encoding="utf-8")
    _, g = parse_file("/src", str(p), maxdepth=1)
    assert sorted(g.successors(ROOT_NODE)) == ["build/pch.hh.gch", "dune/xt/common/debug.hh", "dune/xt/common/memory.hh"]


def test_run_compiler_captures_output(tmp_path: Path):
    out = tmp_path / "out.txt"
    run_compiler([sys.executable, "-c", "import sys; print('. a.hh', file=sys.stderr)"], out)
    assert out.read_text(encoding="utf-8").strip() == ". a.hh"


def test_run_compiler_failure(tmp_path: Path):
    with pytest.raises(CompilerError) as ei:
        run_compiler([sys.executable, "-c", "raise SystemExit(3)"], tmp_path / "out.txt")
    assert ei.value.returncode == 3


def test_run_compiler_missing_executable(tmp_path: Path):
    with pytest.raises(CompilerError) as ei:
        run_compiler(["no-such-compiler-dxtci", "-H", "tu.cc"], tmp_path / "out.txt")
    assert ei.value.returncode == 127


@pytest.mark.skipif(shutil.which("g++") is None, reason="g++ not available")
def test_real_compiler_trace(tmp_path: Path):
    (tmp_path / "a.hh").write_text("#pragma once\n#include \"b.hh\"\n", encoding="utf-8")
    (tmp_path / "b.hh").write_text("#pragma once\n", encoding="utf-8")
    (tmp_path / "tu.cc").write_text("#include \"a.hh\"\nint main() { return 0; }\n", encoding="utf-8")
    out = tmp_path / "tu.deps"
    run_compiler(["g++", "-H", "-fsyntax-only", str(tmp_path / "tu.cc")], out)
    _, g = parse_file(str(tmp_path), str(out))
    assert g.has_edge("a.hh", "b.hh")
