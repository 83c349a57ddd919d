from __future__ import annotations

import logging
import pprint
import subprocess
from collections import Counter
from pathlib import Path
from typing import Dict, List, Sequence

import networkx as nx

from dxtci.core.errors import CompilerError

_log = logging.getLogger("dxtci.depgraph")


def run_compiler(cmd: Sequence[str], out_path: Path) -> None:
    """Run the compiler with stdout and stderr both captured into `out_path`."""
    cmd = [str(c) for c in cmd]
    if not cmd:
        raise ValueError("compiler command must not be empty")
    _log.debug("%s > %s", " ".join(cmd), out_path)
    with open(out_path, "wb") as out:
        try:
            p = subprocess.Popen(cmd, shell=False, stdout=out, stderr=out)
        except OSError as exc:
            raise CompilerError(cmd, 127, str(exc), message=f"cannot run {cmd[0]}: {exc}") from exc
        errcode = p.wait()
    if errcode != 0:
        raise CompilerError(cmd, errcode, f"see {out_path}")


def _rotate(cycle: List[str]) -> List[str]:
    i = cycle.index(min(cycle))
    return cycle[i:] + cycle[:i]


def find_cycles(graph: nx.DiGraph) -> List[List[str]]:
    return sorted(_rotate(list(c)) for c in nx.simple_cycles(graph))


def write_cycles(cycles: List[List[str]], path: Path) -> bool:
    if not cycles:
        return False
    with open(path, "w", encoding="utf-8") as out:
        pprint.pprint(cycles, out)
    _log.warning("%d include cycle(s) written to %s", len(cycles), path)
    return True


def include_counts(graph: nx.DiGraph) -> Dict[str, int]:
    """How often each header was included, summed over all includers."""
    counts: Counter = Counter()
    for _, dst, data in graph.edges(data=True):
        counts[dst] += data.get("count", 1)
    return dict(counts.most_common())


def _dot_id(name: str) -> str:
    return '"' + name.replace("\\", "\\\\").replace('"', '\\"') + '"'


def render_dot(graph: nx.DiGraph, root: str, name: str = "includes") -> str:
    lines = [f"digraph {_dot_id(name)} {{", "  rankdir=LR;", "  node [shape=box];"]
    lines.append(f"  {_dot_id(root)} [shape=ellipse];")
    for node in sorted(n for n in graph.nodes if n != root):
        lines.append(f"  {_dot_id(node)};")
    for src, dst in sorted(graph.edges):
        lines.append(f"  {_dot_id(src)} -> {_dot_id(dst)};")
    lines.append("}")
    return "\n".join(lines) + "\n"
