"""
Parser for compiler include traces (`g++ -H` / `clang++ -H`).

The compiler prints one line per opened header to stderr, prefixed by one
dot per nesting level:

    . /usr/include/c++/12/vector
    .. /usr/include/c++/12/bits/stl_algobase.h
    ... /usr/include/x86_64-linux-gnu/c++/12/bits/c++config.h
    . dune/xt/common/memory.hh

Precompiled headers carry a `!` (used) or `x` (rejected) marker right after
the dots. Everything else (diagnostics, the "Multiple include guards may be
useful for:" trailer) is ignored.
"""
from __future__ import annotations

import os
import re
from typing import List, Optional, Tuple

import networkx as nx

ROOT_NODE = "<root>"

_TRACE_RE = re.compile(r"^(?P<dots>\.+)(?P<mark>[!x]?) (?P<path>\S.*)$")


def strip_path(path: str, strip_base: Optional[str]) -> str:
    path = os.path.normpath(path.strip())
    if strip_base:
        base = os.path.normpath(strip_base)
        if path == base:
            return path
        if path.startswith(base + os.sep):
            return path[len(base) + 1:]
    return path


def parse_trace_lines(text: str) -> List[Tuple[int, str]]:
    """(depth, path) for every include trace line, in output order."""
    out: List[Tuple[int, str]] = []
    for line in text.splitlines():
        m = _TRACE_RE.match(line.rstrip())
        if not m:
            continue
        out.append((len(m.group("dots")), m.group("path").strip()))
    return out


def parse_include_trace(
    text: str,
    strip_base: Optional[str] = None,
    maxdepth: int = 100,
    root: str = ROOT_NODE,
) -> Tuple[str, nx.DiGraph]:
    """
    Build an includer -> included graph from an include trace.

    Returns (root, graph). Edges carry a `count` attribute with the number of
    times the include was seen; nodes carry the smallest `depth` they were
    reached at. Includes nested deeper than `maxdepth` are dropped.
    """
    graph = nx.DiGraph()
    graph.add_node(root, depth=0)
    stack: List[str] = [root]

    for depth, raw_path in parse_trace_lines(text):
        if depth > maxdepth:
            continue
        # a well-formed trace never skips a level; clamp if it does
        depth = min(depth, len(stack))
        del stack[depth:]
        parent = stack[-1]
        node = strip_path(raw_path, strip_base)

        if node in graph:
            graph.nodes[node]["depth"] = min(graph.nodes[node].get("depth", depth), depth)
        else:
            graph.add_node(node, depth=depth)
        if graph.has_edge(parent, node):
            graph[parent][node]["count"] += 1
        else:
            graph.add_edge(parent, node, count=1)
        stack.append(node)

    return root, graph


def parse_file(
    strip_base: Optional[str],
    filename: str,
    maxdepth: int = 100,
    root: str = ROOT_NODE,
) -> Tuple[str, nx.DiGraph]:
    with open(filename, "r", encoding="utf-8", errors="replace") as f:
        return parse_include_trace(f.read(), strip_base=strip_base, maxdepth=maxdepth, root=root)
