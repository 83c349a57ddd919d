"""Compile a translation unit with an include trace and report include cycles.

    dependency_info.py --strip-base /path/to/src --out tu.deps -- g++ -H -fsyntax-only tu.cc

Writes the raw compiler output to --out, the include cycles (if any) to
<out>.cycles and a depth-limited Graphviz rendering to <out>.dot.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# ---- sys.path bootstrap ----
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
# ----------------------------

from dxtci.core.depgraph.analysis import find_cycles, render_dot, run_compiler, write_cycles  # noqa: E402
from dxtci.core.depgraph.include_tree import parse_file  # noqa: E402
from dxtci.core.errors import CompilerError  # noqa: E402
from dxtci.core.logging_setup import configure_logging  # noqa: E402

log = logging.getLogger("dxtci.depgraph")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("--out", required=True, help="File receiving the compiler output")
    ap.add_argument("--strip-base", default=None, help="Path prefix removed from header names")
    ap.add_argument("--maxdepth", type=int, default=100, help="Include depth considered for cycle detection")
    ap.add_argument("--render-depth", type=int, default=3, help="Include depth of the rendered graph")
    ap.add_argument("--skip-compile", action="store_true", help="Analyse an existing --out file")
    ap.add_argument("-v", "--verbose", action="store_true")
    ap.add_argument("compiler_cmd", nargs=argparse.REMAINDER, help="Compiler command, after --")
    args = ap.parse_args(argv)

    configure_logging(args.verbose)

    cmd = list(args.compiler_cmd)
    if cmd and cmd[0] == "--":
        cmd = cmd[1:]

    if not args.skip_compile:
        if not cmd:
            ap.error("a compiler command is required unless --skip-compile is given")
        try:
            run_compiler(cmd, Path(args.out))
        except CompilerError as exc:
            log.error("%s", exc)
            return exc.returncode

    _, graph = parse_file(args.strip_base, args.out, maxdepth=args.maxdepth)
    cycles = find_cycles(graph)
    write_cycles(cycles, Path(args.out + ".cycles"))

    root, shallow = parse_file(args.strip_base, args.out, maxdepth=args.render_depth)
    Path(args.out + ".dot").write_text(render_dot(shallow, root), encoding="utf-8")
    log.info("%d headers, %d include edges, %d cycles", graph.number_of_nodes() - 1, graph.number_of_edges(), len(cycles))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
