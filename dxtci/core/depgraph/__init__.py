from .include_tree import ROOT_NODE, parse_file, parse_include_trace
from .analysis import find_cycles, include_counts, render_dot, run_compiler, write_cycles

__all__ = [
    "ROOT_NODE",
    "parse_file",
    "parse_include_trace",
    "find_cycles",
    "include_counts",
    "render_dot",
    "run_compiler",
    "write_cycles",
]
