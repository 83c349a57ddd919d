"""Run a DUNE test executable with its ini file and a gtest XML report.

    dune_execute.py --exec test_foo --ini test_foo.ini [-- extra args]

The ini file may name the command line option the executable expects in
front of it via the key `__inifile_optionkey`. The XML report is written to
<exec-stem>_<ini-stem>.xml.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# ---- sys.path bootstrap ----
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
# ----------------------------

from dxtci.core.logging_setup import configure_logging  # noqa: E402
from dxtci.core.testing.execute import call, gtest_output_arg  # noqa: E402


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("--exec", dest="executable", required=True, help="Test executable (relative to cwd)")
    ap.add_argument("--ini", default=None, help="Ini file passed to the executable")
    ap.add_argument("-v", "--verbose", action="store_true")
    ap.add_argument("extra", nargs=argparse.REMAINDER)
    args = ap.parse_args(argv)

    configure_logging(args.verbose)

    extra = list(args.extra)
    if extra and extra[0] == "--":
        extra = extra[1:]
    return call(args.executable, args.ini, gtest_output_arg(args.executable, args.ini), *extra)


if __name__ == "__main__":
    raise SystemExit(main())
