"""Put the supermodule's remote, submodule status and commit into .gitsuper.

Run from the root of a module checkout nested inside a super-repository,
typically as a pre-commit hook.
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

from dxtci.core.errors import GitCommandError  # noqa: E402
from dxtci.core.git_ops.supermodule import record_supermodule_commit  # noqa: E402
from dxtci.core.logging_setup import configure_logging  # noqa: E402


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("module_dir", nargs="?", type=Path, default=Path.cwd(), help="Module checkout (default: cwd)")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    configure_logging(args.verbose)

    try:
        record_supermodule_commit(args.module_dir)
    except GitCommandError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return exc.returncode or 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
