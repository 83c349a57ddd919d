"""Recursively walk a directory looking for broken symlinks.

Exits with status 1 and prints a report to stderr if any are found,
status 0 otherwise. Usable as a pre-commit hook.
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

from dxtci.core.checks.symlinks import find_broken_symlinks, format_report  # noqa: E402
from dxtci.core.errors import GitCommandError  # noqa: E402
from dxtci.core.logging_setup import configure_logging  # noqa: E402


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("root", nargs="?", type=Path, default=Path("."), help="Directory to scan (default: cwd)")
    ap.add_argument("--tracked-only", action="store_true", help="Only inspect files listed by git ls-files")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    configure_logging(args.verbose)

    try:
        broken = find_broken_symlinks(args.root, tracked_only=args.tracked_only)
    except GitCommandError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2
    if not broken:
        return 0

    print("\n" + format_report(broken), file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
