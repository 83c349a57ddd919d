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

from dxtci.core.ci.env_file import write_env_file  # noqa: E402
from dxtci.core.logging_setup import configure_logging  # noqa: E402


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Write CI variables into a docker --env-file.")
    ap.add_argument("--out", type=Path, default=None, help="Destination (default $DOCKER_ENVFILE or ~/env)")
    ap.add_argument("--prefix", action="append", default=None, help="Variable name prefix; repeatable (default $ENV_PREFIXES)")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    configure_logging(args.verbose)
    write_env_file(args.out, prefixes=args.prefix)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
