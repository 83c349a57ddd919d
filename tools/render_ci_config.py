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

from dxtci.core.ci.config_gen import default_template_path, render_config, write_config  # noqa: E402
from dxtci.core.ci.matrix import load_matrix  # noqa: E402
from dxtci.core.errors import ConfigError  # noqa: E402
from dxtci.core.logging_setup import configure_logging  # noqa: E402


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Render the CI pipeline definition from the build matrix.")
    ap.add_argument("--module", default=None, help="Module name substituted into the template (default dune-xt)")
    ap.add_argument("--matrix", type=Path, default=None, help="Build matrix YAML/JSON (default $DXTCI_MATRIX_FILE)")
    ap.add_argument("--template", type=Path, default=None, help="Jinja template (default templates/ci/config.yml.j2)")
    ap.add_argument("--out", type=Path, default=PROJECT_ROOT / ".gitlab-ci.yml", help="Output path")
    ap.add_argument("--check", action="store_true", help="Fail if the output file differs from a fresh render")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    configure_logging(args.verbose)

    try:
        matrix = load_matrix(args.matrix, module=args.module)
        if args.check:
            template_path = args.template or default_template_path()
            expected = render_config(matrix, template_path.read_text(encoding="utf-8"))
            if not args.out.exists():
                print(f"ERROR: {args.out} missing. Run without --check to generate.", file=sys.stderr)
                return 2
            if args.out.read_text(encoding="utf-8") != expected:
                print(f"ERROR: {args.out} is stale. Regenerate and commit.", file=sys.stderr)
                return 3
            print(f"OK: {args.out} matches.")
            return 0
        write_config(matrix, args.out, template_path=args.template)
    except (ConfigError, OSError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    print(f"Wrote: {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
