"""
Build and push the docker images used as CI execution environments.

Usage:
  update_test_dockers.py [options] BASE
  update_test_dockers.py [options] MODULE_NAME

BASE builds the shared per-compiler base images, any other name builds the
testing images of that module for every entry of the tag matrix.
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

from dxtci.core.docker.builder import (  # noqa: E402
    DEFAULT_DOCKER_DIR,
    DockerCli,
    build_base,
    build_combination,
    resolve_context,
)
from dxtci.core.docker.tag_matrix import load_module_settings, load_tag_matrix  # noqa: E402
from dxtci.core.errors import DxtciError  # noqa: E402
from dxtci.core.logging_setup import configure_logging  # noqa: E402

log = logging.getLogger("dxtci.docker")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("module", metavar="MODULE_NAME", help="Module to build testing images for, or BASE")
    ap.add_argument("--docker-dir", type=Path, default=DEFAULT_DOCKER_DIR, help="Directory holding the Dockerfiles")
    ap.add_argument("--tag-matrix", type=Path, default=None, help="Tag matrix YAML/JSON (default: built-in)")
    ap.add_argument(
        "--module-settings",
        type=Path,
        default=None,
        help="Module settings YAML (default <docker-dir>/<module>/settings.yml)",
    )
    ap.add_argument("--repo-dir", type=Path, default=Path.cwd(), help="Checkout used for commit/remote lookup")
    ap.add_argument("--dry-run", action="store_true", help="Log docker commands without running them")
    ap.add_argument("-v", "--verbose", action="store_true", help="Set logging level to debug.")
    args = ap.parse_args(argv)

    configure_logging(args.verbose)

    try:
        tag_matrix = load_tag_matrix(args.tag_matrix)
        ctx = resolve_context(args.repo_dir)
        cli = DockerCli(dry_run=args.dry_run)

        if args.module == "BASE":
            images = build_base(cli, tag_matrix, ctx, docker_dir=args.docker_dir)
        else:
            settings_path = args.module_settings or (args.docker_dir / args.module / "settings.yml")
            images = build_combination(
                cli,
                tag_matrix,
                args.module,
                load_module_settings(settings_path),
                ctx,
                docker_dir=args.docker_dir,
            )
    except DxtciError as exc:
        log.error("%s", exc)
        return getattr(exc, "returncode", 1) or 1

    log.info("Built %d image(s) for %s at %s", len(images), args.module, ctx.commit)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
