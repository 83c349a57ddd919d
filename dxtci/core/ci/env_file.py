"""
Docker env file for CI jobs.

CI runners expose their settings as environment variables; the test
containers only see what is passed with `docker run --env-file`. This
module selects the relevant variables by name prefix and writes them as
`KEY="<shell-quoted value>"` lines.

Environment variables:
    ENV_PREFIXES    space separated prefixes (default below)
    DOCKER_ENVFILE  destination file (default: ~/env)
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from shlex import quote
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from dxtci.core.settings import env_list, env_str

_log = logging.getLogger("dxtci.ci")

DEFAULT_PREFIXES: List[str] = ["BUILD", "SYSTEM", "GITLAB", "CODECOV", "CI", "encrypt", "TOKEN", "TESTS"]

# free-form text, breaks the env file format
BLACKLIST: List[str] = [
    "TRAVIS_COMMIT_MESSAGE",
    "CI_COMMIT_MESSAGE",
    "CI_COMMIT_DESCRIPTION",
]


def default_env_file() -> Path:
    return Path(env_str("DOCKER_ENVFILE", os.path.join(os.path.expanduser("~"), "env")))


def collect_env(
    environ: Mapping[str, str],
    prefixes: Optional[Sequence[str]] = None,
    blacklist: Optional[Sequence[str]] = None,
) -> List[Tuple[str, str]]:
    prefixes = list(prefixes if prefixes is not None else env_list("ENV_PREFIXES", DEFAULT_PREFIXES))
    blocked = set(blacklist if blacklist is not None else BLACKLIST)

    out: List[Tuple[str, str]] = []
    for key, value in environ.items():
        if key in blocked:
            continue
        if any(key.startswith(p) for p in prefixes):
            out.append((key, value))
    return out


def format_env_lines(items: Iterable[Tuple[str, str]]) -> List[str]:
    return ['{}="{}"'.format(k, quote(v)) for k, v in items]


def write_env_file(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    prefixes: Optional[Sequence[str]] = None,
) -> Path:
    path = Path(path) if path is not None else default_env_file()
    items = collect_env(os.environ if environ is None else environ, prefixes=prefixes)
    lines = format_env_lines(items)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    _log.info("Wrote %d variables to %s", len(lines), path)
    return path
