# dxtci/core/git_ops/repo.py

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Tuple

from dxtci.core.errors import GitCommandError

_log = logging.getLogger("dxtci.git")


# ---------------------------------------------------------------------
# Core git runner (no pager, text output, errors surfaced to caller)
# ---------------------------------------------------------------------

def run_git(repo_path: Path, args: List[str]) -> Tuple[int, str, str]:
    cmd = ["git", "--no-pager", *args]
    _log.debug("%s (cwd=%s)", " ".join(cmd), repo_path)
    p = subprocess.run(
        cmd,
        cwd=str(repo_path),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        env={**os.environ, "GIT_PAGER": "cat", "PAGER": "cat"},
    )
    return p.returncode, (p.stdout or "").rstrip("\n"), (p.stderr or "").strip()


def git_output(repo_path: Path, args: List[str]) -> str:
    rc, out, err = run_git(repo_path, args)
    if rc != 0:
        raise GitCommandError(["git", *args], rc, err or out)
    return out


def head_commit(repo_path: Path) -> str:
    return git_output(repo_path, ["rev-parse", "HEAD"]).strip()


def remote_url(repo_path: Path, remote_name: str = "origin") -> str:
    return git_output(repo_path, ["remote", "get-url", remote_name]).strip()


def submodule_status(repo_path: Path) -> str:
    return git_output(repo_path, ["submodule", "status"])


def ls_files(repo_path: Path) -> List[str]:
    # -z: paths come back verbatim, without core.quotePath escaping
    out = git_output(repo_path, ["ls-files", "-z"])
    return [p for p in out.split("\0") if p]
