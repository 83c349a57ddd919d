from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from dxtci.core.git_ops.repo import ls_files

_log = logging.getLogger("dxtci.symlinks")

IGNORED_DIRS = {".git"}


@dataclass(frozen=True, order=True)
class BrokenLink:
    path: str
    target: str

    def __str__(self) -> str:
        return f"{self.path} --> {self.target}"


def link_target(path: Path) -> Path:
    """Target of a symlink, relative targets taken relative to the link's directory."""
    target = Path(os.readlink(path))
    if not target.is_absolute():
        target = path.parent / target
    return target


def _walk_links(root: Path) -> Iterable[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        # prune in place, os.walk does not descend into removed entries
        dirnames[:] = [d for d in dirnames if d not in IGNORED_DIRS]
        for name in dirnames + filenames:
            p = Path(dirpath) / name
            if p.is_symlink():
                yield p


def _tracked_links(root: Path) -> Iterable[Path]:
    for rel in ls_files(root):
        p = root / rel
        if p.is_symlink():
            yield p


def find_broken_symlinks(root: Path, *, tracked_only: bool = False) -> List[BrokenLink]:
    root = Path(root)
    links = _tracked_links(root) if tracked_only else _walk_links(root)

    broken: List[BrokenLink] = []
    for p in links:
        target = link_target(p)
        if not os.path.exists(target):
            rel = p.relative_to(root).as_posix()
            _log.debug("broken link %s -> %s", rel, target)
            broken.append(BrokenLink(path=rel, target=str(target)))
    return sorted(broken)


def format_report(broken: List[BrokenLink]) -> str:
    return "broken symlink(s) found: {}".format("\n".join(str(b) for b in broken))
