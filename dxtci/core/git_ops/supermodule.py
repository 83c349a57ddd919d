"""
Record which super-repository commit a module checkout was committed from.

A module (e.g. dune-xt) lives as a nested checkout inside an umbrella
repository. The pre-commit hook stores the umbrella's origin URL, its
`git submodule status` and HEAD commit in `.gitsuper` at the module root so
that a commit of the module can later be traced back to a full checkout.

    [supermodule]
    remote = https://github.com/dune-community/dune-gdt-super.git
    status = 3c5b7e1... dune-common (v2.7.0)
    	 9a0f2d4... dune-xt (heads/master)
    commit = 5d1c0b9...
"""
from __future__ import annotations

import logging
import re
from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dxtci.core.git_ops.repo import head_commit, remote_url, submodule_status

_log = logging.getLogger("dxtci.git")

SECTION = "supermodule"
GITSUPER_FILENAME = ".gitsuper"

_STATUS_RE = re.compile(r"^(?P<state>[ +\-U]?)(?P<sha>[0-9a-f]{7,64}) (?P<path>\S+)(?: \((?P<describe>[^)]*)\))?$")


@dataclass(frozen=True)
class SubmoduleEntry:
    # ' ' in sync, '+' checked out commit differs, '-' not initialized, 'U' conflicts
    state: str
    sha: str
    path: str
    describe: Optional[str] = None


@dataclass
class SupermoduleInfo:
    remote: str
    status: str
    commit: str
    submodules: List[SubmoduleEntry] = field(default_factory=list)


def parse_submodule_status(text: str) -> List[SubmoduleEntry]:
    entries: List[SubmoduleEntry] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        m = _STATUS_RE.match(line.rstrip())
        if not m:
            _log.debug("Skipping unparsable submodule status line %r", line)
            continue
        entries.append(
            SubmoduleEntry(
                state=m.group("state") or " ",
                sha=m.group("sha"),
                path=m.group("path"),
                describe=m.group("describe"),
            )
        )
    return entries


def collect_supermodule(module_dir: Path) -> SupermoduleInfo:
    supermod = (Path(module_dir) / "..").resolve()
    remote = remote_url(supermod)
    status = submodule_status(supermod)
    commit = head_commit(supermod)
    return SupermoduleInfo(
        remote=remote.strip(),
        status=status.rstrip(),
        commit=commit.strip(),
        submodules=parse_submodule_status(status),
    )


def write_gitsuper(module_dir: Path, info: SupermoduleInfo) -> Path:
    cf = ConfigParser(default_section=SECTION, interpolation=None)
    cf.set(SECTION, "remote", info.remote)
    cf.set(SECTION, "status", info.status)
    cf.set(SECTION, "commit", info.commit)

    path = Path(module_dir) / GITSUPER_FILENAME
    with path.open("w", encoding="utf-8") as f:
        cf.write(f)
    _log.info("Recorded supermodule %s at %s in %s", info.remote, info.commit, path)
    return path


def read_gitsuper(path: Path) -> SupermoduleInfo:
    cf = ConfigParser(default_section=SECTION, interpolation=None)
    with Path(path).open("r", encoding="utf-8") as f:
        cf.read_file(f)
    defaults = cf.defaults()
    status = defaults.get("status", "")
    return SupermoduleInfo(
        remote=defaults.get("remote", ""),
        status=status,
        commit=defaults.get("commit", ""),
        submodules=parse_submodule_status(status),
    )


def record_supermodule_commit(module_dir: Path) -> Path:
    return write_gitsuper(module_dir, collect_supermodule(module_dir))
