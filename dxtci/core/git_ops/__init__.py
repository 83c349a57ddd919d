from .repo import git_output, head_commit, ls_files, remote_url, run_git
from .supermodule import (
    SupermoduleInfo,
    collect_supermodule,
    read_gitsuper,
    record_supermodule_commit,
    write_gitsuper,
)

__all__ = [
    "run_git",
    "git_output",
    "head_commit",
    "remote_url",
    "ls_files",
    "SupermoduleInfo",
    "collect_supermodule",
    "write_gitsuper",
    "read_gitsuper",
    "record_supermodule_commit",
]
