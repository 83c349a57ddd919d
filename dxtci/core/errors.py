from __future__ import annotations

from typing import List, Optional, Sequence


class DxtciError(Exception):
    pass


class ConfigError(DxtciError):
    pass


class CommandError(DxtciError, RuntimeError):
    """A subprocess returned a non-zero exit code."""

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: int,
        output: str = "",
        message: Optional[str] = None,
    ):
        self.cmd: List[str] = [str(c) for c in cmd]
        self.returncode = returncode
        self.output = output or ""
        super().__init__(message or f"{' '.join(self.cmd)} failed with exit code {returncode}: {self.output.strip()}")


class GitCommandError(CommandError):
    pass


class DockerCommandError(CommandError):
    pass


class DockerBuildError(DockerCommandError):
    pass


class CompilerError(CommandError):
    pass
