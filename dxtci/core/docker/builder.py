from __future__ import annotations

import logging
import os
import re
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from dxtci.core.docker.tag_matrix import ModuleSettings, TagSettings, base_compilers
from dxtci.core.errors import DockerBuildError, DockerCommandError
from dxtci.core.git_ops.repo import head_commit, remote_url
from dxtci.core.settings import PROJECT_ROOT, docker_namespace

_log = logging.getLogger("dxtci.docker")

DEFAULT_DOCKER_DIR = PROJECT_ROOT / "docker"

_IMAGE_ID_RE = re.compile(r"(Successfully built |writing image sha256:|^sha256:)([0-9a-f]+)")


class Timer:
    """Log the wall time spent inside the block."""

    def __init__(self, section: str, log: Callable[[str], None], time_func: Callable[[], float] = time.time):
        self._section = section
        self._log = log
        self._time_func = time_func
        self._start = 0.0
        self.dt = -1.0

    def __enter__(self) -> "Timer":
        self.dt = -1.0
        self._start = self._time_func()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dt = self._time_func() - self._start
        self._log("Execution of {} took {} (s)".format(self._section, self.dt))


@dataclass(frozen=True)
class BuildContext:
    commit: str
    refname: str
    superurl: str


def resolve_context(repo_dir: Path) -> BuildContext:
    commit = os.environ.get("CI_COMMIT_SHA") or head_commit(repo_dir)
    refname = (os.environ.get("CI_COMMIT_REF_NAME") or "master").replace("/", "_")
    superurl = os.environ.get("CI_REPOSITORY_URL") or remote_url(repo_dir)
    return BuildContext(commit=commit.strip(), refname=refname, superurl=superurl.strip())


def parse_image_id(output: str) -> Optional[str]:
    image_id = None
    for line in output.splitlines():
        m = _IMAGE_ID_RE.search(line.strip())
        if m:
            image_id = m.group(2)
    return image_id


class DockerCli:
    """Thin wrapper around the docker command line client."""

    def __init__(self, *, dry_run: bool = False, logger: Optional[logging.Logger] = None):
        self.dry_run = dry_run
        self.log = logger or _log

    def _cmd(self, cmd: List[str], *, error_cls=DockerCommandError, hint: str = "") -> str:
        self.log.debug(" ".join(cmd))
        if self.dry_run:
            self.log.info("[dry-run] %s", " ".join(cmd))
            return ""

        r = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
        out = r.stdout or ""
        self.log.debug(out)
        if r.returncode != 0:
            self.log.error(out)
            self.log.error("Failed: %s", " ".join(cmd))
            if hint:
                self.log.error(hint)
                raise error_cls(cmd, r.returncode, out, message=f"{' '.join(cmd)} failed: {hint}")
            raise error_cls(cmd, r.returncode, out)
        return out

    def build(self, path: Path, tag: str, buildargs: Dict[str, str], *, pull: bool = True) -> str:
        cmd = ["docker", "build", "--rm=false", "-t", tag]
        if pull:
            cmd.append("--pull")
        for k, v in buildargs.items():
            cmd += ["--build-arg", f"{k}={v}"]
        cmd.append(str(path))

        out = self._cmd(cmd, error_cls=DockerBuildError)
        if self.dry_run:
            return tag
        image_id = parse_image_id(out)
        if not image_id:
            raise DockerBuildError(cmd, 0, out, message=f"docker build for {tag} produced no image id")
        return image_id

    def tag(self, image: str, repo: str, tag: str) -> None:
        self._cmd(["docker", "tag", image, f"{repo}:{tag}"])

    def push(self, repo: str, tag: str) -> None:
        self._cmd(
            ["docker", "push", f"{repo}:{tag}"],
            hint=f"Make sure the pushers group has write access to {repo} on the registry!",
        )


def _build_tag_push(
    cli: DockerCli,
    *,
    repo: str,
    dockerdir: Path,
    buildargs: Dict[str, str],
    ctx: BuildContext,
    logger: logging.Logger,
) -> str:
    with Timer("docker build ", logger.info):
        image_id = cli.build(dockerdir, f"{repo}:{ctx.commit}", buildargs)
        cli.tag(image_id, repo, ctx.refname)
    with Timer("docker push {}:{}|{}".format(repo, ctx.refname, ctx.commit), logger.info):
        cli.push(repo, ctx.refname)
        cli.push(repo, ctx.commit)
    return image_id


def build_base(
    cli: DockerCli,
    tag_matrix: Dict[str, TagSettings],
    ctx: BuildContext,
    *,
    docker_dir: Path = DEFAULT_DOCKER_DIR,
    namespace: Optional[str] = None,
) -> List[str]:
    """One shared base image per distinct (base, cc, cxx) of the tag matrix."""
    namespace = namespace or docker_namespace()
    dockerdir = Path(docker_dir) / "shared_base"

    images: List[str] = []
    for distro, cc, cxx in base_compilers(tag_matrix):
        slug_postfix = "base_{}_{}".format(distro, cc)
        logger = logging.getLogger("dxtci.docker.{}".format(slug_postfix))
        repo = "{}/dune-xt-docker_{}".format(namespace, slug_postfix)
        buildargs = {"COMMIT": ctx.commit, "CC": cc, "CXX": cxx, "SUPERURL": ctx.superurl, "BASE": distro}
        images.append(
            _build_tag_push(cli, repo=repo, dockerdir=dockerdir, buildargs=buildargs, ctx=ctx, logger=logger)
        )
    return images


def build_combination(
    cli: DockerCli,
    tag_matrix: Dict[str, TagSettings],
    module: str,
    module_settings: ModuleSettings,
    ctx: BuildContext,
    *,
    docker_dir: Path = DEFAULT_DOCKER_DIR,
    namespace: Optional[str] = None,
) -> List[str]:
    """One testing image of `module` per tag matrix entry."""
    namespace = namespace or docker_namespace()
    dockerdir = Path(docker_dir) / "individual_base"

    images: List[str] = []
    for tag, settings in tag_matrix.items():
        logger = logging.getLogger("dxtci.docker.{}.{}".format(module, tag))
        repo = "{}/{}-testing_{}".format(namespace, module, tag)
        buildargs = {
            "COMMIT": ctx.commit,
            "CC": settings.cc,
            "project_name": module,
            "modules_to_delete": module_settings.modules_to_delete,
            "BASE": settings.base,
        }
        images.append(
            _build_tag_push(cli, repo=repo, dockerdir=dockerdir, buildargs=buildargs, ctx=ctx, logger=logger)
        )
    return images
