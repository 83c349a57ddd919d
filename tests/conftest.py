import shutil
import subprocess
from pathlib import Path

import pytest

GIT_IDENTITY = ["-c", "user.name=dxtci-tests", "-c", "user.email=dxtci-tests@example.invalid"]


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *GIT_IDENTITY, *args], cwd=str(cwd), check=True, capture_output=True)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    # CI variables of the runner executing the tests must not leak into them
    for key in (
        "CI_COMMIT_SHA",
        "CI_COMMIT_REF_NAME",
        "CI_REPOSITORY_URL",
        "DXTCI_MATRIX_FILE",
        "DXTCI_TEMPLATES_DIR",
        "DXTCI_DOCKER_NAMESPACE",
        "ENV_PREFIXES",
        "DOCKER_ENVFILE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def git_available():
    if shutil.which("git") is None:
        pytest.skip("git CLI not available")


@pytest.fixture()
def tmp_repo(tmp_path: Path, git_available):
    """
    Provides a temporary git repo with one commit.
    """
    repo = tmp_path / "repo"
    repo.mkdir(parents=True, exist_ok=True)
    _git(repo, "init")
    (repo / "README.md").write_text("x", encoding="utf-8")
    _git(repo, "add", ".")
    _git(repo, "commit", "-m", "init")
    return repo


@pytest.fixture()
def super_repo(tmp_path: Path, git_available):
    """
    Super-repository with an origin remote and a nested module checkout.

    Returns (super_dir, module_dir).
    """
    sup = tmp_path / "super"
    sup.mkdir()
    _git(sup, "init")
    _git(sup, "remote", "add", "origin", "https://example.invalid/dune-community/dune-gdt-super.git")
    (sup / "config.opts").write_text("CMAKE_FLAGS=''\n", encoding="utf-8")
    _git(sup, "add", ".")
    _git(sup, "commit", "-m", "init super")

    module = sup / "dune-xt"
    module.mkdir()
    return sup, module
