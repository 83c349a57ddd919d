"""
Runtime settings for the dxtci commands.

Configuration comes from environment variables first. Structured settings
(build matrix, docker tag matrix, per-module docker settings) may also be
loaded from a YAML or JSON file and are validated by the pydantic models of
the package that owns them.

Environment variables:
    DXTCI_MATRIX_FILE       build matrix override file (YAML/JSON)
    DXTCI_TEMPLATES_DIR     directory holding ci/config.yml.j2
    DXTCI_DOCKER_NAMESPACE  docker hub namespace (default: dunecommunity)
    DXTCI_LOG_LEVEL         default log level when --verbose is not given
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from dxtci.core.errors import ConfigError

PROJECT_ROOT = Path(__file__).resolve().parents[2]
TEMPLATES_DIR = PROJECT_ROOT / "templates"

DEFAULT_DOCKER_NAMESPACE = "dunecommunity"


def env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    if v is None or not v.strip():
        return default
    return v.strip()


def env_list(key: str, default: List[str], sep: str = " ") -> List[str]:
    v = env_str(key)
    if v is None:
        return list(default)
    return [x for x in v.split(sep) if x]


def templates_dir() -> Path:
    return Path(env_str("DXTCI_TEMPLATES_DIR", str(TEMPLATES_DIR)))


def docker_namespace() -> str:
    return env_str("DXTCI_DOCKER_NAMESPACE", DEFAULT_DOCKER_NAMESPACE)


def resolve_settings_file(path: Optional[Path], env_key: str) -> Optional[Path]:
    """Pick a settings file from the explicit argument, then the env var."""
    if path is not None:
        return Path(path)
    env_path = env_str(env_key)
    if env_path:
        return Path(env_path)
    return None


def load_mapping(path: Path) -> Dict[str, Any]:
    """
    Load a flat or nested mapping from a YAML or JSON file.

    Raises ConfigError if the file cannot be read, does not parse, or is not
    a mapping at the top level.
    """
    try:
        raw_text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read settings file {path}: {exc}") from exc

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"failed to parse {path} as JSON or YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"settings file {path} must contain a mapping, got {type(data).__name__}")
    return data
