from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, Field, ValidationError

from dxtci.core.errors import ConfigError
from dxtci.core.settings import load_mapping


class TagSettings(BaseModel):
    cc: str
    cxx: str
    base: str
    deletes: str = ""


class ModuleSettings(BaseModel):
    # space separated list of dune modules removed from the image before building
    modules_to_delete: str = ""


DEFAULT_TAG_MATRIX: Dict[str, TagSettings] = {
    "debian-unstable_gcc_full": TagSettings(cc="gcc", cxx="g++", base="debian-unstable"),
    "debian_gcc_full": TagSettings(cc="gcc", cxx="g++", base="debian"),
    "debian_clang_full": TagSettings(cc="clang", cxx="clang++", base="debian"),
}


def load_tag_matrix(path: Optional[Path] = None) -> Dict[str, TagSettings]:
    if path is None:
        return dict(DEFAULT_TAG_MATRIX)
    data = load_mapping(path)
    if not data:
        raise ConfigError(f"tag matrix {path} is empty")
    try:
        return {str(tag): TagSettings(**(settings or {})) for tag, settings in data.items()}
    except (TypeError, ValidationError) as exc:
        raise ConfigError(f"invalid tag matrix {path}: {exc}") from exc


def load_module_settings(path: Optional[Path]) -> ModuleSettings:
    if path is None or not Path(path).exists():
        return ModuleSettings()
    data = load_mapping(path)
    deletes = data.get("modules_to_delete", "")
    if isinstance(deletes, list):
        data["modules_to_delete"] = " ".join(str(x) for x in deletes)
    try:
        return ModuleSettings(**data)
    except ValidationError as exc:
        raise ConfigError(f"invalid module settings {path}: {exc}") from exc


def base_compilers(tag_matrix: Dict[str, TagSettings]) -> List[Tuple[str, str, str]]:
    """Unique (base, cc, cxx) triples, in tag matrix order."""
    seen: Set[Tuple[str, str, str]] = set()
    out: List[Tuple[str, str, str]] = []
    for settings in tag_matrix.values():
        key = (settings.base, settings.cc, settings.cxx)
        if key not in seen:
            seen.add(key)
            out.append(key)
    return out
