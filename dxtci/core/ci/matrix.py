from __future__ import annotations

import re
from itertools import product
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from dxtci.core.errors import ConfigError
from dxtci.core.settings import load_mapping, resolve_settings_file

MATRIX_FILE_ENV = "DXTCI_MATRIX_FILE"


class CompilerPair(BaseModel):
    cc: str
    cxx: str

    def as_tuple(self) -> Tuple[str, str]:
        return (self.cc, self.cxx)


def _default_compilers() -> List[CompilerPair]:
    return [CompilerPair(cc="gcc", cxx="g++"), CompilerPair(cc="clang", cxx="clang++")]


def _dedupe(values: List[Any]) -> List[Any]:
    out: List[Any] = []
    for v in values:
        if v not in out:
            out.append(v)
    return out


class BuildMatrix(BaseModel):
    module: str = "dune-xt"
    compilers: List[CompilerPair] = Field(default_factory=_default_compilers)
    images: List[str] = Field(default_factory=lambda: ["debian"])
    subdirs: List[str] = Field(
        default_factory=lambda: [
            "xt/common",
            "xt/grid",
            "xt/functions",
            "xt/functions1",
            "xt/functions2",
            "xt/la",
            "gdt",
        ]
    )
    kinds: List[str] = Field(default_factory=lambda: ["cpp", "headercheck"])
    pythons: List[str] = Field(default_factory=lambda: [f"3.{i}" for i in range(7, 10)])
    wheel_steps_no_all: List[str] = Field(default_factory=lambda: ["xt", "gdt"])

    @field_validator("compilers", mode="before")
    @classmethod
    def _coerce_compilers(cls, v: Any) -> Any:
        # accepts [["gcc", "g++"], ...] as well as [{"cc": ..., "cxx": ...}, ...]
        if isinstance(v, list):
            out = []
            for item in v:
                if isinstance(item, (list, tuple)) and len(item) == 2:
                    out.append({"cc": item[0], "cxx": item[1]})
                else:
                    out.append(item)
            return out
        return v

    @field_validator("compilers", "images", "subdirs", "kinds")
    @classmethod
    def _non_empty(cls, v: List[Any]) -> List[Any]:
        if not v:
            raise ValueError("matrix axis must not be empty")
        return _dedupe(v)

    @field_validator("pythons", "wheel_steps_no_all")
    @classmethod
    def _unique(cls, v: List[Any]) -> List[Any]:
        return _dedupe(v)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "BuildMatrix":
        try:
            return cls(**data)
        except ValidationError as exc:
            raise ConfigError(f"invalid build matrix: {exc}") from exc

    # -----------------------------------------------------------------
    # derived axes
    # -----------------------------------------------------------------

    @property
    def wheel_steps(self) -> List[str]:
        return list(self.wheel_steps_no_all) + ["all"]

    def compiler_tuples(self) -> List[Tuple[str, str]]:
        return [c.as_tuple() for c in self.compilers]

    def compiler_images(self) -> List[Tuple[Tuple[str, str], str]]:
        return list(product(self.compiler_tuples(), self.images))

    def jobs(self) -> List[Tuple[Tuple[str, str], str, str, str]]:
        return list(product(self.compiler_tuples(), self.images, self.subdirs, self.kinds))

    def template_context(self) -> Dict[str, Any]:
        return {
            "module": self.module,
            "compilers": self.compiler_tuples(),
            "images": list(self.images),
            "compiler_images": self.compiler_images(),
            "subdirs": list(self.subdirs),
            "kinds": list(self.kinds),
            "matrix": self.jobs(),
            "pythons": list(self.pythons),
            "wheel_steps_no_all": list(self.wheel_steps_no_all),
            "wheel_steps": self.wheel_steps,
        }


def slug(value: str) -> str:
    """'xt/functions' -> 'xt_functions'"""
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", str(value)).strip("_")


def job_name(cc: str, image: str, subdir: str, kind: str) -> str:
    return f"{image} {cc} {slug(subdir)} {kind}"


def load_matrix(path: Optional[Path] = None, **overrides: Any) -> BuildMatrix:
    """
    Build matrix from an optional YAML/JSON file.

    Resolution order: explicit path, $DXTCI_MATRIX_FILE, built-in defaults.
    Keyword overrides (e.g. module="dune-gdt") win over file values.
    """
    data: Dict[str, Any] = {}
    resolved = resolve_settings_file(path, MATRIX_FILE_ENV)
    if resolved is not None:
        if not resolved.exists():
            raise ConfigError(f"build matrix file not found: {resolved}")
        data = load_mapping(resolved)
    data.update({k: v for k, v in overrides.items() if v is not None})
    return BuildMatrix.from_mapping(data)
