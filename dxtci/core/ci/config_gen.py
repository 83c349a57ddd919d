from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from jinja2 import Environment, StrictUndefined, TemplateError

from dxtci.core.ci.matrix import BuildMatrix, job_name, slug
from dxtci.core.errors import ConfigError
from dxtci.core.settings import templates_dir

_log = logging.getLogger("dxtci.ci")

MODULE_PLACEHOLDER = "DUNE_XT_OR_DUNE_GDT"
DEFAULT_TEMPLATE = Path("ci") / "config.yml.j2"


def _environment() -> Environment:
    env = Environment(
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["slug"] = slug
    env.globals["job_name"] = job_name
    return env


def default_template_path() -> Path:
    return templates_dir() / DEFAULT_TEMPLATE


def render_config(matrix: BuildMatrix, template_text: str) -> str:
    """
    Render a CI pipeline definition for the given build matrix.

    The module placeholder is substituted textually before Jinja sees the
    template, so it may appear inside job names and YAML keys. The rendered
    text must parse as YAML.
    """
    text = template_text.replace(MODULE_PLACEHOLDER, matrix.module)
    try:
        tpl = _environment().from_string(text)
        out = tpl.render(**matrix.template_context())
    except TemplateError as exc:
        raise ConfigError(f"failed to render CI template: {exc}") from exc

    try:
        yaml.safe_load(out)
    except yaml.YAMLError as exc:
        raise ConfigError(f"rendered CI config is not valid YAML: {exc}") from exc
    return out


def write_config(
    matrix: BuildMatrix,
    out_path: Path,
    template_path: Optional[Path] = None,
) -> Path:
    template_path = Path(template_path or default_template_path())
    try:
        template_text = template_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read CI template {template_path}: {exc}") from exc

    rendered = render_config(matrix, template_text)
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(rendered, encoding="utf-8")
    _log.info(
        "Rendered %d matrix jobs for %s from %s into %s",
        len(matrix.jobs()),
        matrix.module,
        template_path,
        out_path,
    )
    return out_path
