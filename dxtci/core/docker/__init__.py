from .builder import BuildContext, DockerCli, Timer, build_base, build_combination, resolve_context
from .tag_matrix import DEFAULT_TAG_MATRIX, ModuleSettings, TagSettings, load_module_settings, load_tag_matrix

__all__ = [
    "BuildContext",
    "DockerCli",
    "Timer",
    "build_base",
    "build_combination",
    "resolve_context",
    "DEFAULT_TAG_MATRIX",
    "ModuleSettings",
    "TagSettings",
    "load_module_settings",
    "load_tag_matrix",
]
