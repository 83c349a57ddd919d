from .matrix import BuildMatrix, CompilerPair, load_matrix
from .config_gen import render_config, write_config
from .env_file import collect_env, write_env_file

__all__ = [
    "BuildMatrix",
    "CompilerPair",
    "load_matrix",
    "render_config",
    "write_config",
    "collect_env",
    "write_env_file",
]
