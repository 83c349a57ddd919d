from .execute import build_command, call, gtest_output_arg, parse_ini_file

__all__ = ["build_command", "call", "gtest_output_arg", "parse_ini_file"]
