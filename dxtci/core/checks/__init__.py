from .symlinks import BrokenLink, find_broken_symlinks, format_report

__all__ = ["BrokenLink", "find_broken_symlinks", "format_report"]
