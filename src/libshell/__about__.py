"""Metadata for libshell package."""

from __future__ import annotations

__title__ = "libshell"
__package_name__ = "libshell"
__version__ = "0.3.0"
__description__ = (
    "Run commands with fallback attempts through a persistent shell session"
)
__email__ = "maintainers@libshell.dev"
__author__ = "libshell contributors"
__github__ = "https://github.com/libshell/libshell"
__docs__ = "https://libshell.readthedocs.io"
__tracker__ = "https://github.com/libshell/libshell/issues"
__pypi__ = "https://pypi.org/project/libshell/"
__license__ = "MIT"
__copyright__ = "Copyright 2024- libshell contributors"
