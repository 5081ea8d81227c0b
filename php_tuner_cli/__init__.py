"""
php-tuner CLI Package

A Rich-based CLI for sizing PHP-FPM pools and FrankenPHP threads.
"""

from .main import app, main
from _version import __version__, get_full_version, get_version_dict

__all__ = ["app", "main", "__version__", "get_full_version", "get_version_dict"]
