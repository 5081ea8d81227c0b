"""
Shared helpers for php-tuner commands.

Option conversion and the single fatal-error path.
"""

from __future__ import annotations

from typing import NoReturn, Optional, TypeVar, Union

import typer

from php_tuner.calculator.models import AUTO, Override, Setting
from php_tuner.exceptions import TunerError
from php_tuner.logger import default_logger

N = TypeVar("N", int, float)


def as_setting(value: Optional[N]) -> Setting[N]:
    """Missing or non-positive numbers mean auto-detect."""
    if value is None or value <= 0:
        return AUTO
    return Override(value)


def fail(error: Union[TunerError, str]) -> NoReturn:
    """Print ``Error: <message>`` to stderr and exit 1."""
    if isinstance(error, TunerError):
        default_logger().error("command failed", error=error.to_dict())
        message = error.message
    else:
        message = error
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)
