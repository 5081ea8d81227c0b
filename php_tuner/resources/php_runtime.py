"""PHP CLI queries: the configured ``memory_limit``."""

from __future__ import annotations

import subprocess

from ..exceptions import ExecutionContext, ProbeError

UNLIMITED = -1


def parse_memory_limit(limit: str) -> int:
    """
    Convert a php.ini ``memory_limit`` value to megabytes.

    ``128M`` -> 128, ``1G`` -> 1024, ``262144K`` -> 256, a bare number is
    taken as bytes, and ``-1`` (unlimited) is returned as ``-1``.

    Raises:
        ValueError: the value is not a recognised size
    """
    text = limit.strip().upper()
    if text == "-1":
        return UNLIMITED

    if text.endswith("G"):
        return int(text[:-1]) * 1024
    if text.endswith("M"):
        return int(text[:-1])
    if text.endswith("K"):
        return int(text[:-1]) // 1024
    return int(text) // (1024 * 1024)


def get_memory_limit(php_binary: str = "php", timeout: float = 5.0) -> int:
    """
    Ask the PHP CLI for its ``memory_limit`` in MB.

    Raises:
        ProbeError: binary missing, failing, or printing an unparseable value
    """
    context = ExecutionContext(operation="php_memory_limit", metadata={"binary": php_binary})
    try:
        completed = subprocess.run(
            [php_binary, "-r", "echo ini_get('memory_limit');"],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise ProbeError(
            f"could not query PHP memory_limit: {e}",
            context=context,
            original_exception=e,
        ) from e

    try:
        return parse_memory_limit(completed.stdout)
    except ValueError as e:
        raise ProbeError(
            f"unrecognised memory_limit value: {completed.stdout.strip()!r}",
            context=context,
            original_exception=e,
        ) from e
