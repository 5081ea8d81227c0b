"""
In-place rewriting of PHP-FPM pool settings.

Works on the raw text: every line that is not one of the managed
``pm*`` keys is kept byte for byte, in order. No I/O happens here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Pattern, Sequence, Tuple

from ..calculator.models import PreforkConfig
from ..config.tables import SECTION_MARKER, SETTING_KEYS, SETTING_RELEVANCE

COMMENTED_OUT = "(commented out)"
UNKNOWN_VALUE = "(unknown)"


@dataclass(frozen=True)
class ConfigPatchResult:
    """Patched text plus an ordered ``key: old -> new`` change log."""

    updated_text: str
    change_log: Tuple[str, ...] = field(default_factory=tuple)
    backup_path: str = ""


def relevant_settings(
    config: PreforkConfig,
    relevance: Mapping[str, FrozenSet[str]] = SETTING_RELEVANCE,
    keys: Sequence[str] = SETTING_KEYS,
) -> List[Tuple[str, str]]:
    """The ``(key, value)`` pairs written for the config's pool type, in write order."""
    values = config.settings()
    pool = config.pool_type.value
    return [(key, values[key]) for key in keys if pool in relevance.get(key, frozenset())]


def _key_pattern(key: str) -> Pattern[str]:
    return re.compile(r"^;?\s*" + re.escape(key) + r"\s*=")


def _extract_value(line: str) -> str:
    parts = line.split("=", 1)
    if len(parts) == 2:
        return parts[1].strip()
    return UNKNOWN_VALUE


def patch_config(
    text: str,
    config: PreforkConfig,
    relevance: Mapping[str, FrozenSet[str]] = SETTING_RELEVANCE,
    section_marker: str = SECTION_MARKER,
) -> ConfigPatchResult:
    """
    Write the pool settings of ``config`` into ``text``.

    For each relevant key the first line matching ``key =``, commented out
    with ``;`` or not, is replaced by ``key = value``. Keys with no line
    are inserted below the first ``section_marker`` line, or appended at
    the end when there is no marker.

    Returns:
        ConfigPatchResult with an empty ``backup_path``
    """
    settings = relevant_settings(config, relevance)
    patterns: Dict[str, Pattern[str]] = {key: _key_pattern(key) for key, _ in settings}
    lines = text.split("\n")
    changes: List[str] = []
    found = set()

    for i, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            continue

        for key, value in settings:
            if key in found or not patterns[key].match(stripped):
                continue

            found.add(key)
            new_line = f"{key} = {value}"
            if stripped.startswith(";"):
                lines[i] = new_line
                changes.append(f"{key}: {COMMENTED_OUT} -> {value}")
            else:
                old_value = _extract_value(stripped)
                if old_value != value:
                    lines[i] = new_line
                    changes.append(f"{key}: {old_value} -> {value}")
            break

    missing = [(key, value) for key, value in settings if key not in found]
    if missing:
        insert_at = _insertion_index(lines, section_marker)
        for offset, (key, value) in enumerate(missing):
            lines.insert(insert_at + offset, f"{key} = {value}")
            changes.append(f"{key}: (added) {value}")

    return ConfigPatchResult(updated_text="\n".join(lines), change_log=tuple(changes))


def _insertion_index(lines: List[str], section_marker: str) -> int:
    for i, line in enumerate(lines):
        if section_marker in line:
            return i + 1
    # Keep a trailing newline at the very end
    if lines and lines[-1] == "":
        return len(lines) - 1
    return len(lines)
