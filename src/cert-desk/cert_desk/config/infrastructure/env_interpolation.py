"""Recursive ${ENV_VAR} substitution over raw YAML data."""

import os
import re
from typing import TypeAlias

_ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

RawValue: TypeAlias = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def collect_missing_vars(data: RawValue) -> list[str]:
    """Return every referenced variable absent from the environment, in first-seen order."""
    missing: list[str] = []
    for text in _strings(data):
        for name in _ENV_REFERENCE.findall(text):
            if name not in os.environ and name not in missing:
                missing.append(name)
    return missing


def interpolate(data: RawValue) -> RawValue:
    """Return a copy of ``data`` with every ${ENV_VAR} replaced by its value.

    Call ``collect_missing_vars`` first; an unset variable raises KeyError here.
    """
    if isinstance(data, str):
        return _ENV_REFERENCE.sub(lambda match: os.environ[match.group(1)], data)
    if isinstance(data, list):
        return [interpolate(item) for item in data]
    if isinstance(data, dict):
        return {key: interpolate(value) for key, value in data.items()}
    return data


def _strings(data: RawValue) -> list[str]:
    if isinstance(data, str):
        return [data]
    if isinstance(data, list):
        return [text for item in data for text in _strings(item)]
    if isinstance(data, dict):
        return [text for value in data.values() for text in _strings(value)]
    return []
