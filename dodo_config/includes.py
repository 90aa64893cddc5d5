"""Resolving the ``include`` lists of configuration files."""

from __future__ import annotations

from typing import Any

from .extract import as_string, extract, list_of
from .files import read_yaml_file


class IncludeError(Exception):
    """Raised when some files could not be resolved.

    ``resolved`` holds what was found anyway; ``errors`` the failures.
    """

    def __init__(self, errors: list[Exception], resolved: list[str]):
        super().__init__("; ".join(str(err) for err in errors))
        self.errors = errors
        self.resolved = resolved


def _include_file(_name: str, value: Any) -> str:
    try:
        return extract(value, "file", as_string) or ""
    except ValueError as err:
        raise type(err)(f"invalid config for file: {err}") from err


def resolve_includes(*filenames: str) -> list[str]:
    """Return the given files followed by everything they include, recursively."""
    resolved = list(filenames)
    errors: list[Exception] = []

    for filename in filenames:
        try:
            data = read_yaml_file(filename)
            includes = extract(data, "include", list_of(_include_file))
        except (ValueError, OSError, Exception) as err:
            errors.append(err)
            continue

        for included in includes or []:
            try:
                resolved.extend(resolve_includes(included))
            except IncludeError as err:
                errors.append(err)

    if errors:
        raise IncludeError(errors, resolved)
    return resolved