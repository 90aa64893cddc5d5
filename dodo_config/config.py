"""Loading all backdrops from a set of configuration files."""

from __future__ import annotations

from .backdrop import backdrop_from_struct
from .extract import extract, mapping
from .files import ConfigFileError, read_yaml_file
from .includes import IncludeError, resolve_includes
from .models import Backdrop


class BackdropLoadError(Exception):
    """Raised when some configuration could not be loaded.

    ``backdrops`` holds what was loaded anyway; ``errors`` the failures.
    """

    def __init__(self, errors: list[Exception], backdrops: dict[str, Backdrop]):
        super().__init__("\n".join(str(err) for err in errors))
        self.errors = errors
        self.backdrops = backdrops


def get_all_backdrops(*filenames: str) -> dict[str, Backdrop]:
    """Return every backdrop defined in the files and what they include."""
    backdrops: dict[str, Backdrop] = {}

    try:
        resolved = resolve_includes(*filenames)
    except IncludeError as err:
        raise BackdropLoadError([err], backdrops) from err

    errors: list[Exception] = []
    for filename in resolved:
        try:
            data = read_yaml_file(filename)
            found = extract(data, "backdrops", mapping(backdrop_from_struct))
        except (ConfigFileError, ValueError) as err:
            errors.append(err)
            continue
        if found:
            backdrops.update(found)

    if errors:
        raise BackdropLoadError(errors, backdrops)
    return backdrops