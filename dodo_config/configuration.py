"""Looking up backdrops from the configuration files in use."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .config import get_all_backdrops
from .models import Backdrop

CONFIG_FILE_NAMES = ("dodo.yaml", "dodo.yml", ".dodo.yaml", ".dodo.yml")


def default_config_files() -> list[str]:
    """Return the configuration files found in the working directory and above.

    Files further up the tree come first, so that definitions closer to the
    working directory take precedence when backdrops are merged.
    """
    found: list[str] = []
    directory = os.getcwd()
    while True:
        here = [
            os.path.join(directory, name)
            for name in CONFIG_FILE_NAMES
            if os.path.isfile(os.path.join(directory, name))
        ]
        found = here + found
        parent = os.path.dirname(directory)
        if parent == directory:
            return found
        directory = parent


@dataclass
class Configuration:
    """Backdrops loaded lazily from a set of configuration files.

    When ``files`` is None the default configuration files are used.
    """

    files: Optional[Sequence[str]] = None
    _backdrops: Optional[dict[str, Backdrop]] = field(
        default=None, init=False, repr=False
    )

    def _load(self) -> dict[str, Backdrop]:
        if self._backdrops is None:
            files = default_config_files() if self.files is None else self.files
            self._backdrops = get_all_backdrops(*files)
        return self._backdrops

    def get_backdrop(self, name: str) -> Backdrop:
        """Return the backdrop whose name or one of whose aliases is ``name``."""
        for backdrop in self._load().values():
            if backdrop.name == name or name in backdrop.aliases:
                return backdrop
        raise KeyError(f"could not find any configuration for backdrop '{name}'")

    def list_backdrops(self) -> list[Backdrop]:
        """Return every configured backdrop."""
        return list(self._load().values())