"""Reading templated YAML configuration files."""

from __future__ import annotations

from typing import Any

import yaml

from .template import TemplateError, template_tree


class ConfigFileError(Exception):
    """Raised when a configuration file cannot be read, parsed or templated."""


def read_yaml_file(filename: str) -> Any:
    """Load a YAML file and render the templates in its string values."""
    try:
        with open(filename, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as err:
        raise ConfigFileError(f"get yaml contents of {filename}: {err}") from err

    if data is None:
        data = {}

    try:
        return template_tree(data, filename)
    except TemplateError as err:
        raise ConfigFileError(f"templating error in {filename}: {err}") from err