"""Load, template and validate YAML backdrop configurations."""

__version__ = "0.10.0"