"""Combinators that pull typed values out of parsed configuration data."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

V = TypeVar("V")

Extractor = Callable[[str, Any], V]


class ExtractError(ValueError):
    """Raised when a configuration value does not have the expected shape."""


def extract(value: Any, key: str, extractor: Extractor) -> Any:
    """Apply ``extractor`` to ``value[key]``.

    Returns None when the key is absent; raises ExtractError when the
    value is present but invalid.
    """
    if not isinstance(value, dict) or key not in value:
        return None
    return extractor(key, value[key])


def as_string(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ExtractError(f"value for {name} is not a string: {value!r}")
    return value


def as_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ExtractError(f"value for {name} is not a boolean: {value!r}")
    return value


def as_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ExtractError(f"value for {name} is not an integer: {value!r}")
    return value


def parse_string(parse: Callable[[str], V]) -> Extractor:
    """Build an extractor that reads a string and hands it to ``parse``."""

    def _extract(name: str, value: Any) -> V:
        text = as_string(name, value)
        try:
            return parse(text)
        except ExtractError:
            raise
        except ValueError as err:
            raise ExtractError(str(err)) from err

    return _extract


def either(*extractors: Extractor) -> Extractor:
    """Build an extractor returning the result of the first that succeeds."""

    def _extract(name: str, value: Any) -> Any:
        errors: list[str] = []
        for candidate in extractors:
            try:
                return candidate(name, value)
            except ValueError as err:
                errors.append(str(err))
        raise ExtractError("; ".join(errors) or f"no extractor for {name}")

    return _extract


def _fields(name: str, value: Any) -> dict:
    if not isinstance(value, dict):
        raise ExtractError(f"value for {name} is not a map: {value!r}")
    return value


def _items(name: str, value: Any) -> list:
    if not isinstance(value, list):
        raise ExtractError(f"value for {name} is not a list: {value!r}")
    return value


def mapping(extractor: Extractor) -> Extractor:
    """Build an extractor for a map whose values all pass ``extractor``."""

    def _extract(name: str, value: Any) -> dict:
        return {
            str(key): extractor(str(key), item)
            for key, item in _fields(name, value).items()
        }

    return _extract


def list_of(extractor: Extractor) -> Extractor:
    """Build an extractor for a list whose items all pass ``extractor``."""

    def _extract(name: str, value: Any) -> list:
        return [extractor(name, item) for item in _items(name, value)]

    return _extract


def one_or_more(extractor: Extractor) -> Extractor:
    """Build an extractor accepting a single item or a list of items."""

    def _extract(name: str, value: Any) -> list:
        try:
            return [extractor(name, value)]
        except ValueError:
            pass
        return [extractor(name, item) for item in _items(name, value)]

    return _extract


def list_or_dict(extractor: Extractor) -> Extractor:
    """Build an extractor accepting a map (keys become names) or a list."""

    def _extract(name: str, value: Any) -> list:
        errors: list[str] = []
        try:
            return [
                extractor(str(key), item)
                for key, item in _fields(name, value).items()
            ]
        except ValueError as err:
            errors.append(str(err))
        try:
            return [extractor("", item) for item in _items(name, value)]
        except ValueError as err:
            errors.append(str(err))
        raise ExtractError("; ".join(errors))

    return _extract