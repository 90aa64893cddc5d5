import pytest

from dodo_config.extract import (
    ExtractError,
    as_bool,
    as_int,
    as_string,
    either,
    extract,
    list_of,
    list_or_dict,
    mapping,
    one_or_more,
    parse_string,
)


def test_extract_missing_key_returns_none():
    assert extract({"a": "x"}, "b", as_string) is None
    assert extract("notadict", "a", as_string) is None


def test_extract_present_key():
    assert extract({"a": "x"}, "a", as_string) == "x"


def test_extract_dotted_key_is_literal():
    assert extract({"build.builder": "b"}, "build.builder", as_string) == "b"
    assert extract({"build": {"builder": "b"}}, "build.builder", as_string) is None


def test_primitives():
    assert as_bool("n", True) is True
    assert as_int("n", 7) == 7
    with pytest.raises(ExtractError, match="not a string"):
        as_string("n", 3)
    with pytest.raises(ExtractError, match="not a boolean"):
        as_bool("n", "yes")
    with pytest.raises(ExtractError, match="not an integer"):
        as_int("n", True)


def test_parse_string():
    ex = parse_string(str.upper)
    assert ex("n", "abc") == "ABC"
    with pytest.raises(ExtractError):
        parse_string(int)("n", "xyz")


def test_either_first_success():
    ex = either(as_int, as_string)
    assert ex("n", "s") == "s"
    assert ex("n", 5) == 5
    with pytest.raises(ExtractError):
        ex("n", [1])


def test_mapping_uses_keys_as_names():
    ex = mapping(lambda name, v: (name, v))
    assert ex("m", {"a": 1, 2: "b"}) == {"a": ("a", 1), "2": ("2", "b")}
    with pytest.raises(ExtractError, match="not a map"):
        ex("m", [1])


def test_list_of():
    assert list_of(as_string)("l", ["a", "b"]) == ["a", "b"]
    with pytest.raises(ExtractError, match="not a list"):
        list_of(as_string)("l", "a")
    with pytest.raises(ExtractError):
        list_of(as_string)("l", ["a", 1])


def test_one_or_more():
    ex = one_or_more(as_string)
    assert ex("x", "a") == ["a"]
    assert ex("x", ["a", "b"]) == ["a", "b"]
    with pytest.raises(ExtractError):
        ex("x", {"a": 1})


def test_list_or_dict_names():
    ex = list_or_dict(lambda name, v: (name, v))
    assert ex("x", {"k": 1}) == [("k", 1)]
    assert ex("x", [1, 2]) == [("", 1), ("", 2)]
    with pytest.raises(ExtractError):
        list_or_dict(as_string)("x", "scalar")