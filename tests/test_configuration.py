import os

import pytest

from dodo_config.config import BackdropLoadError
from dodo_config.configuration import Configuration, default_config_files

CONFIG = """\
backdrops:
  first:
    image: testimage
    aliases: [one, uno]
  second:
    name: renamed
    image: other
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "dodo.yaml"
    path.write_text(CONFIG)
    return str(path)


def test_get_backdrop_by_name(config_file):
    backdrop = Configuration([config_file]).get_backdrop("first")
    assert backdrop.container_config.image == "testimage"


def test_get_backdrop_by_alias(config_file):
    cfg = Configuration([config_file])
    assert cfg.get_backdrop("uno").name == "first"
    assert cfg.get_backdrop("one").name == "first"


def test_get_backdrop_uses_configured_name(config_file):
    cfg = Configuration([config_file])
    assert cfg.get_backdrop("renamed").container_config.image == "other"
    with pytest.raises(KeyError, match="could not find any configuration"):
        cfg.get_backdrop("second")


def test_unknown_backdrop(config_file):
    with pytest.raises(KeyError, match="missing"):
        Configuration([config_file]).get_backdrop("missing")


def test_list_backdrops(config_file):
    names = {b.name for b in Configuration([config_file]).list_backdrops()}
    assert names == {"first", "renamed"}


def test_backdrops_are_cached(config_file):
    cfg = Configuration([config_file])
    before = cfg.list_backdrops()
    os.remove(config_file)
    assert cfg.list_backdrops() == before


def test_load_error_propagates(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("backdrops:\n  x:\n    aliases: 5\n")
    cfg = Configuration([str(path)])
    with pytest.raises(BackdropLoadError):
        cfg.list_backdrops()
    with pytest.raises(BackdropLoadError):
        cfg.get_backdrop("x")


def test_missing_file_is_an_error(tmp_path):
    with pytest.raises(BackdropLoadError):
        Configuration([str(tmp_path / "absent.yaml")]).list_backdrops()


def test_default_config_files_in_cwd(tmp_path, monkeypatch):
    (tmp_path / "dodo.yaml").write_text(CONFIG)
    monkeypatch.chdir(tmp_path)
    resolved = [os.path.realpath(f) for f in default_config_files()]
    assert os.path.realpath(tmp_path / "dodo.yaml") in resolved


def test_default_config_files_parents_first(tmp_path, monkeypatch):
    child = tmp_path / "child"
    child.mkdir()
    (tmp_path / "dodo.yaml").write_text(CONFIG)
    (child / "dodo.yml").write_text(CONFIG)
    monkeypatch.chdir(child)
    files = default_config_files()
    assert os.path.samefile(files[-1], child / "dodo.yml")
    parent_index = next(
        i for i, f in enumerate(files) if os.path.samefile(f, tmp_path / "dodo.yaml")
    )
    assert parent_index < len(files) - 1


def test_default_files_used_when_none_given(tmp_path, monkeypatch):
    (tmp_path / "dodo.yaml").write_text(CONFIG)
    monkeypatch.chdir(tmp_path)
    assert Configuration().get_backdrop("uno").container_config.image == "testimage"