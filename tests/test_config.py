"""
Tests for views.yaml loading and environment overrides.
"""

from pathlib import Path

import pytest

from tests.infrastructure import write, write_config
from vw.config import DEFAULT_MAX_CHAIN_DEPTH, ViewConfig, load_config
from vw.errors import ConfigError
from vw.paths import DEFAULT_EXTENSION, DEFAULT_VIEWS_DIR, views_root


def test_defaults_without_file(tmp_path: Path):
    cfg = load_config(tmp_path, env={})
    assert cfg == ViewConfig()
    assert cfg.views_dir == DEFAULT_VIEWS_DIR
    assert cfg.extension == DEFAULT_EXTENSION
    assert cfg.max_chain_depth == DEFAULT_MAX_CHAIN_DEPTH == 32
    assert cfg.autoescape is True
    assert cfg.strict_variables is False
    assert cfg.cache is True
    assert cfg.exclude == []


def test_file_values(tmp_path: Path):
    write_config(tmp_path, {
        "views_dir": "templates",
        "extension": "tpl",
        "max_chain_depth": 8,
        "strict_variables": True,
        "cache": False,
        "exclude": ["drafts/"],
    })
    cfg = load_config(tmp_path, env={})
    assert cfg.views_dir == "templates"
    assert cfg.extension == ".tpl"
    assert cfg.max_chain_depth == 8
    assert cfg.strict_variables is True
    assert cfg.cache is False
    assert cfg.exclude == ["drafts/"]


def test_empty_file_gives_defaults(tmp_path: Path):
    write(tmp_path / "views.yaml", "")
    assert load_config(tmp_path, env={}) == ViewConfig()


@pytest.mark.parametrize("data, message", [
    ({"colour": "blue"}, "Unknown config key"),
    ({"views_dir": ""}, "views_dir"),
    ({"max_chain_depth": 0}, "max_chain_depth"),
    ({"max_chain_depth": True}, "max_chain_depth"),
    ({"max_chain_depth": "many"}, "max_chain_depth"),
    ({"autoescape": "yes"}, "autoescape"),
    ({"exclude": "drafts/"}, "exclude"),
])
def test_invalid_values(data, message):
    with pytest.raises(ConfigError, match=message):
        ViewConfig.from_dict(data)


def test_invalid_yaml(tmp_path: Path):
    write(tmp_path / "views.yaml", "views_dir: [unclosed\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(tmp_path, env={})


def test_yaml_must_be_mapping(tmp_path: Path):
    write(tmp_path / "views.yaml", "- a\n- b\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path, env={})


def test_env_overrides(tmp_path: Path):
    write_config(tmp_path, {"views_dir": "from_file", "max_chain_depth": 4})
    cfg = load_config(tmp_path, env={
        "VW_VIEWS_DIR": "from_env",
        "VW_CACHE": "off",
        "VW_MAX_CHAIN_DEPTH": " 12 ",
    })
    assert cfg.views_dir == "from_env"
    assert cfg.cache is False
    assert cfg.max_chain_depth == 12


@pytest.mark.parametrize("value, expected", [("1", True), ("yes", True), ("0", False), ("False", False)])
def test_env_cache_flag(tmp_path: Path, value, expected):
    assert load_config(tmp_path, env={"VW_CACHE": value}).cache is expected


def test_env_invalid_depth(tmp_path: Path):
    with pytest.raises(ConfigError, match="VW_MAX_CHAIN_DEPTH"):
        load_config(tmp_path, env={"VW_MAX_CHAIN_DEPTH": "-1"})


def test_load_config_reads_process_env(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("VW_VIEWS_DIR", "elsewhere")
    assert load_config(tmp_path).views_dir == "elsewhere"


def test_to_dict_round_trip():
    cfg = ViewConfig(views_dir="v", exclude=["a"])
    assert ViewConfig.from_dict(cfg.to_dict()) == cfg


def test_views_root(tmp_path: Path):
    assert views_root(tmp_path, "views") == (tmp_path / "views").resolve()
    absolute = tmp_path / "abs"
    assert views_root(Path("/elsewhere"), str(absolute)) == absolute.resolve()
