"""Tests for configuration loading."""

from pathlib import Path

import pytest

from epaper_example import config as config_module
from epaper_example.config import load_config


@pytest.fixture
def write_config(tmp_path):
    def write(text):
        path = tmp_path / "config.yaml"
        path.write_text(text)
        return path

    return write


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "config.yaml")

    config = load_config()

    assert config.display.model == "waveshare_7in5_v2"
    assert config.display.rotation == 0
    assert config.bitmap.basename == "sample"
    assert config.bitmap.directory is None


def test_default_file_is_used(write_config, monkeypatch):
    path = write_config("display:\n  model: mock\n")
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", path)

    assert load_config().display.model == "mock"


def test_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_full_config(write_config):
    config = load_config(write_config(
        "display:\n"
        "  model: waveshare_4in2\n"
        "  rotation: 180\n"
        "bitmap:\n"
        "  basename: logo\n"
        "  directory: /srv/images\n"
    ))

    assert config.display.model == "waveshare_4in2"
    assert config.display.rotation == 180
    assert config.bitmap.basename == "logo"
    assert config.bitmap.directory == Path("/srv/images")


def test_empty_file(write_config):
    assert load_config(write_config("")).display.model == "waveshare_7in5_v2"


def test_not_a_mapping(write_config):
    with pytest.raises(ValueError):
        load_config(write_config("- one\n- two\n"))


def test_unknown_model(write_config):
    with pytest.raises(ValueError, match="Unknown display model"):
        load_config(write_config("display:\n  model: lcd\n"))


def test_invalid_rotation(write_config):
    with pytest.raises(ValueError, match="rotation"):
        load_config(write_config("display:\n  rotation: 45\n"))
