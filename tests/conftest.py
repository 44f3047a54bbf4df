"""Shared fixtures."""

from pathlib import Path

import pytest
from PIL import Image

from epaper_example.display_driver import MockDisplay


@pytest.fixture
def mock_display() -> MockDisplay:
    return MockDisplay(width=10, height=20)


@pytest.fixture
def display_factory(mock_display):
    """Factory that always hands out ``mock_display`` and records its args."""

    def factory(model, rotation=0):
        factory.requests.append((model, rotation))
        return mock_display

    factory.requests = []
    return factory


@pytest.fixture
def bitmap_file(tmp_path) -> Path:
    path = tmp_path / "picture.bmp"
    Image.new("1", (10, 20), 1).save(path)
    return path


@pytest.fixture
def corrupt_file(tmp_path) -> Path:
    path = tmp_path / "corrupt.bmp"
    path.write_bytes(b"this is not a bitmap")
    return path
