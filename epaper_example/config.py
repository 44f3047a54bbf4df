"""Configuration loader for the ePaper example."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .display_driver import DEFAULT_MODEL, PANEL_MODELS

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"
VALID_ROTATIONS = (0, 90, 180, 270)


@dataclass
class DisplayConfig:
    """Display configuration."""

    model: str = DEFAULT_MODEL
    rotation: int = 0


@dataclass
class BitmapConfig:
    """Default bitmap lookup."""

    basename: str = "sample"
    directory: Optional[Path] = None  # None means the package directory


@dataclass
class Config:
    """Main configuration container."""

    display: DisplayConfig = field(default_factory=DisplayConfig)
    bitmap: BitmapConfig = field(default_factory=BitmapConfig)


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to config file. Defaults to config.yaml in the
            project root; if that file doesn't exist the defaults are used.

    Returns:
        Parsed configuration object.

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist.
        ValueError: If config is invalid.
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return Config()
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Copy config.example.yaml to config.yaml or omit --config."
        )

    with open(config_path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping")

    display_data = data.get("display") or {}
    display = DisplayConfig(
        model=display_data.get("model", DEFAULT_MODEL),
        rotation=display_data.get("rotation", 0),
    )
    if display.model not in PANEL_MODELS:
        raise ValueError(
            f"Unknown display model '{display.model}' "
            f"(expected one of: {', '.join(sorted(PANEL_MODELS))})"
        )
    if display.rotation not in VALID_ROTATIONS:
        raise ValueError(f"Invalid display rotation: {display.rotation}")

    bitmap_data = data.get("bitmap") or {}
    directory = bitmap_data.get("directory")
    bitmap = BitmapConfig(
        basename=bitmap_data.get("basename", "sample"),
        directory=Path(directory).expanduser() if directory else None,
    )

    return Config(display=display, bitmap=bitmap)
