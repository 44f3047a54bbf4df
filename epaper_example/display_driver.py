"""Waveshare ePaper display drivers."""

import importlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from PIL import Image

logger = logging.getLogger(__name__)

# Fixed panel used by the example
DEFAULT_MODEL = "waveshare_7in5_v2"


class DisplayError(Exception):
    """Raised when the panel fails during an operation."""


@dataclass(frozen=True)
class PanelModel:
    """A supported panel and the vendor module that drives it."""

    module: Optional[str]
    width: int
    height: int
    supports_partial: bool = False


PANEL_MODELS = {
    "waveshare_7in5_v2": PanelModel("epd7in5_V2", 800, 480, supports_partial=True),
    "waveshare_7in5_v2_old": PanelModel("epd7in5_V2_old", 800, 480),
    "waveshare_4in2": PanelModel("epd4in2", 400, 300),
    "mock": PanelModel(None, 800, 480, supports_partial=True),
}


class EPaperDisplay(ABC):
    """Base class for a connected ePaper panel.

    Instances are context managers; leaving the ``with`` block releases the
    panel. ``close`` may be called more than once but only releases once.
    """

    def __init__(self, width: int, height: int, rotation: int = 0):
        self.width = width
        self.height = height
        self.rotation = rotation
        self._closed = False

    def __enter__(self) -> "EPaperDisplay":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def clear(self) -> None:
        """Clear the display to white."""

    @abstractmethod
    def wait_until_ready(self) -> None:
        """Block until the panel is idle."""

    @abstractmethod
    def display_image(self, image: Image.Image, full_refresh: bool = True) -> None:
        """Send an image to the panel."""

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._release()

    def _release(self) -> None:
        """Hook for subclasses to free hardware resources."""

    def prepare_image(self, image: Image.Image) -> Image.Image:
        """Rotate, resize and convert an image to the panel's 1-bit format."""
        if self.rotation != 0:
            image = image.rotate(self.rotation, expand=True)

        if image.size != (self.width, self.height):
            logger.warning(
                f"Image size {image.size} doesn't match display "
                f"({self.width}x{self.height}), resizing"
            )
            image = image.resize((self.width, self.height))

        if image.mode != "1":
            image = image.convert("1")

        return image


class WaveshareDisplay(EPaperDisplay):
    """Adapter around a ``waveshare_epd`` EPD object."""

    def __init__(self, epd, epdconfig, model: PanelModel, rotation: int = 0):
        """Wrap an already initialized EPD.

        Args:
            epd: Vendor EPD instance (``init()`` already called).
            epdconfig: Vendor ``epdconfig`` module, used to free GPIO/SPI.
            model: Panel description from ``PANEL_MODELS``.
            rotation: Display rotation in degrees (0, 90, 180, 270).
        """
        super().__init__(
            getattr(epd, "width", model.width),
            getattr(epd, "height", model.height),
            rotation,
        )
        self.epd = epd
        self.epdconfig = epdconfig
        self.model = model

    def clear(self) -> None:
        """Clear the display to white."""
        try:
            self.epd.Clear()
        except Exception as e:
            logger.error(f"Failed to clear display: {e}")
            raise DisplayError("Failed to clear display") from e
        logger.info("Display cleared")

    def wait_until_ready(self) -> None:
        """Block until the panel's BUSY line is released."""
        try:
            self.epd.ReadBusy()
        except Exception as e:
            logger.error(f"Failed waiting for display: {e}")
            raise DisplayError("Failed waiting for display") from e

    def display_image(self, image: Image.Image, full_refresh: bool = True) -> None:
        """Display an image on the ePaper.

        Args:
            image: PIL Image to display; rotated, resized and converted to
                mode "1" as needed.
            full_refresh: Redraw the whole panel. A partial refresh is only
                available on panels that support it.
        """
        if not full_refresh and not self.model.supports_partial:
            raise DisplayError(f"Panel {self.model.module} has no partial refresh")

        image = self.prepare_image(image)

        try:
            if full_refresh:
                self.epd.display(self.epd.getbuffer(image))
            else:
                self.epd.init_part()
                self.epd.display_Partial(
                    self.epd.getbuffer(image), 0, 0, self.width, self.height
                )
        except Exception as e:
            logger.error(f"Failed to display image: {e}")
            raise DisplayError("Failed to display image") from e
        logger.info("Image displayed successfully")

    def _release(self) -> None:
        try:
            self.epd.sleep()
            logger.info("Display entering sleep mode")
        except Exception as e:
            logger.error(f"Failed to put display to sleep: {e}")

        _module_exit(self.epdconfig)


class MockDisplay(EPaperDisplay):
    """Mock display for running without hardware."""

    def __init__(self, width: int = 800, height: int = 480, rotation: int = 0):
        super().__init__(width, height, rotation)
        self.calls: list[str] = []
        self._last_image: Image.Image | None = None
        logger.info("Mock display initialized")

    def clear(self) -> None:
        self.calls.append("clear")
        logger.info("Mock display cleared")

    def wait_until_ready(self) -> None:
        self.calls.append("wait_until_ready")

    def display_image(self, image: Image.Image, full_refresh: bool = True) -> None:
        """Store image for inspection."""
        self.calls.append(f"display_image(full_refresh={full_refresh})")
        self._last_image = self.prepare_image(image)
        logger.info(f"Mock display showing image: {image.size}, mode={image.mode}")

    def _release(self) -> None:
        self.calls.append("close")
        logger.info("Mock display cleaned up")

    @property
    def last_image(self) -> Image.Image | None:
        """Get the last displayed image."""
        return self._last_image


def _module_exit(epdconfig) -> None:
    """Release the GPIO/SPI resources claimed by the vendor library."""
    try:
        epdconfig.module_exit()
        logger.info("Display resources cleaned up")
    except Exception as e:
        logger.error(f"Failed to cleanup display: {e}")


def _import_waveshare(module: str):
    """Import the vendor panel module and its epdconfig.

    The ``waveshare_epd`` package is only present on the Raspberry Pi, and
    importing it there can also fail when GPIO/SPI is not accessible.
    """
    panel = importlib.import_module(f"waveshare_epd.{module}")
    epdconfig = importlib.import_module("waveshare_epd.epdconfig")
    return panel, epdconfig


def create_display(model: str = DEFAULT_MODEL, rotation: int = 0) -> Optional[EPaperDisplay]:
    """Create and initialize a display for the given panel model.

    Args:
        model: Key of ``PANEL_MODELS``.
        rotation: Display rotation in degrees.

    Returns:
        An initialized display, or None if the panel is not available.
    """
    panel_model = PANEL_MODELS.get(model)
    if panel_model is None:
        logger.error(f"Unknown display model: {model}")
        return None

    if panel_model.module is None:
        return MockDisplay(panel_model.width, panel_model.height, rotation)

    try:
        panel, epdconfig = _import_waveshare(panel_model.module)
    except (ImportError, RuntimeError, OSError) as e:
        logger.warning(f"Waveshare library not available: {e}")
        return None

    try:
        epd = panel.EPD()
        if epd.init() not in (0, None):
            logger.error("ePaper display reported an initialization failure")
            _module_exit(epdconfig)
            return None
    except Exception as e:
        logger.error(f"Failed to initialize ePaper display: {e}")
        _module_exit(epdconfig)
        return None

    logger.info("ePaper display initialized successfully")
    return WaveshareDisplay(epd, epdconfig, panel_model, rotation)
