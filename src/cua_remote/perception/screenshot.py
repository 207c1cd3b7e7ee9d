"""
Screenshot capture and transcoding.
Grabs the remote frame and re-encodes it at the model-visible resolution.
"""

from __future__ import annotations

import base64
import io
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from ..errors import RemoteSessionError
from ..schemas.tasks import ScreenshotResult
from ..utils.logger import get_logger
from .resolution import Resolution, ResolutionScaler

if TYPE_CHECKING:
    from ..execution.session import DesktopSession

logger = get_logger(__name__)

# Modes Pillow can write as PNG without conversion
PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}


def encode_base64(png: bytes) -> str:
    return base64.b64encode(png).decode("utf-8")


def to_data_url(png: bytes) -> str:
    """PNG bytes -> data URL accepted as an ``input_image``."""
    return f"data:image/png;base64,{encode_base64(png)}"


def open_image(raw: bytes) -> Image.Image:
    """Decode raw frame bytes, turning codec failures into RemoteSessionError."""
    if not raw:
        raise RemoteSessionError("Remote desktop returned an empty screenshot")
    try:
        image = Image.open(io.BytesIO(bytes(raw)))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise RemoteSessionError(f"Remote desktop returned an unreadable screenshot: {e}") from e
    return image


def scale_screenshot(raw: bytes, target: Resolution) -> bytes:
    """
    Resize a frame to ``target`` and encode it as PNG.

    Stretch-to-fill with Lanczos: the rounding drift between the two aspect
    ratios shows up as sub-pixel stretch, never as cropping or padding.
    """
    image = open_image(raw)
    if image.size == tuple(target) and image.format == "PNG":
        return bytes(raw)

    try:
        if image.mode not in PNG_MODES:
            image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
        if image.size != tuple(target):
            image = image.resize(tuple(target), Image.Resampling.LANCZOS)

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        raise RemoteSessionError(f"Could not re-encode screenshot as PNG: {e}") from e
    return buffer.getvalue()


def describe(png: bytes) -> ScreenshotResult:
    """Wrap encoded screenshot bytes with their dimensions."""
    image = open_image(png)
    width, height = image.size
    return ScreenshotResult(
        base64=encode_base64(png),
        format=(image.format or "png").lower(),
        width=width,
        height=height,
    )


class ScreenshotTranscoder:
    """
    Captures the remote desktop and returns it at the scaled resolution.

    USAGE:
        transcoder = ScreenshotTranscoder(session, scaler)
        png = transcoder.take_screenshot()
    """

    def __init__(self, session: "DesktopSession", scaler: ResolutionScaler):
        self._session = session
        self._scaler = scaler

    @property
    def scaler(self) -> ResolutionScaler:
        return self._scaler

    def take_screenshot(self) -> bytes:
        """Capture one frame; failures propagate as RemoteSessionError."""
        raw = self._session.screenshot()
        png = scale_screenshot(raw, self._scaler.scaled_resolution)
        logger.debug(f"Captured screenshot ({len(png)} bytes at {self._scaler.scaled_resolution})")
        return png
