"""Perception module: resolution scaling and screenshot transcoding."""

from .resolution import (
    Resolution,
    ResolutionBounds,
    ResolutionScaler,
    RoundTrip,
    calculate_scaled_resolution,
    round_half_up,
)
from .screenshot import (
    ScreenshotTranscoder,
    describe,
    encode_base64,
    open_image,
    scale_screenshot,
    to_data_url,
)

__all__ = [
    "Resolution",
    "ResolutionBounds",
    "ResolutionScaler",
    "RoundTrip",
    "calculate_scaled_resolution",
    "round_half_up",
    "ScreenshotTranscoder",
    "describe",
    "encode_base64",
    "open_image",
    "scale_screenshot",
    "to_data_url",
]
