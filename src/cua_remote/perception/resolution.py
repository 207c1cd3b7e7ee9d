"""
resolution.py - Model-space <-> desktop-space scaling
=====================================================
The planner sees a bounded, resized copy of the desktop. This module owns
the single uniform scale factor between the two and converts coordinates
both ways. Pure math: no I/O.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Sequence, Tuple

from ..errors import ConfigurationError
from ..utils import constants
from ..utils.logger import get_logger

logger = get_logger(__name__)


class Resolution(NamedTuple):
    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


Coordinate = Tuple[int, int]


@dataclass(frozen=True)
class ResolutionBounds:
    """Inclusive bounds for the model-visible resolution."""

    min_width: int = constants.MIN_RESOLUTION_WIDTH
    min_height: int = constants.MIN_RESOLUTION_HEIGHT
    max_width: int = constants.MAX_RESOLUTION_WIDTH
    max_height: int = constants.MAX_RESOLUTION_HEIGHT

    def __post_init__(self):
        if min(self.min_width, self.min_height, self.max_width, self.max_height) <= 0:
            raise ConfigurationError("Resolution bounds must be positive")
        if self.min_width > self.max_width or self.min_height > self.max_height:
            raise ConfigurationError(
                f"Minimum bound {self.min_width}x{self.min_height} exceeds "
                f"maximum bound {self.max_width}x{self.max_height}"
            )

    @classmethod
    def from_pairs(cls, min_resolution: Sequence[int], max_resolution: Sequence[int]) -> "ResolutionBounds":
        return cls(
            min_width=min_resolution[0],
            min_height=min_resolution[1],
            max_width=max_resolution[0],
            max_height=max_resolution[1],
        )

    def exceeds_max(self, resolution: Resolution) -> bool:
        return resolution.width > self.max_width or resolution.height > self.max_height

    def below_min(self, resolution: Resolution) -> bool:
        return resolution.width < self.min_width or resolution.height < self.min_height


class RoundTrip(NamedTuple):
    original: Coordinate
    model_space: Coordinate
    round_trip: Coordinate
    error: Coordinate

    @property
    def max_error(self) -> int:
        return max(abs(self.error[0]), abs(self.error[1]))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def calculate_scaled_resolution(
    original: Resolution, bounds: ResolutionBounds
) -> Tuple[Resolution, float]:
    """
    Compute the model-visible resolution and the uniform scale factor.

    Only downscaling is performed. A desktop that exceeds the max bound on
    either axis is shrunk by the smaller of the two axis factors so both
    dimensions fit; anything else is passed through at factor 1.
    """
    if not bounds.exceeds_max(original):
        if bounds.below_min(original):
            logger.warning(
                f"Desktop resolution {original} is below the minimum "
                f"{bounds.min_width}x{bounds.min_height}; passing it through unscaled"
            )
        return original, 1.0

    width_factor = bounds.max_width / original.width
    height_factor = bounds.max_height / original.height
    scale_factor = min(width_factor, height_factor)

    scaled = Resolution(
        round_half_up(original.width * scale_factor),
        round_half_up(original.height * scale_factor),
    )
    return scaled, scale_factor


class ResolutionScaler:
    """
    Maps coordinates between the desktop's true resolution (original space)
    and the resized resolution the planner sees (model space).

    Usage:
        scaler = ResolutionScaler((3840, 2160))
        scaler.scaled_resolution             # Resolution(1920, 1080)
        scaler.scale_to_original_space((960, 540))   # (1920, 1080)
    """

    def __init__(
        self,
        original_resolution: Sequence[int],
        bounds: ResolutionBounds = ResolutionBounds(),
        strict: bool = False,
    ):
        """
        Args:
            original_resolution: (width, height) of the remote framebuffer.
            bounds: Inclusive min/max bounds for the model-visible resolution.
            strict: Raise ConfigurationError instead of logging when the
                    round-trip self-check exceeds tolerance.
        """
        try:
            width, height = (int(v) for v in original_resolution)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Resolution must be a (width, height) pair, got {original_resolution!r}"
            ) from e
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Resolution must be positive, got {width}x{height}")

        self._bounds = bounds
        self._original = Resolution(width, height)
        self._scaled, self._scale_factor = calculate_scaled_resolution(self._original, bounds)

        if self._scale_factor != 1.0:
            logger.info(
                f"Scaling {self._original} -> {self._scaled} (factor {self._scale_factor:.4f})"
            )
        self._validate_coordinate_scaling(strict)

    @classmethod
    def identity(cls, resolution: Sequence[int]) -> "ResolutionScaler":
        """A 1:1 scaler for callers that already speak desktop coordinates."""
        width, height = (int(v) for v in resolution)
        return cls((width, height), bounds=ResolutionBounds(1, 1, max(width, 1), max(height, 1)))

    # ── accessors ───────────────────────────────────────────

    @property
    def original_resolution(self) -> Resolution:
        return self._original

    @property
    def scaled_resolution(self) -> Resolution:
        return self._scaled

    @property
    def scale_factor(self) -> float:
        return self._scale_factor

    @property
    def bounds(self) -> ResolutionBounds:
        return self._bounds

    @property
    def original_aspect_ratio(self) -> float:
        return self._original.aspect_ratio

    @property
    def scaled_aspect_ratio(self) -> float:
        return self._scaled.aspect_ratio

    @property
    def is_identity(self) -> bool:
        return self._scale_factor == 1.0 and self._scaled == self._original

    # ── conversions ─────────────────────────────────────────

    def scale_to_original_space(self, coordinate: Sequence[int]) -> Coordinate:
        """Model-space point -> desktop-space point."""
        return (
            round_half_up(coordinate[0] / self._scale_factor),
            round_half_up(coordinate[1] / self._scale_factor),
        )

    def scale_to_model_space(self, coordinate: Sequence[int]) -> Coordinate:
        """Desktop-space point -> model-space point."""
        return (
            round_half_up(coordinate[0] * self._scale_factor),
            round_half_up(coordinate[1] * self._scale_factor),
        )

    def test_coordinate_round_trip(self, original_coordinate: Sequence[int]) -> RoundTrip:
        original = (int(original_coordinate[0]), int(original_coordinate[1]))
        model_space = self.scale_to_model_space(original)
        round_trip = self.scale_to_original_space(model_space)
        error = (round_trip[0] - original[0], round_trip[1] - original[1])
        return RoundTrip(original, model_space, round_trip, error)

    def sample_points(self) -> List[Tuple[str, Coordinate]]:
        """The four corners and the centre of the original resolution."""
        w, h = self._original
        return [
            ("top-left", (0, 0)),
            ("top-right", (w - 1, 0)),
            ("bottom-left", (0, h - 1)),
            ("bottom-right", (w - 1, h - 1)),
            ("center", (w // 2, h // 2)),
        ]

    def _validate_coordinate_scaling(self, strict: bool) -> None:
        for name, point in self.sample_points():
            result = self.test_coordinate_round_trip(point)
            if result.max_error <= constants.ROUND_TRIP_TOLERANCE:
                continue
            message = (
                f"Round-trip error {result.error} at {name} {point} exceeds "
                f"{constants.ROUND_TRIP_TOLERANCE}px for {self._original} -> {self._scaled}"
            )
            if strict:
                raise ConfigurationError(message)
            logger.warning(message)

    def __repr__(self) -> str:
        return (
            f"ResolutionScaler(original={self._original}, scaled={self._scaled}, "
            f"factor={self._scale_factor:.4f})"
        )
