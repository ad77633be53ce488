"""
Map the right index fingertip's vertical position to a brightness percentage.
"""
import math
from typing import Optional, Tuple

from .config import Cfg
from .types import BrightnessCommand, GestureState, HandsSnapshot

HUE_MAX_BRIGHTNESS = 254


def snap_to_step(value: float, step: int = 5) -> int:
    """Round to the nearest multiple of step, halves rounding up."""
    return int(math.floor(value / step + 0.5)) * step


def percent_to_hue_brightness(percent: int) -> int:
    """Convert a 0..100 percentage to the Hue bridge's 0..254 'bri' scale."""
    return int(math.floor(percent / 100 * HUE_MAX_BRIGHTNESS + 0.5))


class BrightnessMapper:
    """
    Converts fingertip height inside a calibrated band into a percentage.

    The band covers band_fraction of the frame height, centered vertically.
    The top of the band is 100% and the bottom is 0%; positions outside the
    band are clamped to its edges.
    """

    def __init__(self, cfg: Cfg):
        """Initialize the mapper with configuration."""
        self.cfg = cfg
        self.band_fraction = cfg.brightness.band_fraction
        self.snap_step = cfg.brightness.snap_step

    def band(self, height: float) -> Tuple[float, float]:
        """Return (line_start, line_end) of the band in pixels."""
        band_height = self.band_fraction * height
        line_start = (height - band_height) / 2
        return line_start, line_start + band_height

    def percent_for_y(self, y_px: float, height: float) -> int:
        """
        Map a vertical pixel coordinate to a snapped percentage.

        Args:
            y_px: Fingertip y in pixels
            height: Frame height in pixels

        Returns:
            Integer percentage in 0..100, a multiple of snap_step
        """
        line_start, line_end = self.band(height)
        y = max(line_start, min(line_end, y_px))
        raw = 1.0 - (y - line_start) / (line_end - line_start)
        return snap_to_step(raw * 100, self.snap_step)

    def update(self, state: GestureState, hands: HandsSnapshot,
               frame_wh: Tuple[int, int]) -> Optional[BrightnessCommand]:
        """
        Produce this frame's brightness command.

        Args:
            state: Gesture state after this frame's update
            hands: Hands snapshot for this frame
            frame_wh: Frame dimensions (width, height)

        Returns:
            BrightnessCommand while brightness control is engaged and the right
            hand is in view, None otherwise
        """
        if not state.is_brightness_control or not hands.right.detected:
            return None

        _, frame_height = frame_wh
        _, tip_y = hands.right.coordinates
        percent = self.percent_for_y(tip_y * frame_height, frame_height)

        return BrightnessCommand(percent=percent, x=state.initial_x, y=tip_y)
