"""
Frame Renderer
==============

Rasterizes an Event into a fixed-size PNG.

Layout:
    - Uniform grayscale background, intensity sampled per frame
    - Event value in bold, centred on the canvas
    - Event time centred on a fixed anchor 150px from the right
      edge and 30px from the bottom edge (not proportional to size)
    - Text is white on dark backgrounds (< 128), black otherwise

The random background makes output non-deterministic across calls,
even for identical events. Inject a seeded random source to pin it.
"""

import logging
import random
from typing import Optional, Tuple

import cv2
import numpy as np

from framecast.models.event import Event
from framecast.models.frame import Frame


logger = logging.getLogger(__name__)


# Fixed offset of the time label anchor from the bottom-right corner
TIME_OFFSET_X = 150
TIME_OFFSET_Y = 30

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

FONT = cv2.FONT_HERSHEY_SIMPLEX


class RenderError(Exception):
    """Raised when a frame cannot be rendered."""
    pass


def text_color(intensity: int) -> Tuple[int, int, int]:
    """Foreground colour that stays legible on a gray background."""
    return WHITE if intensity < 128 else BLACK


def _put_centered(
    surface: np.ndarray,
    text: str,
    center: Tuple[int, int],
    color: Tuple[int, int, int],
    font_scale: float,
    thickness: int,
) -> None:
    """Draw text centred horizontally and vertically on a point."""
    (text_w, text_h), _ = cv2.getTextSize(text, FONT, font_scale, thickness)
    cx, cy = center
    # putText anchors on the bottom-left of the baseline
    origin = (int(cx - text_w / 2), int(cy + text_h / 2))
    cv2.putText(surface, text, origin, FONT, font_scale, color, thickness, cv2.LINE_AA)


def rasterize(
    event: Event,
    width: int,
    height: int,
    intensity: int,
    font_scale: float = 1.0,
    thickness: int = 2,
    max_dimension: int = 8192,
) -> np.ndarray:
    """
    Draw an event onto a new surface.

    Args:
        event: Event to draw
        width: Surface width in pixels
        height: Surface height in pixels
        intensity: Background gray level [0, 255]
        font_scale: OpenCV font scale for both labels
        thickness: Stroke thickness
        max_dimension: Largest accepted width or height

    Returns:
        BGR surface as np.ndarray (H, W, 3), dtype=uint8

    Raises:
        RenderError: Invalid dimensions or surface allocation failure
    """
    if width <= 0 or height <= 0:
        raise RenderError(f"Invalid canvas size {width}x{height}")
    if width > max_dimension or height > max_dimension:
        raise RenderError(
            f"Canvas size {width}x{height} exceeds max dimension {max_dimension}"
        )
    if not 0 <= intensity <= 255:
        raise RenderError(f"Background intensity out of range: {intensity}")

    try:
        surface = np.full((height, width, 3), intensity, dtype=np.uint8)
    except (MemoryError, ValueError) as e:
        raise RenderError(f"Failed to allocate {width}x{height} surface: {e}")

    color = text_color(intensity)

    _put_centered(
        surface, event.value, (width // 2, height // 2),
        color, font_scale, thickness,
    )
    _put_centered(
        surface, event.time, (width - TIME_OFFSET_X, height - TIME_OFFSET_Y),
        color, font_scale, thickness,
    )

    return surface


def encode_png(surface: np.ndarray) -> bytes:
    """
    Encode a surface as PNG.

    Raises:
        RenderError: If OpenCV fails to encode
    """
    try:
        ok, buf = cv2.imencode(".png", surface)
    except cv2.error as e:
        raise RenderError(f"PNG encoding failed: {e}")

    if not ok:
        raise RenderError("PNG encoding failed: cv2.imencode returned False")

    return buf.tobytes()


def sample_intensity(rng: Optional[random.Random] = None) -> int:
    """Sample a gray level uniformly from [0, 256)."""
    rng = rng or random
    return rng.randrange(256)


def render_frame(
    event: Event,
    width: int,
    height: int,
    rng: Optional[random.Random] = None,
) -> bytes:
    """
    Render an event to PNG bytes.

    Args:
        event: Event to draw
        width: Image width in pixels
        height: Image height in pixels
        rng: Random source for the background shade

    Returns:
        PNG-encoded image bytes

    Raises:
        RenderError: If the frame cannot be rendered
    """
    surface = rasterize(event, width, height, sample_intensity(rng))
    return encode_png(surface)


class FrameRenderer:
    """
    Fixed-size renderer used by stream sessions.

    Attributes:
        width: Frame width in pixels
        height: Frame height in pixels
        font_scale: OpenCV font scale
        thickness: Stroke thickness
        max_dimension: Largest accepted width or height

    Example:
        renderer = FrameRenderer(width=600, height=300)
        frame = renderer.render(generate_event(), sequence=1)
    """

    def __init__(
        self,
        width: int = 600,
        height: int = 300,
        font_scale: float = 1.0,
        thickness: int = 2,
        max_dimension: int = 8192,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.width = width
        self.height = height
        self.font_scale = font_scale
        self.thickness = thickness
        self.max_dimension = max_dimension
        self._rng = rng

        logger.debug(
            f"FrameRenderer initialized: {width}x{height}, "
            f"font_scale={font_scale}, thickness={thickness}"
        )

    def render(self, event: Event, sequence: int = 0) -> Frame:
        """
        Render an event into a Frame.

        Raises:
            RenderError: If the frame cannot be rendered
        """
        intensity = sample_intensity(self._rng)
        surface = rasterize(
            event,
            self.width,
            self.height,
            intensity,
            font_scale=self.font_scale,
            thickness=self.thickness,
            max_dimension=self.max_dimension,
        )
        return Frame(
            sequence=sequence,
            event=event,
            width=self.width,
            height=self.height,
            background=intensity,
            png=encode_png(surface),
        )
