"""
Render Module
=============

Frame rasterization and decoding.

This module provides:
    - render_frame: Event -> PNG bytes (random gray background)
    - FrameRenderer: Fixed-size renderer producing Frame objects
    - RenderError: Raised when a frame cannot be produced
    - decode_png / decode_png_b64 / frame_dimensions: Decode side

Example:
    from framecast.render import FrameRenderer

    renderer = FrameRenderer(width=600, height=300)
    frame = renderer.render(event, sequence=1)
"""

from framecast.render.renderer import (
    FrameRenderer,
    RenderError,
    TIME_OFFSET_X,
    TIME_OFFSET_Y,
    encode_png,
    rasterize,
    render_frame,
    sample_intensity,
    text_color,
)
from framecast.render.decoder import (
    ImageDecodeError,
    decode_png,
    decode_png_b64,
    frame_dimensions,
)


__all__ = [
    "FrameRenderer",
    "RenderError",
    "TIME_OFFSET_X",
    "TIME_OFFSET_Y",
    "encode_png",
    "rasterize",
    "render_frame",
    "sample_intensity",
    "text_color",
    "ImageDecodeError",
    "decode_png",
    "decode_png_b64",
    "frame_dimensions",
]
