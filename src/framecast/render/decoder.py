"""
Image Decoder
=============

Decodes PNG frames back into OpenCV matrices.

Used by the stream probe to check what clients actually receive.

Design Rules:
    - Validates shape and dtype
    - Fails fast on corrupt frames
"""

import base64
import binascii
import logging
from typing import Optional, Tuple

import cv2
import numpy as np


logger = logging.getLogger(__name__)


class ImageDecodeError(Exception):
    """Raised when image decoding fails."""
    pass


def decode_png(data: bytes) -> np.ndarray:
    """
    Decode PNG bytes to a BGR numpy array.

    Args:
        data: Encoded image bytes

    Returns:
        BGR image as np.ndarray (H, W, 3), dtype=uint8

    Raises:
        ImageDecodeError: If decoding fails or image is invalid
    """
    if not data:
        raise ImageDecodeError("Empty image payload")

    nparr = np.frombuffer(data, np.uint8)
    try:
        bgr = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise ImageDecodeError(f"cv2.imdecode failed: {e}")

    if bgr is None:
        raise ImageDecodeError("Failed to decode image: cv2.imdecode returned None")

    if len(bgr.shape) != 3 or bgr.shape[2] != 3:
        raise ImageDecodeError(f"Invalid image shape: {bgr.shape}")

    if bgr.dtype != np.uint8:
        raise ImageDecodeError(f"Invalid dtype: {bgr.dtype}")

    return bgr


def decode_png_b64(image_b64: str) -> np.ndarray:
    """
    Decode a base64 PNG (as carried in SSE frames).

    Raises:
        ImageDecodeError: If base64 or image decoding fails
    """
    try:
        data = base64.b64decode(image_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Base64 decode failed: {e}")
    return decode_png(data)


def frame_dimensions(data: bytes) -> Optional[Tuple[int, int]]:
    """
    Get (width, height) of an encoded image.

    Returns:
        Tuple of (width, height) or None if decode fails
    """
    try:
        bgr = decode_png(data)
    except ImageDecodeError as e:
        logger.debug(f"Could not read frame dimensions: {e}")
        return None
    height, width = bgr.shape[:2]
    return width, height
