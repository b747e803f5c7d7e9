"""Image processing utilities for quizlens.

Shared image conversion and encoding functions used by the screenshot
source and the vision client.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path

import cv2
import numpy as np

logger = logging.getLogger(__name__)


def bgra_to_bgr(image: np.ndarray) -> np.ndarray:
    """Drop the alpha channel from an mss grab (BGRA) for OpenCV."""
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image


def load_image(path: Path | str) -> np.ndarray:
    """Read an image file into a BGR numpy array."""
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError(f"Failed to read image {path}")
    return image


def numpy_to_base64_png(image: np.ndarray) -> str:
    """Convert a numpy image array (BGR, OpenCV format) to base64 PNG."""
    success, buffer = cv2.imencode(".png", image)
    if not success:
        raise ValueError("Failed to encode image to PNG")
    return base64.b64encode(buffer.tobytes()).decode("utf-8")


def resize_for_model(image: np.ndarray, max_dimension: int = 1568) -> np.ndarray:
    """Downscale an image so its longest side is at most ``max_dimension``.

    Preserves aspect ratio. Smaller images are returned unchanged.
    """
    h, w = image.shape[:2]
    largest = max(h, w)
    if largest <= max_dimension:
        return image

    scale = max_dimension / largest
    new_w = max(1, int(w * scale))
    new_h = max(1, int(h * scale))
    logger.debug("Downscaling screenshot %dx%d -> %dx%d", w, h, new_w, new_h)
    return cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_AREA)


def encode_screenshot(path: Path | str, max_dimension: int = 1568) -> str:
    """Load a screenshot, bound its size and return it as base64 PNG."""
    return numpy_to_base64_png(resize_for_model(load_image(path), max_dimension))
