# qrapi/qr_scanner/qr_utils.py

"""
Image loading helpers for QR decoding.
"""

from __future__ import annotations

import base64
import binascii
import io

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from qrapi.errors import ProcessingError


def pil_to_cv2(img: Image.Image) -> np.ndarray:
    """Convert a PIL image to an OpenCV BGR ndarray."""
    if img.mode not in ("RGB", "RGBA", "L"):
        img = img.convert("RGB")

    arr = np.array(img)

    if img.mode == "RGBA":
        arr = cv2.cvtColor(arr, cv2.COLOR_RGBA2BGR)
    elif img.mode == "RGB":
        arr = cv2.cvtColor(arr, cv2.COLOR_RGB2BGR)
    elif img.mode == "L":
        arr = cv2.cvtColor(arr, cv2.COLOR_GRAY2BGR)

    return arr


def load_image_bytes(image_bytes: bytes) -> Image.Image:
    """Robust loader from raw bytes → PIL image.

    Raises:
        ProcessingError: If the bytes are not a readable image.
    """
    if not image_bytes:
        raise ProcessingError("Decode failed: empty image")
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise ProcessingError(f"Decode failed: {exc}") from exc
    return img


def strip_data_url(image: str) -> str:
    """'data:image/png;base64,AAAA' -> 'AAAA'; bare base64 is returned as is."""
    image = image.strip()
    if "," in image:
        return image.split(",", 1)[1]
    return image


def base64_to_bytes(image: str) -> bytes:
    try:
        return base64.b64decode(strip_data_url(image))
    except (binascii.Error, ValueError) as exc:
        raise ProcessingError(f"Decode failed: invalid base64 image ({exc})") from exc
