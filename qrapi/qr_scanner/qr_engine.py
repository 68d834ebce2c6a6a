# qrapi/qr_scanner/qr_engine.py

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import cv2
import numpy as np

from qrapi.errors import DecodeNotFound, ProcessingError, ValidationError
from .qr_utils import base64_to_bytes, load_image_bytes, pil_to_cv2

logger = logging.getLogger("qrapi")


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class QRCorners:
    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point

    @classmethod
    def from_polygon(cls, polygon: List[List[float]]) -> "QRCorners":
        # OpenCV orders the vertices TL, TR, BR, BL.
        tl, tr, br, bl = (Point(round(float(x), 2), round(float(y), 2)) for x, y in polygon[:4])
        return cls(top_left=tl, top_right=tr, bottom_left=bl, bottom_right=br)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            "top_left": self.top_left.to_dict(),
            "top_right": self.top_right.to_dict(),
            "bottom_left": self.bottom_left.to_dict(),
            "bottom_right": self.bottom_right.to_dict(),
        }


@dataclass(frozen=True)
class DecodedResult:
    text: str
    corners: QRCorners
    width: int
    height: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "decoded_text": self.text,
            "qr_location": self.corners.to_dict(),
            "image_info": {"width_px": self.width, "height_px": self.height},
        }


# ---------------------------------------------------------
# QR DECODING
# ---------------------------------------------------------
def decode_qr_opencv(img: np.ndarray) -> Optional[Dict[str, Any]]:
    """Return the first QR symbol found as {"data", "points"}, or None."""
    detector = cv2.QRCodeDetector()

    try:
        txt, pts, _ = detector.detectAndDecode(img)
    except cv2.error as exc:
        raise ProcessingError(f"Decode failed: {exc}") from exc

    if txt and pts is not None:
        return {"data": txt, "points": pts.reshape(-1, 2).tolist()}

    # Multi fallback; only the first decoded symbol is reported
    try:
        ret, data, points, _ = detector.detectAndDecodeMulti(img)
    except cv2.error:
        logger.debug(json.dumps({"event": "qr_multi_detect_failed"}))
        return None

    if ret and data and points is not None:
        for i, txt in enumerate(data):
            if txt:
                return {"data": txt, "points": points[i].reshape(-1, 2).tolist()}

    return None


# ---------------------------------------------------------
# MAIN ENTRY
# ---------------------------------------------------------
def decode_image_bytes(image_bytes: bytes) -> DecodedResult:
    """
    Decode the primary QR symbol in an image.

    Raises:
        ProcessingError: The bytes are not a readable image.
        DecodeNotFound: The image was read but holds no QR symbol.
    """
    pil_img = load_image_bytes(image_bytes)
    width, height = pil_img.size
    img = pil_to_cv2(pil_img)

    qr = decode_qr_opencv(img)
    if qr is None:
        logger.info(json.dumps({"event": "qr_not_found", "width": width, "height": height}))
        raise DecodeNotFound()

    logger.info(json.dumps({"event": "qr_decoded", "chars": len(qr["data"])}))
    return DecodedResult(
        text=qr["data"],
        corners=QRCorners.from_polygon(qr["points"]),
        width=width,
        height=height,
    )


def decode_base64_image(image: str, max_bytes: Optional[int] = None) -> DecodedResult:
    """Same as decode_image_bytes, for a base64 string or data URL."""
    image_bytes = base64_to_bytes(image)
    if max_bytes is not None and len(image_bytes) > max_bytes:
        raise ValidationError(
            "image", f"Image too large. Maximum {max_bytes // (1024 * 1024)}MB allowed."
        )
    return decode_image_bytes(image_bytes)
