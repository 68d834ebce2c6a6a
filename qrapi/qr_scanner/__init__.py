# qrapi/qr_scanner/__init__.py

"""
QR decoding package.

Exposes:

    decode_image_bytes(image_bytes: bytes) -> DecodedResult
    decode_base64_image(image: str) -> DecodedResult

Both raise DecodeNotFound when the image holds no QR code and
ProcessingError when the image cannot be read at all.
"""

from .qr_engine import DecodedResult, Point, QRCorners, decode_base64_image, decode_image_bytes
