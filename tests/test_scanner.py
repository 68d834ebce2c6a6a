# tests/test_scanner.py
import base64

import pytest

from qrapi.errors import DecodeNotFound, ProcessingError, ValidationError
from qrapi.qr_scanner import decode_base64_image, decode_image_bytes
from qrapi.qr_scanner.qr_utils import strip_data_url


def test_text_round_trip(qr_png):
    original = "Hello QR round trip 123"
    result = decode_image_bytes(qr_png(original))
    assert result.text == original
    assert (result.width, result.height) == (400, 400)


def test_corners_are_named_and_ordered(qr_png):
    corners = decode_image_bytes(qr_png("corner check")).corners
    assert corners.top_left.x < corners.top_right.x
    assert corners.top_left.y < corners.bottom_left.y
    assert corners.bottom_left.x < corners.bottom_right.x
    assert set(corners.to_dict()) == {"top_left", "top_right", "bottom_left", "bottom_right"}


def test_blank_image_is_not_found(blank_png):
    with pytest.raises(DecodeNotFound) as info:
        decode_image_bytes(blank_png)
    assert info.value.status_code == 422


@pytest.mark.parametrize("data", [b"definitely not an image", b""])
def test_unreadable_bytes_are_processing_errors(data):
    with pytest.raises(ProcessingError) as info:
        decode_image_bytes(data)
    assert info.value.status_code == 500


def test_strip_data_url():
    assert strip_data_url("data:image/png;base64,QUJD") == "QUJD"
    assert strip_data_url("QUJD") == "QUJD"


def test_base64_and_data_url_inputs(qr_png):
    encoded = base64.b64encode(qr_png("https://example.com")).decode()
    assert decode_base64_image(encoded).text == "https://example.com"
    assert decode_base64_image("data:image/png;base64," + encoded).text == "https://example.com"


def test_base64_size_limit(qr_png):
    encoded = base64.b64encode(qr_png("big")).decode()
    with pytest.raises(ValidationError):
        decode_base64_image(encoded, max_bytes=10)


def test_invalid_base64_is_processing_error():
    with pytest.raises(ProcessingError):
        decode_base64_image("abc")
