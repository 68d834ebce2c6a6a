# tests/conftest.py
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from qrapi.main import app
from qrapi.qr_generator.encoder import render_png
from qrapi.qr_generator.options import normalize_options


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def qr_png():
    def _make(text: str) -> bytes:
        return render_png(text, normalize_options({"size": 400, "margin": 4}))

    return _make


@pytest.fixture
def blank_png() -> bytes:
    output = io.BytesIO()
    Image.new("RGB", (240, 240), "white").save(output, format="PNG")
    return output.getvalue()
