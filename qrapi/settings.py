# qrapi/settings.py

from __future__ import annotations

import os

from qrapi import __version__

API_VERSION = __version__

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SENTRY_DSN = os.getenv("SENTRY_DSN", "")
SENTRY_TRACES_SAMPLE_RATE = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.2"))

# Comma-separated list; "*" allows any origin.
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
]

MAX_BODY_BYTES = int(os.getenv("MAX_BODY_BYTES", str(10 * 1024 * 1024)))
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))

BULK_WORKERS = int(os.getenv("BULK_WORKERS", "4"))

MAX_BULK_ITEMS = 50
MAX_TEXT_LENGTH = 2000
