# qrapi/qr_generator/__init__.py

"""
QR generation package.

Exposes:

    generate(kind, fields, raw_options) -> dict
    run_batch(items, raw_options) -> BatchReport
    normalize_options(raw) -> RenderOptions
"""

from .bulk import BatchEntry, BatchReport, run_batch
from .options import RenderOptions, normalize_options
from .pipeline import generate
