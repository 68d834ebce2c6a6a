"""QR Code Generator & Decoder API."""

__version__ = "1.0.0"
