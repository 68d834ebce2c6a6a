# qrapi/errors.py

"""
Error taxonomy shared by the payload engine, the generators and the scanner.

Every error carries the HTTP status the API answers with and a message that
is safe to show to the caller.
"""

from __future__ import annotations

from typing import Iterable


class QRAPIError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(QRAPIError):
    """A required field is missing or malformed."""

    status_code = 400

    def __init__(self, field: str, reason: str):
        super().__init__(reason)
        self.field = field
        self.reason = reason


class InvalidTypeError(QRAPIError):
    status_code = 400

    def __init__(self, kind, valid: Iterable[str]):
        self.kind = kind
        self.valid = tuple(valid)
        super().__init__(f'Invalid type "{kind}". Valid: {", ".join(self.valid)}')


class DecodeNotFound(QRAPIError):
    """The image was read but holds no QR symbol."""

    status_code = 422

    def __init__(
        self,
        message: str = "No QR code found in the image. "
        "Make sure the image is clear and contains a QR code.",
    ):
        super().__init__(message)


class ProcessingError(QRAPIError):
    """Collaborator failure or unreadable input."""

    status_code = 500
