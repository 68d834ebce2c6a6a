# qrapi/qr_generator/pipeline.py

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from qrcode.exceptions import DataOverflowError

from qrapi.errors import ProcessingError
from qrapi.payloads import PayloadRequest, parse_request
from . import encoder
from .options import RenderOptions, normalize_options

logger = logging.getLogger("qrapi")


def options_for(request: PayloadRequest, options: RenderOptions) -> RenderOptions:
    if request.forced_error_correction:
        return options.with_error_correction(request.forced_error_correction)
    return options


def encode(text: str, options: RenderOptions):
    """Call the encoder, surfacing its failures as ProcessingError."""
    try:
        return encoder.render(text, options)
    except (DataOverflowError, ValueError, OSError) as exc:
        raise ProcessingError(f"QR generation failed: {exc}") from exc


def shape_image(rendered, options: RenderOptions) -> Dict[str, Any]:
    if options.output_format == "svg":
        return {"format": "svg", "qr": rendered}
    data_url = encoder.to_data_url(rendered)
    if options.output_format == "png":
        return {
            "format": "png",
            "base64": data_url,
            "image_url_ready": data_url,
            "size_px": encoder.png_width(rendered),
        }
    return {"format": "base64", "qr": data_url}


def prepare(
    kind: Any,
    fields: Mapping[str, Any],
    raw_options: Optional[Mapping[str, Any]] = None,
) -> Tuple[PayloadRequest, RenderOptions]:
    """Validate fields and options without touching the encoder."""
    request = parse_request(kind, fields)
    return request, options_for(request, normalize_options(raw_options))


def generate(
    kind: Any,
    fields: Mapping[str, Any],
    raw_options: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Build, encode and wrap a single QR code.

    Raises:
        InvalidTypeError: If `kind` is not a known payload type.
        ValidationError: If a required field is missing or malformed.
        ProcessingError: If the encoder fails.
    """
    request, options = prepare(kind, fields, raw_options)
    rendered = encode(request.render(), options)

    logger.info(
        json.dumps(
            {
                "event": "qr_generated",
                "type": request.kind,
                "format": options.output_format,
                "error_correction": options.error_correction,
            }
        )
    )

    envelope: Dict[str, Any] = {
        "success": True,
        "type": request.label,
        "input": request.describe(),
    }
    if request.info:
        envelope["info"] = request.info
    if request.format_tip:
        envelope["format_tip"] = request.format_tip
    envelope["qr_options"] = options.to_dict()
    envelope["data"] = shape_image(rendered, options)
    return envelope
