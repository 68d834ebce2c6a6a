# qrapi/qr_generator/bulk.py

"""
Bulk QR generation.

Every item is turned into exactly one BatchEntry, success or failure, so the
report always has one entry per input item, in input order. A failing item
never affects its siblings.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from qrapi.errors import InvalidTypeError, QRAPIError, ValidationError
from qrapi.payloads import PAYLOAD_TYPES, parse_request
from qrapi.settings import BULK_WORKERS, MAX_BULK_ITEMS
from . import encoder
from .options import RenderOptions, normalize_options
from .pipeline import encode, options_for

logger = logging.getLogger("qrapi")

BULK_DEFAULT_SIZE = 200
BULK_OPTION_KEYS = ("size", "format", "error_correction")


@dataclass(frozen=True)
class BatchEntry:
    index: int
    success: bool
    kind: Optional[str] = None
    qr: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"index": self.index, "success": self.success}
        if self.kind is not None:
            entry["type"] = self.kind
        if self.success:
            entry["qr"] = self.qr
        else:
            entry["error"] = self.error
        return entry


@dataclass(frozen=True)
class BatchReport:
    entries: Tuple[BatchEntry, ...]

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def success_count(self) -> int:
        return sum(1 for entry in self.entries if entry.success)

    @property
    def failed_count(self) -> int:
        return self.total - self.success_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "total": self.total,
            "success_count": self.success_count,
            "failed_count": self.failed_count,
            "data": [entry.to_dict() for entry in self.entries],
        }


def validate_items(items: Any) -> List[Any]:
    if not isinstance(items, list) or not items:
        raise ValidationError(
            "items",
            'Provide items array. Example: { "items": '
            '[{ "type": "url", "data": { "url": "https://google.com" } }] }',
        )
    if len(items) > MAX_BULK_ITEMS:
        raise ValidationError("items", f"Maximum {MAX_BULK_ITEMS} QR codes per bulk request.")
    return items


def bulk_options(raw_options: Optional[Mapping[str, Any]] = None) -> RenderOptions:
    """Shared options for a batch; only size, format and error correction apply."""
    raw: Dict[str, Any] = {"size": BULK_DEFAULT_SIZE}
    for key in BULK_OPTION_KEYS:
        value = (raw_options or {}).get(key)
        if value is not None:
            raw[key] = value
    return normalize_options(raw)


def process_item(index: int, item: Any, options: RenderOptions) -> BatchEntry:
    kind = item.get("type") if isinstance(item, Mapping) else None
    if not isinstance(kind, str) or kind not in PAYLOAD_TYPES:
        error = InvalidTypeError(kind, PAYLOAD_TYPES)
        return BatchEntry(index=index, success=False, error=error.message)

    try:
        fields = item.get("data")
        if fields is None:
            fields = {}
        if not isinstance(fields, Mapping):
            raise ValidationError("data", "data must be an object of fields")

        request = parse_request(kind, fields, bulk=True)
        item_options = options_for(request, options)
        rendered = encode(request.render(), item_options)
        if item_options.output_format != "svg":
            rendered = encoder.to_data_url(rendered)
        return BatchEntry(index=index, success=True, kind=kind, qr=rendered)
    except Exception as exc:
        message = exc.message if isinstance(exc, QRAPIError) else str(exc)
        logger.warning(
            json.dumps(
                {"event": "bulk_item_failed", "index": index, "type": kind, "error": message}
            )
        )
        return BatchEntry(index=index, success=False, kind=kind, error=message)


def run_batch(
    items: Any,
    raw_options: Optional[Mapping[str, Any]] = None,
) -> BatchReport:
    """Generate one QR per item.

    Raises:
        ValidationError: If `items` is not a list of 1 to 50 entries. No
            partial report is produced in that case.
    """
    items = validate_items(items)
    options = bulk_options(raw_options)

    def _run(pair: Tuple[int, Any]) -> BatchEntry:
        return process_item(pair[0], pair[1], options)

    workers = min(BULK_WORKERS, len(items))
    if workers <= 1:
        entries: Sequence[BatchEntry] = [_run(pair) for pair in enumerate(items)]
    else:
        # map() yields in submission order regardless of completion order
        with ThreadPoolExecutor(max_workers=workers) as executor:
            entries = list(executor.map(_run, enumerate(items)))

    report = BatchReport(entries=tuple(entries))
    logger.info(
        json.dumps(
            {
                "event": "bulk_completed",
                "total": report.total,
                "success_count": report.success_count,
                "failed_count": report.failed_count,
            }
        )
    )
    return report
