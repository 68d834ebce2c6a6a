# qrapi/payloads/__init__.py

"""
Payload construction & validation engine.

Exposes:

    build_payload(kind: str, fields: Mapping) -> Payload
    parse_request(kind: str, fields: Mapping, bulk: bool = False) -> PayloadRequest

`PAYLOAD_TYPES` maps each accepted type name to its request variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Type

from qrapi.errors import InvalidTypeError
from .requests import (
    EmailRequest,
    EventRequest,
    LocationRequest,
    PayloadRequest,
    PhoneRequest,
    SmsRequest,
    TextRequest,
    UpiRequest,
    UrlRequest,
    VCardRequest,
    WhatsAppRequest,
    WifiRequest,
)

PAYLOAD_TYPES: Dict[str, Type[PayloadRequest]] = {
    variant.kind: variant
    for variant in (
        UrlRequest,
        TextRequest,
        EmailRequest,
        SmsRequest,
        PhoneRequest,
        WifiRequest,
        VCardRequest,
        UpiRequest,
        LocationRequest,
        WhatsAppRequest,
        EventRequest,
    )
}


@dataclass(frozen=True)
class Payload:
    text: str
    kind: str


def resolve_type(kind: Any) -> Type[PayloadRequest]:
    variant = PAYLOAD_TYPES.get(kind) if isinstance(kind, str) else None
    if variant is None:
        raise InvalidTypeError(kind, PAYLOAD_TYPES)
    return variant


def parse_request(kind: Any, fields: Mapping[str, Any], bulk: bool = False) -> PayloadRequest:
    variant = resolve_type(kind)
    return variant.parse_bulk(fields) if bulk else variant.parse(fields)


def build_payload(kind: Any, fields: Mapping[str, Any]) -> Payload:
    request = parse_request(kind, fields)
    return Payload(text=request.render(), kind=request.kind)


__all__ = [
    "PAYLOAD_TYPES",
    "Payload",
    "PayloadRequest",
    "build_payload",
    "parse_request",
    "resolve_type",
]
