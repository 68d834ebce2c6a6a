# qrapi/payloads/requests.py

"""
Typed payload requests, one variant per QR type.

`parse` turns a loose field bag (query string or JSON object) into a variant,
running every required-field check before any format check. Once a variant
exists, `render` cannot fail.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple

from qrapi.errors import ValidationError
from qrapi.payloads import formats
from qrapi.settings import MAX_TEXT_LENGTH

WIFI_ENCRYPTIONS = ("WPA", "WEP", "NOPASS")
DEFAULT_UPI_CURRENCY = "INR"

_NON_DIGITS = re.compile(r"[^0-9]")


# ---------------------------------------------------------
# FIELD HELPERS
# ---------------------------------------------------------
def _text(fields: Mapping[str, Any], key: str, default: str = "") -> str:
    value = fields.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple, set)):
        raise ValidationError(
            key, f"{key} must be a text or number value, not an object or array"
        )
    return str(value)


def _required(fields: Mapping[str, Any], key: str, message: str) -> str:
    value = _text(fields, key)
    if not value:
        raise ValidationError(key, message)
    return value


def _flag(fields: Mapping[str, Any], key: str) -> bool:
    value = fields.get(key)
    if isinstance(value, bool):
        return value
    return _text(fields, key).strip().lower() == "true"


def _coordinate(raw: str, field: str) -> float:
    try:
        value = float(raw.strip())
    except ValueError:
        raise ValidationError(field, "lat and lng must be valid numbers")
    if not math.isfinite(value):
        raise ValidationError(field, "lat and lng must be valid numbers")
    return value


# ---------------------------------------------------------
# VARIANTS
# ---------------------------------------------------------
@dataclass(frozen=True)
class PayloadRequest:
    kind: ClassVar[str] = ""
    label: ClassVar[str] = ""
    info: ClassVar[Optional[str]] = None
    format_tip: ClassVar[Optional[str]] = None
    forced_error_correction: ClassVar[Optional[str]] = None
    # Reduced field set read in bulk mode; None means every field.
    bulk_fields: ClassVar[Optional[Tuple[str, ...]]] = None

    @classmethod
    def parse(cls, fields: Mapping[str, Any]) -> "PayloadRequest":
        raise NotImplementedError

    @classmethod
    def parse_bulk(cls, fields: Mapping[str, Any]) -> "PayloadRequest":
        if cls.bulk_fields is None:
            return cls.parse(fields)
        return cls.parse({key: fields.get(key) for key in cls.bulk_fields})

    def render(self) -> str:
        raise NotImplementedError

    def describe(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class UrlRequest(PayloadRequest):
    url: str

    kind: ClassVar[str] = "url"
    label: ClassVar[str] = "url"

    @classmethod
    def parse(cls, fields):
        url = _required(fields, "url", "url param required. Example: ?url=https://example.com")
        if not url.startswith(("http://", "https://")):
            raise ValidationError("url", "URL must start with http:// or https://")
        return cls(url=url)

    def render(self) -> str:
        return self.url

    def describe(self):
        return {"url": self.url}


@dataclass(frozen=True)
class TextRequest(PayloadRequest):
    text: str

    kind: ClassVar[str] = "text"
    label: ClassVar[str] = "text"

    @classmethod
    def parse(cls, fields):
        text = _text(fields, "text")
        if not text.strip():
            raise ValidationError("text", "text param required. Example: ?text=Hello+World")
        if len(text) > MAX_TEXT_LENGTH:
            raise ValidationError("text", f"Text too long. Max {MAX_TEXT_LENGTH} characters.")
        return cls(text=text)

    def render(self) -> str:
        return self.text

    def describe(self):
        return {"text": self.text, "char_count": len(self.text)}


@dataclass(frozen=True)
class EmailRequest(PayloadRequest):
    to: str
    subject: str = ""
    body: str = ""

    kind: ClassVar[str] = "email"
    label: ClassVar[str] = "email"

    @classmethod
    def parse(cls, fields):
        to = _required(fields, "to", "to param required. Example: ?to=user@example.com")
        if "@" not in to:
            raise ValidationError("to", "Invalid email address in 'to'")
        return cls(to=to, subject=_text(fields, "subject"), body=_text(fields, "body"))

    def render(self) -> str:
        return formats.mailto_uri(self.to, self.subject, self.body)

    def describe(self):
        return {"to": self.to, "subject": self.subject, "body": self.body}


@dataclass(frozen=True)
class SmsRequest(PayloadRequest):
    phone: str
    message: str = ""

    kind: ClassVar[str] = "sms"
    label: ClassVar[str] = "sms"

    @classmethod
    def parse(cls, fields):
        phone = _required(fields, "phone", "phone param required. Example: ?phone=+919876543210")
        return cls(phone=phone, message=_text(fields, "message"))

    def render(self) -> str:
        return formats.sms_uri(self.phone, self.message)

    def describe(self):
        return {"phone": self.phone, "message": self.message}


@dataclass(frozen=True)
class PhoneRequest(PayloadRequest):
    phone: str

    kind: ClassVar[str] = "phone"
    label: ClassVar[str] = "phone"

    @classmethod
    def parse(cls, fields):
        return cls(
            phone=_required(fields, "phone", "phone param required. Example: ?phone=+919876543210")
        )

    def render(self) -> str:
        return formats.tel_uri(self.phone)

    def describe(self):
        return {"phone": self.phone}


@dataclass(frozen=True)
class WifiRequest(PayloadRequest):
    ssid: str
    password: str = ""
    encryption: str = "WPA"
    hidden: bool = False

    kind: ClassVar[str] = "wifi"
    label: ClassVar[str] = "wifi"
    info: ClassVar[Optional[str]] = "Scan with phone camera to connect automatically"
    bulk_fields: ClassVar[Optional[Tuple[str, ...]]] = ("ssid", "password", "encryption")

    @classmethod
    def parse(cls, fields):
        ssid = _required(
            fields, "ssid", "ssid param required. Example: ?ssid=MyNetwork&password=mypass"
        )
        encryption = _text(fields, "encryption", "WPA").upper()
        if encryption not in WIFI_ENCRYPTIONS:
            encryption = "WPA"
        return cls(
            ssid=ssid,
            password=_text(fields, "password"),
            encryption=encryption,
            hidden=_flag(fields, "hidden"),
        )

    def render(self) -> str:
        return formats.wifi_config(self.ssid, self.password, self.encryption, self.hidden)

    def describe(self):
        return {
            "ssid": self.ssid,
            "encryption": self.encryption,
            "hidden": self.hidden,
            "password_set": len(self.password) > 0,
        }


@dataclass(frozen=True)
class VCardRequest(PayloadRequest):
    name: str
    phone: str = ""
    email: str = ""
    org: str = ""
    title: str = ""
    url: str = ""
    address: str = ""
    note: str = ""

    kind: ClassVar[str] = "vcard"
    label: ClassVar[str] = "vcard"
    info: ClassVar[Optional[str]] = "Scan to add contact directly to phone"
    forced_error_correction: ClassVar[Optional[str]] = "H"
    bulk_fields: ClassVar[Optional[Tuple[str, ...]]] = ("name", "phone", "email", "org")

    @classmethod
    def parse(cls, fields):
        name = _required(
            fields, "name", "name param required. Example: ?name=Rahul+Sharma&phone=+919876543210"
        )
        return cls(
            name=name,
            phone=_text(fields, "phone"),
            email=_text(fields, "email"),
            org=_text(fields, "org"),
            title=_text(fields, "title"),
            url=_text(fields, "url"),
            address=_text(fields, "address"),
            note=_text(fields, "note"),
        )

    def render(self) -> str:
        return formats.vcard(
            self.name,
            phone=self.phone,
            email=self.email,
            org=self.org,
            title=self.title,
            url=self.url,
            address=self.address,
            note=self.note,
        )

    def describe(self):
        return {
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "org": self.org,
            "title": self.title,
            "url": self.url,
        }


@dataclass(frozen=True)
class UpiRequest(PayloadRequest):
    vpa: str
    name: str = ""
    amount: str = ""
    currency: Optional[str] = DEFAULT_UPI_CURRENCY
    note: str = ""

    kind: ClassVar[str] = "upi"
    label: ClassVar[str] = "upi"
    info: ClassVar[Optional[str]] = "Scan with any UPI app (GPay, PhonePe, Paytm, etc.)"
    bulk_fields: ClassVar[Optional[Tuple[str, ...]]] = ("vpa", "name", "amount")

    @classmethod
    def parse(cls, fields):
        vpa = _required(
            fields, "vpa", "vpa param required. Example: ?vpa=rahul@okicici&name=Rahul&amount=100"
        )
        if "@" not in vpa:
            raise ValidationError("vpa", "Invalid UPI VPA. Must contain @ (e.g. user@okicici)")
        return cls(
            vpa=vpa,
            name=_text(fields, "name"),
            amount=_text(fields, "amount"),
            currency=_text(fields, "currency", DEFAULT_UPI_CURRENCY),
            note=_text(fields, "note"),
        )

    @classmethod
    def parse_bulk(cls, fields):
        # Bulk items carry no currency; it is only stated next to an amount.
        request = super().parse_bulk(fields)
        currency = DEFAULT_UPI_CURRENCY if request.amount else None
        return cls(vpa=request.vpa, name=request.name, amount=request.amount, currency=currency)

    def render(self) -> str:
        return formats.upi_uri(self.vpa, self.name, self.amount, self.currency, self.note)

    def describe(self):
        return {
            "vpa": self.vpa,
            "name": self.name,
            "amount": self.amount or "any",
            "currency": self.currency,
            "note": self.note,
        }


@dataclass(frozen=True)
class LocationRequest(PayloadRequest):
    lat: float
    lng: float
    label_text: str = ""

    kind: ClassVar[str] = "location"
    label: ClassVar[str] = "location"
    info: ClassVar[Optional[str]] = "Scan to open location in maps app"
    bulk_fields: ClassVar[Optional[Tuple[str, ...]]] = ("lat", "lng")

    @classmethod
    def parse(cls, fields):
        raw_lat, raw_lng = _text(fields, "lat"), _text(fields, "lng")
        if not raw_lat or not raw_lng:
            raise ValidationError(
                "lat" if not raw_lat else "lng",
                "lat and lng required. Example: ?lat=28.6139&lng=77.2090",
            )
        lat = _coordinate(raw_lat, "lat")
        lng = _coordinate(raw_lng, "lng")
        if not -90 <= lat <= 90:
            raise ValidationError("lat", "lat (latitude) must be between -90 and 90")
        if not -180 <= lng <= 180:
            raise ValidationError("lng", "lng (longitude) must be between -180 and 180")
        return cls(lat=lat, lng=lng, label_text=_text(fields, "label"))

    def render(self) -> str:
        if self.label_text:
            return formats.maps_url(self.lat, self.lng, self.label_text)
        return formats.geo_uri(self.lat, self.lng)

    def describe(self):
        return {"latitude": self.lat, "longitude": self.lng, "label": self.label_text}


@dataclass(frozen=True)
class WhatsAppRequest(PayloadRequest):
    digits: str
    message: str = ""

    kind: ClassVar[str] = "whatsapp"
    label: ClassVar[str] = "whatsapp"
    info: ClassVar[Optional[str]] = "Scan to open WhatsApp chat directly"

    @classmethod
    def parse(cls, fields):
        phone = _required(
            fields, "phone", "phone required. Example: ?phone=+919876543210&message=Hello"
        )
        digits = _NON_DIGITS.sub("", phone)
        if not digits:
            raise ValidationError("phone", "phone must contain at least one digit")
        return cls(digits=digits, message=_text(fields, "message"))

    def render(self) -> str:
        return formats.whatsapp_url(self.digits, self.message)

    def describe(self):
        return {"phone": f"+{self.digits}", "message": self.message}


@dataclass(frozen=True)
class EventRequest(PayloadRequest):
    title: str
    start: str
    end: str = ""
    location: str = ""
    description: str = ""

    kind: ClassVar[str] = "event"
    label: ClassVar[str] = "calendar_event"
    info: ClassVar[Optional[str]] = "Scan to add event to calendar"
    format_tip: ClassVar[Optional[str]] = (
        "start/end format: YYYYMMDDTHHMMSS (e.g. 20240115T140000)"
    )

    @classmethod
    def parse(cls, fields):
        title, start = _text(fields, "title"), _text(fields, "start")
        if not title or not start:
            raise ValidationError(
                "title" if not title else "start",
                "title and start required. "
                "Example: ?title=Meeting&start=20240115T100000&end=20240115T110000",
            )
        return cls(
            title=title,
            start=start,
            end=_text(fields, "end"),
            location=_text(fields, "location"),
            description=_text(fields, "description"),
        )

    def render(self) -> str:
        return formats.vevent(
            self.title, self.start, self.end, self.location, self.description
        )

    def describe(self):
        return {
            "title": self.title,
            "start": self.start,
            "end": self.end,
            "location": self.location,
            "description": self.description,
        }
