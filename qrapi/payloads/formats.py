# qrapi/payloads/formats.py

"""
Wire grammars for every QR payload type.

Each function takes already-validated values and returns the exact text that
ends up inside the QR symbol. Nothing here validates or raises; optional
parts are omitted when their value is empty.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from urllib.parse import quote

# Same unreserved set as JavaScript's encodeURIComponent.
_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_COMPONENT_SAFE)


def _query(pairs: List[tuple]) -> str:
    present = [f"{key}={value}" for key, value in pairs if value]
    return "?" + "&".join(present) if present else ""


# ---------------------------------------------------------
# URI STYLE
# ---------------------------------------------------------
def mailto_uri(to: str, subject: str = "", body: str = "") -> str:
    params = _query(
        [
            ("subject", encode_component(subject) if subject else ""),
            ("body", encode_component(body) if body else ""),
        ]
    )
    return f"mailto:{to}{params}"


def sms_uri(phone: str, message: str = "") -> str:
    if message:
        return f"sms:{phone}?body={encode_component(message)}"
    return f"sms:{phone}"


def tel_uri(phone: str) -> str:
    return f"tel:{phone}"


def whatsapp_url(digits: str, message: str = "") -> str:
    if message:
        return f"https://wa.me/{digits}?text={encode_component(message)}"
    return f"https://wa.me/{digits}"


def upi_uri(
    vpa: str,
    name: str = "",
    amount: str = "",
    currency: Optional[str] = None,
    note: str = "",
) -> str:
    uri = f"upi://pay?pa={vpa}"
    if name:
        uri += f"&pn={encode_component(name)}"
    if amount:
        uri += f"&am={amount}"
    if currency:
        uri += f"&cu={currency}"
    if note:
        uri += f"&tn={encode_component(note)}"
    return uri


def format_coordinate(value: float) -> str:
    """Shortest plain decimal: 77.2090 -> '77.209', 91.0 -> '91', 1e-05 -> '0.00001'."""
    if value.is_integer():
        return str(int(value))
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def geo_uri(lat: float, lng: float) -> str:
    return f"geo:{format_coordinate(lat)},{format_coordinate(lng)}"


def maps_url(lat: float, lng: float, label: str) -> str:
    return (
        f"https://maps.google.com?q={format_coordinate(lat)},{format_coordinate(lng)}"
        f"&label={encode_component(label)}"
    )


# ---------------------------------------------------------
# KEY/VALUE BLOCKS
# ---------------------------------------------------------
def wifi_config(ssid: str, password: str, encryption: str, hidden: bool) -> str:
    return f"WIFI:T:{encryption};S:{ssid};P:{password};H:{'true' if hidden else 'false'};"


def vcard(
    name: str,
    phone: str = "",
    email: str = "",
    org: str = "",
    title: str = "",
    url: str = "",
    address: str = "",
    note: str = "",
) -> str:
    """vCard 3.0 contact; N lists the name tokens last-to-first."""
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{name}",
        f"N:{';'.join(reversed(name.split(' ')))};;",
    ]
    optional = [
        ("TEL;TYPE=CELL:{}", phone),
        ("EMAIL:{}", email),
        ("ORG:{}", org),
        ("TITLE:{}", title),
        ("URL:{}", url),
        ("ADR:;;{};;;;", address),
        ("NOTE:{}", note),
    ]
    for template, value in optional:
        if value:
            lines.append(template.format(value))
    lines.append("END:VCARD")
    return "\n".join(lines)


def vevent(
    title: str,
    start: str,
    end: str = "",
    location: str = "",
    description: str = "",
) -> str:
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "BEGIN:VEVENT",
        f"SUMMARY:{title}",
        f"DTSTART:{start}",
    ]
    if end:
        lines.append(f"DTEND:{end}")
    if location:
        lines.append(f"LOCATION:{location}")
    if description:
        lines.append(f"DESCRIPTION:{description}")
    lines.extend(["END:VEVENT", "END:VCALENDAR"])
    return "\n".join(lines)
