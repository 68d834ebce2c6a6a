# tests/test_payloads.py
import re

import pytest

from qrapi.errors import InvalidTypeError, ValidationError
from qrapi.payloads import PAYLOAD_TYPES, Payload, build_payload, parse_request

WIFI_GRAMMAR = re.compile(r"^WIFI:T:(WPA|WEP|NOPASS);S:[^;]*;P:[^;]*;H:(true|false);$")


def _error(kind, fields) -> ValidationError:
    with pytest.raises(ValidationError) as info:
        build_payload(kind, fields)
    return info.value


def test_every_type_is_registered():
    assert list(PAYLOAD_TYPES) == [
        "url", "text", "email", "sms", "phone", "wifi",
        "vcard", "upi", "location", "whatsapp", "event",
    ]


def test_unknown_type_lists_valid_set():
    with pytest.raises(InvalidTypeError) as info:
        build_payload("bogus", {})
    assert 'Invalid type "bogus"' in info.value.message
    assert "url, text, email" in info.value.message
    assert info.value.status_code == 400


def test_url_verbatim_and_scheme_check():
    assert build_payload("url", {"url": "https://example.com"}) == Payload(
        text="https://example.com", kind="url"
    )
    error = _error("url", {"url": "ftp://x"})
    assert error.field == "url"
    assert "http://" in error.reason and "https://" in error.reason
    assert _error("url", {}).reason.startswith("url param required")


def test_text_rules():
    assert build_payload("text", {"text": "Hello World"}).text == "Hello World"
    assert _error("text", {"text": "   "}).field == "text"
    assert build_payload("text", {"text": "x" * 2000}).text == "x" * 2000
    assert "Max 2000" in _error("text", {"text": "x" * 2001}).reason


def test_object_and_array_values_are_rejected():
    error = _error("text", {"text": {"a": 1}})
    assert error.field == "text"
    assert "not an object or array" in error.reason
    assert _error("sms", {"phone": "+1", "message": ["hi"]}).field == "message"
    assert build_payload("text", {"text": 42}).text == "42"


def test_email_scenarios():
    assert build_payload("email", {"to": "a@b.com", "subject": "Hi"}).text == (
        "mailto:a@b.com?subject=Hi"
    )
    assert build_payload("email", {"to": "a@b.com", "subject": "", "body": "Yo yo"}).text == (
        "mailto:a@b.com?body=Yo%20yo"
    )
    assert _error("email", {"to": "notanemail"}).field == "to"
    assert _error("email", {}).field == "to"


def test_sms_and_phone():
    assert build_payload("sms", {"phone": "+919876543210"}).text == "sms:+919876543210"
    assert build_payload("sms", {"phone": "123", "message": "hi there"}).text == (
        "sms:123?body=hi%20there"
    )
    assert build_payload("phone", {"phone": "+919876543210"}).text == "tel:+919876543210"
    assert _error("phone", {"phone": ""}).field == "phone"
    assert _error("sms", {}).field == "phone"


@pytest.mark.parametrize(
    "encryption, expected",
    [("WPA", "WPA"), ("wep", "WEP"), ("nopass", "NOPASS"), ("WPA3", "WPA"), (None, "WPA")],
)
def test_wifi_encryption_is_coerced(encryption, expected):
    fields = {"ssid": "Home", "password": "secret"}
    if encryption is not None:
        fields["encryption"] = encryption
    text = build_payload("wifi", fields).text
    assert WIFI_GRAMMAR.match(text)
    assert text == f"WIFI:T:{expected};S:Home;P:secret;H:false;"


def test_wifi_hidden_flag():
    assert build_payload("wifi", {"ssid": "X", "hidden": "true"}).text.endswith("H:true;")
    assert build_payload("wifi", {"ssid": "X", "hidden": True}).text.endswith("H:true;")
    assert build_payload("wifi", {"ssid": "X", "hidden": "no"}).text.endswith("H:false;")
    assert _error("wifi", {"password": "p"}).field == "ssid"


def test_wifi_describe_hides_password():
    request = parse_request("wifi", {"ssid": "Home", "password": "secret"})
    assert request.describe() == {
        "ssid": "Home",
        "encryption": "WPA",
        "hidden": False,
        "password_set": True,
    }


def test_vcard_only_present_fields_and_forced_h():
    request = parse_request("vcard", {"name": "Rahul Sharma", "email": "r@x.in", "org": ""})
    assert request.render() == (
        "BEGIN:VCARD\nVERSION:3.0\nFN:Rahul Sharma\nN:Sharma;Rahul;;\n"
        "EMAIL:r@x.in\nEND:VCARD"
    )
    assert request.forced_error_correction == "H"
    assert _error("vcard", {"phone": "1"}).field == "name"


def test_upi_defaults_currency_and_encodes():
    assert build_payload("upi", {"vpa": "rahul@okicici"}).text == (
        "upi://pay?pa=rahul@okicici&cu=INR"
    )
    assert build_payload(
        "upi",
        {"vpa": "rahul@okicici", "name": "Rahul S", "amount": "499", "currency": "USD", "note": "a b"},
    ).text == "upi://pay?pa=rahul@okicici&pn=Rahul%20S&am=499&cu=USD&tn=a%20b"
    assert _error("upi", {"vpa": "rahul"}).field == "vpa"


def test_upi_describe_amount_any():
    assert parse_request("upi", {"vpa": "a@b"}).describe()["amount"] == "any"


def test_location_scenarios():
    assert build_payload("location", {"lat": "28.6139", "lng": "77.2090"}).text == (
        "geo:28.6139,77.209"
    )
    assert build_payload("location", {"lat": 0, "lng": -0.5}).text == "geo:0,-0.5"
    assert build_payload("location", {"lat": "0.00001", "lng": "0.00005"}).text == (
        "geo:0.00001,0.00005"
    )
    assert build_payload(
        "location", {"lat": "28.6139", "lng": "77.2090", "label": "India Gate"}
    ).text == "https://maps.google.com?q=28.6139,77.209&label=India%20Gate"

    error = _error("location", {"lat": "91", "lng": "0"})
    assert error.field == "lat"
    assert "latitude" in error.reason and "-90" in error.reason

    assert _error("location", {"lat": "0", "lng": "181"}).field == "lng"
    assert "valid numbers" in _error("location", {"lat": "north", "lng": "1"}).reason
    assert "valid numbers" in _error("location", {"lat": "nan", "lng": "1"}).reason
    assert _error("location", {"lat": "1"}).field == "lng"


def test_whatsapp_strips_non_digits():
    assert build_payload("whatsapp", {"phone": "+91 98765-43210"}).text == (
        "https://wa.me/919876543210"
    )
    assert build_payload("whatsapp", {"phone": "1555", "message": "Hello there"}).text == (
        "https://wa.me/1555?text=Hello%20there"
    )
    assert parse_request("whatsapp", {"phone": "+1 555"}).describe()["phone"] == "+1555"
    assert _error("whatsapp", {"phone": "call me"}).field == "phone"


def test_event_block():
    text = build_payload(
        "event", {"title": "Launch", "start": "20240115T100000", "location": "HQ"}
    ).text
    assert text == (
        "BEGIN:VCALENDAR\nVERSION:2.0\nBEGIN:VEVENT\nSUMMARY:Launch\n"
        "DTSTART:20240115T100000\nLOCATION:HQ\nEND:VEVENT\nEND:VCALENDAR"
    )
    assert _error("event", {"title": "Launch"}).field == "start"
    assert _error("event", {"start": "20240115T100000"}).field == "title"


def test_required_checks_run_before_format_checks():
    # Missing lng reported even though lat is also out of range.
    assert "required" in _error("location", {"lat": "500"}).reason
