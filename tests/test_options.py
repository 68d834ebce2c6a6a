# tests/test_options.py
import pytest

from qrapi.qr_generator.options import RenderOptions, normalize_options


def test_defaults_when_nothing_given():
    assert normalize_options({}) == RenderOptions(
        width=300,
        margin=2,
        dark_color="000000",
        light_color="ffffff",
        error_correction="M",
        output_format="png",
    )
    assert normalize_options(None) == normalize_options({})


@pytest.mark.parametrize(
    "size, expected",
    [("50", 100), ("99", 100), ("5000", 2000), ("2001", 2000), ("-20", 100), ("450", 450)],
)
def test_width_is_clamped(size, expected):
    assert normalize_options({"size": size}).width == expected


@pytest.mark.parametrize("size", ["abc", "", "px300", None, True])
def test_unparsable_width_defaults_to_300(size):
    assert normalize_options({"size": size}).width == 300


def test_width_parses_leading_integer():
    assert normalize_options({"size": "250px"}).width == 250
    assert normalize_options({"size": "320.9"}).width == 320
    assert normalize_options({"size": 640.5}).width == 640


def test_margin_parsing_and_clamping():
    assert normalize_options({"margin": "0"}).margin == 0
    assert normalize_options({"margin": "25"}).margin == 10
    assert normalize_options({"margin": "-3"}).margin == 0
    assert normalize_options({"margin": "wide"}).margin == 2


def test_colors_lose_leading_hash_only():
    options = normalize_options({"color": "#1a1a2e", "bg_color": "##fafafa"})
    assert options.dark_color == "1a1a2e"
    assert options.light_color == "fafafa"
    # malformed colours pass through untouched
    assert normalize_options({"color": "not-a-color"}).dark_color == "not-a-color"


def test_error_correction_is_case_insensitive_with_fallback():
    assert normalize_options({"error_correction": "h"}).error_correction == "H"
    assert normalize_options({"error_correction": "Q"}).error_correction == "Q"
    assert normalize_options({"error_correction": "X"}).error_correction == "M"


def test_output_format_is_case_insensitive_with_fallback():
    assert normalize_options({"format": "SVG"}).output_format == "svg"
    assert normalize_options({"format": "Base64"}).output_format == "base64"
    assert normalize_options({"format": "jpeg"}).output_format == "png"


def test_with_error_correction_returns_copy():
    options = normalize_options({"error_correction": "L"})
    forced = options.with_error_correction("H")
    assert forced.error_correction == "H"
    assert options.error_correction == "L"
    assert forced.width == options.width
