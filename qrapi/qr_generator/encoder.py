# qrapi/qr_generator/encoder.py

"""Render payload text into QR images with the `qrcode` package."""

from __future__ import annotations

import base64
from io import BytesIO
from typing import Type, Union

import qrcode
from qrcode.image.svg import SvgPathImage
from PIL import Image

from .options import RenderOptions

_ERROR_CORRECTION = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


def _build_matrix(text: str, options: RenderOptions) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        error_correction=_ERROR_CORRECTION[options.error_correction],
        box_size=10,
        border=options.margin,
    )
    qr.add_data(text)
    qr.make(fit=True)
    return qr


def render_png(text: str, options: RenderOptions) -> bytes:
    """Render a square PNG `options.width` pixels wide.

    A symbol with more modules than `options.width` is drawn at one pixel per
    module instead, so the image comes out wider than requested.

    Raises:
        ValueError: If a colour cannot be parsed.
        qrcode.exceptions.DataOverflowError: If the text exceeds QR capacity.
    """
    qr = _build_matrix(text, options)

    # Smallest whole module size that reaches the requested width.
    modules = qr.modules_count + 2 * options.margin
    qr.box_size = max(1, -(-options.width // modules))

    qr_image = qr.make_image(
        fill_color=f"#{options.dark_color}",
        back_color=f"#{options.light_color}",
    )
    qr_image = qr_image.convert("RGB")
    # Never shrink below one pixel per module.
    if modules <= options.width and qr_image.size != (options.width, options.width):
        qr_image = qr_image.resize((options.width, options.width), Image.Resampling.NEAREST)

    output = BytesIO()
    qr_image.save(output, format="PNG")
    return output.getvalue()


def png_width(png: bytes) -> int:
    with Image.open(BytesIO(png)) as image:
        return image.width


def _svg_factory(options: RenderOptions) -> Type[SvgPathImage]:
    style = dict(SvgPathImage.QR_PATH_STYLE, fill=f"#{options.dark_color}")
    return type(
        "ColoredSvgPathImage",
        (SvgPathImage,),
        {"QR_PATH_STYLE": style, "background": f"#{options.light_color}"},
    )


def render_svg(text: str, options: RenderOptions) -> str:
    qr = _build_matrix(text, options)
    svg_image = qr.make_image(image_factory=_svg_factory(options))
    return svg_image.to_string(encoding="unicode")


def render(text: str, options: RenderOptions) -> Union[bytes, str]:
    """PNG bytes for the raster formats, SVG markup for `svg`."""
    if options.output_format == "svg":
        return render_svg(text, options)
    return render_png(text, options)


def to_data_url(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
