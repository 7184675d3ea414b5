# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/utils/image_utils.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

qrcode and Pillow helpers.
Matrix encoding is delegated to ``qrcode``; raster drawing, resizing and
PNG encoding to ``Pillow``.
"""

# Standard
import base64
from html import escape
from io import BytesIO, StringIO
import logging
import re
from typing import List

# Third-Party
from PIL import Image, ImageOps
import qrcode

# First-Party
from mcp_qr_generator.models import ErrorCorrectionLevel

logger = logging.getLogger(__name__)

EC_MAP = {
    ErrorCorrectionLevel.L: qrcode.constants.ERROR_CORRECT_L,
    ErrorCorrectionLevel.M: qrcode.constants.ERROR_CORRECT_M,
    ErrorCorrectionLevel.Q: qrcode.constants.ERROR_CORRECT_Q,
    ErrorCorrectionLevel.H: qrcode.constants.ERROR_CORRECT_H,
}

SVG_NS = "http://www.w3.org/2000/svg"
_DATA_URI_PREFIX = re.compile(r"^data:[^;,]*(;[^,]*)?,")


def create_qr_matrix(data: str, error_correction: ErrorCorrectionLevel = ErrorCorrectionLevel.M, margin: int = 4) -> qrcode.QRCode:
    """Encode data into a QR code with the smallest fitting version.

    Args:
        data: Text to encode.
        error_correction: Error correction level.
        margin: Quiet zone width in modules.

    Returns:
        qrcode.QRCode: Encoded QR code; ``get_matrix()`` includes the margin.

    Examples:
        >>> qr = create_qr_matrix("hello", margin=0)
        >>> len(qr.get_matrix())
        21
        >>> len(create_qr_matrix("hello", margin=4).get_matrix())
        29
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=EC_MAP[error_correction],
        box_size=1,
        border=margin,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr


def matrix_to_image(matrix: List[List[bool]], size: int, fill_color: str = "#000000", back_color: str = "#ffffff") -> Image.Image:
    """Draw a module matrix as an RGB image with a whole number of pixels per module.

    Modules are drawn at ``size // n`` pixels (at least one) and centered on a
    ``size`` x ``size`` background. When ``size`` is smaller than the module
    count the image is ``n`` x ``n`` so no module is dropped.

    Examples:
        >>> matrix_to_image([[True, False], [False, True]], 5).size
        (5, 5)
        >>> matrix_to_image([[True] * 3] * 3, 2).size
        (3, 3)
    """
    n = len(matrix)
    box = max(1, size // n)
    mask = Image.frombytes("L", (n, n), bytes(0 if cell else 255 for row in matrix for cell in row))
    mask = mask.resize((n * box, n * box), Image.Resampling.NEAREST)
    img = ImageOps.colorize(mask, black=fill_color, white=back_color)
    if n * box >= size:
        return img

    canvas = Image.new("RGB", (size, size), back_color)
    offset = (size - n * box) // 2
    canvas.paste(img, (offset, offset))
    return canvas


def matrix_to_svg(matrix: List[List[bool]], size: int, fill_color: str = "#000000", back_color: str = "#ffffff") -> str:
    """Render a module matrix as an SVG document.

    The viewBox is expressed in modules (margin included) and the rendered
    width/height in pixels.

    Args:
        matrix: Module matrix, margin included.
        size: Rendered width and height.
        fill_color: Dark module color.
        back_color: Light module color.

    Returns:
        str: SVG document.

    Examples:
        >>> svg = matrix_to_svg([[True, False], [False, True]], 100)
        >>> 'viewBox="0 0 2 2"' in svg
        True
        >>> 'd="M0 0h1v1h-1zM1 1h1v1h-1z"' in svg
        True
    """
    n = len(matrix)
    runs = []
    for y, row in enumerate(matrix):
        x = 0
        while x < n:
            if not row[x]:
                x += 1
                continue
            start = x
            while x < n and row[x]:
                x += 1
            width = x - start
            runs.append(f"M{start} {y}h{width}v1h-{width}z")

    return (
        f'<svg xmlns="{SVG_NS}" width="{size}" height="{size}" viewBox="0 0 {n} {n}" shape-rendering="crispEdges">'
        f'<path fill="{escape(back_color)}" d="M0 0h{n}v{n}H0z"/>'
        f'<path fill="{escape(fill_color)}" d="{"".join(runs)}"/>'
        "</svg>\n"
    )


def qr_to_text(qr: qrcode.QRCode, invert: bool = False) -> str:
    """Render a QR code with half-block characters, two module rows per line."""
    buffer = StringIO()
    qr.print_ascii(out=buffer, invert=invert)
    return buffer.getvalue()


def image_to_data_uri(img: Image.Image) -> str:
    """Encode an image as a base64 PNG data URI."""
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return f"data:image/png;base64,{base64.b64encode(buffer.getvalue()).decode('ascii')}"


def strip_data_uri(data: str) -> str:
    """Return the payload of a data URI, or the input unchanged if it is not one.

    Examples:
        >>> strip_data_uri("data:image/png;base64,AAAA")
        'AAAA'
        >>> strip_data_uri("AAAA")
        'AAAA'
    """
    return _DATA_URI_PREFIX.sub("", data, count=1)


def data_uri_to_bytes(data_uri: str) -> bytes:
    """Decode a base64 data URI (or bare base64 string) into bytes.

    Raises:
        ValueError: If the payload is not valid base64.

    Examples:
        >>> data_uri_to_bytes("data:text/plain;base64,aGk=")
        b'hi'
    """
    return base64.b64decode(strip_data_uri(data_uri.strip()), validate=True)
