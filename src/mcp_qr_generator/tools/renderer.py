# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/tools/renderer.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

QR renderer.
One rendering strategy per output format, selected from a static mapping.
"""

# Standard
import base64
import logging
import time
from typing import Callable, Dict

# Third-Party
import qrcode

# First-Party
from mcp_qr_generator.errors import EncodingError, ValidationError
from mcp_qr_generator.models import OutputFormat, QRCodeResult, QROptions
from mcp_qr_generator.utils.image_utils import create_qr_matrix, image_to_data_uri, matrix_to_image, matrix_to_svg, qr_to_text

logger = logging.getLogger(__name__)


def _render_png(qr: qrcode.QRCode, options: QROptions) -> str:
    img = matrix_to_image(qr.get_matrix(), options.size, options.color, options.background_color)
    return image_to_data_uri(img)


def _render_svg(qr: qrcode.QRCode, options: QROptions) -> str:
    return matrix_to_svg(qr.get_matrix(), options.size, options.color, options.background_color)


def _render_terminal(qr: qrcode.QRCode, options: QROptions) -> str:
    # light modules drawn as blocks so the code scans on dark consoles
    return qr_to_text(qr, invert=True)


def _render_base64(qr: qrcode.QRCode, options: QROptions) -> str:
    return base64.b64encode(qr_to_text(qr).encode("utf-8")).decode("ascii")


RENDERERS: Dict[OutputFormat, Callable[[qrcode.QRCode, QROptions], str]] = {
    OutputFormat.PNG: _render_png,
    OutputFormat.SVG: _render_svg,
    OutputFormat.TERMINAL: _render_terminal,
    OutputFormat.BASE64: _render_base64,
}


def validate_text(text: str) -> None:
    """Reject empty or whitespace-only text.

    Raises:
        ValidationError: If the text is empty.
    """
    if not text or not text.strip():
        raise ValidationError("Text is required")


def render_qr(text: str, options: QROptions) -> QRCodeResult:
    """Render text as a QR code in the format given by the options.

    Args:
        text: Text or URL to encode.
        options: Resolved options.

    Returns:
        QRCodeResult: Rendered result without any logo.

    Raises:
        ValidationError: If the text is empty.
        EncodingError: If the encoding library fails (e.g. data too long).
    """
    validate_text(text)

    try:
        qr = create_qr_matrix(text, options.error_correction_level, options.margin)
        data = RENDERERS[options.format](qr, options)
    except Exception as e:
        logger.error("Failed to render QR code: format=%s ec=%s error=%s", options.format.value, options.error_correction_level.value, e)
        raise EncodingError(f"QR code generation error: {e}") from e

    logger.debug("Rendered QR code: format=%s size=%d version=%s", options.format.value, options.size, qr.version)
    return QRCodeResult(
        data=data,
        mime_type=options.format.mime_type,
        format=options.format,
        size=options.size,
        content=text,
        timestamp=int(time.time() * 1000),
    )
