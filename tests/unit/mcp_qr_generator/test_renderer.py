# -*- coding: utf-8 -*-
"""Location: ./tests/unit/mcp_qr_generator/test_renderer.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Unit tests for format rendering.
"""

# Standard
import base64
from io import BytesIO
import time

# Third-Party
from PIL import Image
import pytest

# First-Party
from mcp_qr_generator.errors import EncodingError, ValidationError
from mcp_qr_generator.models import ErrorCorrectionLevel, OutputFormat, QROptions
from mcp_qr_generator.tools.renderer import render_qr, RENDERERS, validate_text
from mcp_qr_generator.utils.image_utils import create_qr_matrix, data_uri_to_bytes


def _options(fmt=OutputFormat.PNG, **overrides):
    values = dict(
        error_correction_level=ErrorCorrectionLevel.M,
        format=fmt,
        size=300,
        margin=4,
        color="#000000",
        background_color="#ffffff",
    )
    values.update(overrides)
    return QROptions(**values)


def test_every_format_has_a_renderer():
    assert set(RENDERERS) == set(OutputFormat)


def test_png_is_data_uri_of_requested_size():
    before = int(time.time() * 1000)
    result = render_qr("https://example.com", _options(size=200))

    assert result.data.startswith("data:image/png;base64,")
    assert result.mime_type == "image/png"
    assert result.format is OutputFormat.PNG
    assert result.size == 200
    assert result.content == "https://example.com"
    assert result.timestamp >= before

    img = Image.open(BytesIO(data_uri_to_bytes(result.data)))
    assert img.size == (200, 200)


def test_png_uses_requested_colors():
    result = render_qr("hello", _options(size=100, color="#ff0000", background_color="#00ff00"))
    img = Image.open(BytesIO(data_uri_to_bytes(result.data))).convert("RGB")
    # corner pixel lies in the quiet zone
    assert img.getpixel((0, 0)) == (0, 255, 0)
    colors = {c for _, c in img.getcolors()}
    assert (255, 0, 0) in colors


def test_svg_document():
    result = render_qr("hello", _options(OutputFormat.SVG, size=256))
    assert result.mime_type == "image/svg+xml"
    assert result.data.startswith("<svg")
    assert result.data.rstrip().endswith("</svg>")
    assert 'width="256"' in result.data
    assert 'viewBox="0 0 29 29"' in result.data


def test_terminal_output_is_text():
    result = render_qr("hello", _options(OutputFormat.TERMINAL))
    assert result.mime_type == "text/plain"
    assert "\n" in result.data
    assert any(ch in result.data for ch in "█▀▄")


def test_base64_output_decodes_to_text_rendering():
    result = render_qr("hello", _options(OutputFormat.BASE64))
    assert result.mime_type == "text/plain"
    decoded = base64.b64decode(result.data).decode("utf-8")
    assert "\n" in decoded


def test_margin_changes_module_count():
    small = render_qr("hello", _options(OutputFormat.SVG, margin=0))
    assert 'viewBox="0 0 21 21"' in small.data


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_empty_text_is_rejected(text):
    with pytest.raises(ValidationError, match="Text is required"):
        render_qr(text, _options())


def test_validate_text_accepts_content():
    validate_text("x")


def test_data_too_long_is_encoding_error():
    with pytest.raises(EncodingError, match="QR code generation error"):
        render_qr("a" * 8000, _options(error_correction_level=ErrorCorrectionLevel.H))


def test_unicode_text():
    result = render_qr("héllo wörld ✓", _options(OutputFormat.SVG))
    assert result.content == "héllo wörld ✓"


def _assert_modules_intact(img, matrix):
    n = len(matrix)
    box = max(1, img.width // n)
    offset = (img.width - n * box) // 2
    for y, row in enumerate(matrix):
        for x, dark in enumerate(row):
            pixel = img.getpixel((offset + x * box + box // 2, offset + y * box + box // 2))
            assert pixel == ((0, 0, 0) if dark else (255, 255, 255)), (x, y)


@pytest.mark.parametrize("size", [20, 33, 100, 301])
def test_png_keeps_every_module(size):
    result = render_qr("https://example.com", _options(size=size))
    matrix = create_qr_matrix("https://example.com", ErrorCorrectionLevel.M, 4).get_matrix()
    img = Image.open(BytesIO(data_uri_to_bytes(result.data))).convert("RGB")

    assert img.width == img.height == max(size, len(matrix))
    _assert_modules_intact(img, matrix)
