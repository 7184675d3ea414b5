# -*- coding: utf-8 -*-
"""Location: ./tests/unit/mcp_qr_generator/test_logo.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Unit tests for logo loading and compositing.
"""

# Standard
from io import BytesIO

# Third-Party
import httpx
from PIL import Image
import pytest

# First-Party
from mcp_qr_generator.config import ServerConfig
from mcp_qr_generator.errors import EncodingError, NetworkError, ValidationError
from mcp_qr_generator.models import ErrorCorrectionLevel, LogoOptions, OutputFormat, QROptions
from mcp_qr_generator.tools.logo import add_logo, add_logo_to_png, add_logo_to_svg, check_logo_domain, fetch_logo_from_url, load_logo_bytes, logo_edge
from mcp_qr_generator.tools.renderer import render_qr
from mcp_qr_generator.utils.image_utils import data_uri_to_bytes


def _render(fmt, size=300):
    options = QROptions(
        error_correction_level=ErrorCorrectionLevel.H,
        format=fmt,
        size=size,
        margin=4,
        color="#000000",
        background_color="#ffffff",
    )
    return render_qr("https://example.com", options).data


def _transport(status=200, content=b"", headers=None):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status, content=content, headers=headers or {})

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport


# --------------------------------------------------------------------------- #
# Domain policy                                                                #
# --------------------------------------------------------------------------- #
def test_domain_allowed_by_default(config):
    assert check_logo_domain("https://cdn.example.com/a.png", config) == "cdn.example.com"


def test_domain_deny_list():
    config = ServerConfig(disallowed_domains="evil.com")
    with pytest.raises(ValidationError, match="Domain not allowed: evil.com"):
        check_logo_domain("https://evil.com/a.png", config)
    # exact match only
    assert check_logo_domain("https://sub.evil.com/a.png", config) == "sub.evil.com"


def test_domain_allow_list():
    config = ServerConfig(allowed_domains="good.com")
    assert check_logo_domain("https://GOOD.com/a.png", config) == "good.com"
    with pytest.raises(ValidationError, match="Domain not allowed: other.com"):
        check_logo_domain("https://other.com/a.png", config)


def test_deny_list_wins_over_allow_list():
    config = ServerConfig(allowed_domains="good.com", disallowed_domains="good.com")
    with pytest.raises(ValidationError, match="Domain not allowed"):
        check_logo_domain("https://good.com/a.png", config)


def test_url_without_host(config):
    with pytest.raises(ValidationError, match="Invalid logo URL"):
        check_logo_domain("https:///a.png", config)


# --------------------------------------------------------------------------- #
# Remote fetch                                                                 #
# --------------------------------------------------------------------------- #
@pytest.mark.asyncio
async def test_fetch_success(config, logo_png):
    transport = _transport(content=logo_png, headers={"content-type": "image/png"})
    data = await fetch_logo_from_url("https://cdn.example.com/logo.png", config, transport=transport)
    assert data == logo_png
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_fetch_forbidden_domain_makes_no_request():
    config = ServerConfig(disallowed_domains="evil.com")
    transport = _transport(content=b"x", headers={"content-type": "image/png"})
    with pytest.raises(ValidationError, match="Domain not allowed"):
        await fetch_logo_from_url("https://evil.com/logo.png", config, transport=transport)
    assert transport.requests == []


@pytest.mark.asyncio
async def test_fetch_non_success_status(config):
    transport = _transport(status=404, content=b"nope", headers={"content-type": "text/plain"})
    with pytest.raises(NetworkError, match="Failed to fetch logo: 404 Not Found"):
        await fetch_logo_from_url("https://cdn.example.com/logo.png", config, transport=transport)


@pytest.mark.asyncio
async def test_fetch_rejects_non_image_content_type(config):
    transport = _transport(content=b"<html></html>", headers={"content-type": "text/html"})
    with pytest.raises(NetworkError, match="Invalid content type: text/html"):
        await fetch_logo_from_url("https://cdn.example.com/logo.png", config, transport=transport)


@pytest.mark.asyncio
async def test_fetch_rejects_oversized_body():
    config = ServerConfig(max_logo_size=10)
    transport = _transport(content=b"x" * 50, headers={"content-type": "image/png"})
    with pytest.raises(NetworkError, match=r"Logo size exceeds maximum \(10 bytes\)"):
        await fetch_logo_from_url("https://cdn.example.com/logo.png", config, transport=transport)


@pytest.mark.asyncio
async def test_fetch_does_not_follow_redirects(config):
    transport = _transport(status=302, headers={"location": "https://evil.com/x.png"})
    with pytest.raises(NetworkError, match="Failed to fetch logo: 302"):
        await fetch_logo_from_url("https://cdn.example.com/logo.png", config, transport=transport)
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_fetch_transport_error(config):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError, match="Error fetching logo"):
        await fetch_logo_from_url("https://cdn.example.com/logo.png", config, transport=httpx.MockTransport(handler))


# --------------------------------------------------------------------------- #
# Local sources                                                                #
# --------------------------------------------------------------------------- #
@pytest.mark.asyncio
async def test_load_from_data_uri(config, logo_png, logo_data_uri):
    assert await load_logo_bytes(logo_data_uri, config) == logo_png


@pytest.mark.asyncio
async def test_load_from_file(config, logo_png, tmp_path):
    path = tmp_path / "logo.png"
    path.write_bytes(logo_png)
    assert await load_logo_bytes(str(path), config) == logo_png


@pytest.mark.asyncio
async def test_load_missing_file(config, tmp_path):
    with pytest.raises(ValidationError, match="Logo file not found"):
        await load_logo_bytes(str(tmp_path / "missing.png"), config)


@pytest.mark.asyncio
async def test_load_oversized_data_uri(logo_data_uri):
    with pytest.raises(ValidationError, match="Logo size exceeds maximum"):
        await load_logo_bytes(logo_data_uri, ServerConfig(max_logo_size=10))


@pytest.mark.asyncio
async def test_load_invalid_data_uri(config):
    with pytest.raises(ValidationError, match="Invalid logo data URI"):
        await load_logo_bytes("data:image/png;base64,@@@", config)


# --------------------------------------------------------------------------- #
# Compositing                                                                  #
# --------------------------------------------------------------------------- #
def test_logo_edge_default_and_percentage():
    assert logo_edge(None, 300, 300) == pytest.approx(60)
    assert logo_edge(30, 300, 300) == pytest.approx(90)


def test_svg_logo_is_centered(config):
    svg = _render(OutputFormat.SVG)
    out = add_logo_to_svg(svg, LogoOptions(image="https://cdn.example.com/logo.png"), config)

    assert out.count("<image") == 1
    assert out.rstrip().endswith("</svg>")
    assert out.index("<image") < out.rindex("</svg>")
    assert 'href="https://cdn.example.com/logo.png"' in out


def test_svg_logo_geometry(config):
    svg = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100"></svg>'
    out = add_logo_to_svg(svg, LogoOptions(image="logo.png", size=50), config)
    assert '<image href="logo.png" x="25" y="25" width="50" height="50" />' in out


def test_svg_logo_href_is_escaped(config):
    svg = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100"></svg>'
    out = add_logo_to_svg(svg, LogoOptions(image='a"b<c.png'), config)
    assert 'href="a&quot;b&lt;c.png"' in out


def test_svg_without_viewbox(config):
    with pytest.raises(EncodingError, match="viewBox"):
        add_logo_to_svg("<svg></svg>", LogoOptions(image="logo.png"), config)


def test_svg_remote_logo_domain_policy():
    config = ServerConfig(disallowed_domains="evil.com")
    svg = _render(OutputFormat.SVG)
    with pytest.raises(ValidationError, match="Domain not allowed"):
        add_logo_to_svg(svg, LogoOptions(image="https://evil.com/logo.png"), config)


@pytest.mark.asyncio
async def test_png_logo_is_composited_in_center(config, logo_data_uri):
    png = _render(OutputFormat.PNG)
    out = await add_logo_to_png(png, LogoOptions(image=logo_data_uri, size=20), config)

    img = Image.open(BytesIO(data_uri_to_bytes(out))).convert("RGB")
    assert img.size == (300, 300)
    assert img.getpixel((150, 150)) == (255, 0, 0)
    # quiet zone untouched
    assert img.getpixel((2, 2)) == (255, 255, 255)


@pytest.mark.asyncio
async def test_png_logo_from_remote_url(config, logo_png):
    transport = _transport(content=logo_png, headers={"content-type": "image/png"})
    png = _render(OutputFormat.PNG)
    out = await add_logo(png, LogoOptions(image="https://cdn.example.com/logo.png"), OutputFormat.PNG, config, transport=transport)
    img = Image.open(BytesIO(data_uri_to_bytes(out))).convert("RGB")
    assert img.getpixel((150, 150)) == (255, 0, 0)


@pytest.mark.asyncio
async def test_png_logo_not_an_image(config):
    png = _render(OutputFormat.PNG)
    with pytest.raises(ValidationError, match="Could not decode logo image"):
        await add_logo_to_png(png, LogoOptions(image="data:image/png;base64,aGVsbG8="), config)


@pytest.mark.asyncio
async def test_add_logo_leaves_text_formats_unchanged(config):
    assert await add_logo("text", LogoOptions(image="logo.png"), OutputFormat.TERMINAL, config) == "text"
