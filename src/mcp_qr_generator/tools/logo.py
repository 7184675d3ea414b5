# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/tools/logo.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Logo compositing.
Places a logo in the center of a rendered QR code. SVG output gets an
embedded <image> reference; PNG output is composited pixel-wise after the
logo is loaded from a data URI, a remote URL or a local file.

Remote logos are subject to the configured domain allow/deny lists and the
maximum logo size, and are fetched with httpx under an explicit timeout.
Redirects are not followed so the domain policy cannot be bypassed.
"""

# Standard
import base64
import binascii
from html import escape
from io import BytesIO
import logging
from pathlib import Path
import re
from typing import Awaitable, Callable, Dict, Optional
from urllib.parse import urlparse

# Third-Party
import httpx
from PIL import Image, ImageOps, UnidentifiedImageError

# First-Party
from mcp_qr_generator.config import ServerConfig
from mcp_qr_generator.errors import EncodingError, NetworkError, ValidationError
from mcp_qr_generator.models import LogoOptions, OutputFormat
from mcp_qr_generator.utils.image_utils import data_uri_to_bytes, image_to_data_uri

logger = logging.getLogger(__name__)

DEFAULT_LOGO_RATIO = 0.2
_VIEWBOX = re.compile(r'viewBox="0 0 (\d+(?:\.\d+)?) (\d+(?:\.\d+)?)"')


def logo_edge(size: Optional[float], width: float, height: float) -> float:
    """Edge length of the square reserved for the logo.

    Args:
        size: Logo size as a percentage of the smaller dimension, or None for the default 20%.
        width: QR code width.
        height: QR code height.

    Returns:
        float: Edge length in the same unit as width/height.

    Examples:
        >>> logo_edge(None, 300, 300)
        60.0
        >>> logo_edge(50, 400, 200)
        100.0
    """
    shortest = min(width, height)
    if size:
        return (size / 100) * shortest
    return shortest * DEFAULT_LOGO_RATIO


def _fmt(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


def is_remote(image: str) -> bool:
    """Whether a logo reference points at an http(s) URL."""
    return image.lower().startswith(("http://", "https://"))


def check_logo_domain(url: str, config: ServerConfig) -> str:
    """Apply the logo domain policy to a URL.

    Both lists use exact hostname matching.

    Args:
        url: Logo URL.
        config: Server configuration.

    Returns:
        str: The URL's hostname.

    Raises:
        ValidationError: If the URL has no host or the host is not allowed.

    Examples:
        >>> check_logo_domain("https://cdn.example.com/logo.png", ServerConfig())
        'cdn.example.com'
        >>> check_logo_domain("https://evil.com/x.png", ServerConfig(disallowed_domains=("evil.com",)))
        Traceback (most recent call last):
        ...
        mcp_qr_generator.errors.ValidationError: Domain not allowed: evil.com
    """
    hostname = urlparse(url).hostname
    if not hostname:
        raise ValidationError(f"Invalid logo URL: {url}")

    if config.allowed_domains is not None and hostname not in {d.lower() for d in config.allowed_domains}:
        raise ValidationError(f"Domain not allowed: {hostname}")
    if hostname in {d.lower() for d in config.disallowed_domains}:
        raise ValidationError(f"Domain not allowed: {hostname}")
    return hostname


async def fetch_logo_from_url(url: str, config: ServerConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> bytes:
    """Download a logo image.

    Args:
        url: http(s) URL of the logo.
        config: Server configuration (domain lists, size limit, timeout).
        transport: Optional httpx transport, used in tests.

    Returns:
        bytes: Logo image bytes.

    Raises:
        ValidationError: If the domain is not allowed.
        NetworkError: On non-2xx status, non-image content type, oversized body or transport failure.
    """
    hostname = check_logo_domain(url, config)
    logger.info("Fetching logo from %s", hostname)

    try:
        async with httpx.AsyncClient(timeout=config.logo_fetch_timeout, transport=transport) as client:
            async with client.stream("GET", url) as response:
                if not response.is_success:
                    raise NetworkError(f"Failed to fetch logo: {response.status_code} {response.reason_phrase}")

                content_type = response.headers.get("content-type", "")
                if not content_type.startswith("image/"):
                    raise NetworkError(f"Invalid content type: {content_type or None}")

                declared = response.headers.get("content-length", "")
                if declared.isdigit() and int(declared) > config.max_logo_size:
                    raise NetworkError(f"Logo size exceeds maximum ({config.max_logo_size} bytes)")

                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > config.max_logo_size:
                        raise NetworkError(f"Logo size exceeds maximum ({config.max_logo_size} bytes)")
    except httpx.HTTPError as e:
        logger.error("Logo fetch failed: host=%s error=%s", hostname, e)
        raise NetworkError(f"Error fetching logo: {e}") from e

    return bytes(body)


def _decode_inline_logo(image: str) -> bytes:
    _, _, payload = image.partition(",")
    try:
        return base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Invalid logo data URI") from e


def _read_local_logo(image: str, config: ServerConfig) -> bytes:
    path = Path(image).expanduser()
    if not path.is_file():
        raise ValidationError(f"Logo file not found: {image}")
    if path.stat().st_size > config.max_logo_size:
        raise ValidationError(f"Logo size exceeds maximum ({config.max_logo_size} bytes)")
    try:
        return path.read_bytes()
    except OSError as e:
        raise ValidationError(f"Could not read logo file: {image}") from e


async def load_logo_bytes(image: str, config: ServerConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> bytes:
    """Load logo bytes from a data URI, an http(s) URL or a local path.

    Args:
        image: Logo reference.
        config: Server configuration.
        transport: Optional httpx transport for remote logos.

    Returns:
        bytes: Raw logo image bytes.

    Raises:
        ValidationError: If the source is invalid, missing, forbidden or too large.
        NetworkError: If a remote fetch fails.
    """
    if image.startswith("data:"):
        data = _decode_inline_logo(image)
        if len(data) > config.max_logo_size:
            raise ValidationError(f"Logo size exceeds maximum ({config.max_logo_size} bytes)")
        return data
    if is_remote(image):
        return await fetch_logo_from_url(image, config, transport=transport)
    return _read_local_logo(image, config)


def add_logo_to_svg(svg: str, logo: LogoOptions, config: ServerConfig) -> str:
    """Embed a logo reference in the center of an SVG QR code.

    Args:
        svg: Rendered SVG document.
        logo: Logo descriptor.
        config: Server configuration (domain policy for remote references).

    Returns:
        str: SVG document with an <image> element before the closing tag.

    Raises:
        EncodingError: If the viewBox cannot be parsed.
        ValidationError: If a remote logo's domain is not allowed.
    """
    match = _VIEWBOX.search(svg)
    if not match:
        raise EncodingError("Could not extract viewBox from SVG")
    if is_remote(logo.image):
        check_logo_domain(logo.image, config)

    width, height = float(match.group(1)), float(match.group(2))
    edge = logo_edge(logo.size, width, height)
    x = (width - edge) / 2
    y = (height - edge) / 2

    element = f'<image href="{escape(logo.image, quote=True)}" x="{_fmt(x)}" y="{_fmt(y)}" width="{_fmt(edge)}" height="{_fmt(edge)}" />'
    head, sep, tail = svg.rpartition("</svg>")
    if not sep:
        raise EncodingError("Could not find closing </svg> tag")
    return f"{head}{element}</svg>{tail}"


def _open_logo(data: bytes) -> Image.Image:
    try:
        img = Image.open(BytesIO(data))
        if getattr(img, "is_animated", False):
            img.seek(0)
        return img.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError("Could not decode logo image") from e


async def add_logo_to_png(png: str, logo: LogoOptions, config: ServerConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """Composite a logo onto the center of a PNG QR code.

    The logo is scaled to fit a square (aspect ratio kept, transparent
    padding) and alpha-composited over the QR code.

    Args:
        png: PNG data URI of the rendered QR code.
        logo: Logo descriptor.
        config: Server configuration.
        transport: Optional httpx transport for remote logos.

    Returns:
        str: PNG data URI with the logo applied.
    """
    logo_bytes = await load_logo_bytes(logo.image, config, transport=transport)
    logo_img = _open_logo(logo_bytes)

    try:
        base = Image.open(BytesIO(data_uri_to_bytes(png))).convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise EncodingError(f"Could not decode QR code image: {e}") from e

    width, height = base.size
    edge = max(1, round(logo_edge(logo.size, width, height)))
    fitted = ImageOps.contain(logo_img, (edge, edge), Image.Resampling.LANCZOS)

    square = Image.new("RGBA", (edge, edge), (255, 255, 255, 0))
    square.paste(fitted, ((edge - fitted.width) // 2, (edge - fitted.height) // 2))
    base.alpha_composite(square, dest=(round((width - edge) / 2), round((height - edge) / 2)))

    logger.debug("Composited logo: edge=%dpx qr=%dx%d", edge, width, height)
    return image_to_data_uri(base)


async def _composite_svg(data: str, logo: LogoOptions, config: ServerConfig, transport: Optional[httpx.AsyncBaseTransport]) -> str:
    return add_logo_to_svg(data, logo, config)


COMPOSITORS: Dict[OutputFormat, Callable[[str, LogoOptions, ServerConfig, Optional[httpx.AsyncBaseTransport]], Awaitable[str]]] = {
    OutputFormat.PNG: add_logo_to_png,
    OutputFormat.SVG: _composite_svg,
}


async def add_logo(data: str, logo: LogoOptions, fmt: OutputFormat, config: ServerConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """Apply a logo to rendered output; formats without a compositor are returned unchanged."""
    compositor = COMPOSITORS.get(fmt)
    if compositor is None:
        return data
    return await compositor(data, logo, config, transport)
