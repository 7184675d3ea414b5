# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/tools/generator.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

QR generation pipeline: resolve options, render, composite a logo and
optionally persist the result.
"""

# Standard
import hashlib
import json
import logging
import os
from typing import Optional

# Third-Party
import httpx

# First-Party
from mcp_qr_generator.config import ServerConfig
from mcp_qr_generator.errors import EncodingError, QRGeneratorError
from mcp_qr_generator.models import QRCodeResult, QROptionsInput
from mcp_qr_generator.tools.logo import add_logo
from mcp_qr_generator.tools.options import resolve_options
from mcp_qr_generator.tools.renderer import render_qr, validate_text
from mcp_qr_generator.utils.file_utils import save_qr_to_file

logger = logging.getLogger(__name__)


async def generate_qr(
    text: str,
    options: Optional[QROptionsInput] = None,
    config: Optional[ServerConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> QRCodeResult:
    """Generate a QR code from text or a URL.

    Args:
        text: Text or URL to encode.
        options: Caller options; unset fields use the configured defaults.
        config: Server configuration. Defaults to ServerConfig().
        transport: Optional httpx transport for remote logo fetches.

    Returns:
        QRCodeResult: Rendered QR code, with the logo applied for png/svg.

    Raises:
        ValidationError: Empty text, oversized QR code or invalid/forbidden logo.
        EncodingError: The encoding or imaging library failed.
        NetworkError: A remote logo could not be fetched.
    """
    config = config or ServerConfig()
    options = options or QROptionsInput()

    validate_text(text)
    resolved = resolve_options(options, config)
    result = render_qr(text, resolved)

    if resolved.logo is not None and resolved.format.supports_logo:
        try:
            data = await add_logo(result.data, resolved.logo, resolved.format, config, transport=transport)
        except QRGeneratorError:
            raise
        except Exception as e:
            logger.error("Failed to apply logo: format=%s error=%s", resolved.format.value, e)
            raise EncodingError(f"QR code generation error: {e}") from e
        result = result.model_copy(update={"data": data})

    logger.info("QR code generated: format=%s size=%d logo=%s", result.format.value, result.size, resolved.logo is not None)
    return result


async def generate_and_save_qr(
    text: str,
    output_path: str,
    options: Optional[QROptionsInput] = None,
    config: Optional[ServerConfig] = None,
) -> str:
    """Generate a QR code and save it to a file.

    Returns:
        str: Path of the saved file.
    """
    result = await generate_qr(text, options, config)
    return save_qr_to_file(result, output_path)


def unique_filename(text: str, options: QROptionsInput, config: ServerConfig) -> str:
    """Deterministic file name for a text/options pair.

    Examples:
        >>> name = unique_filename("hi", QROptionsInput(format="svg"), ServerConfig())
        >>> name.startswith("qr-") and name.endswith(".svg")
        True
        >>> unique_filename("hi", QROptionsInput(), ServerConfig()).endswith(".png")
        True
    """
    canonical = json.dumps(options.model_dump(mode="json", by_alias=True, exclude_none=True), sort_keys=True)
    digest = hashlib.md5((text + canonical).encode("utf-8"), usedforsecurity=False).hexdigest()
    fmt = options.format or config.default_format
    return f"qr-{digest}.{fmt.file_extension}"


async def generate_qr_with_unique_filename(
    text: str,
    directory: str,
    options: Optional[QROptionsInput] = None,
    config: Optional[ServerConfig] = None,
) -> str:
    """Generate a QR code and save it under a content-derived name in ``directory``.

    Returns:
        str: Path of the saved file.
    """
    config = config or ServerConfig()
    options = options or QROptionsInput()
    output_path = os.path.join(directory, unique_filename(text, options, config))
    return await generate_and_save_qr(text, output_path, options, config)
