# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/tools/options.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Options resolver: merges caller options with configured defaults and
validates the result.
"""

# Standard
from typing import Optional

# Third-Party
from PIL import ImageColor

# First-Party
from mcp_qr_generator.config import ServerConfig
from mcp_qr_generator.errors import ValidationError
from mcp_qr_generator.models import LogoOptions, QROptions, QROptionsInput


def _validate_color(name: str, value: str) -> str:
    try:
        ImageColor.getrgb(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {value}") from e
    return value


def _validate_logo(logo: Optional[LogoOptions]) -> Optional[LogoOptions]:
    if logo is not None and logo.size is not None and not 1 <= logo.size <= 100:
        raise ValidationError(f"Logo size must be between 1 and 100 (got {logo.size:g})")
    return logo


def resolve_options(raw: QROptionsInput, config: ServerConfig) -> QROptions:
    """Merge caller options with server defaults.

    Every option left unset by the caller takes the configured default.

    Args:
        raw: Caller supplied (possibly partial) options.
        config: Server configuration.

    Returns:
        QROptions: Resolved, immutable options.

    Raises:
        ValidationError: If the size exceeds the configured maximum or a value is out of range.

    Examples:
        >>> opts = resolve_options(QROptionsInput(size=200), ServerConfig())
        >>> (opts.format.value, opts.size, opts.margin, opts.error_correction_level.value)
        ('png', 200, 4, 'M')
        >>> resolve_options(QROptionsInput(size=250.6, margin=1.2), ServerConfig()).size
        251
        >>> resolve_options(QROptionsInput(size=5000), ServerConfig())
        Traceback (most recent call last):
        ...
        mcp_qr_generator.errors.ValidationError: QR code size exceeds maximum (1000px)
    """
    # numeric sizes from the wire are rounded to whole pixels and modules
    size = round(raw.size) if raw.size is not None else config.default_size
    margin = round(raw.margin) if raw.margin is not None else config.default_margin

    if size > config.max_qr_code_size:
        raise ValidationError(f"QR code size exceeds maximum ({config.max_qr_code_size}px)")
    if size < 1:
        raise ValidationError("QR code size must be at least 1px")
    if margin < 0:
        raise ValidationError("Margin must not be negative")

    return QROptions(
        error_correction_level=raw.error_correction_level or config.default_error_correction_level,
        format=raw.format or config.default_format,
        size=size,
        margin=margin,
        color=_validate_color("color", raw.color or config.default_color),
        background_color=_validate_color("background color", raw.background_color or config.default_background_color),
        logo=_validate_logo(raw.logo_options()),
    )
