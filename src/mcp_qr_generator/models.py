# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/models.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Data models for QR generation.
Resolved options and results are frozen; tool argument models accept the
camelCase field names used on the wire.
"""

# Standard
from enum import Enum
from typing import Optional

# Third-Party
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ErrorCorrectionLevel(str, Enum):
    """QR error correction tiers (L: 7%, M: 15%, Q: 25%, H: 30%)."""

    L = "L"
    M = "M"
    Q = "Q"
    H = "H"


class OutputFormat(str, Enum):
    """Supported output formats."""

    PNG = "png"
    SVG = "svg"
    BASE64 = "base64"
    TERMINAL = "terminal"

    @property
    def mime_type(self) -> str:
        """MIME type of rendered output in this format.

        Returns:
            str: MIME type string.

        Examples:
            >>> OutputFormat.PNG.mime_type
            'image/png'
            >>> OutputFormat.TERMINAL.mime_type
            'text/plain'
        """
        return _MIME_TYPES[self]

    @property
    def file_extension(self) -> str:
        """File extension used when saving without an explicit name.

        Returns:
            str: Extension without leading dot.

        Examples:
            >>> OutputFormat.SVG.file_extension
            'svg'
            >>> OutputFormat.BASE64.file_extension
            'txt'
        """
        return self.value if self in (OutputFormat.PNG, OutputFormat.SVG) else "txt"

    @property
    def supports_logo(self) -> bool:
        """Whether a logo can be composited onto this format."""
        return self in (OutputFormat.PNG, OutputFormat.SVG)


_MIME_TYPES = {
    OutputFormat.PNG: "image/png",
    OutputFormat.SVG: "image/svg+xml",
    OutputFormat.BASE64: "text/plain",
    OutputFormat.TERMINAL: "text/plain",
}


class LogoOptions(BaseModel):
    """Logo to place in the center of a QR code.

    Attributes:
        image: Remote URL, data URI or local file path.
        size: Edge length as a percentage (1-100) of the QR code's smaller dimension.
    """

    model_config = ConfigDict(frozen=True)

    image: str
    size: Optional[float] = None


class QROptions(BaseModel):
    """Fully resolved QR generation options."""

    model_config = ConfigDict(frozen=True)

    error_correction_level: ErrorCorrectionLevel
    format: OutputFormat
    size: int
    margin: int
    color: str
    background_color: str
    logo: Optional[LogoOptions] = None


class QRCodeResult(BaseModel):
    """Rendered QR code.

    Attributes:
        data: PNG data URI, SVG document, terminal text or base64 text.
        mime_type: MIME type of ``data``.
        format: Output format.
        size: Requested size in pixels.
        content: Encoded text.
        timestamp: Generation time in milliseconds since the epoch.
    """

    model_config = ConfigDict(frozen=True)

    data: str
    mime_type: str
    format: OutputFormat
    size: int
    content: str
    timestamp: int


class QROptionsInput(BaseModel):
    """Caller supplied QR options; unset fields fall back to server defaults."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    error_correction_level: Optional[ErrorCorrectionLevel] = Field(default=None, alias="errorCorrectionLevel")
    format: Optional[OutputFormat] = None
    size: Optional[float] = Field(default=None, allow_inf_nan=False)
    margin: Optional[float] = Field(default=None, allow_inf_nan=False)
    color: Optional[str] = None
    background_color: Optional[str] = Field(default=None, alias="backgroundColor")
    logo: Optional[str] = None
    logo_size: Optional[float] = Field(default=None, alias="logoSize")

    @field_validator("logo")
    @classmethod
    def blank_logo_is_absent(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    def logo_options(self) -> Optional[LogoOptions]:
        """Build the logo descriptor, if a logo was given.

        Returns:
            Optional[LogoOptions]: Logo descriptor or None.

        Examples:
            >>> QROptionsInput().logo_options() is None
            True
            >>> QROptionsInput(logo="a.png", logoSize=30).logo_options().size
            30.0
        """
        if self.logo is None:
            return None
        return LogoOptions(image=self.logo, size=self.logo_size)


class GenerateQRArguments(QROptionsInput):
    """Arguments of the ``generate_qr`` tool."""

    text: str


class SaveQRArguments(GenerateQRArguments):
    """Arguments of the ``save_qr`` tool."""

    output_path: str = Field(alias="outputPath")
