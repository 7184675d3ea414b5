# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/errors.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Shared exception types for the QR generator.
"""

# Future
from __future__ import annotations


class QRGeneratorError(Exception):
    """Base exception for the QR generator."""


class ValidationError(QRGeneratorError):
    """Caller input was missing, out of bounds or forbidden."""


class EncodingError(QRGeneratorError):
    """QR matrix or raster generation failed."""


class NetworkError(QRGeneratorError):
    """Remote logo fetch failed."""


class StorageError(QRGeneratorError):
    """Writing a rendered QR code to disk failed."""


class ServerOverloadedError(QRGeneratorError):
    """No request slot available."""


class ProtocolError(QRGeneratorError):
    """Malformed or invalid JSON-RPC envelope.

    Attributes:
        code: JSON-RPC error code to report.
        message: Human-readable error message.
    """

    def __init__(self, code: int, message: str):
        """Initialize the protocol error.

        Args:
            code: JSON-RPC error code.
            message: Error message.
        """
        super().__init__(message)
        self.code = code
        self.message = message
