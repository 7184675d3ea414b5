# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/utils/file_utils.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

File helpers: output path expansion, persisting rendered QR codes and
parsing human-readable byte sizes.
"""

# Standard
import logging
import os

# First-Party
from mcp_qr_generator.errors import StorageError
from mcp_qr_generator.models import OutputFormat, QRCodeResult
from mcp_qr_generator.utils.image_utils import data_uri_to_bytes

logger = logging.getLogger(__name__)


def expand_output_path(output_path: str) -> str:
    """Resolve a leading ``~`` to the user's home directory.

    Args:
        output_path: Path as given by the caller.

    Returns:
        str: Expanded path; unchanged when it does not start with ``~``.

    Examples:
        >>> expand_output_path("/tmp/qr.png")
        '/tmp/qr.png'
        >>> expand_output_path("~/qr.png") == os.path.join(os.path.expanduser("~"), "qr.png")
        True
    """
    if output_path.startswith("~"):
        return os.path.expanduser(output_path)
    return output_path


def save_qr_to_file(result: QRCodeResult, output_path: str) -> str:
    """Write a rendered QR code to disk.

    PNG results are written as raw image bytes decoded from the data URI;
    every other format is written as UTF-8 text. Missing parent directories
    are created.

    Args:
        result: Rendered QR code.
        output_path: Destination file path.

    Returns:
        str: The path written.

    Raises:
        StorageError: If the directory or file cannot be written.
    """
    output_path = expand_output_path(output_path)
    try:
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        if result.format is OutputFormat.PNG:
            with open(output_path, "wb") as f:
                f.write(data_uri_to_bytes(result.data))
        else:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(result.data)
    except OSError as e:
        logger.error("Failed to save QR code: path=%s format=%s error=%s", output_path, result.format.value, e)
        raise StorageError(f"Error saving QR code: {e}") from e

    logger.info("QR code saved: path=%s format=%s", output_path, result.format.value)
    return output_path


def convert_to_bytes(size_str: str) -> int:
    """Convert a human-readable size string (e.g., '10MB', '500KB') to bytes.

    Examples:
        >>> convert_to_bytes("1MB")
        1048576
        >>> convert_to_bytes("500 kb")
        512000
        >>> convert_to_bytes("2048")
        2048
    """

    unit_factors = {
        "B": 1,
        "KB": 1024,
        "MB": 1024**2,
        "GB": 1024**3,
    }

    size_str = size_str.strip().upper()
    numbers = [n for n in size_str if n.isdigit() or n == "."]
    units = "".join([u for u in size_str if not (u.isdigit() or u == "." or u.isspace())])
    if not numbers:
        raise ValueError(f"No numeric value found in size string: '{size_str}'")
    if units and units not in unit_factors:
        raise ValueError(f"Unknown size unit '{units}' in size string: '{size_str}'")
    size_value = float("".join(numbers))

    return int(size_value * unit_factors.get(units, 1))
