# -*- coding: utf-8 -*-
"""Location: ./tests/conftest.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors
"""

# Standard
import base64
from io import BytesIO

# Third-Party
from PIL import Image
import pytest

# First-Party
from mcp_qr_generator.config import ServerConfig
from mcp_qr_generator.dispatcher import ToolDispatcher


def make_png_bytes(size=(40, 20), color=(255, 0, 0, 255)) -> bytes:
    """Small solid PNG used as a logo."""
    buffer = BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def config():
    """Default server configuration with logging disabled."""
    return ServerConfig(enable_logging=False)


@pytest.fixture
def logo_png():
    return make_png_bytes()


@pytest.fixture
def logo_data_uri(logo_png):
    return "data:image/png;base64," + base64.b64encode(logo_png).decode("ascii")


@pytest.fixture
def dispatcher(config):
    return ToolDispatcher(config)
