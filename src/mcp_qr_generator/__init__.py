# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

MCP QR Generator.
QR code generation exposed as JSON-RPC tools (generate_qr, save_qr) over HTTP.
"""

__version__ = "1.0.0"
