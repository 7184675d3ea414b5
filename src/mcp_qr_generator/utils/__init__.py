# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/utils/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Image and file helpers.
"""
