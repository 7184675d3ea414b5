# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/tools/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

QR generation tools.
"""
