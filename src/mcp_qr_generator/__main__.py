# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/__main__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Allow ``python -m mcp_qr_generator``.
"""

# Standard
import sys

# First-Party
from mcp_qr_generator.server import main

sys.exit(main())
