# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/health.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Liveness report served on ``GET /health``.
"""

# Standard
from datetime import datetime, timezone
import time
from typing import Any, Dict

# First-Party
from mcp_qr_generator import __version__


def health_status(started_at: float) -> Dict[str, Any]:
    """Build the health report.

    Args:
        started_at: Process start time as returned by ``time.monotonic()``.

    Returns:
        Dict[str, Any]: status, ISO-8601 timestamp, version and uptime in seconds.

    Examples:
        >>> report = health_status(time.monotonic())
        >>> report["status"], report["version"]
        ('ok', '1.0.0')
        >>> report["uptime"] >= 0
        True
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "uptime": round(time.monotonic() - started_at, 3),
    }
