# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/jsonrpc.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

JSON-RPC 2.0 envelope helpers.
"""

# Standard
from enum import IntEnum
from typing import Any, Dict

JSONRPC_VERSION = "2.0"


class JSONRPCErrorCode(IntEnum):
    """Error codes used in JSON-RPC error responses."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    TOOL_EXECUTION_ERROR = -32000


def success_response(request_id: Any, result: Any) -> Dict[str, Any]:
    """Build a JSON-RPC success response.

    Examples:
        >>> success_response(1, {"ok": True})
        {'jsonrpc': '2.0', 'id': 1, 'result': {'ok': True}}
    """
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: Any, code: int, message: str) -> Dict[str, Any]:
    """Build a JSON-RPC error response.

    Examples:
        >>> error_response(None, JSONRPCErrorCode.PARSE_ERROR, "Parse error")
        {'jsonrpc': '2.0', 'id': None, 'error': {'code': -32700, 'message': 'Parse error'}}
    """
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": {"code": int(code), "message": message}}
