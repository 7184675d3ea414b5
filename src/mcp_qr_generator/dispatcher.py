# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/dispatcher.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

JSON-RPC Tool Dispatcher.
Parses a JSON-RPC 2.0 request body, routes ``tools/list`` and ``tools/call``
to the static tool registry and converts every outcome into a JSON-RPC
response envelope. Each exchange is handled independently; the only shared
state is the read-only configuration, the tool registry and the request
slot limiter.

Error mapping:
- malformed JSON -> -32700
- invalid envelope -> -32600
- params not an object -> -32602
- unknown tool or method -> -32601
- argument validation or tool failure -> -32000
"""

# Standard
import asyncio
from contextlib import asynccontextmanager
import json
from typing import Any, AsyncIterator, Dict, Mapping, Optional, Union

# Third-Party
import pydantic

# First-Party
from mcp_qr_generator.config import ServerConfig
from mcp_qr_generator.errors import ProtocolError, ServerOverloadedError
from mcp_qr_generator.jsonrpc import error_response, JSONRPC_VERSION, JSONRPCErrorCode, success_response
from mcp_qr_generator.services.logging_service import LoggingService
from mcp_qr_generator.tool_registry import list_tools, ToolDefinition, TOOLS

logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

_MISSING = object()


class RequestLimiter:
    """Bounds concurrent tool executions and the number of waiting requests.

    Examples:
        >>> limiter = RequestLimiter(2)
        >>> limiter.max_queue_size
        6
        >>> limiter.pending
        0
    """

    def __init__(self, max_concurrent: int, queue_factor: int = 3):
        """Initialize the limiter.

        Args:
            max_concurrent: Maximum number of tool calls executing at once.
            queue_factor: Pending (running + waiting) calls allowed per slot.
        """
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self.max_queue_size = max_concurrent * queue_factor
        self.pending = 0

    @asynccontextmanager
    async def slot(self, request_name: str) -> AsyncIterator[None]:
        """Acquire a request slot with queue size checks.

        Args:
            request_name: Name used in log messages.

        Yields:
            None: While the slot is held.

        Raises:
            ServerOverloadedError: If the pending queue is full.
        """
        if self.pending >= self.max_queue_size:
            logger.warning("Queue full (%d). Rejecting %s", self.pending, request_name)
            raise ServerOverloadedError(f"Server overloaded. Max queue size ({self.max_queue_size}) exceeded.")

        self.pending += 1
        try:
            async with self._semaphore:
                yield
        finally:
            self.pending -= 1


def _format_validation_error(exc: pydantic.ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ())) or "arguments"
        parts.append(f"{location}: {error.get('msg')}")
    return "Invalid arguments: " + "; ".join(parts)


class ToolDispatcher:
    """Routes JSON-RPC requests to registered tools."""

    def __init__(self, config: ServerConfig, tools: Mapping[str, ToolDefinition] = TOOLS, limiter: Optional[RequestLimiter] = None):
        """Initialize the dispatcher.

        Args:
            config: Server configuration passed to every tool handler.
            tools: Tool registry.
            limiter: Request slot limiter. Defaults to one sized from the config.
        """
        self.config = config
        self.tools = tools
        self.limiter = limiter or RequestLimiter(config.max_concurrent_requests)

    async def handle_request(self, body: Union[str, bytes]) -> Dict[str, Any]:
        """Handle a raw request body.

        Args:
            body: HTTP request body.

        Returns:
            Dict[str, Any]: JSON-RPC response envelope.
        """
        try:
            payload = json.loads(body)
        except (ValueError, TypeError):
            logger.warning("Rejected request body: parse error")
            return error_response(None, JSONRPCErrorCode.PARSE_ERROR, "Parse error")
        return await self.handle_message(payload)

    async def handle_message(self, payload: Any) -> Dict[str, Any]:
        """Handle a decoded JSON-RPC request object.

        Args:
            payload: Decoded JSON value.

        Returns:
            Dict[str, Any]: JSON-RPC response envelope.
        """
        request_id = payload.get("id") if isinstance(payload, dict) else None
        try:
            method = self._validate_envelope(payload)
            logger.debug("RPC Request [%s]: %s %s", request_id, method, json.dumps(payload.get("params"), default=str))

            if method == "tools/list":
                response = success_response(request_id, {"tools": list_tools(self.tools)})
            elif method == "tools/call":
                response = await self._call_tool(request_id, payload.get("params"))
            else:
                raise ProtocolError(JSONRPCErrorCode.METHOD_NOT_FOUND, f"Method not found: {method}")
        except ProtocolError as e:
            response = error_response(request_id, e.code, e.message)

        if "error" in response:
            logger.warning("RPC Response [%s]: Error %s", request_id, json.dumps(response["error"]))
        else:
            logger.debug("RPC Response [%s]: Success", request_id)
        return response

    @staticmethod
    def _validate_envelope(payload: Any) -> str:
        if not isinstance(payload, dict):
            raise ProtocolError(JSONRPCErrorCode.INVALID_REQUEST, "Invalid Request")
        method = payload.get("method")
        if payload.get("jsonrpc") != JSONRPC_VERSION or not isinstance(method, str) or not method or payload.get("id", _MISSING) is _MISSING:
            raise ProtocolError(JSONRPCErrorCode.INVALID_REQUEST, "Invalid Request")
        return method

    async def _call_tool(self, request_id: Any, params: Any) -> Dict[str, Any]:
        if not isinstance(params, dict):
            raise ProtocolError(JSONRPCErrorCode.INVALID_PARAMS, "Invalid params")

        name = params.get("name")
        tool = self.tools.get(name) if isinstance(name, str) else None
        if tool is None:
            raise ProtocolError(JSONRPCErrorCode.METHOD_NOT_FOUND, f"Tool not found: {name}")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}

        try:
            args = tool.arguments_model.model_validate(arguments)
        except pydantic.ValidationError as e:
            raise ProtocolError(JSONRPCErrorCode.TOOL_EXECUTION_ERROR, _format_validation_error(e)) from e

        try:
            async with self.limiter.slot(tool.name):
                result = await tool.handler(args, self.config)
        except Exception as e:
            logger.error("Tool %s failed: %s", tool.name, e)
            raise ProtocolError(JSONRPCErrorCode.TOOL_EXECUTION_ERROR, str(e)) from e

        return success_response(request_id, result)
