# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/server.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

HTTP front end.
``POST /`` carries one JSON-RPC request per HTTP request; ``GET /health``
reports liveness. Anything else is answered with a JSON-RPC shaped error.

Usage:
    mcp-qr-generator --port 9999
    mcp-qr-generator --text "https://example.com" --format svg --output qr.svg
"""

# Standard
import asyncio
import sys
import time
from typing import Optional, Sequence

# Third-Party
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

# First-Party
from mcp_qr_generator import __version__
from mcp_qr_generator.config import load_config, parse_command_line_args, ServerConfig
from mcp_qr_generator.dispatcher import ToolDispatcher
from mcp_qr_generator.errors import QRGeneratorError
from mcp_qr_generator.health import health_status
from mcp_qr_generator.jsonrpc import error_response, JSONRPCErrorCode
from mcp_qr_generator.middleware.request_logging_middleware import RequestLoggingMiddleware
from mcp_qr_generator.models import QROptionsInput
from mcp_qr_generator.services.logging_service import LoggingService
from mcp_qr_generator.tools.generator import generate_qr
from mcp_qr_generator.utils.file_utils import expand_output_path, save_qr_to_file

logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

_HTTP_ERROR_MESSAGES = {404: "Not found", 405: "Method not allowed"}


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Server configuration. Defaults to ServerConfig().

    Returns:
        FastAPI: Application serving the JSON-RPC endpoint and the health check.
    """
    config = config or ServerConfig()
    app = FastAPI(title="MCP QR Generator", version=__version__, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.config = config
    app.state.dispatcher = ToolDispatcher(config)
    app.state.started_at = time.monotonic()
    app.add_middleware(RequestLoggingMiddleware)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = _HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=error_response(None, JSONRPCErrorCode.METHOD_NOT_FOUND, message))

    @app.post("/")
    async def rpc_endpoint(request: Request) -> JSONResponse:
        """Handle one JSON-RPC request."""
        body = await request.body()
        try:
            response = await request.app.state.dispatcher.handle_request(body)
        except Exception as e:
            logger.exception("Unhandled error while processing request: %s", e)
            return JSONResponse(status_code=500, content=error_response(None, JSONRPCErrorCode.INTERNAL_ERROR, "Internal server error"))
        return JSONResponse(content=response)

    @app.get("/health")
    async def health_check(request: Request):
        """Report liveness."""
        return health_status(request.app.state.started_at)

    return app


async def run_once(text: str, options: QROptionsInput, config: ServerConfig, output: Optional[str] = None) -> str:
    """Generate a single QR code outside the server.

    Args:
        text: Text to encode.
        options: Caller options.
        config: Server configuration.
        output: File to write. When None the rendered data is returned.

    Returns:
        str: Saved path when ``output`` is given, otherwise the rendered data.
    """
    result = await generate_qr(text, options, config)
    if output:
        return save_qr_to_file(result, expand_output_path(output))
    return result.data


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command line entry point.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].

    Returns:
        int: Process exit status.
    """
    args = parse_command_line_args(argv)
    config = load_config(args)
    logging_service.configure(config)

    if args.text is not None:
        options = QROptionsInput(logo=args.logo, logo_size=args.logo_size)
        try:
            output = asyncio.run(run_once(args.text, options, config, args.output))
        except QRGeneratorError as e:
            logger.error("QR code generation failed: %s", e)
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if args.output:
            print(f"QR code saved to {output}")
        else:
            print(output)
        return 0

    logger.info("Starting MCP QR Generator %s on %s:%d", __version__, config.host, config.port)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
