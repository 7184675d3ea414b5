# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/tool_registry.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Tool catalog.
A static mapping from tool name to its description, input schema, argument
model and handler. Built at import time and never mutated.
"""

# Standard
import base64
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Type

# Third-Party
from mcp.types import ImageContent, TextContent, Tool
from pydantic import BaseModel

# First-Party
from mcp_qr_generator.config import ServerConfig
from mcp_qr_generator.models import ErrorCorrectionLevel, GenerateQRArguments, OutputFormat, SaveQRArguments
from mcp_qr_generator.tools.generator import generate_qr
from mcp_qr_generator.utils.file_utils import expand_output_path, save_qr_to_file
from mcp_qr_generator.utils.image_utils import strip_data_uri

ToolHandler = Callable[[Any, ServerConfig], Awaitable[Dict[str, Any]]]

QR_OPTION_PROPERTIES: Dict[str, Any] = {
    "errorCorrectionLevel": {
        "type": "string",
        "enum": [e.value for e in ErrorCorrectionLevel],
        "description": "Error correction level (L: 7%, M: 15%, Q: 25%, H: 30%)",
    },
    "format": {
        "type": "string",
        "enum": [f.value for f in OutputFormat],
        "description": "Output format",
    },
    "size": {"type": "number", "description": "Size of QR code in pixels (for PNG) or viewBox (for SVG)"},
    "margin": {"type": "number", "description": "Margin around the QR code in modules"},
    "color": {"type": "string", "description": "Color of the QR code (dark modules)"},
    "backgroundColor": {"type": "string", "description": "Background color of the QR code (light modules)"},
    "logo": {"type": "string", "description": "URL, data URI or file path of an image to add as logo in the center of the QR code"},
    "logoSize": {"type": "number", "minimum": 1, "maximum": 100, "description": "Size of the logo as a percentage of the QR code size (1-100)"},
}

TEXT_PROPERTY = {"type": "string", "description": "Text or URL to encode in the QR code"}


@dataclass(frozen=True)
class ToolDefinition:
    """A registered tool.

    Attributes:
        name: Unique tool name.
        description: Human-readable description.
        input_schema: JSON Schema of the tool arguments.
        arguments_model: Pydantic model used to validate arguments.
        handler: Coroutine invoked with validated arguments and the server config.
    """

    name: str
    description: str
    input_schema: Dict[str, Any]
    arguments_model: Type[BaseModel]
    handler: ToolHandler

    def describe(self) -> Dict[str, Any]:
        """Catalog entry as returned by ``tools/list``."""
        tool = Tool(name=self.name, description=self.description, inputSchema=self.input_schema)
        return tool.model_dump(mode="json", by_alias=True, exclude_none=True)


def _content_block(block: BaseModel) -> Dict[str, Any]:
    return block.model_dump(mode="json", by_alias=True, exclude_none=True)


async def handle_generate_qr(args: GenerateQRArguments, config: ServerConfig) -> Dict[str, Any]:
    """Generate a QR code and shape it as tool content.

    Text formats are returned as a text block; png/svg as an image block
    carrying the base64 payload.
    """
    result = await generate_qr(args.text, args, config)

    if result.mime_type.startswith("image/"):
        if result.format is OutputFormat.PNG:
            payload = strip_data_uri(result.data)
        else:
            payload = base64.b64encode(result.data.encode("utf-8")).decode("ascii")
        block = ImageContent(type="image", data=payload, mimeType=result.mime_type)
    else:
        block = TextContent(type="text", text=result.data)

    return {
        "content": [_content_block(block)],
        "structuredContent": {
            "format": result.format.value,
            "size": result.size,
            "content": result.content,
            "timestamp": result.timestamp,
        },
    }


async def handle_save_qr(args: SaveQRArguments, config: ServerConfig) -> Dict[str, Any]:
    """Generate a QR code and write it to ``outputPath``."""
    output_path = expand_output_path(args.output_path)
    result = await generate_qr(args.text, args, config)
    saved_path = save_qr_to_file(result, output_path)

    return {
        "content": [_content_block(TextContent(type="text", text=f"QR code saved to {saved_path}"))],
        "structuredContent": {
            "path": saved_path,
            "format": result.format.value,
            "size": result.size,
        },
    }


def _schema(required: List[str], **extra: Any) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {"text": TEXT_PROPERTY, **extra, **QR_OPTION_PROPERTIES},
        "required": required,
    }


TOOLS: Mapping[str, ToolDefinition] = MappingProxyType(
    {
        "generate_qr": ToolDefinition(
            name="generate_qr",
            description="Generate a QR code from text or URL",
            input_schema=_schema(["text"]),
            arguments_model=GenerateQRArguments,
            handler=handle_generate_qr,
        ),
        "save_qr": ToolDefinition(
            name="save_qr",
            description="Generate a QR code and save it to a file",
            input_schema=_schema(["text", "outputPath"], outputPath={"type": "string", "description": "Path where the QR code will be saved"}),
            arguments_model=SaveQRArguments,
            handler=handle_save_qr,
        ),
    }
)


def list_tools(tools: Mapping[str, ToolDefinition] = TOOLS) -> List[Dict[str, Any]]:
    """Catalog of the given tools in registration order."""
    return [tool.describe() for tool in tools.values()]
