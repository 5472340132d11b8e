"""MCP server exposing the candidate sourcing tools over stdio.

Every tool in :data:`~talentscout.tools.TOOLS` is published with its pydantic
input schema.  Successful calls answer with the result as JSON text; failed
calls answer with an MCP error result carrying the failure message.
Logging goes to stderr so stdout carries only protocol messages.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .errors import ToolCallError
from .tools import TOOLS, ToolContext, call_tool

logger = logging.getLogger(__name__)

SERVER_NAME = "candidate-sourcing"


def build_server(context: ToolContext) -> Server:
    """Create an MCP server whose tool calls run against *context*."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema())
            for tool in TOOLS.values()
        ]

    # Arguments are validated by the tool's pydantic model inside call_tool.
    @server.call_tool(validate_input=False)
    async def handle_call(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        response = await call_tool(context, name, arguments)
        if not response["success"]:
            raise ToolCallError(f"Error: {response['error']}")
        return [types.TextContent(type="text", text=json.dumps(response["result"], indent=2, ensure_ascii=False))]

    return server


async def serve(context: ToolContext | None = None) -> None:
    """Serve MCP requests on stdin/stdout until the client disconnects."""
    server = build_server(context or ToolContext())
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Candidate sourcing MCP server started")
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("Client disconnected, shutting down")
