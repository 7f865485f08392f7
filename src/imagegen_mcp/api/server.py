#!/usr/bin/env python
"""
MCP server exposing OpenAI image generation as tools.

Run with `imagegen-mcp` (console script) or `python -m imagegen_mcp.api.server`.
Configuration comes from the environment or a local .env file:
OPENAI_API_KEY (required), OPENAI_API_URL (optional alternate endpoint).
"""

from __future__ import annotations

import sys

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from imagegen_mcp.api.dispatcher import ToolDispatcher
from imagegen_mcp.config import ConfigurationError, Settings, load_settings
from imagegen_mcp.logging_config import configure_logging, get_logger
from imagegen_mcp.providers.openai_provider import OpenAIImageProvider

SERVER_NAME = "image-generation-server"
SERVER_VERSION = "1.0.0"

log = get_logger(__name__)


def create_server(dispatcher: ToolDispatcher) -> Server:
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [types.Tool.model_validate(tool) for tool in dispatcher.list_tools()]

    # Registered directly rather than through @server.call_tool(): McpError
    # raised by the dispatcher must reach the client as a protocol error,
    # and the decorator would fold it into an isError result.
    async def call_tool(req: types.CallToolRequest) -> types.ServerResult:
        result = await dispatcher.call_tool(req.params.name, req.params.arguments or {})
        return types.ServerResult(types.CallToolResult.model_validate(result))

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


def build_dispatcher(settings: Settings) -> ToolDispatcher:
    provider = OpenAIImageProvider(settings)
    return ToolDispatcher(provider)


async def serve(settings: Settings) -> None:
    server = create_server(build_dispatcher(settings))
    async with stdio_server() as (read_stream, write_stream):
        log.info("Image Generation MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> int:
    configure_logging()
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        log.error("%s", exc)
        return 1

    configure_logging(settings.log_level)
    try:
        anyio.run(serve, settings)
    except KeyboardInterrupt:
        log.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
