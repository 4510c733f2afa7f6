"""MCP Server for the UE Data Miner.

Exposes the blueprint class hierarchy to agents:
  - derived_classes: every class derived from a base class
  - is_derived_from: check one class against an ancestor
  - resolve_attributes: inherited display properties of a class
  - list_miners: available data miners

The hierarchy is built on the first tool call from the configured
content_path (config.json or DATA_MINER_CONTENT) and kept for the process.

Usage:
    # Run directly (stdio transport)
    python mcp_server.py

    # Add to Claude Desktop config:
    {
        "mcpServers": {
            "data-miner": {
                "command": "data-miner-mcp"
            }
        }
    }
"""

import json
import os
import sys
import threading
from pathlib import Path
from typing import Optional

# Support source-based invocation:
#   python /path/to/repo/data_miner/mcp_server.py
if __package__ in (None, ""):
    repo_root_str = str(Path(__file__).resolve().parent.parent)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from data_miner.assets import PropertyTag, open_source
from data_miner.core import configure_logging, get_logger, resolve_run_options
from data_miner.errors import HierarchyError
from data_miner.hierarchy import AttributeResolver, ClassHierarchyIndex, QuerySpec
from data_miner.miners import iter_miner_classes

logger = get_logger(__name__)

server = Server("data-miner")

_index: Optional[ClassHierarchyIndex] = None
_index_lock = threading.Lock()


def get_index() -> ClassHierarchyIndex:
    """Build the hierarchy once per process."""
    global _index
    if _index is not None:
        return _index
    with _index_lock:
        if _index is None:
            options = resolve_run_options()
            if not options["content_path"]:
                raise HierarchyError(
                    "No content_path configured. Set DATA_MINER_CONTENT or run "
                    "'data-miner config --set content_path=<dir>'."
                )
            source = open_source(options["content_path"], options["parser_path"])
            _index = ClassHierarchyIndex.build(source.iter_classes())
    return _index


# =============================================================================
# Tool implementations (sync, testable without a server)
# =============================================================================


def derived_classes(class_name: str, limit: int = 200) -> dict:
    index = get_index()
    derived = index.get_derived_classes(class_name)
    return {
        "class": class_name,
        "known": class_name in index,
        "total": len(derived),
        "classes": [
            {"name": c.name, "super": c.super_name, "path": c.package_path}
            for c in derived[:limit]
        ],
    }


def is_derived_from(class_name: str, ancestor: str) -> dict:
    index = get_index()
    chain = [c.name for c in index.iter_ancestors(class_name, include_self=True)]
    return {
        "class": class_name,
        "ancestor": ancestor,
        "result": index.is_derived_from(class_name, ancestor),
        "chain": chain,
    }


def resolve_attributes(
    class_name: str,
    name_property: str = "Name",
    description_property: Optional[str] = "Description",
    icon_property: Optional[str] = "Icon",
    extras: Optional[list[str]] = None,
) -> dict:
    index = get_index()
    asset_class = index.get(class_name)
    if asset_class is None:
        return {"error": f"Unknown class: {class_name}"}

    spec = QuerySpec.display(
        name=name_property,
        description=description_property,
        icon=icon_property,
        extras=extras or (),
    )
    query = AttributeResolver(index).resolve(asset_class, spec)

    values = {}
    for slot, value in query.values.items():
        if isinstance(value, PropertyTag):
            values[slot] = {"type": value.type, "value": value.value}
        else:
            values[slot] = str(value)
    return {"class": class_name, "values": values, "missing": query.missing}


def list_miners() -> dict:
    return {
        "miners": [
            {
                "name": m.name,
                "default_enabled": m.default_enabled,
                "requires_hierarchy": m.requires_hierarchy,
            }
            for m in iter_miner_classes()
        ]
    }


# =============================================================================
# MCP Tool Definitions
# =============================================================================


@server.list_tools()
async def list_tools() -> list[Tool]:
    """Return available tools."""
    return [
        Tool(
            name="derived_classes",
            description="""List every blueprint class derived (directly or transitively) from a class.

Native code classes such as HDaoJuBase work as roots.

Examples:
  - "HDaoJuWuQi" → every weapon blueprint
  - "HCharacterDongWu" → every animal NPC""",
            inputSchema={
                "type": "object",
                "properties": {
                    "class_name": {"type": "string", "description": "Base class name"},
                    "limit": {
                        "type": "integer",
                        "description": "Max classes returned (default 200)",
                        "default": 200,
                    },
                },
                "required": ["class_name"],
            },
        ),
        Tool(
            name="is_derived_from",
            description="Check whether a class derives from an ancestor. Returns the ancestor chain.",
            inputSchema={
                "type": "object",
                "properties": {
                    "class_name": {"type": "string"},
                    "ancestor": {"type": "string"},
                },
                "required": ["class_name", "ancestor"],
            },
        ),
        Tool(
            name="resolve_attributes",
            description="""Resolve display properties of a class, falling back to ancestor defaults.

Returns each resolved value and the slots no class in the chain sets.""",
            inputSchema={
                "type": "object",
                "properties": {
                    "class_name": {"type": "string"},
                    "name_property": {"type": "string", "default": "Name"},
                    "description_property": {"type": "string", "default": "Description"},
                    "icon_property": {"type": "string", "default": "Icon"},
                    "extras": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Additional property names to resolve",
                    },
                },
                "required": ["class_name"],
            },
        ),
        Tool(
            name="list_miners",
            description="List available data miners.",
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "derived_classes":
            result = derived_classes(
                class_name=arguments.get("class_name", ""),
                limit=arguments.get("limit", 200),
            )
        elif name == "is_derived_from":
            result = is_derived_from(
                class_name=arguments.get("class_name", ""),
                ancestor=arguments.get("ancestor", ""),
            )
        elif name == "resolve_attributes":
            result = resolve_attributes(
                class_name=arguments.get("class_name", ""),
                name_property=arguments.get("name_property", "Name"),
                description_property=arguments.get("description_property", "Description"),
                icon_property=arguments.get("icon_property", "Icon"),
                extras=arguments.get("extras"),
            )
        elif name == "list_miners":
            result = list_miners()
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2, default=str))]

    except Exception as e:
        logger.warning("Tool %s failed: %s", name, e)
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]


# =============================================================================
# Main
# =============================================================================


async def main():
    """Run the MCP server."""
    configure_logging(debug=bool(os.environ.get("DATA_MINER_MCP_DEBUG")) or None)

    print("UE Data Miner MCP Server", file=sys.stderr)
    print("Tools: derived_classes, is_derived_from, resolve_attributes, list_miners", file=sys.stderr)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def cli_main():
    """Entry point for the data-miner-mcp command."""
    import asyncio

    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
