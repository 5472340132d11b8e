"""Command-line entry point for TalentScout."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .server import serve
from .tools import TOOLS, ToolContext, call_tool

console = Console()
err_console = Console(stderr=True)

_LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def configure_logging() -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )


def display_tools() -> None:
    """Print the available tools and their arguments."""
    table = Table(title="Available tools", show_header=True, header_style="bold magenta")
    table.add_column("Tool", style="cyan")
    table.add_column("Arguments", style="green")
    table.add_column("Description", style="dim", max_width=60)

    for tool in TOOLS.values():
        properties = tool.input_schema().get("properties", {})
        table.add_row(tool.name, ", ".join(properties) or "-", tool.description)

    console.print(table)


def display_search_results(result: dict) -> None:
    """Render a search page as a table."""
    candidates = result.get("candidates", [])
    if not candidates:
        console.print("[yellow]No candidates matched.[/yellow]")
        return

    table = Table(title=f"Candidates ({len(candidates)})", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="cyan", width=4)
    table.add_column("Name", style="white", max_width=30)
    table.add_column("Title", style="green", max_width=35)
    table.add_column("Company", style="yellow", max_width=20)
    table.add_column("Seniority", justify="center")
    table.add_column("Years", justify="right")
    table.add_column("Source ID", style="dim")

    for c in candidates:
        years = c.get("experience_years")
        table.add_row(
            str(c["index"]),
            c["full_name"],
            c.get("current_title") or c.get("headline") or "",
            c.get("current_company") or "",
            c.get("seniority_level") or "",
            "" if years is None else str(years),
            c["source_id"],
        )
    console.print(table)

    pagination = result.get("pagination", {})
    if pagination.get("has_more"):
        console.print(f"[dim]More results available, cursor: {pagination.get('next_cursor')}[/dim]")


async def _run_call(name: str, arguments: dict) -> int:
    response = await call_tool(ToolContext(), name, arguments)
    if not response["success"]:
        err_console.print(Panel(response["error"], title="Error", border_style="red"))
        return 1
    if name == "search_candidates":
        display_search_results(response["result"])
    else:
        console.print_json(data=response["result"])
    return 0


def main() -> int:
    """Main entry point for the TalentScout CLI."""
    parser = argparse.ArgumentParser(
        description="TalentScout: candidate sourcing tools over LinkedIn profile data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  talentscout serve
  talentscout tools
  talentscout call search_candidates --args '{"titles": ["Data Engineer"], "page_size": 10}'
  talentscout call get_provider_status
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("serve", help="Run the MCP server on stdin/stdout")
    subparsers.add_parser("tools", help="List available tools")
    call_parser = subparsers.add_parser("call", help="Invoke a single tool")
    call_parser.add_argument("name", choices=sorted(TOOLS), help="Tool name")
    call_parser.add_argument("--args", "-a", default="{}", help="Tool arguments as a JSON object")

    args = parser.parse_args()

    load_dotenv()
    configure_logging()

    if args.command == "serve":
        asyncio.run(serve())
        return 0

    if args.command == "tools":
        display_tools()
        return 0

    try:
        arguments = json.loads(args.args)
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]--args is not valid JSON: {exc}[/red]")
        return 2
    if not isinstance(arguments, dict):
        err_console.print("[red]--args must be a JSON object[/red]")
        return 2
    return asyncio.run(_run_call(args.name, arguments))


if __name__ == "__main__":
    sys.exit(main())
