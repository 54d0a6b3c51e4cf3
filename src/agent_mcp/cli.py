"""Root CLI group and version flag."""

import click

from agent_mcp import __version__
from agent_mcp.commands.init import init
from agent_mcp.commands.serve import serve


@click.group()
@click.version_option(version=__version__, prog_name="agent-mcp")
def cli() -> None:
    """agent-mcp — expose command-line AI agents as MCP tools."""


cli.add_command(init)
cli.add_command(serve)
