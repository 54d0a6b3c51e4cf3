"""agent-mcp serve — run the stdio MCP server for one agent."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from agent_mcp.agent.profiles import PROFILES, get_profile
from agent_mcp.config.models import ServerConfig
from agent_mcp.config.parser import ConfigError, load_config
from agent_mcp.server import build_server

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Send the server's own log to stderr; stdout carries the protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


@click.command()
@click.argument("agent", type=click.Choice(sorted(PROFILES)))
@click.option(
    "-f", "--file", "config_file", type=click.Path(), help="Config file path."
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
def serve(agent: str, config_file: str | None, log_level: str | None) -> None:
    """Serve AGENT as an MCP tool over stdio."""
    try:
        config = load_config(Path(config_file) if config_file else None)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    if log_level:
        config = config.model_copy(update={"log_level": log_level.upper()})

    configure_logging(config.log_level)
    run_server(agent, config)


def run_server(agent: str, config: ServerConfig) -> None:
    """Build the server for *agent* and block until the client disconnects."""
    profile = get_profile(agent)
    server = build_server(profile, config)
    logging.getLogger(__name__).info(
        "Serving %s as MCP server '%s'", profile.display_name, profile.server_name
    )
    server.run("stdio")
