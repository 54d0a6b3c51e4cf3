"""agent-mcp init — scaffold an agent-mcp.yaml in the current directory."""

from __future__ import annotations

from pathlib import Path

import click

from agent_mcp.config.parser import DEFAULT_CONFIG_NAME

CONFIG_FILENAME = DEFAULT_CONFIG_NAME

TEMPLATE_YAML = """\
# agent-mcp configuration
# Every key is optional; remove this file to run with the defaults.
version: "1"

# Level for the server's own log (written to stderr)
log_level: INFO

agents:
  gemini:
    # Executable to run (default: gemini on PATH)
    # command: /usr/local/bin/gemini
    # Extra flags appended after the built-in ones
    args: []
    # Attach a hint telling the client to display the result directly
    render_hint: true

  claude:
    # command: claude
    args: []
    # Environment variables removed before the agent starts,
    # e.g. to make the CLI use subscription auth instead of an API key
    unset_env:
      - ANTHROPIC_API_KEY
    # env:
    #   NODE_OPTIONS: --max-old-space-size=2048
"""


@click.command()
@click.option(
    "--force",
    is_flag=True,
    help=f"Overwrite existing {CONFIG_FILENAME} if it exists.",
)
def init(force: bool) -> None:
    """Write a template agent-mcp.yaml in the current directory."""
    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists() and not force:
        raise click.ClickException(
            f"{CONFIG_FILENAME} already exists. Use --force to overwrite."
        )

    try:
        config_path.write_text(TEMPLATE_YAML, encoding="utf-8")
    except OSError as exc:
        raise click.ClickException(f"Cannot write {CONFIG_FILENAME}: {exc}") from exc
    click.echo(f"  Created {CONFIG_FILENAME}")

    click.echo()
    click.echo("Next steps:")
    click.echo(f"  1. Edit {CONFIG_FILENAME} to adjust agent launch settings")
    click.echo("  2. Register `agent-mcp serve gemini` or `agent-mcp serve claude`")
    click.echo("     as a stdio MCP server in your client")
