"""CLI entry point for prdigest.

Commands:
  serve   - listen for GitHub pull_request webhooks and review each event
  review  - run the review pipeline once for a given pull request
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from prdigest_cli.commands.review import review_cmd
from prdigest_cli.commands.serve import serve_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("prdigest"),
    prog_name="prdigest",
)
@click.option(
    "--config",
    "config_path",
    default=".prdigest.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRDIGEST_CONFIG",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.pass_context
def main(ctx: click.Context, config_path: str, log_level: str):
    """Commit-by-commit AI review bot for GitHub pull requests."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(serve_cmd)
main.add_command(review_cmd)
