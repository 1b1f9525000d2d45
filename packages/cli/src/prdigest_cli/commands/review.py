"""review command: run the review pipeline once for a pull request."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.markdown import Markdown

from prdigest_cli.commands.common import load_checked_config
from prdigest_core.models import PullRequestRef
from prdigest_core.pipeline import Pipeline

console = Console()


@click.command("review")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option(
    "--dry-run",
    "dry_run",
    is_flag=True,
    help="Print the report instead of posting it on GitHub.",
)
@click.pass_context
def review_cmd(ctx, pr_number: int, dry_run: bool):
    """Review a single pull request of the configured repository."""
    config = load_checked_config(ctx.obj["config_path"], {"dry_run": dry_run or None})
    pipeline = Pipeline.from_config(config)

    pr = PullRequestRef(owner=config.owner, repo=config.repo, number=pr_number)
    summary = asyncio.run(pipeline.run(pr))

    if summary is None:
        raise click.ClickException(f"Review of {pr.full_repo}#{pr_number} failed; see the log for details.")

    if summary.posted:
        console.print(
            f"[green]Posted review of {summary.review_count}/{summary.chunk_count} commit(s) "
            f"on {pr.full_repo}#{pr_number}.[/green]"
        )
    else:
        console.print(Markdown(summary.report))
        console.print(f"[bold]Dry run complete. {summary.review_count} commit review(s) not posted.[/bold]")
