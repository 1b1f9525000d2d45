"""serve command: run the webhook listener."""

from __future__ import annotations

import logging

import click
import uvicorn

from prdigest_cli.commands.common import load_checked_config
from prdigest_cli.webhook import create_app
from prdigest_core.pipeline import Pipeline

logger = logging.getLogger(__name__)


@click.command("serve")
@click.option("--host", default="0.0.0.0", show_default=True, envvar="PRDIGEST_HOST")
@click.option("--port", default=8080, show_default=True, type=int, envvar="PRDIGEST_PORT")
@click.pass_context
def serve_cmd(ctx, host: str, port: int):
    """Listen for pull_request webhooks and post a review for every opened or updated PR.

    \b
    Environment variables:
      LOGIN, OWNER, REPO   Bot identity and the repository to review
      OPENAI_KEY_NAME      Name of the variable holding the OpenAI key (default OPENAI_API_KEY)
      GITHUB_TOKEN         Token used to post comments (or use gh CLI)
    """
    config = load_checked_config(ctx.obj["config_path"])
    pipeline = Pipeline.from_config(config)

    logger.info("Listening for %s pull requests as %s on %s:%d", config.full_repo, config.login, host, port)
    uvicorn.run(create_app(config, pipeline), host=host, port=port, log_config=None)
