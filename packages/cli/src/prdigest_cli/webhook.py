"""
Webhook receiver for GitHub pull request events.

Accepted events are answered immediately and reviewed in a background task,
so GitHub's delivery timeout never depends on how long the model takes.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, Header, Request

from prdigest_core.config import Config
from prdigest_core.models import pull_request_from_event
from prdigest_core.pipeline import Pipeline

logger = logging.getLogger(__name__)


def create_app(config: Config, pipeline: Pipeline) -> FastAPI:
    """Create the FastAPI application serving the webhook endpoint."""
    app = FastAPI(title="prdigest", description="Commit-by-commit PR review bot")

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok", "repo": config.full_repo}

    @app.post("/webhooks/github")
    async def handle_github_webhook(
        request: Request,
        background_tasks: BackgroundTasks,
        x_github_event: Optional[str] = Header(None),
    ):
        if x_github_event != "pull_request":
            logger.info("Ignoring %s event", x_github_event)
            return {"status": "ignored", "reason": f"Event type '{x_github_event}' not handled"}

        body = await request.body()
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unparsable webhook payload: %s", e)
            return {"status": "ignored", "reason": "Invalid payload"}
        if not isinstance(payload, dict):
            return {"status": "ignored", "reason": "Invalid payload"}

        pr = pull_request_from_event(payload, config.owner, config.repo)
        if pr is None:
            return {"status": "ignored", "reason": f"Action '{payload.get('action')}' not reviewed"}

        logger.info("Received %s for %s %s", payload.get("action"), pr.full_repo, pr.session_id)
        background_tasks.add_task(pipeline.run, pr)
        return {"status": "queued", "pr": pr.number}

    return app
