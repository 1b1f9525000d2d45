from __future__ import annotations

import logging
import subprocess
from dataclasses import replace

import click

from prdigest_core.config import Config

logger = logging.getLogger(__name__)


def gh_session_token() -> str | None:
    """Return the token of the local `gh auth login` session, or None."""
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    token = result.stdout.strip() if result.returncode == 0 else ""
    if not token:
        return None
    logger.debug("Using the GitHub token of the gh CLI session.")
    return token


def load_checked_config(config_path: str, overrides: dict | None = None) -> Config:
    """Load the Config and resolve credentials, turning missing ones into usage errors."""
    from prdigest_core.config import load_config

    try:
        config = load_config(config_path, overrides)
    except ValueError as e:
        raise click.UsageError(str(e))

    # load_config already read GITHUB_TOKEN; the gh session is the fallback.
    if config.github_token is None:
        token = gh_session_token()
        if token:
            config = replace(config, github_token=token)
        elif not config.dry_run:
            raise click.UsageError(
                "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
                "Create a token at https://github.com/settings/tokens"
            )

    if not config.api_key:
        key_var = config.openai_key_name if config.provider == "openai" else "ANTHROPIC_API_KEY"
        raise click.UsageError(f"{key_var} environment variable is not set.")

    return config
