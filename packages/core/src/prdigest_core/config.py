from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional

import yaml

# Placeholder identities used when the environment does not name a target.
DEFAULT_LOGIN = "jaykchen"
DEFAULT_OWNER = "jaykchen"
DEFAULT_REPO = "a-test"
DEFAULT_OPENAI_KEY_NAME = "OPENAI_API_KEY"

DEFAULT_PATCH_HOST = "patch-diff.githubusercontent.com"

# The model context is 4096 tokens; the remainder is left for the prompt and reply.
CONTEXT_WINDOW = 4096
TOKEN_CEILING = 3800

DEFAULT_MODELS = {
    "openai": "gpt-3.5-turbo",
    "anthropic": "claude-sonnet-4-20250514",
}

# Environment variable → Config attribute. Environment wins over the YAML file.
_ENV_KEYS = {
    "LOGIN": "login",
    "OWNER": "owner",
    "REPO": "repo",
    "OPENAI_KEY_NAME": "openai_key_name",
}


@dataclass(frozen=True)
class Config:
    """Process-wide settings, resolved once at start-up and passed explicitly."""

    login: str = DEFAULT_LOGIN
    owner: str = DEFAULT_OWNER
    repo: str = DEFAULT_REPO
    openai_key_name: str = DEFAULT_OPENAI_KEY_NAME
    provider: str = "openai"
    model: Optional[str] = None
    token_ceiling: int = TOKEN_CEILING
    overflow: str = "drop"  # "drop" discards lines past the ceiling; "split" opens a new chunk
    patch_host: str = DEFAULT_PATCH_HOST
    dry_run: bool = False
    github_token: Optional[str] = field(default=None, repr=False)
    api_key: Optional[str] = field(default=None, repr=False)

    @property
    def full_repo(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def model_name(self) -> str:
        return self.model or DEFAULT_MODELS[self.provider]


def load_config(config_path: str = ".prdigest.yml", overrides: Optional[dict] = None) -> Config:
    """
    Build a Config by merging (in order of precedence):
      1. Built-in defaults
      2. .prdigest.yml in the current directory
      3. Environment variables (LOGIN, OWNER, REPO, OPENAI_KEY_NAME)
      4. Explicit overrides (None values are ignored)
    """
    values: dict = {}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        known = {f.name for f in fields(Config)}
        values.update({k: v for k, v in file_config.items() if k in known})

    for env_name, key in _ENV_KEYS.items():
        value = os.environ.get(env_name)
        if value:
            values[key] = value

    if overrides:
        for key, value in overrides.items():
            if value is not None:
                values[key] = value

    config = Config(**values)

    if config.provider not in DEFAULT_MODELS:
        raise ValueError(f"Unknown model provider: {config.provider!r}. Choose 'openai' or 'anthropic'.")
    if config.overflow not in ("drop", "split"):
        raise ValueError(f"Unknown overflow mode: {config.overflow!r}. Choose 'drop' or 'split'.")

    # Resolve credentials from environment variables
    if config.api_key is None:
        key_var = config.openai_key_name if config.provider == "openai" else "ANTHROPIC_API_KEY"
        config = replace(config, api_key=os.environ.get(key_var))
    if config.github_token is None:
        config = replace(config, github_token=os.environ.get("GITHUB_TOKEN"))

    return config
