"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path
from urllib.parse import urlsplit

import yaml
from pydantic import ValidationError

from .models import FileInfoConfig


def load_config(cli_path: str | None = None) -> FileInfoConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    Both service URLs must be absolute http(s) URLs once env vars are
    expanded, so an unset ``${VAR}`` fails here rather than on first request.
    """
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./fileinfo.yaml"),
        Path.home() / ".fileinfo" / "config.yaml",
    ]

    for path in config_paths:
        if not (path and path.exists()):
            continue
        try:
            with open(path) as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            continue
        try:
            cfg = FileInfoConfig(**_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
        problems = check_service_urls(cfg)
        if problems:
            raise ValueError(f"Invalid config in {path}: {'; '.join(problems)}")
        return cfg

    return FileInfoConfig()


def check_service_urls(cfg: FileInfoConfig) -> list[str]:
    """Return a message for each service URL that can't be requested."""
    problems = []
    for name, url in (("resolver.url", cfg.resolver.url), ("gitlab.url", cfg.gitlab.url)):
        if not url:
            problems.append(f"{name} is not set")
            continue
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            problems.append(f"{name} must be an http(s) URL, got {url!r}")
    return problems


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


CONFIG_TEMPLATE = """\
# fileinfo.yaml

# Revision resolver (Sourcegraph-compatible GraphQL endpoint)
resolver:
  url: "{resolver_url}"
  token_env: "SRC_ACCESS_TOKEN"
  timeout: 30

# Code host used for base commit lookups
gitlab:
  url: "{gitlab_url}"
  token_env: "GITLAB_TOKEN"
  timeout: 30

# Retry while the backing store is still cloning a repository
retry:
  max_attempts: null             # null = keep retrying until the clone finishes
  delay: 1.0                     # seconds between attempts

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""


def render_config_template(
    resolver_url: str = "https://sourcegraph.com", gitlab_url: str = "https://gitlab.com"
) -> str:
    """Fill the `fileinfo config init` template with the given service URLs."""
    return CONFIG_TEMPLATE.format(
        resolver_url=resolver_url.rstrip("/"), gitlab_url=gitlab_url.rstrip("/")
    )


DEFAULT_CONFIG_TEMPLATE = render_config_template()
