from pydantic import BaseModel, Field
from typing import Literal


class ResolverConfig(BaseModel):
    url: str = "https://sourcegraph.com"
    token_env: str = "SRC_ACCESS_TOKEN"
    timeout: float = 30.0


class GitLabConfig(BaseModel):
    url: str = "https://gitlab.com"
    token_env: str = "GITLAB_TOKEN"
    timeout: float = 30.0


class RetryConfig(BaseModel):
    # None keeps retrying until the backing store finishes cloning.
    max_attempts: int | None = Field(default=None, ge=1)
    delay: float = Field(default=1.0, ge=0)


class FileInfoConfig(BaseModel):
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    gitlab: GitLabConfig = Field(default_factory=GitLabConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
