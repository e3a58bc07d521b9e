from .loader import load_config
from .models import (
    FileInfoConfig,
    GitLabConfig,
    ResolverConfig,
    RetryConfig,
)

__all__ = [
    "FileInfoConfig",
    "GitLabConfig",
    "ResolverConfig",
    "RetryConfig",
    "load_config",
]
