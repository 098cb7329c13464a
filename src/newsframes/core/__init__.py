"""Core configuration and exceptions."""

from .config import Config, get_core_config, set_core_config
from .exceptions import (
    ChannelError,
    ConfigurationError,
    NewsframesError,
    PipelineRunError,
    StepLimitExceededError,
    StorageError,
)

__all__ = [
    "Config",
    "get_core_config",
    "set_core_config",
    "NewsframesError",
    "ConfigurationError",
    "ChannelError",
    "PipelineRunError",
    "StepLimitExceededError",
    "StorageError",
]
