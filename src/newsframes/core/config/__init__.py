"""Modular configuration system for newsframes."""

from .base import get_bool_env, get_env, get_int_env
from .main import Config, get_core_config, set_core_config
from .models import LLMConfig, ModelsConfig, PipelineConfig
from .providers import GeminiConfig, OpenAIConfig, StorageConfig

__all__ = [
    # Main classes
    "Config",
    # Main functions
    "get_core_config",
    "set_core_config",
    # Base utilities
    "get_env",
    "get_bool_env",
    "get_int_env",
    # Model configs
    "ModelsConfig",
    "LLMConfig",
    "PipelineConfig",
    # Provider configs
    "GeminiConfig",
    "OpenAIConfig",
    "StorageConfig",
]
