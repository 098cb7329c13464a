"""Main configuration class that combines all config modules."""

import logging
import tomllib
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .base import get_bool_env, get_env, get_int_env
from .models import LLMConfig, ModelsConfig, PipelineConfig
from .providers import GeminiConfig, OpenAIConfig, StorageConfig

logger = logging.getLogger(__name__)

DEFAULT_TOML_NAME = "settings.toml"


class Config(BaseModel):
    """Main configuration class for newsframes.

    Configuration is loaded from multiple sources in priority order:
    1. Environment variables
    2. TOML configuration file
    3. Default values
    """

    model_config = ConfigDict(extra="ignore")

    # Core settings
    debug: bool = False
    log_level: str = "INFO"

    # Sub-configurations
    models: ModelsConfig = Field(default_factory=ModelsConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    # Provider configurations
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)

    # Internal state
    loaded_from: list[Path] = Field(default_factory=list)

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> "Config":
        """Load configuration from files and environment."""
        load_dotenv()

        env_path = get_env("NEWSFRAMES_CONFIG_PATH")
        if config_path:
            toml_path = Path(config_path)
        elif env_path:
            toml_path = Path(env_path).resolve()
        else:
            toml_path = Path.cwd() / DEFAULT_TOML_NAME

        config = cls()
        if toml_path.exists():
            try:
                with open(toml_path, "rb") as f:
                    toml_data = tomllib.load(f)

                # Merge TOML data with defaults using Pydantic
                config_dict = config.model_dump(by_alias=False)
                for key, value in toml_data.items():
                    if isinstance(value, dict) and isinstance(config_dict.get(key), dict):
                        config_dict[key].update(value)
                    else:
                        config_dict[key] = value
                config = cls.model_validate(config_dict)
                config.loaded_from.append(toml_path)
            except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
                logger.warning("Failed to load TOML config from %s: %s", toml_path, e)

        config._apply_env_overrides()
        return config

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to config."""
        # Model configuration
        if llm_val := get_env("NEWSFRAMES_DEFAULT_LLM"):
            self.models.default_llm = llm_val

        # Providers
        if gemini_key := get_env("GEMINI_API_KEY"):
            self.gemini.api_key = gemini_key
        if openai_key := get_env("OPENAI_API_KEY"):
            self.openai.api_key = openai_key
        if openai_url := get_env("OPENAI_BASE_URL"):
            self.openai.base_url = openai_url

        # Pipeline
        if graph_path := get_env("NEWSFRAMES_GRAPH_CONFIG_PATH"):
            self.pipeline.graph_config_path = graph_path
        if step_limit := get_int_env("NEWSFRAMES_STEP_LIMIT"):
            self.pipeline.step_limit = step_limit

        # Storage
        if backend := get_env("NEWSFRAMES_STORAGE_BACKEND"):
            self.storage.backend = backend  # type: ignore[assignment]
        if dsn := get_env("NEWSFRAMES_POSTGRES_DSN"):
            self.storage.dsn = dsn

        # Debug/Logging
        if (debug_val := get_bool_env("NEWSFRAMES_DEBUG")) is not None:
            self.debug = debug_val
        if log_level := get_env("NEWSFRAMES_LOG_LEVEL"):
            self.log_level = log_level


# ---- Global config management ----

_GLOBAL_CONFIG: Config | None = None


def get_core_config() -> Config:
    """Return process-global core config."""
    global _GLOBAL_CONFIG
    if _GLOBAL_CONFIG is None:
        _GLOBAL_CONFIG = Config.load()
    return _GLOBAL_CONFIG


def set_core_config(config: Config) -> None:
    """Set the global core config."""
    global _GLOBAL_CONFIG
    _GLOBAL_CONFIG = config
