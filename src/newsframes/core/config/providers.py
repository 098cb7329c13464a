"""Provider configurations for external services."""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class GeminiConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    api_key: str = ""
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"


class OpenAIConfig(BaseModel):
    """Any OpenAI-compatible chat-completions endpoint."""

    model_config = ConfigDict(extra="ignore")

    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    organization: str | None = None


class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    backend: Literal["memory", "postgres"] = "memory"
    dsn: str = ""
    table: str = "news_frames"
    pool_min_size: int = 1
    pool_max_size: int = 5
