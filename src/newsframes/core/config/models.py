"""Model and LLM configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelsConfig(BaseModel):
    # Accept both `default_llm` and canonical `default` from TOML/env.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    default_llm: str = Field(default="gemini/gemini-1.5-flash-latest", alias="default")


class LLMConfig(BaseModel):
    """Provider-agnostic generation controls.

    Used whenever a prompt does not set its own value.
    """

    model_config = ConfigDict(extra="ignore")

    temperature: float = 0.3
    max_output_tokens: int = 2048
    timeout_sec: float = 60.0
    # Ask providers for a JSON response body (Gemini responseMimeType,
    # OpenAI response_format).
    json_output: bool = True


class PipelineConfig(BaseModel):
    """Graph execution controls."""

    model_config = ConfigDict(extra="ignore")

    # Empty means the bundled headline_analyzer graph_config.json
    graph_config_path: str = ""
    step_limit: int = 25
    max_concurrency: int = 5
