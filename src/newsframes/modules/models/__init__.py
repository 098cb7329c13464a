"""Model layer (LLM providers) decoupled from the pipeline."""

from __future__ import annotations

from .base import BaseLLM
from .registry import ModelRegistry, model_registry
from .types import FailureResult, GenerationOptions, failure_result, is_failure

__all__ = [
    "BaseLLM",
    "ModelRegistry",
    "model_registry",
    "FailureResult",
    "GenerationOptions",
    "failure_result",
    "is_failure",
]
