"""Services used by pipeline steps."""

from .generation import GenerationClient
from .placeholders import AnonymizationResult, PlaceholderCodec, ReversionResult

__all__ = ["GenerationClient", "PlaceholderCodec", "AnonymizationResult", "ReversionResult"]
