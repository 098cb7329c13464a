"""Request payloads."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    headline: str

    @field_validator("headline")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Headline is required and must be a non-empty string.")
        return value

    @classmethod
    def from_body(cls, body: Any) -> "AnalyzeRequest":
        """Accept a raw JSON body (str/bytes) or an already-decoded mapping.

        Raises ``ValueError`` (pydantic's ``ValidationError`` included).
        """
        if isinstance(body, (bytes, bytearray)):
            body = body.decode("utf-8")
        if body is None or body == "":
            body = {}
        if isinstance(body, str):
            body = json.loads(body)
        if not isinstance(body, dict):
            raise ValueError("Request body must be a JSON object.")
        return cls.model_validate(body)


__all__ = ["AnalyzeRequest"]
