"""Cortex utilities package."""

from .json import extract_json_object, safe_json_loads, strip_json_fence
from .templates import render_template, resolve_path

__all__ = [
    "extract_json_object",
    "safe_json_loads",
    "strip_json_fence",
    "render_template",
    "resolve_path",
]
