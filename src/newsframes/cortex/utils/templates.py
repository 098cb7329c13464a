"""`{{dotted.path}}` templates rendered against pipeline state."""

from __future__ import annotations

import json
import re
from typing import Any, Mapping

_PLACEHOLDER = re.compile(r"\{\{\s*([\w-]+(?:\.[\w-]+)*)\s*\}\}")

_MISSING = object()


def resolve_path(obj: Any, path: str, default: Any = None) -> Any:
    """Resolve ``a.b.c`` inside nested mappings; ``default`` if any hop is missing.

    An empty path returns ``obj`` itself.
    """
    if not path:
        return obj if obj is not None else default
    current = obj
    for key in path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


def _to_text(value: Any) -> str:
    if isinstance(value, (dict, list, bool)):
        return json.dumps(value, ensure_ascii=False, indent=2)
    return str(value)


def render_template(template: str | None, data: Mapping[str, Any]) -> str:
    """Substitute placeholders; unresolved ones are left verbatim."""
    if not template:
        return ""

    def _sub(match: re.Match[str]) -> str:
        value = resolve_path(data, match.group(1), _MISSING)
        if value is _MISSING or value is None:
            return match.group(0)
        return _to_text(value)

    return _PLACEHOLDER.sub(_sub, template)


__all__ = ["resolve_path", "render_template"]
