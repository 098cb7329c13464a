"""Channel registry for pipeline state.

A channel is a named state field plus a merge rule ``(old, new) -> merged``
and a default factory. The registry is the single authority on which fields
exist: steps read through ``get()`` and every update they return is checked
against it before LangGraph applies it through the same merge functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Annotated, Callable, Iterator, Mapping, TypedDict

from newsframes.core.exceptions import ChannelError

MergeFn = Callable[[Any, Any], Any]
DefaultFn = Callable[[], Any]


def replace(old: Any, new: Any) -> Any:
    """Last write wins."""
    return new


def append(old: Any, new: Any) -> list[Any]:
    """Concatenate lists; a scalar ``new`` is appended as one item."""
    items = list(old or [])
    if isinstance(new, (list, tuple)):
        items.extend(new)
    elif new is not None:
        items.append(new)
    return items


def _none() -> Any:
    return None


@dataclass(frozen=True)
class Channel:
    merge: MergeFn = replace
    default: DefaultFn = _none


class ChannelRegistry:
    """Registered state fields for one graph."""

    def __init__(self, channels: Mapping[str, Channel]) -> None:
        self._channels = dict(channels)

    def __contains__(self, name: object) -> bool:
        return name in self._channels

    def __iter__(self) -> Iterator[str]:
        return iter(self._channels)

    def __len__(self) -> int:
        return len(self._channels)

    def channel(self, name: str) -> Channel:
        try:
            return self._channels[name]
        except KeyError:
            raise ChannelError(f"Unknown state field '{name}'") from None

    def get(self, record: Mapping[str, Any], name: str) -> Any:
        """Current value of ``name`` or its default when absent (or None)."""
        channel = self.channel(name)
        value = record.get(name)
        return channel.default() if value is None else value

    def apply(self, record: Mapping[str, Any], name: str, value: Any) -> dict[str, Any]:
        """Return a new record with ``name`` merged; ``record`` is left untouched."""
        channel = self.channel(name)
        updated = dict(record)
        if name in record:
            updated[name] = channel.merge(record[name], value)
        else:
            updated[name] = value
        return updated

    def apply_update(self, record: Mapping[str, Any], update: Mapping[str, Any]) -> dict[str, Any]:
        self.validate_update(update)
        result = dict(record)
        for name, value in update.items():
            result = self.apply(result, name, value)
        return result

    def validate_update(self, update: Mapping[str, Any]) -> None:
        unknown = [k for k in update if k not in self._channels]
        if unknown:
            raise ChannelError(f"Update writes unregistered state field(s): {sorted(unknown)}")

    def initial(self, values: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Start-of-run record: only explicitly provided fields are set."""
        values = dict(values or {})
        self.validate_update(values)
        return values

    def materialize(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Full view with every registered field, defaults filled in."""
        return {name: self.get(record, name) for name in self._channels}

    def state_schema(self, name: str = "PipelineState") -> type:
        """TypedDict whose Annotated reducers are this registry's merge functions.

        LangGraph turns each annotated field into a reducer channel, so the
        merge rules defined here are the ones applied at runtime.
        """
        fields = {field: Annotated[Any, ch.merge] for field, ch in self._channels.items()}
        return TypedDict(name, fields, total=False)  # type: ignore[operator]


__all__ = ["Channel", "ChannelRegistry", "replace", "append", "MergeFn", "DefaultFn"]
