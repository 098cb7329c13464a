"""Render a prompt template into role-tagged messages."""

from __future__ import annotations

from typing import Any, Mapping

from langchain_core.messages import BaseMessage, ChatMessage, HumanMessage, SystemMessage

from ..engine.definition import PromptTemplate
from ..utils.templates import render_template


def build_messages(prompt: PromptTemplate, data: Mapping[str, Any]) -> list[BaseMessage]:
    """System, developer and user messages in that order; empty parts are skipped."""
    messages: list[BaseMessage] = []
    system = render_template(prompt.system, data)
    if system:
        messages.append(SystemMessage(content=system))
    developer = render_template(prompt.developer, data)
    if developer:
        messages.append(ChatMessage(role="developer", content=developer))
    user = render_template(prompt.user, data)
    if user:
        messages.append(HumanMessage(content=user))
    return messages


__all__ = ["build_messages"]
