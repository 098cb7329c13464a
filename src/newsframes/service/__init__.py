"""Inbound request handling for the headline analyzer."""

from .handler import HandlerResponse, handle_request
from .payloads import AnalyzeRequest

__all__ = ["AnalyzeRequest", "HandlerResponse", "handle_request"]
