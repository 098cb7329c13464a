"""Framework-free request handler.

``handle_request`` takes an HTTP method and raw body and returns a
``HandlerResponse``; wiring it to a concrete HTTP server is left to the
deployment. The success body always has the same top-level shape
(``message``, ``data``, ``graph_structure``); callers tell success from
partial failure by the flags and status fields inside ``data``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from newsframes.core.exceptions import PipelineRunError
from newsframes.cortex.graphs.headline_analyzer import ANALYSIS_FIELDS, HeadlineAnalyzer
from newsframes.cortex.services.placeholders import STATUS_NO_INPUT
from newsframes.cortex.steps.functions import UNAVAILABLE_PREFIX
from newsframes.modules.models.types import is_failure

from .payloads import AnalyzeRequest

logger = logging.getLogger(__name__)

COMMON_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

MSG_OK = "Processing successful"
MSG_ANONYMIZATION_FAILED = "Initial proper noun replacement failed."
MSG_ALL_ANALYSES_FAILED = "All analysis steps failed."
MSG_SYNTHESIS_FAILED = "Synthesis failed or encountered an error."
MSG_REVERSION_SKIPPED = "Final proper noun reversion was skipped or had issues."
MSG_SAVE_FAILED = "Processing completed, but failed to save results to database."


@dataclass
class HandlerResponse:
    status_code: int
    body: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=lambda: dict(COMMON_HEADERS))

    def json(self) -> str:
        return json.dumps(self.body if self.body is not None else {}, default=str)


def build_response_data(state: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "input_headline": state.get("input_headline"),
        "headline_with_placeholders": state.get("headline_with_placeholders"),
        "properNoun_map": state.get("properNoun_map"),
        "anonymization_result": state.get("anonymization_result"),
        "analyses": {name: state.get(f) for name, f in ANALYSIS_FIELDS.items()},
        "analysis_error_flags": state.get("analysis_error_flags"),
        "synthesis_result": state.get("synthesis_result"),
        "main_reverter_details": state.get("main_reverter_details"),
        "flipped_headline": state.get("flipped_headline"),
        "speculative_reverted_headline": state.get("speculative_reverted_headline"),
        "episodic_thematic_reverted_headline": state.get("episodic_thematic_reverted_headline"),
        "violence_type_reverted_headline": state.get("violence_type_reverted_headline"),
        "error_messages": state.get("error_messages") or [],
        "db_save_status": state.get("db_save_status"),
    }


def overall_status_message(state: Mapping[str, Any]) -> str:
    """First matching problem wins, in pipeline order."""
    if is_failure(state.get("anonymization_result")):
        return MSG_ANONYMIZATION_FAILED
    analyses = [state.get(f) for f in ANALYSIS_FIELDS.values()]
    if analyses and all(a is None or is_failure(a) for a in analyses):
        return MSG_ALL_ANALYSES_FAILED
    flipped = state.get("main_flipped_headline_with_placeholders")
    if is_failure(state.get("synthesis_result")) or (
        isinstance(flipped, str) and flipped.startswith(UNAVAILABLE_PREFIX)
    ):
        return MSG_SYNTHESIS_FAILED
    details = state.get("main_reverter_details") or {}
    if details.get("status") == STATUS_NO_INPUT:
        return MSG_REVERSION_SKIPPED
    save_status = state.get("db_save_status")
    if save_status and not save_status.get("success"):
        return MSG_SAVE_FAILED
    return MSG_OK


async def handle_request(
    method: str,
    body: Any,
    *,
    analyzer: HeadlineAnalyzer,
) -> HandlerResponse:
    method = (method or "").upper()
    if method == "OPTIONS":
        return HandlerResponse(status_code=204)
    if method != "POST":
        return HandlerResponse(status_code=405, body={"error": "Method Not Allowed"})

    try:
        request = AnalyzeRequest.from_body(body)
    except ValueError as e:
        logger.info("Rejected request: %s", e)
        return HandlerResponse(status_code=400, body={"error": f"Invalid request: {e}"})

    graph_structure = analyzer.graph_structure
    try:
        state = await analyzer.analyze(request.headline)
    except PipelineRunError as e:
        logger.error("Pipeline execution failed: %s", e)
        return HandlerResponse(
            status_code=500,
            body={
                "error": "Graph execution failed unexpectedly.",
                "details": str(e),
                "step_id": e.step_id,
                "input_headline": request.headline,
                "partial_state": e.partial_state,
                "graph_structure": graph_structure,
            },
        )

    return HandlerResponse(
        status_code=200,
        body={
            "message": overall_status_message(state),
            "data": build_response_data(state),
            "graph_structure": graph_structure,
        },
    )


__all__ = [
    "COMMON_HEADERS",
    "HandlerResponse",
    "build_response_data",
    "overall_status_message",
    "handle_request",
]
