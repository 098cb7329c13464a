"""Request handler: method/input rejection, fixed response shape, status messages."""

from __future__ import annotations

import json

import httpx
import pytest

HEADLINE = "Dog attacks 4-year-old causing injuries"


def _analyzer(client, store=None):
    from newsframes.core.config import Config
    from newsframes.cortex.graphs.headline_analyzer import build_headline_pipeline
    from newsframes.modules.providers.storage.memory import InMemoryHeadlineStore

    cfg = Config.model_validate({"models": {"default_llm": "fake/test"}})
    return build_headline_pipeline(
        cfg, client=client, store=store if store is not None else InMemoryHeadlineStore()
    )


class TestRejection:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    async def test_unsupported_method(self, method, client_factory):
        from newsframes.service.handler import handle_request

        calls = []
        analyzer = _analyzer(client_factory(lambda m: calls.append(m) or {}))
        response = await handle_request(method, json.dumps({"headline": HEADLINE}), analyzer=analyzer)
        assert response.status_code == 405
        assert response.body == {"error": "Method Not Allowed"}
        assert calls == []

    @pytest.mark.asyncio
    async def test_options_preflight(self, client_factory):
        from newsframes.service.handler import handle_request

        response = await handle_request("OPTIONS", None, analyzer=_analyzer(client_factory(lambda m: {})))
        assert response.status_code == 204
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        ["", "{}", '{"headline": ""}', '{"headline": "   "}', '{"headline": 42}', "not json", "[1]"],
    )
    async def test_missing_or_empty_headline(self, body, client_factory):
        from newsframes.service.handler import handle_request

        calls = []
        analyzer = _analyzer(client_factory(lambda m: calls.append(m) or {}))
        response = await handle_request("POST", body, analyzer=analyzer)
        assert response.status_code == 400
        assert response.body["error"].startswith("Invalid request:")
        assert calls == []


class TestSuccessShape:
    @pytest.mark.asyncio
    async def test_fixed_top_level_shape(self, client_factory, responder_factory):
        from newsframes.service.handler import MSG_OK, handle_request

        analyzer = _analyzer(client_factory(responder_factory()))
        response = await handle_request("post", {"headline": f"  {HEADLINE} "}, analyzer=analyzer)

        assert response.status_code == 200
        assert set(response.body) == {"message", "data", "graph_structure"}
        assert response.body["message"] == MSG_OK
        data = response.body["data"]
        assert data["input_headline"] == HEADLINE
        assert set(data["analyses"]) == {
            "cognitive_frames",
            "speculative_reframing",
            "euphemism",
            "episodic_thematic",
            "violence_type",
        }
        assert data["flipped_headline"]
        assert data["db_save_status"]["success"] is True
        assert json.loads(response.json())["data"]["input_headline"] == HEADLINE

    @pytest.mark.asyncio
    async def test_save_failure_is_still_http_success(
        self, client_factory, responder_factory, failing_store
    ):
        from newsframes.service.handler import MSG_SAVE_FAILED, handle_request

        analyzer = _analyzer(client_factory(responder_factory()), store=failing_store)
        response = await handle_request("POST", {"headline": HEADLINE}, analyzer=analyzer)

        assert response.status_code == 200
        assert response.body["data"]["db_save_status"]["success"] is False
        assert response.body["message"] == MSG_SAVE_FAILED

    @pytest.mark.asyncio
    async def test_synthesis_failure_message(self, client_factory, responder_factory):
        from newsframes.service.handler import MSG_SYNTHESIS_FAILED, handle_request

        responder = responder_factory({"synthesizer": "no json"})
        response = await handle_request(
            "POST", {"headline": HEADLINE}, analyzer=_analyzer(client_factory(responder))
        )
        assert response.status_code == 200
        assert response.body["message"] == MSG_SYNTHESIS_FAILED

    @pytest.mark.asyncio
    async def test_all_analyses_failed_message(self, client_factory, responder_factory):
        from newsframes.service.handler import MSG_ALL_ANALYSES_FAILED, handle_request

        down = httpx.ConnectError("down")
        responder = responder_factory(
            {
                name: down
                for name in (
                    "cognitive_frames",
                    "speculative_reframing",
                    "euphemism",
                    "episodic_thematic",
                    "violence_type",
                )
            }
        )
        response = await handle_request(
            "POST", {"headline": HEADLINE}, analyzer=_analyzer(client_factory(responder))
        )
        assert response.body["message"] == MSG_ALL_ANALYSES_FAILED


class TestRunFailure:
    @pytest.mark.asyncio
    async def test_run_error_returns_500_with_partial_state(self, client_factory, responder_factory):
        from newsframes.core.exceptions import PipelineRunError
        from newsframes.service.handler import handle_request

        analyzer = _analyzer(client_factory(responder_factory()))

        async def boom(headline):
            raise PipelineRunError(
                "Step 'saver' failed: disk on fire",
                partial_state={"input_headline": headline},
                step_id="saver",
            )

        analyzer.analyze = boom
        response = await handle_request("POST", {"headline": HEADLINE}, analyzer=analyzer)

        assert response.status_code == 500
        assert response.body["error"] == "Graph execution failed unexpectedly."
        assert response.body["step_id"] == "saver"
        assert response.body["partial_state"] == {"input_headline": HEADLINE}
        assert response.body["graph_structure"]["entry"] == "anonymizer"


class TestOverallStatusMessage:
    def test_first_problem_wins(self):
        from newsframes.modules.models.types import failure_result
        from newsframes.service.handler import (
            MSG_ANONYMIZATION_FAILED,
            MSG_OK,
            MSG_REVERSION_SKIPPED,
            overall_status_message,
        )

        ok = {"frame_type": "x"}
        base = {
            "cognitive_frames_analysis_result": ok,
            "synthesis_result": {"flipped_headline": "y"},
            "main_flipped_headline_with_placeholders": "y",
            "main_reverter_details": {"status": "Completed"},
            "db_save_status": {"success": True},
        }
        assert overall_status_message(base) == MSG_OK
        assert (
            overall_status_message({**base, "anonymization_result": failure_result("x")})
            == MSG_ANONYMIZATION_FAILED
        )
        assert (
            overall_status_message(
                {**base, "main_reverter_details": {"status": "Skipped - no input text"}}
            )
            == MSG_REVERSION_SKIPPED
        )
