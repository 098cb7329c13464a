"""Placeholder codec: best-effort anonymization and pure reversion."""

from __future__ import annotations

import httpx
import pytest


def _codec(client):
    from newsframes.cortex.services.placeholders import PlaceholderCodec

    return PlaceholderCodec(client)


class TestRevert:
    def test_identity_on_empty_map(self):
        from newsframes.cortex.services.placeholders import STATUS_NO_MAP, PlaceholderCodec

        result = PlaceholderCodec.revert("Dog attacks 4-year-old causing injuries", {})
        assert result.final_text == "Dog attacks 4-year-old causing injuries"
        assert result.status == STATUS_NO_MAP
        assert result.replacements_made == {}

    def test_missing_text_reports_no_input(self):
        from newsframes.cortex.services.placeholders import STATUS_NO_INPUT, PlaceholderCodec

        result = PlaceholderCodec.revert(None, {"[PERSON_A]": "Ada"})
        assert result.status == STATUS_NO_INPUT
        assert result.final_text is None

    def test_replaces_every_occurrence_and_skips_absent_tokens(self):
        from newsframes.cortex.services.placeholders import STATUS_COMPLETED, PlaceholderCodec

        mapping = {"[PERSON_A]": "Ada", "[PLACE_A]": "London", "[ORG_A]": "Unused"}
        result = PlaceholderCodec.revert("[PERSON_A] leaves [PLACE_A]; [PERSON_A] waves", mapping)
        assert result.status == STATUS_COMPLETED
        assert result.final_text == "Ada leaves London; Ada waves"
        assert result.replacements_made == {"[PERSON_A]": 2, "[PLACE_A]": 1}
        assert result.map_used == mapping

    def test_tokens_with_regex_metacharacters(self):
        from newsframes.cortex.services.placeholders import PlaceholderCodec

        mapping = {"[A.B*]": "x", "[A]": "y"}
        result = PlaceholderCodec.revert("[A.B*] [A] [AxB*]", mapping)
        assert result.final_text == "x y [AxB*]"

    def test_originals_containing_tokens_are_not_rereplaced(self):
        from newsframes.cortex.services.placeholders import PlaceholderCodec

        mapping = {"[P_1]": "[P_2]", "[P_2]": "Bob"}
        result = PlaceholderCodec.revert("[P_1] and [P_2]", mapping)
        assert result.final_text == "[P_2] and Bob"


class TestAnonymize:
    @pytest.mark.asyncio
    async def test_round_trip_restores_proper_nouns(self, client_factory):
        text = "Macron meets Zelensky in Kyiv"
        reply = {
            "text_with_placeholders": "[PERSON_A] meets [PERSON_B] in [PLACE_A]",
            "properNoun_map": {
                "[PERSON_A]": "Macron",
                "[PERSON_B]": "Zelensky",
                "[PLACE_A]": "Kyiv",
            },
        }
        codec = _codec(client_factory(lambda messages: reply))

        anonymized = await codec.anonymize(text)
        assert not anonymized.failed
        assert "Macron" not in anonymized.text_with_placeholders

        restored = codec.revert(anonymized.text_with_placeholders, anonymized.mapping)
        assert restored.final_text == text

    @pytest.mark.asyncio
    async def test_service_failure_falls_back_to_original(self, client_factory):
        codec = _codec(client_factory(lambda messages: httpx.ConnectError("refused")))

        result = await codec.anonymize("Macron meets Zelensky")
        assert result.text_with_placeholders == "Macron meets Zelensky"
        assert result.mapping == {}
        assert result.failed
        assert result.raw_result["failure_kind"] == "transport"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply",
        [
            {"properNoun_map": {}},
            {"text_with_placeholders": "x", "properNoun_map": ["[A]"]},
            {"text_with_placeholders": "x", "properNoun_map": {"PERSON_A": "Ada"}},
            {"text_with_placeholders": "x", "properNoun_map": {"[A]": 3}},
        ],
    )
    async def test_malformed_reply_falls_back(self, client_factory, reply):
        codec = _codec(client_factory(lambda messages: reply))

        result = await codec.anonymize("Ada visits London")
        assert result.text_with_placeholders == "Ada visits London"
        assert result.mapping == {}
        assert result.failed

    @pytest.mark.asyncio
    async def test_empty_text_does_not_call_service(self, client_factory):
        calls = []

        def responder(messages):
            calls.append(messages)
            return {}

        codec = _codec(client_factory(responder))
        result = await codec.anonymize("   ")
        assert calls == []
        assert result.failed
        assert result.mapping == {}

    @pytest.mark.asyncio
    async def test_no_proper_nouns_is_not_a_failure(self, client_factory):
        text = "Dog attacks 4-year-old causing injuries"
        codec = _codec(
            client_factory(lambda m: {"text_with_placeholders": text, "properNoun_map": {}})
        )

        result = await codec.anonymize(text)
        assert not result.failed
        assert result.text_with_placeholders == text
        assert result.mapping == {}
