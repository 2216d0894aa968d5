"""
Tests — Text-generation gateway.

Covers:
    - LocalStubProvider (queued replies, canned replies, call log)
    - failure classification (ProviderUnavailable / RequestFailed / MalformedResponse)
    - schema checking of JSON responses
    - provider selection from config
"""

import pytest

from dispatchdesk.ai.gateway import (
    GeminiProvider,
    LocalStubProvider,
    TextGenerationGateway,
    matches_schema,
    parse_json_response,
)
from dispatchdesk.core.exceptions import MalformedResponse, ProviderUnavailable, RequestFailed

SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "score": {"type": "NUMBER"},
        "tags": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["name", "score"],
}


class TestLocalStubProvider:
    def test_queued_replies_in_order(self):
        provider = LocalStubProvider(["one", "two"])
        assert provider.generate("p", "m") == "one"
        assert provider.generate("p", "m") == "two"
        assert len(provider.calls) == 2

    def test_queued_exception_is_raised(self):
        provider = LocalStubProvider([ConnectionError("down")])
        with pytest.raises(ConnectionError):
            provider.generate("p", "m")

    def test_dict_reply_is_serialised(self):
        provider = LocalStubProvider().queue({"name": "x"})
        assert provider.generate("p", "m", response_schema=SCHEMA) == '{"name": "x"}'

    def test_canned_reply_without_queue(self):
        provider = LocalStubProvider()
        assert provider.generate("p", "m")
        assert provider.calls[0]["prompt"] == "p"


class TestGateway:
    def test_no_provider_raises_without_calling(self):
        gw = TextGenerationGateway(provider=None)
        assert gw.configured is False
        with pytest.raises(ProviderUnavailable):
            gw.generate_text("hello")
        with pytest.raises(ProviderUnavailable):
            gw.generate_json("hello", SCHEMA)

    def test_text_is_stripped(self):
        gw = TextGenerationGateway(LocalStubProvider(["  answer \n"]))
        assert gw.generate_text("q") == "answer"

    def test_provider_error_becomes_request_failed(self):
        gw = TextGenerationGateway(LocalStubProvider([RuntimeError("quota exceeded")]))
        with pytest.raises(RequestFailed, match="quota exceeded"):
            gw.generate_text("q")

    def test_single_attempt(self):
        provider = LocalStubProvider([RuntimeError("boom"), "second"])
        gw = TextGenerationGateway(provider)
        with pytest.raises(RequestFailed):
            gw.generate_text("q")
        assert len(provider.calls) == 1

    def test_json_success(self):
        provider = LocalStubProvider([{"name": "a", "score": 7.5, "tags": ["x"]}])
        gw = TextGenerationGateway(provider)
        assert gw.generate_json("q", SCHEMA) == {"name": "a", "score": 7.5, "tags": ["x"]}
        assert provider.calls[0]["response_schema"] is SCHEMA

    def test_invalid_json_is_malformed(self):
        gw = TextGenerationGateway(LocalStubProvider(["not json"]))
        with pytest.raises(MalformedResponse):
            gw.generate_json("q", SCHEMA)

    def test_wrong_shape_is_malformed(self):
        gw = TextGenerationGateway(LocalStubProvider([{"name": "a"}]))
        with pytest.raises(MalformedResponse):
            gw.generate_json("q", SCHEMA)

    def test_empty_json_text_is_malformed(self):
        gw = TextGenerationGateway(LocalStubProvider([""]))
        with pytest.raises(MalformedResponse):
            gw.generate_json("q", SCHEMA)


class TestSchemaChecks:
    def test_fenced_json_is_accepted(self):
        text = '```json\n{"name": "a", "score": 1}\n```'
        assert parse_json_response(text, SCHEMA) == {"name": "a", "score": 1}

    def test_bool_is_not_a_number(self):
        assert not matches_schema({"name": "a", "score": True}, SCHEMA)

    def test_array_item_types(self):
        assert not matches_schema({"name": "a", "score": 1, "tags": [1]}, SCHEMA)
        assert matches_schema({"name": "a", "score": 1, "tags": []}, SCHEMA)

    def test_extra_fields_allowed(self):
        assert matches_schema({"name": "a", "score": 1, "extra": None}, SCHEMA)


class TestFromConfig:
    def test_gemini_without_key_is_unconfigured(self):
        gw = TextGenerationGateway.from_config({"LLM_PROVIDER": "gemini", "GEMINI_API_KEY": ""})
        assert gw.configured is False

    def test_gemini_with_key(self):
        gw = TextGenerationGateway.from_config({
            "LLM_PROVIDER": "gemini",
            "GEMINI_API_KEY": "k",
            "LLM_DEFAULT_CHAT_MODEL": "gemini-2.5-flash",
        })
        assert isinstance(gw.provider, GeminiProvider)
        assert gw.model == "gemini-2.5-flash"

    def test_local_provider(self):
        gw = TextGenerationGateway.from_config({"LLM_PROVIDER": "local"})
        assert isinstance(gw.provider, LocalStubProvider)

    def test_testing_app_is_unconfigured(self, app):
        assert TextGenerationGateway.from_config(app.config).configured is False
