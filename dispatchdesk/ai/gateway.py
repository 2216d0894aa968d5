"""
Project Dispatch Desk
Text-Generation Gateway.

Thin request/response boundary in front of a generative-text provider:
    - Provider abstraction (Google Gemini, local stub)
    - Free-text or schema-checked JSON responses
    - Failure classification: ProviderUnavailable / RequestFailed / MalformedResponse
    - Call logging (purpose, model, latency)

One attempt per call: no retry, no backoff, no timeout beyond the
transport default. Callers decide what a failure means for their feature.

Usage:
    from dispatchdesk.ai.gateway import TextGenerationGateway
    gw = TextGenerationGateway.from_config(app.config)
    text = gw.generate_text(prompt, purpose="project_summary")
    data = gw.generate_json(prompt, PERSONA_SCHEMA, purpose="user_persona")
"""

import json
import logging
import re
import time
from abc import ABC, abstractmethod

from dispatchdesk.core.exceptions import MalformedResponse, ProviderUnavailable, RequestFailed

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "gemini-2.5-flash"


# ── Provider Abstract Base ────────────────────────────────────────────────────

class LLMProvider(ABC):
    """Abstract interface for text-generation providers."""

    @abstractmethod
    def generate(self, prompt: str, model: str, *, response_schema: dict | None = None) -> str:
        """
        Send one generation request.

        Args:
            prompt: Fully interpolated prompt text.
            model: Model identifier string.
            response_schema: When given, the provider is asked for JSON of
                this shape (OpenAPI-subset dict, e.g. {"type": "OBJECT", ...}).

        Returns:
            The raw response text (JSON text when a schema was given).
        """
        ...


# ── Google Gemini Provider ────────────────────────────────────────────────────

class GeminiProvider(LLMProvider):
    """
    Google Gemini API provider (google-genai SDK).

    Environment:
        GEMINI_API_KEY — obtain at https://aistudio.google.com/apikey
    """

    def __init__(self, api_key: str, temperature: float = 0.3):
        self.api_key = api_key
        self.temperature = temperature
        self._client = None

    def _get_client(self):
        if self._client is None:
            from google import genai
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, prompt: str, model: str = DEFAULT_CHAT_MODEL, *, response_schema: dict | None = None) -> str:
        client = self._get_client()
        from google.genai import types

        params = {"temperature": self.temperature}
        if response_schema is not None:
            params["response_mime_type"] = "application/json"
            params["response_schema"] = response_schema

        response = client.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(**params),
        )
        return response.text or ""


# ── Local Stub Provider (for dev/test without API keys) ──────────────────────

class LocalStubProvider(LLMProvider):
    """
    Deterministic provider for development and tests. No API key required.

    Replies queued in ``replies`` are returned in order; an Exception in
    the queue is raised instead of returned. When the queue is empty a
    canned reply is produced (JSON when a schema was requested).
    Every call is recorded in ``calls``.
    """

    def __init__(self, replies: list | None = None):
        self.replies = list(replies or [])
        self.calls: list[dict] = []

    def queue(self, *replies) -> "LocalStubProvider":
        self.replies.extend(replies)
        return self

    def generate(self, prompt: str, model: str = "local-stub", *, response_schema: dict | None = None) -> str:
        self.calls.append({"prompt": prompt, "model": model, "response_schema": response_schema})
        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            if isinstance(reply, (dict, list)):
                return json.dumps(reply, ensure_ascii=False)
            return reply
        return self._canned(response_schema)

    @staticmethod
    def _canned(response_schema: dict | None) -> str:
        if response_schema is None:
            return "Local stub response. Configure GEMINI_API_KEY for real generation."
        properties = response_schema.get("properties", {})
        if "recommendations" in properties:
            return json.dumps({"recommendations": []})
        return json.dumps({
            "historySummary": "Local stub persona.",
            "domains": [],
            "workStyle": "n/a",
            "improvementAreas": "n/a",
        })


# ── Schema checking ──────────────────────────────────────────────────────────

def matches_schema(value, schema: dict) -> bool:
    """Check ``value`` against an OpenAPI-subset schema dict (all listed types)."""
    kind = str(schema.get("type", "")).upper()
    if kind == "OBJECT":
        if not isinstance(value, dict):
            return False
        properties = schema.get("properties", {})
        if any(name not in value for name in schema.get("required", [])):
            return False
        return all(matches_schema(value[k], sub) for k, sub in properties.items() if k in value)
    if kind == "ARRAY":
        if not isinstance(value, list):
            return False
        items = schema.get("items")
        return items is None or all(matches_schema(v, items) for v in value)
    if kind == "STRING":
        return isinstance(value, str)
    if kind == "NUMBER":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if kind == "INTEGER":
        return isinstance(value, int) and not isinstance(value, bool)
    if kind == "BOOLEAN":
        return isinstance(value, bool)
    return True


_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_json_response(text: str, schema: dict):
    """Parse provider JSON text and check its shape, or raise MalformedResponse."""
    raw = (text or "").strip()
    fenced = _FENCE.match(raw)
    if fenced:
        raw = fenced.group(1)
    if not raw:
        raise MalformedResponse("Empty response where JSON was expected")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Response is not valid JSON: {e}") from e
    if not matches_schema(data, schema):
        raise MalformedResponse("Response JSON does not match the expected shape")
    return data


# ── Gateway (Main Interface) ─────────────────────────────────────────────────

class TextGenerationGateway:
    """
    Single-attempt call-and-classify boundary for every AI feature.

    A gateway built without a provider is "not configured": every call
    raises ProviderUnavailable before anything is sent.
    """

    def __init__(self, provider: LLMProvider | None = None, model: str = DEFAULT_CHAT_MODEL):
        self.provider = provider
        self.model = model

    @classmethod
    def from_config(cls, config) -> "TextGenerationGateway":
        """
        Build the gateway from Flask config.

        LLM_PROVIDER=local → LocalStubProvider (no key needed)
        LLM_PROVIDER=gemini (default) → GeminiProvider when GEMINI_API_KEY is set
        anything else, or no key → not configured
        """
        name = (config.get("LLM_PROVIDER") or "").lower()
        model = config.get("LLM_DEFAULT_CHAT_MODEL") or DEFAULT_CHAT_MODEL
        provider = None
        if name == "local":
            provider = LocalStubProvider()
        elif name == "gemini" and config.get("GEMINI_API_KEY"):
            provider = GeminiProvider(api_key=config["GEMINI_API_KEY"])
        if provider is None:
            logger.warning("Text generation provider not configured (LLM_PROVIDER=%s)", name or "-")
        return cls(provider=provider, model=model)

    @property
    def configured(self) -> bool:
        return self.provider is not None

    def generate_text(self, prompt: str, *, purpose: str = "") -> str:
        """Return the generated text (stripped). Raises a GatewayError subclass on failure."""
        return self._call(prompt, purpose=purpose).strip()

    def generate_json(self, prompt: str, schema: dict, *, purpose: str = ""):
        """Return parsed JSON that matches ``schema``. Raises a GatewayError subclass on failure."""
        text = self._call(prompt, purpose=purpose, response_schema=schema)
        try:
            return parse_json_response(text, schema)
        except MalformedResponse as e:
            logger.warning("LLM response malformed purpose=%s model=%s: %s", purpose, self.model, e)
            raise

    def _call(self, prompt: str, *, purpose: str, response_schema: dict | None = None) -> str:
        if self.provider is None:
            raise ProviderUnavailable("No text generation provider credential configured")

        start_time = time.time()
        try:
            text = self.provider.generate(prompt, self.model, response_schema=response_schema)
        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            logger.warning(
                "LLM call failed purpose=%s model=%s latency_ms=%d: %s",
                purpose, self.model, latency_ms, e,
            )
            raise RequestFailed(str(e)) from e

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "LLM call ok purpose=%s model=%s prompt_chars=%d latency_ms=%d",
            purpose, self.model, len(prompt), latency_ms,
        )
        return text or ""
