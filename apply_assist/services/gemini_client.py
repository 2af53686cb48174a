"""
Gemini API Client

Gemini exposes an OpenAI-compatible endpoint, so we use the openai library
pointed at the Gemini base URL.

Every call is a single outstanding request raced against a deadline:
- client-level timeout = settings.llm_timeout_seconds
- max_retries = 0 (no retry, no backoff)

Replies are free-form text. Callers that expect JSON use extract_json_object(),
which tolerates markdown fences and chatter around the object.
"""
import json
import re
from typing import Optional

import openai
from openai import OpenAI

from apply_assist.core.config import get_settings
from apply_assist.core.logging_config import get_logger

logger = get_logger(__name__)


class LLMServiceError(RuntimeError):
    """Raised when the completion service fails."""


class LLMTimeoutError(LLMServiceError):
    """Raised when the completion service misses its deadline."""


class LLMResponseError(LLMServiceError):
    """Raised when a reply contains no parseable JSON object."""


_FENCED_JSON_RE = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```")
_FIRST_OBJECT_RE = re.compile(r"\{[\s\S]*?\}")
_GREEDY_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> dict:
    """
    Extract the first JSON object from an LLM reply.

    Order of attempts:
    1. fenced ```json block
    2. first non-greedy {...} match (flat action objects)
    3. greedy {...} match (nested objects like parsed resumes)
    """
    if not text:
        raise LLMResponseError("Empty LLM response")

    candidates = []
    fenced = _FENCED_JSON_RE.search(text)
    if fenced:
        candidates.append(fenced.group(1).strip())
    first = _FIRST_OBJECT_RE.search(text)
    if first:
        candidates.append(first.group(0))
    greedy = _GREEDY_OBJECT_RE.search(text)
    if greedy:
        candidates.append(greedy.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data

    raise LLMResponseError("No JSON object found in LLM response")


class GeminiClient:
    """
    Wrapper for the Gemini completion API.
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        settings = get_settings()
        self.timeout = settings.llm_timeout_seconds
        self.temperature = settings.llm_temperature
        self.model = model or settings.gemini_model
        self.client = OpenAI(
            api_key=api_key or settings.gemini_api_key or "missing-key",
            base_url=settings.gemini_base_url,
            timeout=self.timeout,
            max_retries=0
        )

    def generate(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        system_prompt: Optional[str] = None
    ) -> str:
        """
        Send a single prompt and return the raw reply text.

        Raises:
            LLMTimeoutError: deadline exceeded
            LLMServiceError: any other API failure
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "timeout": timeout or self.timeout,
        }
        if max_tokens:
            kwargs["max_tokens"] = max_tokens

        try:
            response = self.client.chat.completions.create(**kwargs)
        except openai.APITimeoutError as e:
            logger.warning("LLM call exceeded %.1fs deadline", kwargs["timeout"])
            raise LLMTimeoutError("LLM timeout") from e
        except openai.OpenAIError as e:
            logger.error("LLM API error: %s", e)
            raise LLMServiceError(str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        return (content or "").strip()

    def generate_json(self, prompt: str, **kwargs) -> dict:
        """Generate and extract the first JSON object from the reply."""
        return extract_json_object(self.generate(prompt, **kwargs))

    def test_connection(self) -> bool:
        """Test if Gemini API is reachable"""
        try:
            response = self.generate("Reply with exactly: OK", max_tokens=10)
            return "OK" in response.upper()
        except LLMServiceError as e:
            logger.error("Gemini connection failed: %s", e)
            return False


# Singleton instance
_gemini_client: Optional[GeminiClient] = None


def get_gemini_client() -> GeminiClient:
    """Get or create Gemini client (singleton pattern)"""
    global _gemini_client
    if _gemini_client is None:
        _gemini_client = GeminiClient()
    return _gemini_client
