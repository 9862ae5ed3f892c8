"""
Grading Oracle client for HireLoop

Thin async client over an OpenAI-compatible chat completions endpoint
(Groq by default). Exposes a single operation, ``complete(prompt)``, that
returns the model's raw text. Callers parse that text with
``parse_oracle_json``.

Rate-limit responses (HTTP 429) are retried with exponential backoff.
Every other failure is raised immediately as ``OracleUnavailable`` so the
calling component can apply its failure policy.
"""

import json
import logging
import re
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from hireloop.config.settings import Settings, get_settings
from hireloop.core.exceptions import (
    OracleMalformedResponse,
    OracleRateLimited,
    OracleUnavailable,
)

logger = logging.getLogger(__name__)

JSON_ONLY_SUFFIX = (
    "\n\nReturn ONLY a valid JSON object. Do not include markdown formatting, "
    "code blocks, or any extra text."
)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_fences(text: str) -> str:
    """Remove incidental markdown code fences around model output."""
    return _FENCE_RE.sub("", text).strip()


def parse_oracle_json(raw_text: str) -> dict[str, Any]:
    """
    Parse oracle output into a JSON object.

    Raises:
        OracleMalformedResponse: if no JSON object can be recovered
    """
    cleaned = strip_fences(raw_text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        # Fall back to the outermost {...} span
        json_start = cleaned.find("{")
        json_end = cleaned.rfind("}") + 1
        if json_start < 0 or json_end <= json_start:
            raise OracleMalformedResponse("Oracle response contains no JSON object", raw_text)
        try:
            data = json.loads(cleaned[json_start:json_end])
        except json.JSONDecodeError as e:
            raise OracleMalformedResponse(f"Oracle response is not valid JSON: {e}", raw_text) from e

    if not isinstance(data, dict):
        raise OracleMalformedResponse("Oracle response is not a JSON object", raw_text)
    return data


class GradingOracle:
    """
    Async client for the grading oracle.

    The HTTP client is created once and reused; call ``close()`` on shutdown.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the oracle client.

        Args:
            settings: Settings override (defaults to cached app settings)
            client: Pre-built HTTP client, mainly for tests
        """
        self.settings = settings or get_settings()
        self.client = client or httpx.AsyncClient(
            base_url=self.settings.oracle_base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {self.settings.oracle_api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.settings.oracle_timeout_seconds,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    def _extract_content(self, result: dict) -> str:
        """Extract text content from API response, handling list/dict formats."""
        content = result.get("choices", [{}])[0].get("message", {}).get("content", "")

        # Handle case where content is a list (multi-part response)
        if isinstance(content, list):
            text_parts = []
            for part in content:
                if isinstance(part, str):
                    text_parts.append(part)
                elif isinstance(part, dict) and "text" in part:
                    text_parts.append(part["text"])
            content = "".join(text_parts)

        return content if isinstance(content, str) else str(content)

    async def _post(self, prompt: str) -> str:
        payload = {
            "model": self.settings.oracle_model,
            "messages": [
                {"role": "user", "content": prompt + JSON_ONLY_SUFFIX}
            ],
            "temperature": self.settings.oracle_temperature,
            "max_tokens": self.settings.oracle_max_tokens,
            "response_format": {"type": "json_object"},
        }

        try:
            response = await self.client.post("/chat/completions", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429:
                raise OracleRateLimited("Oracle rate limit exceeded") from e
            logger.error(f"Oracle API error: status={e.response.status_code}")
            raise OracleUnavailable(f"Oracle returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Oracle transport error: {e}")
            raise OracleUnavailable(f"Oracle request failed: {e}") from e

        try:
            result = response.json()
        except ValueError as e:
            raise OracleMalformedResponse("Oracle returned a non-JSON envelope", response.text) from e

        return strip_fences(self._extract_content(result))

    async def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the raw completion text.

        Raises:
            OracleRateLimited: rate limit persisted through all retries
            OracleUnavailable: any other transport or HTTP failure
            OracleMalformedResponse: the response envelope was not JSON
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(OracleRateLimited),
            stop=stop_after_attempt(self.settings.oracle_rate_limit_retries + 1),
            wait=wait_exponential(multiplier=self.settings.oracle_backoff_base_seconds),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._post(prompt)
