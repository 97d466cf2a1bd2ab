"""
Gemini ``generateContent`` client over REST.

Retries once on a fallback model when the primary model reports a quota
or rate limit problem.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from clprompt.domain.exceptions import ExternalServiceError
from clprompt.infra.config.logging_config import get_logger

QUOTA_PATTERN = re.compile(r"quota|RESOURCE_EXHAUSTED|rate.limit", re.IGNORECASE)
NO_REPLY_MESSAGE = "Gemini returned no reply."


@dataclass
class GeminiResult:
    status_code: int
    data: Dict[str, Any]
    error: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_quota(self) -> bool:
        return self.status_code == 429 or bool(self.error and QUOTA_PATTERN.search(self.error))


def extract_text(data: Dict[str, Any]) -> str:
    """Text of the first part of the first candidate."""
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback") or {}
        reason = feedback.get("blockReason")
        suffix = f" Block reason: {reason}" if reason else ""
        raise ExternalServiceError(NO_REPLY_MESSAGE + suffix)
    parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
    text = (parts[0] or {}).get("text") if parts else ""
    return (text or "").strip()


def _error_message(response: httpx.Response, data: Dict[str, Any]) -> str:
    err = data.get("error")
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    if err:
        return str(err)
    if response.is_success:
        return ""
    return response.reason_phrase or f"HTTP {response.status_code}"


class GeminiClient:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash",
        fallback_model: Optional[str] = "gemini-2.5-flash-lite",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        max_output_tokens: int = 1024,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.fallback_model = fallback_model
        self.base_url = base_url.rstrip("/")
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self._transport = transport
        self._log = get_logger("infra.gemini")

    def build_payload(self, contents: List[Dict[str, Any]], system_text: str) -> Dict[str, Any]:
        return {
            "contents": contents,
            "systemInstruction": {"parts": [{"text": system_text}]},
            "generationConfig": {"maxOutputTokens": self.max_output_tokens},
        }

    async def _call(self, client: httpx.AsyncClient, model: str, payload: Dict[str, Any]) -> GeminiResult:
        url = f"{self.base_url}/models/{model}:generateContent"
        response = await client.post(url, params={"key": self.api_key}, json=payload)
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        result = GeminiResult(response.status_code, data, _error_message(response, data))
        self._log.info(
            "gemini.response", model=model, status=response.status_code, quota=result.is_quota
        )
        return result

    async def generate(self, contents: List[Dict[str, Any]], system_text: str) -> str:
        """Return the reply text; raise ExternalServiceError on any failure."""
        if not self.api_key:
            raise ExternalServiceError("GEMINI_API_KEY not set")

        payload = self.build_payload(contents, system_text)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                result = await self._call(client, self.model, payload)
                if result.is_quota and self.fallback_model and self.fallback_model != self.model:
                    self._log.warning(
                        "gemini.quota_fallback", model=self.model, fallback=self.fallback_model
                    )
                    result = await self._call(client, self.fallback_model, payload)
        except httpx.HTTPError as e:
            self._log.error("gemini.request_failed", error=str(e))
            raise ExternalServiceError(str(e) or "Gemini request failed") from e

        if not result.ok:
            raise ExternalServiceError(
                result.error or f"HTTP {result.status_code}", status_code=result.status_code
            )
        return extract_text(result.data)
