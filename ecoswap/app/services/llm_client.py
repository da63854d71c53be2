import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

RATE_LIMIT_MARKERS = ("rate limit", "rate_limit", "quota")


class LLMServiceError(Exception):
    """The completion service failed or returned an unusable response."""


class LLMRateLimitError(LLMServiceError):
    """The completion service rejected the call for rate-limit or quota reasons."""


class Completion(BaseModel):
    content: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


def _strip_invalid_control_chars(s: str) -> str:
    """Remove ASCII control chars that frequently break json.loads (except \n, \r, \t)."""
    if not isinstance(s, str):
        return str(s)
    return re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F]", "", s)


def _strip_code_fence(text: str) -> str:
    txt = text.strip()
    if txt.startswith("```"):
        txt = re.sub(r"^```[a-zA-Z0-9_-]*\s*", "", txt, count=1)
        txt = re.sub(r"\s*```$", "", txt, count=1).strip()
    return txt


def _try_local_json_repair(raw: str) -> Optional[str]:
    cleaned = _strip_code_fence(_strip_invalid_control_chars(raw))
    if cleaned.startswith("{") and cleaned.endswith("}"):
        try:
            json.loads(cleaned)
            return cleaned
        except json.JSONDecodeError:
            pass
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end != -1 and end > start:
        snippet = cleaned[start : end + 1]
        try:
            json.loads(snippet)
            return snippet
        except json.JSONDecodeError:
            return None
    return None


def parse_llm_json_content(raw: str) -> Dict[str, Any]:
    """Parse a model reply into a JSON object, tolerating code fences and surrounding prose.

    Raises ValueError when no JSON object can be recovered.
    """
    repaired = _try_local_json_repair(raw or "")
    if repaired is None:
        raise ValueError("LLM response did not contain a valid JSON object")
    data = json.loads(repaired)
    if not isinstance(data, dict):
        raise ValueError("LLM response is not a JSON object")
    return data


def _is_rate_limit_message(message: str) -> bool:
    lowered = (message or "").lower()
    return any(marker in lowered for marker in RATE_LIMIT_MARKERS)


class LLMClient:
    """Thin OpenAI-compatible chat completions client."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        model: str,
        timeout_seconds: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise LLMServiceError("OPENAI_API_KEY must be set to call the completion service")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Completion:
        payload = {
            "model": self.model,
            "temperature": temperature,
            "messages": messages,
            "max_tokens": max_tokens,
            "stream": False,
        }
        timeout = httpx.Timeout(self.timeout_seconds, read=self.timeout_seconds, connect=10.0)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                resp = await client.post(
                    f"{self.base_url}/v1/chat/completions",
                    json=payload,
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            raise LLMServiceError(f"Completion request failed: {exc}") from exc

        if resp.status_code == 429:
            raise LLMRateLimitError(f"Completion service rate limited the request: {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise LLMServiceError(f"Completion service returned non-JSON (status {resp.status_code})") from exc

        if not isinstance(data, dict):
            raise LLMServiceError(
                f"Completion service returned {type(data).__name__} instead of an object (status {resp.status_code})"
            )

        if data.get("error"):
            error_info = data["error"] if isinstance(data["error"], dict) else {"message": str(data["error"])}
            error_type = error_info.get("type") or error_info.get("code") or "unknown_error"
            error_message = str(error_info.get("message") or "Unknown error")
            logger.warning(
                "Completion service returned error: type=%s, message=%s",
                error_type,
                error_message[:500],
            )
            if _is_rate_limit_message(f"{error_type} {error_message}"):
                raise LLMRateLimitError(error_message)
            raise LLMServiceError(f"Completion service error ({error_type}): {error_message}")

        if resp.status_code >= 400:
            raise LLMServiceError(f"Completion service returned status {resp.status_code}")

        choices = data.get("choices")
        first = choices[0] if isinstance(choices, list) and choices else {}
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not content:
            raise LLMServiceError("Completion service returned empty content")

        usage = data.get("usage") if isinstance(data.get("usage"), dict) else {}
        try:
            prompt_tokens = int(usage.get("prompt_tokens") or 0)
            completion_tokens = int(usage.get("completion_tokens") or 0)
            total_tokens = int(usage.get("total_tokens") or prompt_tokens + completion_tokens)
        except (TypeError, ValueError) as exc:
            raise LLMServiceError(f"Completion service returned malformed usage: {usage}") from exc
        return Completion(
            content=content if isinstance(content, str) else str(content),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
        )
