# -*- coding: utf-8 -*-
"""Summaries: Gemini text-generation client over the REST API."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import httpx

from ..config import settings
from ..errors import RemoteAuthError, SummarizerError

logger = logging.getLogger(__name__)

INVALID_KEY_MARKER = "API key not valid"


class Summarizer(Protocol):
    def generate(self, prompt: str, *, response_format: str = "json", temperature: float = 0.3) -> str:
        ...


def _extract_error_message(resp: httpx.Response) -> str:
    """Pull ``error.message`` out of a Google-style error body, else the raw text."""
    raw = resp.text or ""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict):
            msg = err.get("message")
            if isinstance(msg, str) and msg.strip():
                return msg.strip()
        msg = data.get("message") or data.get("detail")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    snippet = raw.replace("\n", " ").strip()[:300]
    return snippet or f"HTTP {resp.status_code}"


def _extract_text(data: object) -> str:
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    first = candidates[0]
    if not isinstance(first, dict):
        return ""
    content = first.get("content")
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts")
    if not isinstance(parts, list):
        return ""
    out: list[str] = []
    for part in parts:
        if isinstance(part, dict):
            text = part.get("text")
            if isinstance(text, str):
                out.append(text)
    return "".join(out)


@dataclass
class GeminiClient:
    api_key: str
    model: str
    base_url: str
    timeout: float = 60.0
    transport: Optional[httpx.BaseTransport] = None

    @classmethod
    def from_settings(cls) -> "GeminiClient":
        if not settings.gemini_api_key:
            raise RemoteAuthError("Gemini API key is not configured.")
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.gemini_timeout,
        )

    def _url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    def generate(self, prompt: str, *, response_format: str = "json", temperature: float = 0.3) -> str:
        generation_config: Dict[str, Any] = {"temperature": temperature}
        if response_format == "json":
            generation_config["responseMimeType"] = "application/json"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(self._url(), headers=headers, json=payload)
        except httpx.InvalidURL as exc:
            raise SummarizerError(f"Gemini base URL is invalid: {exc}") from exc
        except httpx.HTTPError as exc:
            raise SummarizerError(f"Gemini API unreachable: {exc}") from exc

        if resp.status_code >= 400:
            message = _extract_error_message(resp)
            if INVALID_KEY_MARKER in message or resp.status_code in (401, 403):
                raise RemoteAuthError(message)
            raise SummarizerError(f"Gemini API error ({resp.status_code}): {message}")

        try:
            data = resp.json()
        except json.JSONDecodeError as exc:
            snippet = (resp.text or "").replace("\n", " ").strip()[:200]
            raise SummarizerError(f"Gemini returned non-JSON response: {snippet}") from exc

        text = _extract_text(data)
        if not text:
            logger.warning("gemini response had no text parts (model=%s)", self.model)
        return text
