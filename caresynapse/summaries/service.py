# -*- coding: utf-8 -*-
"""Summaries: one call from record to validated summaries."""

from __future__ import annotations

import logging
from typing import Optional

from ..config import settings
from ..errors import (
    MalformedResponse,
    RemoteAuthError,
    SummarizerError,
    UnexpectedResponseShape,
    ValidationError,
)
from ..records.models import AiSummaries, HealthRecord
from .client import GeminiClient, Summarizer
from .prompt import build_summary_prompt
from .validator import parse_summary_response

logger = logging.getLogger(__name__)

MISSING_NAME_MESSAGE = "Patient information is incomplete. Please fill in at least the patient's name."
INVALID_KEY_MESSAGE = "Invalid API Key for Gemini. Please check your configuration."


def placeholder_summaries() -> AiSummaries:
    return AiSummaries(
        doctor_summary="Doctor summary generation unavailable (API key missing).",
        patient_summary="Patient summary generation unavailable (API key missing).",
        alerts=["Alert generation unavailable (API key missing)."],
    )


def check_ready(record: HealthRecord) -> None:
    if not record.patient_info.name.strip():
        raise ValidationError(MISSING_NAME_MESSAGE)


def generate_all_summaries(
    record: HealthRecord,
    summarizer: Optional[Summarizer] = None,
) -> AiSummaries:
    """Blocking; callers on an event loop should run it in a worker thread."""
    check_ready(record)

    if summarizer is None:
        if not settings.gemini_api_key:
            logger.warning("Gemini API key not configured. Returning placeholder summaries.")
            return placeholder_summaries()
        summarizer = GeminiClient.from_settings()

    prompt = build_summary_prompt(record)
    try:
        raw = summarizer.generate(
            prompt,
            response_format="json",
            temperature=settings.gemini_temperature,
        )
        return parse_summary_response(raw)
    except RemoteAuthError as exc:
        logger.warning("summarizer rejected credential: %s", exc.message)
        raise RemoteAuthError(INVALID_KEY_MESSAGE) from exc
    except (MalformedResponse, UnexpectedResponseShape) as exc:
        logger.warning("summarizer output rejected: %s", exc.message)
        raise
    except SummarizerError as exc:
        logger.error("summarizer call failed: %s", exc.message, exc_info=True)
        raise SummarizerError(f"Failed to generate summaries: {exc.message}") from exc
