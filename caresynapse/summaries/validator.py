# -*- coding: utf-8 -*-
"""Summaries: parse and validate the summarizer's raw text.

Text in, ``AiSummaries`` or a typed error out; no network involved.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..errors import MalformedResponse, UnexpectedResponseShape
from ..records.models import AiSummaries

EXCERPT_CHARS = 500

# A fence must span the whole text: ```lang\n ... \n```
_FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    match = _FENCE_RE.match(cleaned)
    if match and match.group(2):
        return match.group(2).strip()
    return cleaned


def _excerpt(text: str) -> str:
    if len(text) <= EXCERPT_CHARS:
        return text
    return text[:EXCERPT_CHARS] + "..."


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def parse_summary_response(text: str) -> AiSummaries:
    body = strip_code_fence(text or "")
    try:
        parsed = json.loads(body)
    except ValueError as exc:
        excerpt = _excerpt(body)
        raise MalformedResponse(
            f"Failed to parse AI response. Raw response: {excerpt}", excerpt
        ) from exc

    if not isinstance(parsed, dict):
        raise UnexpectedResponseShape("AI response did not match expected structure.")
    doctor = parsed.get("doctorSummary")
    patient = parsed.get("patientSummary")
    alerts = parsed.get("alerts")
    if not (
        _is_str(doctor)
        and _is_str(patient)
        and isinstance(alerts, list)
        and all(_is_str(alert) for alert in alerts)
    ):
        raise UnexpectedResponseShape("AI response did not match expected structure.")

    return AiSummaries(doctor_summary=doctor, patient_summary=patient, alerts=list(alerts))
