# -*- coding: utf-8 -*-
"""Summaries: prompt construction for the summarizer."""

from __future__ import annotations

import json

from ..records.models import NO_ALERTS_MESSAGE, HealthRecord, strip_ids

SUMMARY_RESPONSE_KEYS = ("doctorSummary", "patientSummary", "alerts")


def serialize_record(record: HealthRecord) -> str:
    # Identity tokens carry no clinical meaning and would make the prompt unstable.
    return json.dumps(strip_ids(record), indent=2, ensure_ascii=False)


def build_summary_prompt(record: HealthRecord) -> str:
    return (
        "Given the following patient health record:\n"
        "```json\n"
        f"{serialize_record(record)}\n"
        "```\n"
        "\n"
        "Generate the following as a single, well-formed JSON object:\n"
        '1. "doctorSummary": A concise clinical summary in SOAP format (Subjective, Objective, '
        "Assessment, Plan). Ensure each section (Subjective, Objective, Assessment, Plan) is "
        "clearly delineated, perhaps using markdown bold for the titles.\n"
        '2. "patientSummary": An easy-to-understand summary for the patient in plain language. '
        "Use bullet points and short sentences where appropriate.\n"
        '3. "alerts": An array of strings detailing critical alerts, potential medication '
        "conflicts, contraindications, or significant abnormal values. If no critical alerts "
        f'are found, the array should contain a single string: "{NO_ALERTS_MESSAGE}"\n'
        "\n"
        'The JSON output must have exactly these three keys: "doctorSummary" (string), '
        '"patientSummary" (string), and "alerts" (array of strings).\n'
        "Do not include any other text outside the JSON object.\n"
    )
