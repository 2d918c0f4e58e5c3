# -*- coding: utf-8 -*-
"""Health records: timeline projection.

Recomputed from the record on every read. Events sort most recent first; dates
that are neither ISO dates nor bare years ("Childhood", "") sort after all dated
events, and ties keep record order.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import List, Optional

from .models import HealthRecord, TimelineEvent

_YEAR_RE = re.compile(r"^\d{4}$")


def parse_event_date(value: str) -> Optional[date]:
    text = (value or "").strip()
    if not text:
        return None
    if _YEAR_RE.match(text):
        return date(int(text), 1, 1)
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def build_timeline(record: HealthRecord) -> List[TimelineEvent]:
    events: List[TimelineEvent] = []
    for lab in record.lab_results:
        events.append(
            TimelineEvent(
                date=lab.date,
                title=f"Lab: {lab.name}",
                description=f"Value: {lab.value} {lab.unit}",
                kind="lab",
            )
        )
    for diagnosis in record.diagnoses:
        events.append(
            TimelineEvent(
                date=diagnosis.date,
                title=f"Diagnosis: {diagnosis.description}",
                description=f"Status: {diagnosis.status}",
                kind="diagnosis",
            )
        )
    for med in record.medications:
        events.append(
            TimelineEvent(
                date=med.start_date,
                title=f"Medication: {med.name}",
                description=f"{med.dose}, {med.frequency}",
                kind="medication",
            )
        )
    for report in record.imaging_reports:
        events.append(
            TimelineEvent(
                date=report.date,
                title=f"Imaging: {report.type}",
                description="Key findings available.",
                kind="imaging",
            )
        )

    dated = [(parse_event_date(e.date), e) for e in events]
    # sorted() is stable: two passes give "newest first, undated last, ties in order".
    with_date = sorted(
        ((d, e) for d, e in dated if d is not None), key=lambda pair: pair[0], reverse=True
    )
    without_date = [e for d, e in dated if d is None]
    return [e for _, e in with_date] + without_date
