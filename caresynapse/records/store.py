# -*- coding: utf-8 -*-
"""Health records: in-memory session store.

Holds the one authoritative record plus the summaries generated from it.
Whole-record replacement (submit / import / reset / example) invalidates the
summaries; field and item edits are draft changes and leave them alone.

Every mutation bumps ``revision``. Summaries computed from a snapshot are only
applied while the store is still at that snapshot's revision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Type

from ..errors import RecordFieldError, RecordItemNotFound
from .models import (
    AiSummaries,
    HealthRecord,
    RecordItem,
    RecordSection,
    SECTION_ITEM_MODELS,
    empty_health_record,
    section_items,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordSnapshot:
    revision: int
    record: HealthRecord


def _resolve_fields(model: Type[RecordItem], fields: Mapping[str, Any]) -> Dict[str, str]:
    """Map wire (camelCase) or Python field names onto model attributes."""
    by_alias = {info.alias or name: name for name, info in model.model_fields.items()}
    resolved: Dict[str, str] = {}
    for key, value in fields.items():
        name = key if key in model.model_fields else by_alias.get(key)
        if name is None:
            raise RecordFieldError(f"Unknown field {key!r} for {model.__name__}")
        if name == "id":
            raise RecordFieldError("Identity tokens cannot be edited")
        resolved[name] = "" if value is None else str(value)
    return resolved


class RecordStore:
    def __init__(self, record: Optional[HealthRecord] = None) -> None:
        self._record = (record or empty_health_record()).model_copy(deep=True)
        self._summaries: Optional[AiSummaries] = None
        self._revision = 0

    @property
    def record(self) -> HealthRecord:
        return self._record.model_copy(deep=True)

    @property
    def summaries(self) -> Optional[AiSummaries]:
        return self._summaries

    @property
    def revision(self) -> int:
        return self._revision

    def _touch(self) -> None:
        self._revision += 1

    # ---- whole record ----

    def replace(self, record: HealthRecord | Mapping[str, Any]) -> HealthRecord:
        if isinstance(record, HealthRecord):
            record = record.model_dump()
        self._record = HealthRecord.model_validate(record)
        self._summaries = None
        self._touch()
        return self.record

    def snapshot(self) -> RecordSnapshot:
        return RecordSnapshot(revision=self._revision, record=self.record)

    # ---- summaries ----

    def set_summaries(self, summaries: AiSummaries) -> None:
        self._summaries = summaries

    def clear_summaries(self) -> None:
        self._summaries = None

    def apply_summaries(self, summaries: AiSummaries, snapshot: RecordSnapshot) -> bool:
        if snapshot.revision != self._revision:
            logger.warning(
                "discarding stale summaries: computed at revision %d, store at %d",
                snapshot.revision,
                self._revision,
            )
            return False
        self._summaries = summaries
        return True

    # ---- draft edits ----

    def update_patient(self, fields: Mapping[str, Any]) -> HealthRecord:
        patient = self._record.patient_info
        updates = _resolve_fields(type(patient), fields)
        self._record.patient_info = type(patient).model_validate({**patient.model_dump(), **updates})
        self._touch()
        return self.record

    def add_item(self, section: RecordSection, fields: Optional[Mapping[str, Any]] = None) -> RecordItem:
        model = SECTION_ITEM_MODELS[section]
        item = model(**_resolve_fields(model, fields or {}))
        section_items(self._record, section).append(item)
        self._touch()
        return item.model_copy()

    def _index_of(self, section: RecordSection, item_id: str) -> int:
        for idx, item in enumerate(section_items(self._record, section)):
            if item.id == item_id:
                return idx
        raise RecordItemNotFound(section.value, item_id)

    def update_item(self, section: RecordSection, item_id: str, fields: Mapping[str, Any]) -> RecordItem:
        items = section_items(self._record, section)
        idx = self._index_of(section, item_id)
        updates = _resolve_fields(type(items[idx]), fields)
        items[idx] = type(items[idx]).model_validate({**items[idx].model_dump(), **updates})
        self._touch()
        return items[idx].model_copy()

    def remove_item(self, section: RecordSection, item_id: str) -> None:
        items = section_items(self._record, section)
        del items[self._index_of(section, item_id)]
        self._touch()
