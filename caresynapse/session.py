# -*- coding: utf-8 -*-
"""Session controller: the flows the UI triggers, on top of the record store.

Every failure is turned into a single user-visible message here (notification
and/or ``last_error``); the store is left as it was.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

from .config import settings
from .errors import CareSynapseError, ImportParseError, SummaryInProgress
from .notifications import NotificationKind, Notifier
from .records.importer import import_workbook
from .records.models import AiSummaries, HealthRecord, empty_health_record, example_health_record
from .records.store import RecordStore
from .summaries.client import Summarizer
from .summaries.service import generate_all_summaries

logger = logging.getLogger(__name__)

IMPORT_ERROR_CHARS = 300


class Session:
    def __init__(
        self,
        *,
        store: Optional[RecordStore] = None,
        notifier: Optional[Notifier] = None,
        summarizer: Optional[Summarizer] = None,
    ) -> None:
        self.store = store or RecordStore()
        self.notifier = notifier or Notifier()
        self.summarizer = summarizer
        self.is_loading = False
        self.last_error: Optional[str] = None

    def _info(self, kind: NotificationKind, message: str, duration: Optional[float] = None) -> None:
        self.notifier.notify(kind, message, duration)

    def clear_error(self) -> None:
        self.last_error = None

    # ---- whole-record flows ----

    def submit(self, record: HealthRecord | Mapping[str, Any]) -> HealthRecord:
        saved = self.store.replace(record)
        self.last_error = None
        self._info(NotificationKind.success, "Health data saved locally. Proceed to generate summaries.")
        return saved

    def load_example(self) -> HealthRecord:
        saved = self.store.replace(example_health_record())
        self.last_error = None
        self._info(NotificationKind.info, "Example data loaded into the form.")
        return saved

    def connect_simulated_ehr(self) -> HealthRecord:
        saved = self.store.replace(example_health_record())
        self._info(NotificationKind.success, "Simulated FHIR connection successful. Example data loaded.")
        return saved

    def reset(self) -> HealthRecord:
        saved = self.store.replace(empty_health_record())
        self._info(NotificationKind.info, "Form has been reset.")
        return saved

    def import_file(self, data: bytes) -> HealthRecord:
        try:
            record = import_workbook(data)
        except ImportParseError as exc:
            detail = exc.message[:IMPORT_ERROR_CHARS]
            logger.warning("workbook import failed: %s", detail)
            message = (
                "Failed to import from Excel. Ensure the file is valid and follows the "
                f"expected format. Error: {detail}"
            )
            self._info(NotificationKind.error, message, settings.import_notice_seconds)
            raise ImportParseError(message) from exc
        saved = self.store.replace(record)
        self._info(
            NotificationKind.success,
            "Data imported successfully from Excel.",
            settings.import_notice_seconds,
        )
        return saved

    # ---- summaries ----

    async def generate_summaries(self) -> Optional[AiSummaries]:
        """Summarize the current record.

        Returns the applied summaries, or None when the record was edited or
        replaced while the request was in flight (the stale result is dropped).
        """
        if self.is_loading:
            raise SummaryInProgress()
        snapshot = self.store.snapshot()
        self.is_loading = True
        self.last_error = None
        self.notifier.dismiss()
        try:
            summaries = await asyncio.to_thread(
                generate_all_summaries, snapshot.record, self.summarizer
            )
        except CareSynapseError as exc:
            self.last_error = exc.message
            self._info(NotificationKind.error, exc.message)
            raise
        finally:
            self.is_loading = False

        if not self.store.apply_summaries(summaries, snapshot):
            self._info(
                NotificationKind.warning,
                "Record changed while summaries were generating; result discarded.",
            )
            return None
        self._info(NotificationKind.success, "AI summaries generated successfully!")
        return summaries
