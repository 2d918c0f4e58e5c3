# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import unittest

from caresynapse.errors import ImportParseError, SummarizerError, ValidationError
from caresynapse.notifications import NotificationKind, Notifier
from caresynapse.records.exporter import export_workbook
from caresynapse.records.models import AiSummaries, HealthRecord, PatientInfo, example_health_record
from caresynapse.session import Session

GOOD_RESPONSE = '```json\n{"doctorSummary":"S","patientSummary":"P","alerts":["Check potassium"]}\n```'


class FakeSummarizer:
    def __init__(self, response: str = GOOD_RESPONSE, error: Exception | None = None, on_call=None) -> None:
        self.response = response
        self.error = error
        self.on_call = on_call
        self.calls = 0

    def generate(self, prompt: str, *, response_format: str = "json", temperature: float = 0.3) -> str:
        self.calls += 1
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return self.response


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestSessionRecordFlows(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.session = Session(notifier=Notifier(clock=self.clock))

    def test_submit_replaces_and_notifies(self) -> None:
        self.session.store.set_summaries(AiSummaries(doctor_summary="S", patient_summary="P", alerts=[]))
        self.session.submit(HealthRecord(patient_info=PatientInfo(name="Ann")))
        self.assertIsNone(self.session.store.summaries)
        notice = self.session.notifier.current()
        self.assertIsNotNone(notice)
        assert notice is not None
        self.assertEqual(notice.kind, NotificationKind.success)

    def test_notification_expires(self) -> None:
        self.session.reset()
        self.assertIsNotNone(self.session.notifier.current())
        self.clock.now += 3.5
        self.assertIsNone(self.session.notifier.current())

    def test_latest_notification_replaces_earlier(self) -> None:
        self.session.load_example()
        self.session.reset()
        notice = self.session.notifier.current()
        assert notice is not None
        self.assertEqual(notice.message, "Form has been reset.")

    def test_import_success_replaces_record(self) -> None:
        data = export_workbook(example_health_record())
        record = self.session.import_file(data)
        self.assertEqual(record.patient_info.name, "Jane Doe")
        notice = self.session.notifier.current()
        assert notice is not None
        self.assertEqual(notice.expires_at - notice.created_at, 5.0)

    def test_failed_import_leaves_store_untouched(self) -> None:
        self.session.load_example()
        self.session.store.set_summaries(AiSummaries(doctor_summary="S", patient_summary="P", alerts=[]))
        before = self.session.store.record
        revision = self.session.store.revision

        with self.assertRaises(ImportParseError) as ctx:
            self.session.import_file(b"garbage bytes")

        self.assertTrue(ctx.exception.message.startswith("Failed to import from Excel."))
        self.assertEqual(self.session.store.record, before)
        self.assertEqual(self.session.store.revision, revision)
        self.assertIsNotNone(self.session.store.summaries)
        notice = self.session.notifier.current()
        assert notice is not None
        self.assertEqual(notice.kind, NotificationKind.error)


class TestSessionSummaries(unittest.TestCase):
    def test_generate_applies_summaries(self) -> None:
        session = Session(summarizer=FakeSummarizer())
        session.load_example()
        result = asyncio.run(session.generate_summaries())
        self.assertIsNotNone(result)
        self.assertEqual(session.store.summaries, result)
        self.assertFalse(session.is_loading)

    def test_edit_during_request_discards_result(self) -> None:
        session = Session()
        session.load_example()
        session.summarizer = FakeSummarizer(on_call=lambda: session.store.update_patient({"name": "Changed"}))

        result = asyncio.run(session.generate_summaries())

        self.assertIsNone(result)
        self.assertIsNone(session.store.summaries)
        notice = session.notifier.current()
        assert notice is not None
        self.assertEqual(notice.kind, NotificationKind.warning)

    def test_failure_keeps_previous_summaries(self) -> None:
        previous = AiSummaries(doctor_summary="old", patient_summary="old", alerts=[])
        session = Session(summarizer=FakeSummarizer(error=SummarizerError("boom")))
        session.load_example()
        session.store.set_summaries(previous)

        with self.assertRaises(SummarizerError):
            asyncio.run(session.generate_summaries())

        self.assertEqual(session.store.summaries, previous)
        self.assertEqual(session.last_error, "Failed to generate summaries: boom")
        self.assertFalse(session.is_loading)

    def test_missing_name_never_calls_summarizer(self) -> None:
        fake = FakeSummarizer()
        session = Session(summarizer=fake)
        with self.assertRaises(ValidationError):
            asyncio.run(session.generate_summaries())
        self.assertEqual(fake.calls, 0)
        self.assertIn("patient's name", session.last_error or "")


if __name__ == "__main__":
    unittest.main()
