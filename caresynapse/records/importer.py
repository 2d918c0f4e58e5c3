# -*- coding: utf-8 -*-
"""Health records: spreadsheet import.

A workbook is handled as ``{sheet name: [row, ...]}`` where each row maps a column
header to a raw cell value. Reading the bytes is delegated to pandas; mapping rows
onto the record schema is a pure function so it can be tested without a file.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type

import pandas as pd

from ..errors import ImportParseError
from .models import (
    HealthRecord,
    PatientInfo,
    RecordItem,
    RecordSection,
    SECTION_ITEM_MODELS,
)

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]
Workbook = Mapping[str, Sequence[Row]]

PATIENT_SHEET = "PatientInfo"
PATIENT_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("Name", "name"),
    ("DOB", "dob"),
    ("Gender", "gender"),
)


@dataclass(frozen=True)
class SheetMapping:
    section: RecordSection
    sheet: str
    columns: Tuple[Tuple[str, str], ...]

    @property
    def model(self) -> Type[RecordItem]:
        return SECTION_ITEM_MODELS[self.section]

    @property
    def headers(self) -> List[str]:
        return [header for header, _ in self.columns]


SHEET_MAPPINGS: Tuple[SheetMapping, ...] = (
    SheetMapping(
        RecordSection.lab_results,
        "LabResults",
        (
            ("Test Name", "name"),
            ("LOINC Code", "loinc_code"),
            ("Value", "value"),
            ("Unit", "unit"),
            ("Reference Range", "reference_range"),
            ("Date", "date"),
            ("Interpretation", "interpretation"),
        ),
    ),
    SheetMapping(
        RecordSection.diagnoses,
        "Diagnoses",
        (
            ("Description", "description"),
            ("ICD-10 Code", "icd10_code"),
            ("SNOMED Code", "snomed_code"),
            ("Date", "date"),
            ("Status", "status"),
        ),
    ),
    SheetMapping(
        RecordSection.vitals,
        "Vitals",
        (("Type", "type"), ("Value", "value"), ("Unit", "unit"), ("Date", "date")),
    ),
    SheetMapping(
        RecordSection.medications,
        "Medications",
        (
            ("Name", "name"),
            ("RxNorm ID", "rx_norm_id"),
            ("Dose", "dose"),
            ("Route", "route"),
            ("Frequency", "frequency"),
            ("Start Date", "start_date"),
            ("Status", "status"),
        ),
    ),
    SheetMapping(
        RecordSection.imaging_reports,
        "ImagingReports",
        (("Type", "type"), ("Date", "date"), ("Report Text", "report_text")),
    ),
    SheetMapping(
        RecordSection.allergies,
        "Allergies",
        (
            ("Substance", "substance"),
            ("Reaction", "reaction"),
            ("Severity", "severity"),
            ("Onset Date", "onset_date"),
        ),
    ),
    SheetMapping(
        RecordSection.past_medical_history,
        "PastMedicalHistory",
        (("Description", "description"), ("Date", "date")),
    ),
    SheetMapping(
        RecordSection.surgical_history,
        "SurgicalHistory",
        (("Description", "description"), ("Date", "date")),
    ),
    SheetMapping(
        RecordSection.dental_records,
        "DentalRecords",
        (
            ("Procedure Code", "procedure_code"),
            ("Description", "description"),
            ("Date", "date"),
            ("Notes", "notes"),
        ),
    ),
)


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Array-likes have no single truth value; treat them as present.
        return False


def cell_to_str(value: Any) -> str:
    """Coerce a raw cell to the string stored in the record."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _map_row(model: Type[RecordItem], columns: Sequence[Tuple[str, str]], row: Row) -> RecordItem:
    # Start from the fully defaulted item (fresh id); only present cells overwrite.
    fields: Dict[str, str] = {}
    for header, field in columns:
        value = row.get(header)
        if is_missing(value):
            continue
        fields[field] = cell_to_str(value)
    return model(**fields)


def _map_patient(rows: Optional[Sequence[Row]]) -> PatientInfo:
    if not rows:
        return PatientInfo()
    first = rows[0]
    fields: Dict[str, str] = {}
    for header, field in PATIENT_COLUMNS:
        value = first.get(header)
        if is_missing(value):
            continue
        fields[field] = cell_to_str(value)
    return PatientInfo(**fields)


def map_workbook(workbook: Workbook) -> HealthRecord:
    """Build a fresh record from parsed sheets; absent sheets give empty sections."""
    sections: Dict[str, List[RecordItem]] = {}
    for mapping in SHEET_MAPPINGS:
        rows = workbook.get(mapping.sheet) or []
        sections[mapping.section.name] = [
            _map_row(mapping.model, mapping.columns, row) for row in rows
        ]
    return HealthRecord(patient_info=_map_patient(workbook.get(PATIENT_SHEET)), **sections)


def _frame_rows(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for raw in frame.to_dict(orient="records"):
        row = {str(k).strip(): v for k, v in raw.items() if not is_missing(v)}
        if row:
            rows.append(row)
    return rows


def read_workbook(data: bytes) -> Dict[str, List[Dict[str, Any]]]:
    """Parse workbook bytes into ``{sheet: rows}``.

    Empty cells are left out of their row (they read as "missing", not as ""),
    and rows with no values at all are skipped. Text such as "NA" or "None" is
    kept as text.
    """
    if not data:
        raise ImportParseError("File data could not be read.")
    try:
        frames = pd.read_excel(
            io.BytesIO(data),
            sheet_name=None,
            dtype=object,
            keep_default_na=False,
            na_values=[""],
        )
    except Exception as exc:
        raise ImportParseError(str(exc) or exc.__class__.__name__) from exc
    return {str(name): _frame_rows(frame) for name, frame in frames.items()}


def import_workbook(data: bytes) -> HealthRecord:
    workbook = read_workbook(data)
    record = map_workbook(workbook)
    logger.info(
        "imported workbook: sheets=%s rows=%d",
        sorted(workbook),
        sum(len(rows) for name, rows in workbook.items() if name != PATIENT_SHEET),
    )
    return record
