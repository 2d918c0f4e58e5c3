# -*- coding: utf-8 -*-
"""Health records: spreadsheet export (the inverse of the import mapping)."""

from __future__ import annotations

import io
from typing import Dict, List

import pandas as pd

from .importer import PATIENT_COLUMNS, PATIENT_SHEET, SHEET_MAPPINGS
from .models import HealthRecord, section_items

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def record_to_workbook(record: HealthRecord) -> Dict[str, List[Dict[str, str]]]:
    """Rows keyed by the import headers; identity tokens are not exported."""
    patient = record.patient_info
    workbook: Dict[str, List[Dict[str, str]]] = {
        PATIENT_SHEET: [{header: getattr(patient, field) for header, field in PATIENT_COLUMNS}]
    }
    for mapping in SHEET_MAPPINGS:
        workbook[mapping.sheet] = [
            {header: getattr(item, field) for header, field in mapping.columns}
            for item in section_items(record, mapping.section)
        ]
    return workbook


def export_workbook(record: HealthRecord) -> bytes:
    """Write one sheet per section; empty sections keep their header row so the
    file can be filled in and imported again."""
    headers = {PATIENT_SHEET: [header for header, _ in PATIENT_COLUMNS]}
    headers.update({m.sheet: m.headers for m in SHEET_MAPPINGS})

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet, rows in record_to_workbook(record).items():
            frame = pd.DataFrame(rows, columns=headers[sheet], dtype=object)
            frame.to_excel(writer, sheet_name=sheet, index=False)
    return buffer.getvalue()
