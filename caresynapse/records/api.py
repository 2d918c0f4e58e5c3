# -*- coding: utf-8 -*-
"""Health records: API endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response

from ..config import settings
from ..deps import get_session
from ..errors import ImportParseError, RecordFieldError, RecordItemNotFound
from ..session import Session
from .exporter import XLSX_MIME, export_workbook
from .models import HealthRecord, PatientInfo, RecordSection, TimelineEvent, form_options
from .timeline import build_timeline

router = APIRouter(prefix="/api/record", tags=["Record"])


@router.get("", response_model=HealthRecord, summary="Current health record")
def get_record(session: Session = Depends(get_session)):
    return session.store.record


@router.put("", response_model=HealthRecord, summary="Submit (replace) the health record")
def submit_record(record: HealthRecord, session: Session = Depends(get_session)):
    return session.submit(record)


@router.post("/reset", response_model=HealthRecord, summary="Reset to an empty record")
def reset_record(session: Session = Depends(get_session)):
    return session.reset()


@router.post("/example", response_model=HealthRecord, summary="Load the example record")
def load_example(session: Session = Depends(get_session)):
    return session.load_example()


@router.post("/ehr-connect", response_model=HealthRecord, summary="Simulated EHR (FHIR) connection")
def connect_ehr(session: Session = Depends(get_session)):
    return session.connect_simulated_ehr()


@router.post("/import", response_model=HealthRecord, summary="Import a record from an Excel workbook")
async def import_record(file: UploadFile = File(...), session: Session = Depends(get_session)):
    max_bytes = settings.max_upload_mb * 1024 * 1024
    data = await file.read(max_bytes + 1)
    await file.close()
    try:
        if len(data) > max_bytes:
            raise ImportParseError(f"File too large (max {settings.max_upload_mb} MB)")
        return session.import_file(data)
    except ImportParseError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc


@router.get("/export", summary="Download the record as an Excel workbook")
def export_record(session: Session = Depends(get_session)):
    content = export_workbook(session.store.record)
    return Response(
        content=content,
        media_type=XLSX_MIME,
        headers={"Content-Disposition": 'attachment; filename="health_record.xlsx"'},
    )


@router.get("/timeline", response_model=List[TimelineEvent], summary="Timeline of clinical events")
def get_timeline(session: Session = Depends(get_session)):
    return build_timeline(session.store.record)


@router.patch("/patient", response_model=PatientInfo, summary="Edit patient info fields")
def edit_patient(fields: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    try:
        return session.store.update_patient(fields).patient_info
    except RecordFieldError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc


@router.post("/sections/{section}", summary="Add an item to a record section")
def add_item(
    section: RecordSection,
    fields: Optional[Dict[str, Any]] = Body(default=None),
    session: Session = Depends(get_session),
):
    try:
        item = session.store.add_item(section, fields)
    except RecordFieldError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc
    return item.model_dump(by_alias=True)


@router.patch("/sections/{section}/{item_id}", summary="Edit an item by id")
def edit_item(
    section: RecordSection,
    item_id: str,
    fields: Dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
):
    try:
        item = session.store.update_item(section, item_id, fields)
    except RecordItemNotFound as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    except RecordFieldError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc
    return item.model_dump(by_alias=True)


@router.delete("/sections/{section}/{item_id}", summary="Remove an item by id")
def remove_item(section: RecordSection, item_id: str, session: Session = Depends(get_session)):
    try:
        session.store.remove_item(section, item_id)
    except RecordItemNotFound as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return {"status": "ok", "id": item_id}


@router.get("/options", summary="Choice lists for the entry form")
def get_options():
    return form_options()
