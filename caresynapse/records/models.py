# -*- coding: utf-8 -*-
"""Health records: Pydantic models.

Design goals:
- One canonical, fully populated shape for a patient's record (no missing lists).
- camelCase on the wire, snake_case in Python.
- Clinical codes and enumerated values are opaque strings; the option tuples below
  drive the entry form but are never enforced.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Type
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

GENDER_OPTIONS = ("Male", "Female", "Other", "Prefer not to say")
LAB_INTERPRETATION_OPTIONS = ("Normal", "Abnormal", "Critical", "")
DIAGNOSIS_STATUS_OPTIONS = ("Active", "Resolved", "")
VITAL_TYPE_OPTIONS = ("Blood Pressure", "Heart Rate", "Weight", "BMI", "Temperature", "SpO2")
MEDICATION_STATUS_OPTIONS = ("Active", "Inactive", "On Hold", "")
ALLERGY_SEVERITY_OPTIONS = ("Mild", "Moderate", "Severe", "")

DEFAULT_GENDER = "Prefer not to say"
DEFAULT_VITAL_TYPE = "Blood Pressure"
NO_ALERTS_MESSAGE = "No critical alerts identified."


def new_id() -> str:
    return str(uuid4())


class RecordModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordItem(RecordModel):
    id: str = Field(default_factory=new_id)


class PatientInfo(RecordItem):
    name: str = ""
    dob: str = Field("", description="YYYY-MM-DD")
    gender: str = DEFAULT_GENDER

    @field_validator("gender", mode="before")
    @classmethod
    def _blank_gender(cls, value: Any) -> Any:
        return value or DEFAULT_GENDER


class LabResult(RecordItem):
    name: str = ""
    loinc_code: str = ""
    value: str = ""
    unit: str = ""
    reference_range: str = ""
    date: str = Field("", description="YYYY-MM-DD")
    interpretation: str = ""


class Diagnosis(RecordItem):
    description: str = ""
    icd10_code: str = ""
    snomed_code: str = ""
    date: str = ""
    status: str = ""


class VitalSign(RecordItem):
    type: str = DEFAULT_VITAL_TYPE
    value: str = ""
    unit: str = ""
    date: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _blank_type(cls, value: Any) -> Any:
        return value or DEFAULT_VITAL_TYPE


class Medication(RecordItem):
    name: str = ""
    rx_norm_id: str = ""
    dose: str = ""
    route: str = ""
    frequency: str = ""
    start_date: str = ""
    status: str = ""


class ImagingReport(RecordItem):
    type: str = Field("", description="e.g. 'X-Ray Chest', 'MRI Brain'")
    date: str = ""
    report_text: str = ""


class Allergy(RecordItem):
    substance: str = ""
    reaction: str = ""
    severity: str = ""
    onset_date: str = ""


class HistoryItem(RecordItem):
    """Past medical or surgical history entry."""

    description: str = ""
    date: str = Field("", description="YYYY-MM-DD, a bare year, or free text")


class DentalRecord(RecordItem):
    procedure_code: str = ""
    description: str = ""
    date: str = ""
    notes: str = ""


_SECTION_FIELDS = (
    "lab_results",
    "diagnoses",
    "vitals",
    "medications",
    "imaging_reports",
    "allergies",
    "past_medical_history",
    "surgical_history",
    "dental_records",
)


class HealthRecord(RecordModel):
    patient_info: PatientInfo = Field(default_factory=PatientInfo)
    lab_results: List[LabResult] = Field(default_factory=list)
    diagnoses: List[Diagnosis] = Field(default_factory=list)
    vitals: List[VitalSign] = Field(default_factory=list)
    medications: List[Medication] = Field(default_factory=list)
    imaging_reports: List[ImagingReport] = Field(default_factory=list)
    allergies: List[Allergy] = Field(default_factory=list)
    past_medical_history: List[HistoryItem] = Field(default_factory=list)
    surgical_history: List[HistoryItem] = Field(default_factory=list)
    dental_records: List[DentalRecord] = Field(default_factory=list)

    @field_validator(*_SECTION_FIELDS, mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("patient_info", mode="before")
    @classmethod
    def _none_as_new_patient(cls, value: Any) -> Any:
        return PatientInfo() if value is None else value

    @model_validator(mode="after")
    def _unique_ids(self) -> "HealthRecord":
        # Blank or repeated tokens (across all sections) are reissued.
        if not self.patient_info.id:
            self.patient_info = self.patient_info.model_copy(update={"id": new_id()})
        seen = {self.patient_info.id}
        for name in _SECTION_FIELDS:
            items = getattr(self, name)
            for idx, item in enumerate(items):
                if not item.id or item.id in seen:
                    items[idx] = item.model_copy(update={"id": new_id()})
                seen.add(items[idx].id)
        return self


class AiSummaries(RecordModel):
    doctor_summary: str
    patient_summary: str
    alerts: List[str]

    def has_critical_alerts(self) -> bool:
        if not self.alerts:
            return False
        return not (len(self.alerts) == 1 and self.alerts[0] == NO_ALERTS_MESSAGE)


class RecordSection(str, Enum):
    lab_results = "labResults"
    diagnoses = "diagnoses"
    vitals = "vitals"
    medications = "medications"
    imaging_reports = "imagingReports"
    allergies = "allergies"
    past_medical_history = "pastMedicalHistory"
    surgical_history = "surgicalHistory"
    dental_records = "dentalRecords"


SECTION_ITEM_MODELS: Dict[RecordSection, Type[RecordItem]] = {
    RecordSection.lab_results: LabResult,
    RecordSection.diagnoses: Diagnosis,
    RecordSection.vitals: VitalSign,
    RecordSection.medications: Medication,
    RecordSection.imaging_reports: ImagingReport,
    RecordSection.allergies: Allergy,
    RecordSection.past_medical_history: HistoryItem,
    RecordSection.surgical_history: HistoryItem,
    RecordSection.dental_records: DentalRecord,
}


def section_items(record: HealthRecord, section: RecordSection) -> List[RecordItem]:
    """The live list backing ``section`` (mutations are visible on ``record``)."""
    return getattr(record, section.name)


def strip_ids(record: HealthRecord) -> Dict[str, Any]:
    """Dump ``record`` without identity tokens, for structural comparison."""
    data = record.model_dump(by_alias=True)
    data["patientInfo"].pop("id", None)
    for section in RecordSection:
        for item in data[section.value]:
            item.pop("id", None)
    return data


def empty_health_record() -> HealthRecord:
    return HealthRecord(patient_info=PatientInfo())


def example_health_record() -> HealthRecord:
    """Demo patient used by "Load Example" and the simulated EHR connection."""
    return HealthRecord(
        patient_info=PatientInfo(name="Jane Doe", dob="1985-07-22", gender="Female"),
        lab_results=[
            LabResult(
                name="Hemoglobin A1c",
                loinc_code="4548-4",
                value="6.5",
                unit="%",
                reference_range="4.0-5.6%",
                date="2023-10-15",
                interpretation="Abnormal",
            ),
            LabResult(
                name="Total Cholesterol",
                loinc_code="2093-3",
                value="220",
                unit="mg/dL",
                reference_range="<200 mg/dL",
                date="2023-10-15",
                interpretation="Abnormal",
            ),
        ],
        diagnoses=[
            Diagnosis(
                description="Type 2 Diabetes Mellitus",
                icd10_code="E11.9",
                snomed_code="44054006",
                date="2022-05-01",
                status="Active",
            ),
            Diagnosis(
                description="Hypertension",
                icd10_code="I10",
                snomed_code="38341003",
                date="2021-11-20",
                status="Active",
            ),
        ],
        vitals=[
            VitalSign(type="Blood Pressure", value="145/90", unit="mmHg", date="2023-11-01"),
            VitalSign(type="Heart Rate", value="78", unit="bpm", date="2023-11-01"),
        ],
        medications=[
            Medication(
                name="Metformin",
                rx_norm_id="860975",
                dose="500mg",
                route="Oral",
                frequency="Twice daily",
                start_date="2022-05-01",
                status="Active",
            ),
            Medication(
                name="Lisinopril",
                rx_norm_id="203155",
                dose="10mg",
                route="Oral",
                frequency="Once daily",
                start_date="2021-11-20",
                status="Active",
            ),
        ],
        imaging_reports=[
            ImagingReport(
                type="Chest X-Ray",
                date="2023-01-10",
                report_text="Lungs are clear. No acute cardiopulmonary process.",
            )
        ],
        allergies=[
            Allergy(substance="Penicillin", reaction="Rash", severity="Moderate", onset_date="2005-03-01")
        ],
        past_medical_history=[HistoryItem(description="Seasonal allergies", date="Childhood")],
        surgical_history=[HistoryItem(description="Appendectomy", date="2000")],
        dental_records=[
            DentalRecord(
                procedure_code="D1110",
                description="Adult Prophylaxis",
                date="2023-06-15",
                notes="Routine cleaning, no issues.",
            )
        ],
    )


def form_options() -> Dict[str, List[str]]:
    return {
        "gender": list(GENDER_OPTIONS),
        "labInterpretation": list(LAB_INTERPRETATION_OPTIONS),
        "diagnosisStatus": list(DIAGNOSIS_STATUS_OPTIONS),
        "vitalType": list(VITAL_TYPE_OPTIONS),
        "medicationStatus": list(MEDICATION_STATUS_OPTIONS),
        "allergySeverity": list(ALLERGY_SEVERITY_OPTIONS),
    }


class TimelineEvent(BaseModel):
    date: str
    title: str
    description: str
    kind: str = Field(..., description="lab | diagnosis | medication | imaging")
