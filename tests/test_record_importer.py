# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from datetime import datetime

from caresynapse.errors import ImportParseError
from caresynapse.records.exporter import export_workbook, record_to_workbook
from caresynapse.records.importer import (
    cell_to_str,
    import_workbook,
    map_workbook,
    read_workbook,
)
from caresynapse.records.models import (
    HealthRecord,
    LabResult,
    PatientInfo,
    RecordSection,
    VitalSign,
    example_health_record,
    strip_ids,
)


class TestMapWorkbook(unittest.TestCase):
    def test_lab_row_keeps_defaults_for_missing_headers(self) -> None:
        record = map_workbook({"LabResults": [{"Test Name": "Glucose", "Value": "100"}]})

        self.assertEqual(len(record.lab_results), 1)
        lab = record.lab_results[0]
        self.assertEqual(lab.name, "Glucose")
        self.assertEqual(lab.value, "100")
        self.assertEqual(lab.loinc_code, "")
        self.assertEqual(lab.unit, "")
        self.assertEqual(lab.reference_range, "")
        self.assertEqual(lab.date, "")
        self.assertEqual(lab.interpretation, "")
        self.assertTrue(lab.id)

    def test_absent_sheets_give_empty_sections(self) -> None:
        record = map_workbook({})
        for section in RecordSection:
            self.assertEqual(getattr(record, section.name), [])
        self.assertEqual(record.patient_info.name, "")
        self.assertEqual(record.patient_info.gender, "Prefer not to say")

    def test_vital_type_defaults_to_blood_pressure(self) -> None:
        record = map_workbook({"Vitals": [{"Value": "120/80", "Unit": "mmHg"}]})
        self.assertEqual(record.vitals[0].type, "Blood Pressure")
        self.assertEqual(record.vitals[0].value, "120/80")

    def test_patient_sheet_uses_first_row_and_coerces_dob(self) -> None:
        record = map_workbook(
            {
                "PatientInfo": [
                    {"Name": "Ann Lee", "DOB": datetime(1990, 2, 3)},
                    {"Name": "Ignored", "Gender": "Male"},
                ]
            }
        )
        patient = record.patient_info
        self.assertEqual(patient.name, "Ann Lee")
        self.assertEqual(patient.dob, "1990-02-03")
        self.assertEqual(patient.gender, "Prefer not to say")

    def test_rows_keep_sheet_order_and_get_fresh_ids(self) -> None:
        rows = [{"Description": "Asthma", "Date": 1999.0}, {"Description": "Gout", "ID": "same"}]
        record = map_workbook({"PastMedicalHistory": rows, "SurgicalHistory": rows})

        self.assertEqual([h.description for h in record.past_medical_history], ["Asthma", "Gout"])
        self.assertEqual(record.past_medical_history[0].date, "1999")
        ids = {h.id for h in record.past_medical_history + record.surgical_history}
        self.assertEqual(len(ids), 4)

    def test_missing_cells_do_not_overwrite_defaults(self) -> None:
        record = map_workbook(
            {"Medications": [{"Name": "Aspirin", "Dose": None, "Route": float("nan")}]}
        )
        med = record.medications[0]
        self.assertEqual(med.name, "Aspirin")
        self.assertEqual(med.dose, "")
        self.assertEqual(med.route, "")

    def test_unmapped_columns_are_ignored(self) -> None:
        record = map_workbook({"Allergies": [{"Substance": "Latex", "Comment": "n/a"}]})
        self.assertEqual(record.allergies[0].substance, "Latex")
        self.assertNotIn("Comment", record.allergies[0].model_dump())


class TestCellToStr(unittest.TestCase):
    def test_coercions(self) -> None:
        self.assertEqual(cell_to_str(100), "100")
        self.assertEqual(cell_to_str(6.5), "6.5")
        self.assertEqual(cell_to_str(220.0), "220")
        self.assertEqual(cell_to_str(datetime(2023, 10, 15)), "2023-10-15")
        self.assertEqual(cell_to_str(datetime(2023, 10, 15, 8, 30)), "2023-10-15T08:30:00")
        self.assertEqual(cell_to_str(True), "TRUE")
        self.assertEqual(cell_to_str("E11.9"), "E11.9")


class TestWorkbookFiles(unittest.TestCase):
    def test_unreadable_bytes_raise_import_error(self) -> None:
        with self.assertRaises(ImportParseError):
            read_workbook(b"this is not a spreadsheet")

    def test_empty_bytes_raise_import_error(self) -> None:
        with self.assertRaises(ImportParseError) as ctx:
            read_workbook(b"")
        self.assertIn("could not be read", ctx.exception.message)

    def test_export_then_import_preserves_fields(self) -> None:
        original = example_health_record()
        restored = import_workbook(export_workbook(original))

        self.assertEqual(strip_ids(restored), strip_ids(original))
        self.assertNotEqual(restored.patient_info.id, original.patient_info.id)
        self.assertNotEqual(restored.lab_results[0].id, original.lab_results[0].id)

    def test_blank_gender_and_vital_type_survive_round_trip(self) -> None:
        original = HealthRecord(
            patient_info=PatientInfo(name="Ann", gender=""),
            vitals=[VitalSign(type="", value="98", unit="%")],
        )
        self.assertEqual(original.patient_info.gender, "Prefer not to say")
        self.assertEqual(original.vitals[0].type, "Blood Pressure")

        restored = import_workbook(export_workbook(original))
        self.assertEqual(strip_ids(restored), strip_ids(original))

    def test_empty_sections_export_header_only_sheets(self) -> None:
        record = HealthRecord(lab_results=[LabResult(name="Glucose", value="100")])
        workbook = read_workbook(export_workbook(record))

        self.assertIn("DentalRecords", workbook)
        self.assertEqual(workbook["DentalRecords"], [])
        self.assertEqual(workbook["LabResults"], [{"Test Name": "Glucose", "Value": "100"}])

    def test_record_to_workbook_drops_ids(self) -> None:
        workbook = record_to_workbook(example_health_record())
        self.assertEqual(workbook["PatientInfo"][0]["Name"], "Jane Doe")
        for rows in workbook.values():
            for row in rows:
                self.assertNotIn("id", row)


if __name__ == "__main__":
    unittest.main()
