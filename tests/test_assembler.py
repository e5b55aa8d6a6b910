"""Unit tests for JobDraftAssembler."""
import json
from decimal import Decimal

import pytest

from src.extraction import (
    ExtractedJobDraft,
    ExtractionState,
    JobDraftAssembler,
    build_field_specs,
)
from src.utils.exceptions import FieldSpecError, IncompleteJobSheetError


@pytest.fixture
def assembler():
    return JobDraftAssembler()


class TestWorkedExample:
    def test_full_job_sheet(self, assembler, job_sheet_text):
        outcome = assembler.extract(job_sheet_text)
        draft = outcome.draft

        assert draft.customer_name == "John Jerrime"
        assert draft.customer_phone == "0411 056 876"
        assert draft.bike_model == "Trek Marlin 7"
        assert draft.work_required == "Fork service"
        assert draft.work_done == "Fork Service\nHub clean"
        assert draft.labor_cost == 80
        assert draft.parts_cost == 210
        assert draft.total_cost == 290
        assert draft.notes == "S/T 27/6/2023"
        assert outcome.state == ExtractionState.COMPLETE
        assert outcome.is_complete
        assert outcome.missing_required == ()

    def test_windows_line_endings(self, assembler, job_sheet_text):
        outcome = assembler.extract(job_sheet_text.replace("\n", "\r\n"))

        assert outcome.draft.work_done == "Fork Service\nHub clean"
        assert outcome.draft.customer_name == "John Jerrime"

    def test_fields_sharing_a_line(self, assembler):
        text = (
            "Customer: John Jerrime Phone: 0411 056 876\n"
            "Bike: Trek Marlin 7 Date In: 14/6/2023\n"
            "Labor: $80 Parts: $210 Notes: call first"
        )
        outcome = assembler.extract(text)
        draft = outcome.draft

        assert draft.customer_name == "John Jerrime"
        assert draft.customer_phone == "0411 056 876"
        assert draft.bike_model == "Trek Marlin 7"
        assert draft.date_in == "2023-06-14"
        assert draft.total_cost == 290
        assert draft.notes == "call first"
        assert outcome.is_complete

    def test_date_in_is_normalized(self, assembler, job_sheet_text):
        outcome = assembler.extract("Date In: 14/6/2023\n" + job_sheet_text)
        assert outcome.draft.date_in == "2023-06-14"

    def test_unreadable_date_in_kept_raw(self, assembler):
        outcome = assembler.extract("Date In: after lunch")
        assert outcome.draft.date_in == "after lunch"


class TestCompleteness:
    def test_missing_customer_is_incomplete(self, assembler):
        text = "Phone: 0411 056 876\nBike: Trek Marlin 7\nWork Required: Fork service"
        outcome = assembler.extract(text)

        assert outcome.draft.customer_name == "Unknown Customer"
        assert outcome.state == ExtractionState.INCOMPLETE
        assert outcome.missing_required == ("customer_name",)

    def test_empty_text_defaults_everything(self, assembler):
        outcome = assembler.extract("")
        draft = outcome.draft

        assert draft == ExtractedJobDraft()
        assert outcome.state == ExtractionState.INCOMPLETE
        assert set(outcome.missing_required) == {"customer_name", "customer_phone", "bike_model"}
        assert outcome.matched_fields == ()

    def test_literal_default_text_still_counts_as_recovered(self, assembler):
        text = "Customer: Unknown Customer\nPhone: 0411 056 876\nBike: BMX"
        outcome = assembler.extract(text)
        assert outcome.is_complete

    def test_raise_if_incomplete(self, assembler):
        outcome = assembler.extract("Bike: BMX", source="sheet-7.jpg")

        with pytest.raises(IncompleteJobSheetError) as exc_info:
            outcome.raise_if_incomplete()

        assert exc_info.value.missing_fields == ["customer_name", "customer_phone"]
        assert exc_info.value.details["source"] == "sheet-7.jpg"

    def test_raise_if_incomplete_returns_complete_outcome(self, assembler, job_sheet_text):
        outcome = assembler.extract(job_sheet_text)
        assert outcome.raise_if_incomplete() is outcome

    def test_custom_required_fields(self):
        assembler = JobDraftAssembler(required_fields=["bike_model", "work_done"])
        outcome = assembler.extract("Bike: Trek")

        assert outcome.missing_required == ("work_done",)

    def test_unknown_required_field_rejected(self):
        with pytest.raises(FieldSpecError):
            JobDraftAssembler(required_fields=["frame_size"])


class TestCosts:
    def test_unparsable_labor_is_zero(self, assembler):
        outcome = assembler.extract("Labor: free\nParts: $12.50")

        assert outcome.draft.labor_cost == 0
        assert outcome.draft.parts_cost == Decimal("12.50")
        assert outcome.draft.total_cost == Decimal("12.50")
        assert "labor_cost" in outcome.matched_fields

    def test_printed_total_is_ignored(self, assembler):
        outcome = assembler.extract("Labor: $80\nParts: $210\nTotal: $999")
        assert outcome.draft.total_cost == 290

    @pytest.mark.parametrize("text", [
        "",
        "Labor: $80",
        "Parts: 1,250.40\nLabor: 99.99",
        "Labor: -5\nParts: ???",
        "Total: 500",
        "Labour: 45,5\nMaterials: AUD 10",
        "gibberish ### $$$ 12..3",
        "Customer: Jo\nPhone: 0411 056 876\nBike: BMX\nLabor: " + "9" * 30,
    ])
    def test_total_is_sum_of_labor_and_parts(self, assembler, text):
        draft = assembler.extract(text).draft
        assert draft.total_cost == draft.labor_cost + draft.parts_cost
        assert draft.labor_cost >= 0
        assert draft.parts_cost >= 0


class TestPurity:
    def test_identical_input_identical_outcome(self, assembler, job_sheet_text):
        first = assembler.extract(job_sheet_text)
        second = assembler.extract(job_sheet_text)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_separate_instances_agree(self, job_sheet_text):
        assert JobDraftAssembler().extract(job_sheet_text) == JobDraftAssembler().extract(job_sheet_text)

    def test_unmatched_fields_equal_configured_defaults(self, assembler):
        draft = assembler.extract("nothing useful here").draft

        assert draft.customer_name == "Unknown Customer"
        assert draft.customer_phone == "No Phone"
        assert draft.bike_model == "Unknown Model"
        assert draft.work_required == "No work description"
        assert draft.work_done == ""
        assert draft.notes == ""


class TestConfiguredSpecs:
    def test_relabelled_field(self, job_sheet_text):
        field_specs, section_specs = build_field_specs({"customer_name": {"labels": ["Owner"]}})
        assembler = JobDraftAssembler(field_specs=field_specs, section_specs=section_specs)

        assert assembler.extract("Owner: Sam Hill").draft.customer_name == "Sam Hill"
        # Only the configured label is used now
        assert assembler.extract(job_sheet_text).draft.customer_name == "Unknown Customer"

    def test_overridden_default(self):
        field_specs, section_specs = build_field_specs({"bike_model": {"default": "Walk-in"}})
        assembler = JobDraftAssembler(field_specs=field_specs, section_specs=section_specs)

        assert assembler.extract("").draft.bike_model == "Walk-in"

    def test_extra_boundary_header(self):
        assembler = JobDraftAssembler(boundary_headers=["Signed"])
        outcome = assembler.extract("Notes: pick up Friday\nSigned: JJ")
        assert outcome.draft.notes == "pick up Friday"


class TestOutcomeSerialization:
    def test_to_dict(self, assembler, job_sheet_text):
        data = assembler.extract(job_sheet_text, source="scan.jpg").to_dict()

        assert data["labor_cost"] == 80.0
        assert data["total_cost"] == 290.0
        assert data["state"] == "complete"
        assert data["complete"] is True
        assert data["source"] == "scan.jpg"
        assert "customer_name" in data["matched_fields"]

    def test_to_json(self, assembler, job_sheet_text):
        payload = json.loads(assembler.extract(job_sheet_text).to_json())
        assert payload["bike_model"] == "Trek Marlin 7"
