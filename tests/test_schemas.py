"""
Report schema tests
"""
import pytest
from pydantic import ValidationError

from jalpan.domain.inspection.schemas import (
    DailyReport,
    InspectionItem,
    Status,
    build_blank_report,
    format_display_date,
)


class TestBlankReport:

    def test_one_pending_item_per_category(self, blank_report, catalog):
        assert [item.category for item in blank_report.items] == catalog.categories
        assert all(item.status == Status.PENDING for item in blank_report.items)
        assert not blank_report.finalized
        assert blank_report.completion_time is None

    def test_item_ids_and_defaults(self, blank_report):
        first = blank_report.items[0]
        assert first.id == "2024-05-01-0"
        assert blank_report.items[-1].id == f"2024-05-01-{len(blank_report.items) - 1}"
        assert first.remark == ""
        assert first.counter_incharge == ""
        assert first.sub_item is None
        assert first.timestamp == 1714550400000

    def test_initial_inspector_is_applied(self, catalog):
        report = build_blank_report("2024-05-01", catalog.categories, inspector_name="Ravi")
        assert report.inspector_name == "Ravi"
        assert {item.inspector_name for item in report.items} == {"Ravi"}


class TestDailyReport:

    def test_date_format_enforced(self):
        with pytest.raises(ValidationError):
            DailyReport(date="01-05-2024")

    def test_display_date(self):
        assert format_display_date("2024-05-01") == "01-05-2024"
        assert DailyReport(date="2024-12-31").display_date == "31-12-2024"

    def test_record_round_trip_uses_camel_case_items(self, report_factory):
        report = report_factory("2024-05-01", [("Breakfast", Status.NOT_GOOD)], actions="Informed the Counter Incharge")
        report.items[0].sub_item = "Poha"

        record = report.to_record()
        assert record["items"][0]["counterIncharge"] == "Suresh"
        assert record["items"][0]["subItem"] == "Poha"
        assert record["items"][0]["status"] == "NOT_GOOD"

        assert DailyReport.from_record(record) == report

    def test_items_accept_field_names_and_aliases(self):
        by_alias = InspectionItem.model_validate({"id": "x", "category": "Tea/Coffee", "counterIncharge": "A"})
        by_name = InspectionItem(id="x", category="Tea/Coffee", counter_incharge="A")
        assert by_alias.counter_incharge == by_name.counter_incharge == "A"

    def test_from_record_tolerates_nulls(self):
        report = DailyReport.from_record({
            "date": "2024-05-01",
            "inspector_name": None,
            "actions_taken": None,
            "completion_time": None,
            "finalized": None,
            "items": None,
        })
        assert report.items == []
        assert report.inspector_name == ""
        assert report.actions_taken == ""
        assert not report.finalized
