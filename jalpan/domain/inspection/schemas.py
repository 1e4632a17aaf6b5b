"""
Inspection report schemas

Pydantic models for a daily report and its checklist items, plus the
conversion to and from the persisted row shape.
"""
import time
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class Status(str, Enum):
    """Rating of one category"""
    PENDING = "PENDING"
    NOT_GOOD = "NOT_GOOD"
    GOOD = "GOOD"
    PERFECT = "PERFECT"


def _now_ms() -> int:
    return int(time.time() * 1000)


class InspectionItem(BaseModel):
    """One checklist row"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="<date>-<ordinal>")
    category: str = Field(..., description="Catalog category name")
    status: Status = Field(Status.PENDING, description="Rating")
    remark: str = Field("", description="Defect explanation (NOT_GOOD only)")
    counter_incharge: str = Field("", alias="counterIncharge", description="Person in charge of the counter")
    sub_item: Optional[str] = Field(None, alias="subItem", description="Specific dish prepared")
    inspector_name: str = Field("", alias="inspectorName", description="Inspector, copied at finalize")
    timestamp: int = Field(default_factory=_now_ms, description="Creation time (epoch ms)")


class DailyReport(BaseModel):
    """Inspection report for one calendar date"""
    model_config = ConfigDict(populate_by_name=True)

    date: str = Field(..., pattern=DATE_PATTERN, description="Report date (YYYY-MM-DD)")
    items: List[InspectionItem] = Field(default_factory=list, description="One item per category")
    inspector_name: str = Field("", alias="inspectorName", description="Inspector on duty")
    actions_taken: str = Field("", alias="actionsTaken", description="Composed corrective actions")
    completion_time: Optional[str] = Field(None, alias="completionTime", description="e.g. 11:20 AM")
    finalized: bool = Field(False, description="Validated and saved")

    @property
    def display_date(self) -> str:
        """DD-MM-YYYY"""
        return format_display_date(self.date)

    def to_record(self) -> Dict[str, Any]:
        """Persisted row shape"""
        return {
            "date": self.date,
            "inspector_name": self.inspector_name,
            "completion_time": self.completion_time,
            "actions_taken": self.actions_taken,
            "finalized": self.finalized,
            "items": [item.model_dump(mode="json", by_alias=True) for item in self.items],
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "DailyReport":
        """Build from the persisted row shape"""
        return cls(
            date=record["date"],
            items=[InspectionItem.model_validate(item) for item in record.get("items") or []],
            inspector_name=record.get("inspector_name") or "",
            actions_taken=record.get("actions_taken") or "",
            completion_time=record.get("completion_time"),
            finalized=bool(record.get("finalized")),
        )


def format_display_date(report_date: str) -> str:
    """YYYY-MM-DD -> DD-MM-YYYY"""
    return "-".join(reversed(report_date.split("-")))


def build_blank_report(
    report_date: str,
    categories: Sequence[str],
    inspector_name: str = "",
    timestamp: Optional[int] = None
) -> DailyReport:
    """
    Synthesize an empty report for a date with no stored record

    Args:
        report_date: YYYY-MM-DD
        categories: catalog category names, in order
        inspector_name: configured initial inspector
        timestamp: creation time in epoch ms (defaults to now)

    Returns:
        DailyReport with every item PENDING and finalized=False
    """
    created = timestamp if timestamp is not None else _now_ms()
    items = [
        InspectionItem(
            id=f"{report_date}-{index}",
            category=category,
            status=Status.PENDING,
            remark="",
            counter_incharge="",
            inspector_name=inspector_name,
            timestamp=created,
        )
        for index, category in enumerate(categories)
    ]
    return DailyReport(
        date=report_date,
        items=items,
        inspector_name=inspector_name,
        actions_taken="",
        finalized=False,
    )
