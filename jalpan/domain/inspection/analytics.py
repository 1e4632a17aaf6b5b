"""
Inspection analytics

Per-category rating tallies over a date range and the dashboard listing.
Dates are YYYY-MM-DD strings and compare lexically.
"""
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from jalpan.domain.inspection.schemas import DailyReport, Status, format_display_date


class CategoryStat(BaseModel):
    """Rating counts for one category"""
    category: str
    perfect_count: int = 0
    good_count: int = 0
    not_good_count: int = 0
    total_checked: int = 0

    def record(self, status: Status) -> None:
        if status == Status.PERFECT:
            self.perfect_count += 1
        elif status == Status.GOOD:
            self.good_count += 1
        elif status == Status.NOT_GOOD:
            self.not_good_count += 1
        else:
            # PENDING is never tallied
            return
        self.total_checked += 1


class RatingDistribution(BaseModel):
    """Share of each outcome in percent"""
    perfect: float = 0.0
    good: float = 0.0
    not_good: float = 0.0


class ReportTally(BaseModel):
    """Rating counts inside one report"""
    perfect_count: int = 0
    good_count: int = 0
    not_good_count: int = 0


class ReportListEntry(BaseModel):
    """Dashboard history row"""
    date: str
    display_date: str
    inspector_name: str = ""
    completion_time: Optional[str] = None
    issues_count: int = 0
    perfect_count: int = 0
    headline: str = Field(..., description="e.g. '2 Anomalies', '3 Perfect Ratings', 'All Good'")


def calculate_range_stats(
    reports: Iterable[DailyReport],
    start: Optional[str],
    end: Optional[str],
    categories: Sequence[str]
) -> List[CategoryStat]:
    """
    Per-category tally over [start, end]

    Args:
        reports: stored reports (non-finalized ones are skipped)
        start: inclusive start date (YYYY-MM-DD)
        end: inclusive end date (YYYY-MM-DD)
        categories: catalog categories, output order

    Returns:
        one CategoryStat per category, or [] when the range is incomplete
    """
    if not start or not end:
        return []

    stats: Dict[str, CategoryStat] = {
        category: CategoryStat(category=category) for category in categories
    }

    for report in reports:
        if not report.finalized or not (start <= report.date <= end):
            continue
        for item in report.items:
            stat = stats.get(item.category)
            if stat is not None:
                stat.record(item.status)

    return [stats[category] for category in categories]


def rating_distribution(stat: CategoryStat) -> RatingDistribution:
    """Percentages for a distribution bar; all zero when nothing was checked"""
    if stat.total_checked == 0:
        return RatingDistribution()
    return RatingDistribution(
        perfect=stat.perfect_count / stat.total_checked * 100,
        good=stat.good_count / stat.total_checked * 100,
        not_good=stat.not_good_count / stat.total_checked * 100,
    )


def tally_report(report: DailyReport) -> ReportTally:
    tally = ReportTally()
    for item in report.items:
        if item.status == Status.PERFECT:
            tally.perfect_count += 1
        elif item.status == Status.GOOD:
            tally.good_count += 1
        elif item.status == Status.NOT_GOOD:
            tally.not_good_count += 1
    return tally


def _headline(issues: int, perfect: int) -> str:
    if issues:
        return f"{issues} Anomalies"
    if perfect:
        return f"{perfect} Perfect Ratings"
    return "All Good"


def build_listing(reports: Iterable[DailyReport]) -> List[ReportListEntry]:
    """Dashboard rows, in the order given"""
    entries = []
    for report in reports:
        tally = tally_report(report)
        entries.append(ReportListEntry(
            date=report.date,
            display_date=format_display_date(report.date),
            inspector_name=report.inspector_name,
            completion_time=report.completion_time,
            issues_count=tally.not_good_count,
            perfect_count=tally.perfect_count,
            headline=_headline(tally.not_good_count, tally.perfect_count),
        ))
    return entries
