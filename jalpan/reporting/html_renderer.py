"""
HTML Report Renderer

Renders inspection reports to HTML with the Jinja2 template engine
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader

from jalpan.core.config import settings
from jalpan.domain.inspection.analytics import CategoryStat, rating_distribution, tally_report
from jalpan.domain.inspection.schemas import DailyReport, Status, format_display_date

PAGE_WIDTH_PX = 800

STATUS_LABELS = {
    Status.PERFECT: "PERFECT 🌟",
    Status.GOOD: "GOOD ✅",
    Status.NOT_GOOD: "NOT GOOD ❌",
    Status.PENDING: "PENDING",
}

NO_ACTIONS_TEXT = (
    "No major incidents or corrective actions reported during this session. "
    "Standard procedures followed."
)


class HTMLReportRenderer:
    """HTML report renderer"""

    TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

    def __init__(
        self,
        organization_name: Optional[str] = None,
        location_name: Optional[str] = None,
        default_inspector: Optional[str] = None
    ):
        self.organization_name = organization_name or settings.ORGANIZATION_NAME
        self.location_name = location_name or settings.LOCATION_NAME
        self.default_inspector = settings.INITIAL_INSPECTOR if default_inspector is None else default_inspector

        self.env = Environment(
            loader=FileSystemLoader(str(self.TEMPLATE_DIR)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True
        )

        self.template_map = {
            "report": "quality_report.html",
            "summary": "range_summary.html"
        }

    def resolve_inspector(self, report: DailyReport) -> str:
        first_item = report.items[0].inspector_name if report.items else ""
        return report.inspector_name or first_item or self.default_inspector

    def _convert_report_to_context(self, report: DailyReport) -> Dict[str, Any]:
        """
        DailyReport -> template context

        Args:
            report: finalized report

        Returns:
            context dict for quality_report.html
        """
        tally = tally_report(report)

        rows = []
        for item in report.items:
            rows.append({
                "category": item.category,
                "sub_item": item.sub_item or "N/A",
                "incharge": item.counter_incharge or "—",
                "status": item.status.value,
                "status_label": STATUS_LABELS[item.status],
                "remark": item.remark or "Satisfactory",
            })

        return {
            "page_width": PAGE_WIDTH_PX,
            "organization_name": self.organization_name,
            "location_name": self.location_name,
            "display_date": format_display_date(report.date),
            "inspector_name": self.resolve_inspector(report),
            "completion_time": report.completion_time or "--:--",
            "perfect_count": tally.perfect_count,
            "good_count": tally.good_count,
            "not_good_count": tally.not_good_count,
            "rows": rows,
            "actions_taken": report.actions_taken or NO_ACTIONS_TEXT,
        }

    def _convert_range_to_context(
        self,
        stats: List[CategoryStat],
        start: str,
        end: str
    ) -> Dict[str, Any]:
        rows = []
        for stat in stats:
            share = rating_distribution(stat)
            rows.append({
                "category": stat.category,
                "perfect_count": stat.perfect_count,
                "good_count": stat.good_count,
                "not_good_count": stat.not_good_count,
                "total_checked": stat.total_checked,
                "perfect_pct": round(share.perfect, 1),
                "good_pct": round(share.good, 1),
                "not_good_pct": round(share.not_good, 1),
            })

        return {
            "page_width": PAGE_WIDTH_PX,
            "organization_name": self.organization_name,
            "start_display": format_display_date(start),
            "end_display": format_display_date(end),
            "rows": rows,
        }

    def render_report_html(self, report: DailyReport) -> str:
        template = self.env.get_template(self.template_map["report"])
        return template.render(**self._convert_report_to_context(report))

    def render_summary_html(self, stats: List[CategoryStat], start: str, end: str) -> str:
        template = self.env.get_template(self.template_map["summary"])
        return template.render(**self._convert_range_to_context(stats, start, end))


# Singleton instance
_renderer: Optional[HTMLReportRenderer] = None


def get_html_renderer() -> HTMLReportRenderer:
    """HTMLReportRenderer singleton"""
    global _renderer
    if _renderer is None:
        _renderer = HTMLReportRenderer()
    return _renderer
