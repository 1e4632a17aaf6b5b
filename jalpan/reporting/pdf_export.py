"""
PDF export

HTML -> PDF through pdfkit (wkhtmltopdf). Exports are read-only over a
finalized report and safe to retry.
"""
import threading
from typing import Callable, List, Optional, Tuple

import pdfkit
from jinja2 import TemplateError

from jalpan.core.config import settings
from jalpan.core.logging import get_logger
from jalpan.domain.inspection.analytics import CategoryStat
from jalpan.domain.inspection.exceptions import ReportExportError, ReportNotFinalizedError
from jalpan.domain.inspection.schemas import DailyReport, format_display_date
from jalpan.reporting.html_renderer import HTMLReportRenderer, PAGE_WIDTH_PX, get_html_renderer

logger = get_logger(__name__)

PDF_OPTIONS = {
    'page-width': f'{PAGE_WIDTH_PX}px',
    'page-height': '1200px',
    'margin-top': '0',
    'margin-right': '0',
    'margin-bottom': '0',
    'margin-left': '0',
    'encoding': "UTF-8",
    'disable-smart-shrinking': None,
    'no-outline': None,
    'enable-local-file-access': None
}


def report_pdf_filename(report_date: str) -> str:
    return f"Jalpan_Quality_Report_{format_display_date(report_date)}.pdf"


def summary_pdf_filename(start: str, end: str) -> str:
    return f"Jalpan_Summary_{start}_to_{end}.pdf"


class ReportPDFExporter:
    """Report / range summary PDF generator"""

    def __init__(
        self,
        renderer: Optional[HTMLReportRenderer] = None,
        wkhtmltopdf_path: Optional[str] = None
    ):
        self.renderer = renderer or get_html_renderer()
        self.wkhtmltopdf_path = settings.WKHTMLTOPDF_PATH if wkhtmltopdf_path is None else wkhtmltopdf_path
        # exports run concurrently on the shared instance; count each one
        self._active_exports = 0
        self._lock = threading.Lock()

    @property
    def is_exporting(self) -> bool:
        with self._lock:
            return self._active_exports > 0

    def _begin_export(self) -> None:
        with self._lock:
            self._active_exports += 1

    def _end_export(self) -> None:
        with self._lock:
            self._active_exports -= 1

    def _to_pdf(self, html_string: str) -> bytes:
        try:
            configuration = None
            if self.wkhtmltopdf_path:
                configuration = pdfkit.configuration(wkhtmltopdf=self.wkhtmltopdf_path)
            return pdfkit.from_string(html_string, False, options=PDF_OPTIONS, configuration=configuration)
        except OSError as e:
            logger.error(f"PDF generation error: {e}")
            if "No wkhtmltopdf executable found" in str(e):
                raise ReportExportError(
                    "wkhtmltopdf is not installed. Download it from https://wkhtmltopdf.org/downloads.html"
                ) from e
            raise ReportExportError("Could not generate PDF. Please try again.") from e

    def _export(self, render: Callable[[], str], label: str) -> bytes:
        """
        Render HTML and convert it, holding the busy count for the whole export

        Raises:
            ReportExportError: template rendering or PDF conversion failed
        """
        self._begin_export()
        try:
            try:
                html_string = render()
            except (TemplateError, UnicodeError) as e:
                logger.error(f"HTML rendering error for {label}: {e}")
                raise ReportExportError("Could not generate PDF. Please try again.") from e
            return self._to_pdf(html_string)
        finally:
            self._end_export()

    def export_report(self, report: DailyReport) -> Tuple[bytes, str]:
        """
        PDF for one finalized report

        Returns:
            (pdf bytes, filename)

        Raises:
            ReportNotFinalizedError: the report has not been finalized
            ReportExportError: rendering failed
        """
        if not report.finalized:
            raise ReportNotFinalizedError(
                f"The quality report for {format_display_date(report.date)} hasn't been submitted yet.",
                details={"date": report.date}
            )
        pdf_bytes = self._export(lambda: self.renderer.render_report_html(report), report.date)
        return pdf_bytes, report_pdf_filename(report.date)

    def export_summary(self, stats: List[CategoryStat], start: str, end: str) -> Tuple[bytes, str]:
        """
        PDF for a range summary

        Returns:
            (pdf bytes, filename)

        Raises:
            ReportExportError: rendering failed
        """
        pdf_bytes = self._export(lambda: self.renderer.render_summary_html(stats, start, end), f"{start}..{end}")
        return pdf_bytes, summary_pdf_filename(start, end)


# Singleton instance
_exporter: Optional[ReportPDFExporter] = None


def get_pdf_exporter() -> ReportPDFExporter:
    """ReportPDFExporter singleton"""
    global _exporter
    if _exporter is None:
        _exporter = ReportPDFExporter()
    return _exporter
