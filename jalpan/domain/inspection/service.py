"""
Inspection service

Store lookups combined with blank-report synthesis, form opening and
range analytics.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from jalpan.core.config import settings
from jalpan.domain.inspection.analytics import CategoryStat, calculate_range_stats
from jalpan.domain.inspection.catalog import CategoryCatalog, get_catalog
from jalpan.domain.inspection.exceptions import ReportNotFinalizedError
from jalpan.domain.inspection.form import InspectionForm
from jalpan.domain.inspection.repository import DailyReportRepository
from jalpan.domain.inspection.schemas import DailyReport, build_blank_report, format_display_date
from jalpan.domain.inspection.session_manager import FormSessionManager


class InspectionService:
    """Inspection report service"""

    @staticmethod
    def load_report(
        db: Session,
        report_date: str,
        catalog: Optional[CategoryCatalog] = None,
        default_inspector: Optional[str] = None
    ) -> DailyReport:
        """
        Stored report for the date, or a blank one when none exists

        Raises:
            ReportLoadError: the store failed (no blank report is returned)
        """
        catalog = catalog or get_catalog()
        report = DailyReportRepository.get_by_date(db, report_date)
        if report is not None:
            return report

        inspector = settings.INITIAL_INSPECTOR if default_inspector is None else default_inspector
        return build_blank_report(report_date, catalog.categories, inspector_name=inspector)

    @staticmethod
    def open_form(
        db: Session,
        report_date: str,
        manager: FormSessionManager,
        catalog: Optional[CategoryCatalog] = None
    ) -> InspectionForm:
        """Load the date's report into a new form session"""
        catalog = catalog or get_catalog()
        report = InspectionService.load_report(db, report_date, catalog=catalog)
        form = InspectionForm(report, catalog=catalog, default_inspector=settings.INITIAL_INSPECTOR)
        manager.create_session(form)
        return form

    @staticmethod
    def search_report(db: Session, report_date: str) -> bool:
        """
        Quick search: True only for a finalized record

        Raises:
            ReportLoadError: the lookup itself failed
        """
        report = DailyReportRepository.get_by_date(db, report_date)
        return report is not None and report.finalized

    @staticmethod
    def get_finalized_report(db: Session, report_date: str) -> DailyReport:
        """
        Raises:
            ReportNotFinalizedError: no finalized report for the date
            ReportLoadError: the store failed
        """
        report = DailyReportRepository.get_by_date(db, report_date)
        if report is None or not report.finalized:
            raise ReportNotFinalizedError(
                f"No report found for {format_display_date(report_date)}.",
                details={"date": report_date}
            )
        return report

    @staticmethod
    def range_stats(
        db: Session,
        start: Optional[str],
        end: Optional[str],
        catalog: Optional[CategoryCatalog] = None
    ) -> List[CategoryStat]:
        catalog = catalog or get_catalog()
        reports = DailyReportRepository.list_finalized(db)
        return calculate_range_stats(reports, start, end, catalog.categories)
