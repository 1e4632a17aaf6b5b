"""
Daily Report Repository

Report store over the daily_reports table, keyed by date
"""
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jalpan.core.logging import get_logger
from jalpan.domain.inspection.exceptions import ReportLoadError, ReportSaveError
from jalpan.domain.inspection.models import DailyReportRecord
from jalpan.domain.inspection.schemas import DailyReport

logger = get_logger(__name__)


class DailyReportRepository:
    """Daily report repository"""

    @staticmethod
    def get_by_date(
        db: Session,
        report_date: str
    ) -> Optional[DailyReport]:
        """
        Look up a report by date

        Args:
            db: database session
            report_date: YYYY-MM-DD

        Returns:
            DailyReport or None when no row exists

        Raises:
            ReportLoadError: the database could not be read
        """
        try:
            record = db.query(DailyReportRecord).filter(
                DailyReportRecord.date == report_date
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load report for {report_date}: {e}")
            raise ReportLoadError(
                f"Failed to load the report for {report_date}.",
                details={"date": report_date}
            ) from e

        if record is None:
            return None
        return DailyReport.from_record(record.to_dict())

    @staticmethod
    def upsert(
        db: Session,
        report: DailyReport
    ) -> Tuple[DailyReport, bool]:
        """
        Insert or replace the report for its date (UPSERT)

        Args:
            db: database session
            report: report to store

        Returns:
            (DailyReport, is_created: bool)

        Raises:
            ReportSaveError: connectivity or constraint failure
        """
        values = report.to_record()
        try:
            existing = db.query(DailyReportRecord).filter(
                DailyReportRecord.date == report.date
            ).first()

            if existing:
                for column, value in values.items():
                    setattr(existing, column, value)
                record = existing
                is_created = False
            else:
                record = DailyReportRecord(**values)
                db.add(record)
                is_created = True

            db.commit()
            db.refresh(record)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error saving report for {report.date}: {e}")
            raise ReportSaveError(
                "Failed to save to database. Please check connection.",
                details={"date": report.date}
            ) from e

        action = "created" if is_created else "updated"
        logger.info(f"Daily report {action}: {report.date}")
        return DailyReport.from_record(record.to_dict()), is_created

    @staticmethod
    def list_finalized(db: Session) -> List[DailyReport]:
        """
        All finalized reports, newest first

        A read failure degrades to an empty history.

        Args:
            db: database session

        Returns:
            DailyReport list (date descending)
        """
        try:
            records = db.query(DailyReportRecord).filter(
                DailyReportRecord.finalized.is_(True)
            ).order_by(
                DailyReportRecord.date.desc()
            ).all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching reports: {e}")
            return []

        return [DailyReport.from_record(record.to_dict()) for record in records]

    @staticmethod
    def exists_finalized(db: Session, report_date: str) -> bool:
        """
        Whether a finalized report exists for the date

        Lookup errors count as "not found". Callers that must tell a
        failing store apart from a missing report (the HTTP quick search)
        use get_by_date instead; this is the lenient check for background
        callers such as reminders and batch jobs.

        Args:
            db: database session
            report_date: YYYY-MM-DD

        Returns:
            bool
        """
        try:
            finalized = db.query(DailyReportRecord.finalized).filter(
                DailyReportRecord.date == report_date
            ).scalar()
        except SQLAlchemyError as e:
            logger.warning(f"Quick search lookup failed for {report_date}: {e}")
            return False

        return bool(finalized)
