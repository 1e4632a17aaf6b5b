"""
PDF Export API

Server-side PDF generation with pdfkit (wkhtmltopdf)

wkhtmltopdf is a blocking subprocess, so these run in the threadpool.
"""
from fastapi import APIRouter, HTTPException, Depends, Path, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from jalpan.core.logging import get_logger
from jalpan.domain.inspection.exceptions import (
    ReportExportError,
    ReportLoadError,
    ReportNotFinalizedError,
)
from jalpan.domain.inspection.schemas import DATE_PATTERN
from jalpan.domain.inspection.service import InspectionService
from jalpan.infrastructure.database.session import get_db
from jalpan.reporting.pdf_export import ReportPDFExporter, get_pdf_exporter

logger = get_logger(__name__)

router = APIRouter(tags=["pdf-export"])


def _pdf_response(pdf_bytes: bytes, filename: str) -> Response:
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"'
        }
    )


@router.get("/reports/{report_date}/pdf")
def generate_report_pdf(
    report_date: str = Path(..., pattern=DATE_PATTERN),
    db: Session = Depends(get_db),
    exporter: ReportPDFExporter = Depends(get_pdf_exporter)
):
    """
    Quality report PDF for a finalized date

    Returns:
        PDF file (application/pdf)
    """
    try:
        report = InspectionService.get_finalized_report(db, report_date)
        pdf_bytes, filename = exporter.export_report(report)
    except ReportNotFinalizedError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ReportLoadError as e:
        raise HTTPException(status_code=503, detail=e.message)
    except ReportExportError as e:
        logger.error(f"PDF export failed for {report_date}: {e.message}")
        raise HTTPException(status_code=500, detail=e.message)

    return _pdf_response(pdf_bytes, filename)


@router.get("/analytics/pdf")
def generate_summary_pdf(
    start: str = Query(..., pattern=DATE_PATTERN),
    end: str = Query(..., pattern=DATE_PATTERN),
    db: Session = Depends(get_db),
    exporter: ReportPDFExporter = Depends(get_pdf_exporter)
):
    """
    Range summary PDF

    Returns:
        PDF file (application/pdf)
    """
    stats = InspectionService.range_stats(db, start, end)
    try:
        pdf_bytes, filename = exporter.export_summary(stats, start, end)
    except ReportExportError as e:
        logger.error(f"Summary PDF export failed for {start}..{end}: {e.message}")
        raise HTTPException(status_code=500, detail=e.message)

    return _pdf_response(pdf_bytes, filename)
