"""
Inspection Reports API

History listing, quick search, single-date lookup, share text and AI summary
"""
from fastapi import APIRouter, HTTPException, Depends, Path, Query
from pydantic import BaseModel, Field
from typing import List
from sqlalchemy.orm import Session

from jalpan.domain.inspection.analytics import ReportListEntry, build_listing
from jalpan.domain.inspection.exceptions import ReportLoadError, ReportNotFinalizedError
from jalpan.domain.inspection.repository import DailyReportRepository
from jalpan.domain.inspection.schemas import DATE_PATTERN, DailyReport
from jalpan.domain.inspection.service import InspectionService
from jalpan.domain.inspection.summary import analyze_report
from jalpan.infrastructure.database.session import get_db
from jalpan.llm.client import LLMClient, get_llm
from jalpan.reporting.share_text import build_share_text, build_share_url


router = APIRouter(prefix="/reports", tags=["inspection-report"])


class ReportListResponse(BaseModel):
    """Finalized report history (newest first)"""
    total: int = Field(..., description="Number of finalized reports")
    reports: List[ReportListEntry] = Field(..., description="Dashboard rows")


class SearchResponse(BaseModel):
    date: str
    found: bool


class ShareTextResponse(BaseModel):
    text: str
    share_url: str


class SummaryResponse(BaseModel):
    summary: str


def get_summary_llm() -> LLMClient:
    """LLM client dependency"""
    return get_llm()


def _finalized_or_404(db: Session, report_date: str) -> DailyReport:
    try:
        return InspectionService.get_finalized_report(db, report_date)
    except ReportNotFinalizedError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ReportLoadError as e:
        raise HTTPException(status_code=503, detail=e.message)


@router.get("", response_model=ReportListResponse)
async def list_reports(db: Session = Depends(get_db)):
    """
    Finalized reports, newest first

    A store failure shows as an empty history (logged by the repository).
    """
    reports = DailyReportRepository.list_finalized(db)
    return ReportListResponse(total=len(reports), reports=build_listing(reports))


@router.get("/search", response_model=SearchResponse)
async def search_report(
    date: str = Query(..., pattern=DATE_PATTERN, description="Date to look up (YYYY-MM-DD)"),
    db: Session = Depends(get_db)
):
    """
    Quick search

    found=false is a normal answer; a failing store is 503.
    """
    try:
        found = InspectionService.search_report(db, date)
    except ReportLoadError as e:
        raise HTTPException(status_code=503, detail=e.message)
    return SearchResponse(date=date, found=found)


@router.get("/{report_date}", response_model=DailyReport)
async def get_report(
    report_date: str = Path(..., pattern=DATE_PATTERN),
    db: Session = Depends(get_db)
):
    """
    Report for a date

    Returns the stored report, or a blank PENDING checklist when the date
    has none. A load failure is 503, not a blank report.
    """
    try:
        return InspectionService.load_report(db, report_date)
    except ReportLoadError as e:
        raise HTTPException(status_code=503, detail=e.message)


@router.get("/{report_date}/share-text", response_model=ShareTextResponse)
async def get_share_text(
    report_date: str = Path(..., pattern=DATE_PATTERN),
    db: Session = Depends(get_db)
):
    report = _finalized_or_404(db, report_date)
    text = build_share_text(report)
    return ShareTextResponse(text=text, share_url=build_share_url(text))


@router.post("/{report_date}/summary", response_model=SummaryResponse)
async def summarize_report(
    report_date: str = Path(..., pattern=DATE_PATTERN),
    db: Session = Depends(get_db),
    llm: LLMClient = Depends(get_summary_llm)
):
    """AI summary; failures come back as a readable message"""
    report = _finalized_or_404(db, report_date)
    return SummaryResponse(summary=analyze_report(report, llm=llm))
