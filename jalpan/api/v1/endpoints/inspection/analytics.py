"""
Range Analytics API

Per-category rating counts over a date range
"""
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import List
from sqlalchemy.orm import Session

from jalpan.domain.inspection.analytics import CategoryStat, RatingDistribution, rating_distribution
from jalpan.domain.inspection.schemas import DATE_PATTERN
from jalpan.domain.inspection.service import InspectionService
from jalpan.infrastructure.database.session import get_db


router = APIRouter(prefix="/analytics", tags=["analytics"])


class CategoryStatResponse(CategoryStat):
    distribution: RatingDistribution


class RangeStatsResponse(BaseModel):
    start: str
    end: str
    categories: List[CategoryStatResponse]


@router.get("", response_model=RangeStatsResponse)
async def get_range_stats(
    start: str = Query(..., pattern=DATE_PATTERN, description="Inclusive start (YYYY-MM-DD)"),
    end: str = Query(..., pattern=DATE_PATTERN, description="Inclusive end (YYYY-MM-DD)"),
    db: Session = Depends(get_db)
):
    """
    Range analytics over finalized reports

    Counts are raw; distribution percentages are zero for categories that
    were never checked in the range.
    """
    stats = InspectionService.range_stats(db, start, end)
    return RangeStatsResponse(
        start=start,
        end=end,
        categories=[
            CategoryStatResponse(**stat.model_dump(), distribution=rating_distribution(stat))
            for stat in stats
        ],
    )
