"""
Daily Report model

Operational table holding one inspection report per calendar date
"""
from sqlalchemy import Boolean, Column, DateTime, JSON, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from jalpan.infrastructure.database.session import Base


class DailyReportRecord(Base):
    """Daily inspection report row"""

    __tablename__ = "daily_reports"

    # the date is the primary key: one report per day
    date = Column(
        String(10),
        primary_key=True,
        comment="Report date (YYYY-MM-DD)"
    )
    inspector_name = Column(
        String(200),
        nullable=True,
        comment="Inspector on duty"
    )
    completion_time = Column(
        String(20),
        nullable=True,
        comment="Finalize time, e.g. 11:20 AM"
    )
    actions_taken = Column(
        String,
        nullable=True,
        comment="Composed corrective actions"
    )
    finalized = Column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        comment="Validated and saved"
    )
    items = Column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        comment="InspectionItem JSON array"
    )

    # timestamps
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        comment="Created at"
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        comment="Updated at"
    )

    def __repr__(self):
        return f"<DailyReportRecord(date={self.date}, finalized={self.finalized})>"

    def to_dict(self):
        """Persisted report shape"""
        return {
            "date": self.date,
            "inspector_name": self.inspector_name,
            "completion_time": self.completion_time,
            "actions_taken": self.actions_taken,
            "finalized": self.finalized,
            "items": self.items or [],
        }
