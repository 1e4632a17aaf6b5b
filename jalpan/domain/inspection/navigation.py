"""
Navigation state

Client-side view model: which view is showing and for which date. The HTTP
API is stateless per request (every report call is keyed by its path date),
so this is not held by the server; clients embedding the domain package
drive it around their report loads.

Loads are tagged with the (date, trigger) they were issued for; a result
whose ticket no longer matches is dropped.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from jalpan.domain.inspection.schemas import DailyReport


class ViewMode(str, Enum):
    FORM = "form"
    REPORT = "report"
    DASHBOARD = "dashboard"


@dataclass(frozen=True)
class FetchTicket:
    date: str
    trigger: int


class NavigationState:
    """Selected view and date plus the report loaded for it"""

    def __init__(self, selected_date: str, view: ViewMode = ViewMode.FORM):
        self.view = view
        self.selected_date = selected_date
        self.refresh_trigger = 0
        self.current_report: Optional[DailyReport] = None
        self.load_error: Optional[str] = None
        self.is_loading = False

    def select_date(self, report_date: str) -> None:
        if report_date:
            self.selected_date = report_date

    def set_view(self, view: ViewMode) -> None:
        self.view = view

    def begin_fetch(self) -> FetchTicket:
        self.is_loading = True
        return FetchTicket(date=self.selected_date, trigger=self.refresh_trigger)

    def is_current(self, ticket: FetchTicket) -> bool:
        return ticket.date == self.selected_date and ticket.trigger == self.refresh_trigger

    def apply_fetch(self, ticket: FetchTicket, report: DailyReport) -> bool:
        """Store a loaded report; False when the ticket was superseded"""
        if not self.is_current(ticket):
            return False
        self.current_report = report
        self.load_error = None
        self.is_loading = False
        return True

    def fail_fetch(self, ticket: FetchTicket, message: str) -> bool:
        """Record a load failure; the previous report is not replaced by a blank one"""
        if not self.is_current(ticket):
            return False
        self.current_report = None
        self.load_error = message
        self.is_loading = False
        return True

    def on_saved(self) -> None:
        self.refresh_trigger += 1
        self.view = ViewMode.REPORT

    def view_report(self, report_date: str) -> None:
        self.select_date(report_date)
        self.view = ViewMode.REPORT
