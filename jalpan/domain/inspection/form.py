"""
Inspection Form Engine

Editable state for one daily report: rating toggles, per-category sub-item
inputs, corrective-action checkboxes, validation and finalize.
"""
import re
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from jalpan.domain.inspection.catalog import (
    CategoryCatalog,
    SubItemMode,
    SUBZI_CHOICE,
    get_catalog,
)
from jalpan.domain.inspection.exceptions import FormSaveInProgressError
from jalpan.domain.inspection.repository import DailyReportRepository
from jalpan.domain.inspection.schemas import DailyReport, InspectionItem, Status

COMPLETION_TIME_FORMAT = "%I:%M %p"

INSPECTOR_REQUIRED_MESSAGE = "Inspector (Sewadar on duty) name is required."
ACTIONS_REQUIRED_MESSAGE = "Corrective actions are mandatory since 'Not Good' issues were reported."
SAVE_IN_PROGRESS_MESSAGE = "This report is already being saved. Please wait."

EDITABLE_ITEM_FIELDS = ("counter_incharge", "remark", "sub_item")


class FormError(BaseModel):
    """First failing validation check"""
    message: str = Field(..., description="Human-readable message")
    field: str = Field(..., description="inspector_name / status / counter_incharge / sub_item / actions")
    category: Optional[str] = Field(None, description="Offending category")
    index: Optional[int] = Field(None, description="Offending item index")


class FinalizeOutcome(BaseModel):
    """Result of a finalize attempt"""
    status: Literal["saved", "invalid", "blocked"]
    error: Optional[FormError] = None
    message: Optional[str] = None
    report: Optional[DailyReport] = None
    created: Optional[bool] = None

    @property
    def ok(self) -> bool:
        return self.status == "saved"


def compose_actions(
    selected: Sequence[str],
    custom_text: str,
    phrases: Sequence[str]
) -> str:
    """
    Build the persisted actionsTaken text

    Selected phrases in catalog order, one per line, then the trimmed
    custom note as a final line.

    Args:
        selected: chosen catalog phrases
        custom_text: free-text note
        phrases: catalog phrases (defines the order)

    Returns:
        newline-joined text
    """
    chosen = set(selected)
    parts = [phrase for phrase in phrases if phrase in chosen]
    if custom_text.strip():
        parts.append(custom_text.strip())
    return "\n".join(parts)


def decompose_actions(
    actions_taken: Optional[str],
    phrases: Sequence[str]
) -> Tuple[List[str], str]:
    """
    Split a stored actionsTaken text back into checkboxes and custom text

    Best effort: a custom note that contains a catalog phrase is read back
    as that phrase being selected.

    Args:
        actions_taken: stored composite text
        phrases: catalog phrases

    Returns:
        (selected phrases, custom text)
    """
    remaining = actions_taken or ""
    found: List[str] = []

    for phrase in phrases:
        if phrase in remaining:
            found.append(phrase)
            remaining = remaining.replace(phrase, "", 1)

    # commas and newlines left behind by the removed phrases
    custom = re.sub(r"[\n,]+", " ", remaining).strip()
    return found, custom


class InspectionForm:
    """Editing state for one report"""

    def __init__(
        self,
        report: DailyReport,
        catalog: Optional[CategoryCatalog] = None,
        default_inspector: str = ""
    ):
        self.catalog = catalog or get_catalog()
        self.report = report
        self.session_id: Optional[str] = None
        self.items: List[InspectionItem] = [item.model_copy() for item in report.items]

        first_item_inspector = report.items[0].inspector_name if report.items else ""
        self.inspector_name: str = report.inspector_name or first_item_inspector or default_inspector

        self.selected_actions, self.custom_action = decompose_actions(
            report.actions_taken, self.catalog.corrective_actions
        )

        self.is_saving = False
        self._save_lock = threading.Lock()

    @property
    def date(self) -> str:
        return self.report.date

    @property
    def has_issues(self) -> bool:
        return any(item.status == Status.NOT_GOOD for item in self.items)

    def _item(self, index: int) -> InspectionItem:
        if index < 0 or index >= len(self.items):
            raise IndexError(f"No checklist item at index {index}")
        return self.items[index]

    @contextmanager
    def _editing(self):
        """Hold the save lock for one edit; edits are refused while a save runs"""
        with self._save_lock:
            if self.is_saving:
                raise FormSaveInProgressError(SAVE_IN_PROGRESS_MESSAGE, details={"date": self.date})
            yield

    # ========================================
    # Item editing
    # ========================================

    def set_inspector_name(self, name: str) -> None:
        with self._editing():
            self.inspector_name = name

    def set_status(self, index: int, status: Status) -> InspectionItem:
        """
        Rate a category

        Choosing the current rating again clears it back to PENDING; any
        resulting status other than NOT_GOOD drops the remark.
        """
        with self._editing():
            item = self._item(index)
            new_status = Status.PENDING if item.status == status else status
            new_remark = item.remark if new_status == Status.NOT_GOOD else ""
            self.items[index] = item.model_copy(update={"status": new_status, "remark": new_remark})
            return self.items[index]

    def update_item(self, index: int, **fields) -> InspectionItem:
        """Set counter_incharge / remark / sub_item text"""
        with self._editing():
            item = self._item(index)
            unknown = set(fields) - set(EDITABLE_ITEM_FIELDS)
            if unknown:
                raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

            if "sub_item" in fields and fields["sub_item"] is not None:
                config = self.catalog.config_for(item.category)
                if not config.accepts_free_text:
                    raise ValueError(f'"{item.category}" does not take a typed food name.')

            updates = dict(fields)
            for key in ("counter_incharge", "remark"):
                if key in updates and updates[key] is None:
                    updates[key] = ""

            self.items[index] = item.model_copy(update=updates)
            return self.items[index]

    def select_sub_item_choice(self, index: int, choice: str) -> InspectionItem:
        """
        Pick a fixed sub-item option; picking the active one clears it

        For the Roti/Dal category "Subzi" switches to the free-text mode
        (empty string) rather than storing the word itself.
        """
        with self._editing():
            item = self._item(index)
            config = self.catalog.config_for(item.category)
            if choice not in config.sub_item_choices:
                raise ValueError(f'"{choice}" is not an option for "{item.category}".')

            if config.sub_item_mode == SubItemMode.DAL_OR_SUBZI and choice == SUBZI_CHOICE:
                in_subzi_mode = item.sub_item is not None and item.sub_item != config.sub_item_waiver_value
                new_value = None if in_subzi_mode else ""
            else:
                new_value = None if item.sub_item == choice else choice

            self.items[index] = item.model_copy(update={"sub_item": new_value})
            return self.items[index]

    # ========================================
    # Corrective actions
    # ========================================

    def toggle_action(self, phrase: str) -> List[str]:
        with self._editing():
            if phrase not in self.catalog.corrective_actions:
                raise ValueError(f'Unknown corrective action: "{phrase}"')
            if phrase in self.selected_actions:
                self.selected_actions = [a for a in self.selected_actions if a != phrase]
            else:
                self.selected_actions = self.selected_actions + [phrase]
            return self.selected_actions

    def set_custom_action(self, text: str) -> None:
        with self._editing():
            self.custom_action = text

    def combined_actions(self) -> str:
        return compose_actions(self.selected_actions, self.custom_action, self.catalog.corrective_actions)

    # ========================================
    # Validation / finalize
    # ========================================

    def sub_item_missing(self, item: InspectionItem) -> bool:
        config = self.catalog.config_for(item.category)
        if not config.requires_sub_item:
            return False
        if config.sub_item_waiver_value is not None and item.sub_item == config.sub_item_waiver_value:
            return False
        return not (item.sub_item or "").strip()

    def validate(self) -> Optional[FormError]:
        """
        Ordered checks, first failure wins

        Returns:
            FormError or None when the form may be finalized
        """
        if not self.inspector_name.strip():
            return FormError(message=INSPECTOR_REQUIRED_MESSAGE, field="inspector_name")

        for index, item in enumerate(self.items):
            if item.status == Status.PENDING:
                return FormError(
                    message=f'Please rate quality for "{item.category}".',
                    field="status", category=item.category, index=index
                )
            if not item.counter_incharge.strip():
                return FormError(
                    message=f'Counter Incharge name is required for "{item.category}".',
                    field="counter_incharge", category=item.category, index=index
                )
            if self.sub_item_missing(item):
                return FormError(
                    message=f'Please mention the specific food name for "{item.category}".',
                    field="sub_item", category=item.category, index=index
                )

        if self.has_issues and not self.combined_actions().strip():
            return FormError(message=ACTIONS_REQUIRED_MESSAGE, field="actions")

        return None

    def build_finalized_report(self, now: Optional[datetime] = None) -> DailyReport:
        moment = now or datetime.now()
        return self.report.model_copy(update={
            "items": [item.model_copy(update={"inspector_name": self.inspector_name}) for item in self.items],
            "inspector_name": self.inspector_name,
            "actions_taken": self.combined_actions(),
            "completion_time": moment.strftime(COMPLETION_TIME_FORMAT),
            "finalized": True,
        })

    def _begin_save(self) -> bool:
        with self._save_lock:
            if self.is_saving:
                return False
            self.is_saving = True
            return True

    def _end_save(self) -> None:
        with self._save_lock:
            self.is_saving = False

    def finalize(self, db: Session, now: Optional[datetime] = None) -> FinalizeOutcome:
        """
        Validate, stamp derived fields and upsert

        Edits arriving while the save runs raise FormSaveInProgressError.

        Args:
            db: database session
            now: completion moment (defaults to the current time)

        Returns:
            FinalizeOutcome (saved / invalid / blocked)

        Raises:
            ReportSaveError: the store rejected the save; nothing is committed
        """
        if not self._begin_save():
            return FinalizeOutcome(status="blocked", message=SAVE_IN_PROGRESS_MESSAGE)

        try:
            error = self.validate()
            if error:
                return FinalizeOutcome(status="invalid", error=error, message=error.message)

            report = self.build_finalized_report(now)
            saved, created = DailyReportRepository.upsert(db, report)
            self.report = saved
            self.items = [item.model_copy() for item in saved.items]
        finally:
            self._end_save()

        return FinalizeOutcome(status="saved", report=saved, created=created)
