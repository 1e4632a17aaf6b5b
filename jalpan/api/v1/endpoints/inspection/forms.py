"""
Inspection Form API

Open a form for a date, edit it item by item, validate and finalize
"""
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from typing import List, Optional
from sqlalchemy.orm import Session

from jalpan.domain.inspection.catalog import CategoryConfig
from jalpan.domain.inspection.exceptions import (
    FormSaveInProgressError,
    FormSessionNotFoundError,
    ReportLoadError,
    ReportSaveError,
)
from jalpan.domain.inspection.form import FormError, InspectionForm
from jalpan.domain.inspection.schemas import DATE_PATTERN, DailyReport, InspectionItem, Status
from jalpan.domain.inspection.service import InspectionService
from jalpan.domain.inspection.session_manager import FormSessionManager, get_form_session_manager
from jalpan.infrastructure.database.session import get_db


router = APIRouter(prefix="/forms", tags=["inspection-form"])


# Request / response schemas
class FormOpenRequest(BaseModel):
    """Open a form for a date"""
    date: str = Field(..., pattern=DATE_PATTERN, description="Report date (YYYY-MM-DD)")


class InspectorRequest(BaseModel):
    inspector_name: str = Field(..., description="Sewadar on duty")


class StatusRequest(BaseModel):
    status: Status = Field(..., description="Rating; repeating the current one clears it")


class ItemUpdateRequest(BaseModel):
    """Only the fields sent are changed"""
    counter_incharge: Optional[str] = None
    remark: Optional[str] = None
    sub_item: Optional[str] = None


class ChoiceRequest(BaseModel):
    choice: str = Field(..., description="Fixed sub-item option")


class ActionToggleRequest(BaseModel):
    action: str = Field(..., description="Corrective-action phrase")


class CustomActionRequest(BaseModel):
    text: str = Field("", description="Other corrective actions / notes")


class FormStateResponse(BaseModel):
    """Editable form state"""
    session_id: str
    date: str
    inspector_name: str
    items: List[InspectionItem]
    categories: List[CategoryConfig] = Field(..., description="Sub-item config per item, same order")
    available_actions: List[str]
    selected_actions: List[str]
    custom_action: str
    actions_taken: str = Field(..., description="Composed text as it would be saved")
    has_issues: bool
    finalized: bool
    is_saving: bool


class ValidationResponse(BaseModel):
    valid: bool
    error: Optional[FormError] = None


class FinalizeResponse(BaseModel):
    message: str
    created: bool
    report: DailyReport


def _form_state(form: InspectionForm) -> FormStateResponse:
    return FormStateResponse(
        session_id=form.session_id,
        date=form.date,
        inspector_name=form.inspector_name,
        items=form.items,
        categories=[form.catalog.config_for(item.category) for item in form.items],
        available_actions=form.catalog.corrective_actions,
        selected_actions=form.selected_actions,
        custom_action=form.custom_action,
        actions_taken=form.combined_actions(),
        has_issues=form.has_issues,
        finalized=form.report.finalized,
        is_saving=form.is_saving,
    )


def _get_form(manager: FormSessionManager, session_id: str) -> InspectionForm:
    try:
        return manager.get_session(session_id)
    except FormSessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("", response_model=FormStateResponse, status_code=201)
async def open_form(
    request: FormOpenRequest,
    db: Session = Depends(get_db),
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    """
    Open a form session

    Loads the stored report for the date (re-splitting its corrective
    actions into checkboxes and a note) or starts from a blank checklist.
    A store failure is reported as 503, never replaced by a blank report.
    """
    try:
        form = InspectionService.open_form(db, request.date, manager)
    except ReportLoadError as e:
        raise HTTPException(status_code=503, detail=e.message)
    return _form_state(form)


@router.get("/{session_id}", response_model=FormStateResponse)
async def get_form(
    session_id: str,
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    return _form_state(_get_form(manager, session_id))


@router.delete("/{session_id}", status_code=204)
async def close_form(
    session_id: str,
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    """Discard a form session"""
    _get_form(manager, session_id)
    manager.delete_session(session_id)
    return None


@router.put("/{session_id}/inspector", response_model=FormStateResponse)
async def set_inspector(
    session_id: str,
    request: InspectorRequest,
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    form = _get_form(manager, session_id)
    try:
        form.set_inspector_name(request.inspector_name)
    except FormSaveInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return _form_state(form)


@router.post("/{session_id}/items/{index}/status", response_model=FormStateResponse)
async def set_item_status(
    session_id: str,
    index: int,
    request: StatusRequest,
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    """Rate a category (toggle)"""
    form = _get_form(manager, session_id)
    try:
        form.set_status(index, request.status)
    except FormSaveInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _form_state(form)


@router.patch("/{session_id}/items/{index}", response_model=FormStateResponse)
async def update_item(
    session_id: str,
    index: int,
    request: ItemUpdateRequest,
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    """Counter incharge, remark or typed food name"""
    form = _get_form(manager, session_id)
    try:
        form.update_item(index, **request.model_dump(exclude_unset=True))
    except FormSaveInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _form_state(form)


@router.post("/{session_id}/items/{index}/choice", response_model=FormStateResponse)
async def select_item_choice(
    session_id: str,
    index: int,
    request: ChoiceRequest,
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    """Fixed sub-item option (toggle)"""
    form = _get_form(manager, session_id)
    try:
        form.select_sub_item_choice(index, request.choice)
    except FormSaveInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _form_state(form)


@router.post("/{session_id}/actions/toggle", response_model=FormStateResponse)
async def toggle_action(
    session_id: str,
    request: ActionToggleRequest,
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    form = _get_form(manager, session_id)
    try:
        form.toggle_action(request.action)
    except FormSaveInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _form_state(form)


@router.put("/{session_id}/actions/custom", response_model=FormStateResponse)
async def set_custom_action(
    session_id: str,
    request: CustomActionRequest,
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    form = _get_form(manager, session_id)
    try:
        form.set_custom_action(request.text)
    except FormSaveInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return _form_state(form)


@router.post("/{session_id}/validate", response_model=ValidationResponse)
async def validate_form(
    session_id: str,
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    form = _get_form(manager, session_id)
    error = form.validate()
    return ValidationResponse(valid=error is None, error=error)


@router.post("/{session_id}/finalize", response_model=FinalizeResponse)
def finalize_form(
    session_id: str,
    db: Session = Depends(get_db),
    manager: FormSessionManager = Depends(get_form_session_manager)
):
    """
    Finalize the quality sheet

    A saved form's session is closed; reopen the date to edit it again.

    - 422: validation failed (body carries the FormError)
    - 409: a save for this form is already in flight
    - 503: the store rejected the save; safe to retry
    """
    form = _get_form(manager, session_id)

    try:
        outcome = form.finalize(db)
    except ReportSaveError as e:
        raise HTTPException(status_code=503, detail=e.message)

    if outcome.status == "blocked":
        raise HTTPException(status_code=409, detail=outcome.message)
    if outcome.status == "invalid":
        raise HTTPException(status_code=422, detail=outcome.error.model_dump())

    manager.delete_session(session_id)

    return FinalizeResponse(
        message="Quality sheet finalized.",
        created=outcome.created,
        report=outcome.report,
    )
