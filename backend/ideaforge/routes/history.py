"""Validation history routes.

Endpoints:
  GET    /history          : all entries, oldest first
  GET    /history/latest   : the most recently saved entry
  GET    /history/{id}     : one entry
  POST   /history          : save an entry (oldest evicted beyond the cap)
  DELETE /history/{id}     : delete one entry
  DELETE /history          : clear the history
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..config import Settings
from ..database import get_db
from ..dependencies import get_settings
from ..schemas.history_schema import ValidationEntryCreate, ValidationEntryResponse
from ..services import history_service

router = APIRouter(
    prefix="/history",
    tags=["History"],
)


def _not_found(entry_id: object) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Validation {entry_id} not found",
    )


@router.get(
    "",
    response_model=List[ValidationEntryResponse],
    summary="List Validation History",
)
def list_history(db: Session = Depends(get_db)) -> List[ValidationEntryResponse]:
    return [history_service.to_response(e) for e in history_service.list_entries(db)]


@router.get(
    "/latest",
    response_model=ValidationEntryResponse,
    summary="Latest Validation",
)
def latest_history(db: Session = Depends(get_db)) -> ValidationEntryResponse:
    entry = history_service.get_latest(db)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No validations saved yet",
        )
    return history_service.to_response(entry)


@router.get(
    "/{entry_id}",
    response_model=ValidationEntryResponse,
    summary="Get a Validation",
)
def get_history_entry(entry_id: UUID, db: Session = Depends(get_db)) -> ValidationEntryResponse:
    entry = history_service.get_entry(db, entry_id)
    if entry is None:
        raise _not_found(entry_id)
    return history_service.to_response(entry)


@router.post(
    "",
    response_model=ValidationEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a Validation",
)
def save_history_entry(
    payload: ValidationEntryCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ValidationEntryResponse:
    entry = history_service.save_entry(db, payload, limit=settings.history_limit)
    print(f"🗂️  [HISTORY] Saved validation {entry.id} for '{payload.form_data.startup_name}'")
    return history_service.to_response(entry)


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a Validation",
)
def delete_history_entry(entry_id: UUID, db: Session = Depends(get_db)) -> Response:
    if not history_service.delete_entry(db, entry_id):
        raise _not_found(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear Validation History",
)
def clear_history(db: Session = Depends(get_db)) -> Response:
    history_service.clear_entries(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
