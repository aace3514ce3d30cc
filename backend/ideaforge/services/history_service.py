"""Validation history store.

Server-side mirror of the capped history the frontend keeps locally: at most
``limit`` entries in insertion order, plus a ``latest`` pointer that always
names the most recently saved entry.

Rules
-----
- Saving appends, evicts the oldest entries beyond the cap and repoints latest
- Re-saving an existing id replaces it (last write wins, no locking)
- Deleting the latest entry repoints latest to the newest remaining entry
  by timestamp, or clears it
"""

import json
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ..constants import DEFAULT_HISTORY_LIMIT
from ..models.validation_entry import HistoryPointer, ValidationEntry
from ..schemas.history_schema import ValidationEntryCreate, ValidationEntryResponse
from ..schemas.idea_schema import IdeaSubmission

LATEST = "latest"


def _utc_naive(value: Optional[datetime]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _set_latest(db: Session, entry_id: Optional[UUID]) -> None:
    pointer = db.get(HistoryPointer, LATEST)
    if pointer is None:
        db.add(HistoryPointer(name=LATEST, entry_id=entry_id))
    else:
        pointer.entry_id = entry_id


def _find(db: Session, entry_id: UUID) -> Optional[ValidationEntry]:
    return db.query(ValidationEntry).filter(ValidationEntry.id == entry_id).first()


def to_response(entry: ValidationEntry) -> ValidationEntryResponse:
    analysis = json.loads(entry.analysis_result_json) if entry.analysis_result_json else None
    return ValidationEntryResponse(
        id=entry.id,
        timestamp=entry.timestamp,
        form_data=IdeaSubmission.model_validate_json(entry.form_data_json),
        analysis_result=analysis,
    )


def save_entry(
    db: Session,
    payload: ValidationEntryCreate,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> ValidationEntry:
    """Append an entry, enforce the cap and point ``latest`` at it."""
    entry_id = payload.id or uuid.uuid4()

    existing = _find(db, entry_id)
    if existing is not None:
        db.delete(existing)
        db.flush()

    entry = ValidationEntry(
        id=entry_id,
        timestamp=_utc_naive(payload.timestamp),
        form_data_json=payload.form_data.model_dump_json(by_alias=True),
        analysis_result_json=(
            json.dumps(payload.analysis_result) if payload.analysis_result is not None else None
        ),
    )
    db.add(entry)
    db.flush()

    overflow = db.query(ValidationEntry).count() - max(limit, 1)
    if overflow > 0:
        oldest = (
            db.query(ValidationEntry)
            .order_by(ValidationEntry.seq.asc())
            .limit(overflow)
            .all()
        )
        for old in oldest:
            db.delete(old)
        print(f"🗂️  [HISTORY] Evicted {len(oldest)} entries beyond the cap of {limit}")

    _set_latest(db, entry_id)
    db.commit()
    db.refresh(entry)
    return entry


def list_entries(db: Session) -> List[ValidationEntry]:
    return db.query(ValidationEntry).order_by(ValidationEntry.seq.asc()).all()


def get_entry(db: Session, entry_id: UUID) -> Optional[ValidationEntry]:
    return _find(db, entry_id)


def get_latest(db: Session) -> Optional[ValidationEntry]:
    pointer = db.get(HistoryPointer, LATEST)
    if pointer is None or pointer.entry_id is None:
        return None
    return _find(db, pointer.entry_id)


def delete_entry(db: Session, entry_id: UUID) -> bool:
    """Remove one entry.  Returns False when it does not exist."""
    entry = _find(db, entry_id)
    if entry is None:
        return False

    db.delete(entry)
    db.flush()

    pointer = db.get(HistoryPointer, LATEST)
    if pointer is not None and pointer.entry_id == entry_id:
        newest = (
            db.query(ValidationEntry)
            .order_by(ValidationEntry.timestamp.desc(), ValidationEntry.seq.desc())
            .first()
        )
        pointer.entry_id = newest.id if newest else None

    db.commit()
    return True


def clear_entries(db: Session) -> None:
    db.query(ValidationEntry).delete()
    _set_latest(db, None)
    db.commit()
