from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from .base import CamelModel
from .idea_schema import IdeaSubmission


class ValidationEntryCreate(CamelModel):
    """Body of ``POST /history``.  ``id`` and ``timestamp`` are assigned when absent."""

    id: Optional[UUID] = None
    timestamp: Optional[datetime] = None
    form_data: IdeaSubmission
    analysis_result: Optional[dict[str, Any]] = None


class ValidationEntryResponse(CamelModel):
    id: UUID
    timestamp: datetime
    form_data: IdeaSubmission
    analysis_result: Optional[dict[str, Any]] = None
