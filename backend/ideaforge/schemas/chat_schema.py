from typing import Literal, Optional

from pydantic import BaseModel, Field

ChatRole = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """One normalized chat turn. History is resent by the client on every call."""

    role: ChatRole = "user"
    content: str = Field(..., min_length=1)


class ChatErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
    hint: Optional[str] = None
