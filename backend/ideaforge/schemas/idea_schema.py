from typing import Literal

from pydantic import Field, field_validator

from .base import CamelModel

Industry = Literal[
    "Technology",
    "Healthcare",
    "Finance",
    "E-commerce",
    "Education",
    "Entertainment",
    "Food & Beverage",
    "Real Estate",
    "Transportation",
    "Other",
]

Stage = Literal["idea", "mvp", "launched", "growing"]


class IdeaSubmission(CamelModel):
    """Startup idea collected by the multi-step validation wizard.

    Immutable once submitted.  Every free-text field is required and must be
    non-blank; industry and stage come from fixed enumerations.
    """

    # STEP 1: The idea
    startup_name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=5000)

    # STEP 2: Problem / solution
    problem: str = Field(..., min_length=1, max_length=5000)
    solution: str = Field(..., min_length=1, max_length=5000)

    # STEP 3: Market
    target_market: str = Field(..., min_length=1, max_length=1000)
    industry: Industry
    stage: Stage

    @field_validator("startup_name", "description", "problem", "solution", "target_market")
    @classmethod
    def not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field must not be blank")
        return stripped
