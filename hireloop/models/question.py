"""
Question models for HireLoop
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class QuestionType(str, Enum):
    """Kinds of question items a round can contain."""

    MCQ = "mcq"
    SHORT_ANSWER = "short_answer"
    CODING = "coding"
    WRITTEN_TASK = "written_task"


class QuestionItem(BaseModel):
    """A single generated question, consumed read-only by evaluators."""

    # Identification
    id: str = Field(..., description="Unique question ID within its round")
    type: QuestionType = Field(default=QuestionType.MCQ)

    # Content
    prompt: str = Field(..., description="The question text or problem statement")
    title: str | None = None
    topic: str | None = None

    # MCQ only
    options: list[str] = Field(default_factory=list)
    correct_index: int | None = Field(
        default=None, ge=0,
        description="Zero-based index of the correct option"
    )
    explanation: str | None = None

    # Free-form items
    rubric_hint: str | None = Field(
        default=None,
        description="Expected topics or rubric guidance for graded items"
    )

    # Coding only
    constraints: list[str] = Field(default_factory=list)
    boilerplate: str | None = None
    language: str | None = None

    @model_validator(mode="after")
    def _check_mcq(self) -> "QuestionItem":
        if self.type == QuestionType.MCQ:
            if not self.options:
                raise ValueError(f"MCQ item {self.id} has no options")
            if self.correct_index is None or self.correct_index >= len(self.options):
                raise ValueError(f"MCQ item {self.id} has no valid correct_index")
        return self
