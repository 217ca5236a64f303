from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from models.quiz_models import QuizQuestion


class GenerationErrorKind(str, Enum):
    INVALID_REQUEST = "InvalidRequest"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"
    UPSTREAM_MALFORMED_ENVELOPE = "UpstreamMalformedEnvelope"
    MODEL_OUTPUT_UNPARSEABLE = "ModelOutputUnparseable"
    NO_VALID_QUESTIONS = "NoValidQuestions"


class PipelineState(str, Enum):
    PENDING = "Pending"
    VALIDATING = "Validating"
    INVOKING = "Invoking"
    PARSING = "Parsing"
    CHECKING = "Checking"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class GenerationError(BaseModel):
    """
    Typed failure of a single generation attempt.

    `message` is safe to show to callers. `cause` and `status_code` are kept
    for logs only.
    """

    kind: GenerationErrorKind
    message: str
    status_code: Optional[int] = Field(None, description="Upstream HTTP status, when one was received")
    cause: Optional[str] = Field(None, description="repr of the underlying exception")
    timed_out: bool = False


class GenerationResult(BaseModel):
    questions: List[QuizQuestion] = Field(default_factory=list)
    error: Optional[GenerationError] = None
    state: PipelineState = PipelineState.PENDING
    failed_at: Optional[PipelineState] = Field(None, description="Stage that produced the error")
    requested_count: int = 0
    dropped_count: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: GenerationError, stage: PipelineState, **kwargs) -> "GenerationResult":
        return cls(error=error, state=PipelineState.FAILED, failed_at=stage, **kwargs)

    @classmethod
    def succeeded(cls, questions: List[QuizQuestion], **kwargs) -> "GenerationResult":
        return cls(questions=questions, state=PipelineState.SUCCEEDED, **kwargs)
