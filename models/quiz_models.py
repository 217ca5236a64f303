from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator

OPTION_COUNT = 4


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    question: StrictStr = Field(..., description="The text of the question.")
    options: Tuple[StrictStr, ...] = Field(..., description="Exactly four distinct answer options.")
    correctAnswer: StrictStr = Field(..., description="The correct answer, matching one of the options exactly.")

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question must not be empty")
        return value

    @field_validator("options")
    @classmethod
    def four_distinct_options(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(value) != OPTION_COUNT:
            raise ValueError(f"expected {OPTION_COUNT} options, got {len(value)}")
        if any(not option.strip() for option in value):
            raise ValueError("options must not be empty")
        if len(set(value)) != len(value):
            raise ValueError("options must be distinct")
        return value

    @model_validator(mode="after")
    def answer_among_options(self) -> "QuizQuestion":
        if self.options.count(self.correctAnswer) != 1:
            raise ValueError("correctAnswer must match exactly one option")
        return self


class QuizRequest(BaseModel):
    topic: Optional[str] = None
    difficulty: Optional[str] = None

    @property
    def mode(self) -> Literal["legacy", "category", "category_difficulty"]:
        if self.topic is None and self.difficulty is None:
            return "legacy"
        if self.difficulty is None:
            return "category"
        return "category_difficulty"


class GenerationConfig(BaseModel):
    responseMimeType: str = "application/json"


# Gemini generateContent wire shapes

class Part(BaseModel):
    text: str


class Content(BaseModel):
    parts: List[Part]


class GeminiRequest(BaseModel):
    contents: List[Content]
    generationConfig: GenerationConfig

    @classmethod
    def from_prompt(cls, prompt: str, config: GenerationConfig) -> "GeminiRequest":
        return cls(contents=[Content(parts=[Part(text=prompt)])], generationConfig=config)
