from typing import Optional, Tuple
from langchain_core.prompts import PromptTemplate

from models.quiz_models import GenerationConfig


DEFAULT_QUESTION_COUNT = 10
LEGACY_QUESTION_COUNT = 8
LEGACY_TOPIC = "general programming"

_SCHEMA_AND_FORMAT_RULES = (
    "Provide the response as a valid JSON array. Each object in the array should have the "
    "following exact keys: \"question\", \"options\", and \"correctAnswer\". "
    "\"options\" should be an array of exactly 4 distinct strings. "
    "\"question\" should be a string. "
    "\"correctAnswer\" should be a string that exactly matches one of the items in the \"options\" array. "
    "Do not include any introductory text, markdown formatting, or code fences in your response. "
    "The entire response should be only the JSON array."
)

# Schema text is appended after formatting so its literal quotes never reach the template engine.
_CATEGORY_TEMPLATE = PromptTemplate.from_template(
    "Generate {num_questions} multiple-choice quiz questions about '{topic}'. "
)
_DIFFICULTY_TEMPLATE = PromptTemplate.from_template(
    "Generate {num_questions} multiple-choice quiz questions about '{topic}' "
    "for a '{difficulty}' level developer. "
)


class PromptValidationError(ValueError):
    """Raised when a topic or difficulty is blank."""


class PromptBuilder:
    """Builds the instruction text and generation config sent to the model."""

    def __init__(self, num_questions: int = DEFAULT_QUESTION_COUNT):
        self.num_questions = num_questions

    def build(self, topic: str, difficulty: Optional[str] = None) -> Tuple[str, GenerationConfig]:
        """
        Render the prompt for a topic and optional difficulty.

        Args:
            topic: Subject of the quiz. Must be non-empty after trimming.
            difficulty: Optional level, e.g. "beginner". Must be non-empty after
                trimming when given.

        Returns:
            (prompt, config): the instruction string and the JSON output hint.
        """
        topic = (topic or "").strip()
        if not topic:
            raise PromptValidationError("topic must not be empty")

        if difficulty is None:
            head = _CATEGORY_TEMPLATE.format(num_questions=self.num_questions, topic=topic)
        else:
            difficulty = difficulty.strip()
            if not difficulty:
                raise PromptValidationError("difficulty must not be empty when provided")
            head = _DIFFICULTY_TEMPLATE.format(
                num_questions=self.num_questions, topic=topic, difficulty=difficulty
            )

        return head + _SCHEMA_AND_FORMAT_RULES, GenerationConfig()

    def build_legacy(self) -> Tuple[str, GenerationConfig]:
        """Argument-free variant: eight general programming questions."""
        head = _CATEGORY_TEMPLATE.format(num_questions=LEGACY_QUESTION_COUNT, topic=LEGACY_TOPIC)
        return head + _SCHEMA_AND_FORMAT_RULES, GenerationConfig()
