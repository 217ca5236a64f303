"""
Turns a Gemini reply envelope into validated QuizQuestion records.

Three stages, each returning either its output or a GenerationError:
    extract_text      envelope  -> model text
    decode_questions  text      -> list of raw elements (strict JSON array)
    check_questions   elements  -> (valid questions, dropped count)
"""

import json
from typing import Any, List, Tuple, Union

from pydantic import ValidationError

from models.quiz_models import QuizQuestion
from models.result_models import GenerationError, GenerationErrorKind


def extract_text(envelope: Any) -> Union[str, GenerationError]:
    """Return candidates[0].content.parts[0].text, or an envelope error."""

    def malformed(reason: str) -> GenerationError:
        return GenerationError(
            kind=GenerationErrorKind.UPSTREAM_MALFORMED_ENVELOPE,
            message="Model service reply did not contain generated text",
            cause=reason,
        )

    if not isinstance(envelope, dict):
        return malformed(f"envelope is {type(envelope).__name__}, expected object")

    candidates = envelope.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return malformed("candidates missing or empty")

    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        return malformed("candidates[0].content missing")

    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return malformed("candidates[0].content.parts missing or empty")

    text = parts[0].get("text")
    if not isinstance(text, str):
        return malformed("candidates[0].content.parts[0].text missing")

    return text


def decode_questions(text: str) -> Union[List[Any], GenerationError]:
    """Strictly decode the model text as a JSON array. No fence stripping or partial recovery."""
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        return GenerationError(
            kind=GenerationErrorKind.MODEL_OUTPUT_UNPARSEABLE,
            message="Model output was not valid JSON",
            cause=f"{e.msg} at line {e.lineno} column {e.colno}",
        )
    except RecursionError:
        return GenerationError(
            kind=GenerationErrorKind.MODEL_OUTPUT_UNPARSEABLE,
            message="Model output was not valid JSON",
            cause="nesting too deep to decode",
        )

    if not isinstance(decoded, list):
        return GenerationError(
            kind=GenerationErrorKind.MODEL_OUTPUT_UNPARSEABLE,
            message="Model output was not a JSON array",
            cause=f"top-level value is {type(decoded).__name__}",
        )

    return decoded


def check_questions(elements: List[Any]) -> Tuple[List[QuizQuestion], int]:
    """
    Keep elements that form a consistent QuizQuestion, in their original order.

    An element is dropped when it is not an object, misses or mistypes a
    required field, or fails the consistency rule (four distinct non-empty
    options, correctAnswer equal to exactly one of them).
    """
    valid: List[QuizQuestion] = []
    dropped = 0

    for element in elements:
        if not isinstance(element, dict):
            dropped += 1
            continue
        try:
            valid.append(QuizQuestion.model_validate(element))
        except ValidationError:
            dropped += 1

    return valid, dropped
