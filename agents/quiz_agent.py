import time
from typing import Optional

from agents.prompt_builder import LEGACY_QUESTION_COUNT, PromptBuilder
from agents.response_parser import check_questions, decode_questions, extract_text
from clients.gemini_client import GeminiClient
from models.quiz_models import QuizRequest
from models.result_models import GenerationError, GenerationErrorKind, GenerationResult, PipelineState
from utils.config import Settings
from utils.logging import quiz_logger


class QuizAgent:
    def __init__(
        self,
        settings: Settings,
        client: Optional[GeminiClient] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        """
        Initialize the Quiz Agent with explicit configuration.

        The client and prompt builder can be injected; by default they are
        built from `settings`.
        """
        self.settings = settings
        self.client = client or GeminiClient(settings)
        self.prompt_builder = prompt_builder or PromptBuilder()

    @staticmethod
    def validate_request(request: QuizRequest) -> Optional[GenerationError]:
        if request.mode == "legacy":
            return None
        if request.topic is None or not request.topic.strip():
            return GenerationError(kind=GenerationErrorKind.INVALID_REQUEST, message="topic must not be empty")
        if request.difficulty is not None and not request.difficulty.strip():
            return GenerationError(
                kind=GenerationErrorKind.INVALID_REQUEST,
                message="difficulty must not be empty when provided",
            )
        return None

    async def generate(self, request: QuizRequest) -> GenerationResult:
        """
        Run one generation attempt for a quiz request.

        Returns a GenerationResult holding either the validated questions, in
        the order the model produced them, or a typed GenerationError. Nothing
        is retried.
        """
        start_time = time.time()
        topic = request.topic

        # Validating
        error = self.validate_request(request)
        if error:
            quiz_logger.log_invalid_request(error)
            return GenerationResult.failed(error, PipelineState.VALIDATING)

        if request.mode == "legacy":
            prompt, config = self.prompt_builder.build_legacy()
            requested = LEGACY_QUESTION_COUNT
        else:
            prompt, config = self.prompt_builder.build(request.topic, request.difficulty)
            requested = self.prompt_builder.num_questions

        # Invoking
        envelope = await self.client.generate_content(prompt, config)
        if isinstance(envelope, GenerationError):
            if envelope.kind is GenerationErrorKind.UPSTREAM_UNAVAILABLE:
                quiz_logger.log_upstream_failure(envelope, topic)
            else:
                quiz_logger.log_envelope_violation(envelope, topic)
            return GenerationResult.failed(envelope, PipelineState.INVOKING, requested_count=requested)

        # Parsing
        text = extract_text(envelope)
        if isinstance(text, GenerationError):
            quiz_logger.log_envelope_violation(text, topic)
            return GenerationResult.failed(text, PipelineState.PARSING, requested_count=requested)

        elements = decode_questions(text)
        if isinstance(elements, GenerationError):
            quiz_logger.log_parse_failure(elements, topic, text)
            return GenerationResult.failed(elements, PipelineState.PARSING, requested_count=requested)

        # Checking
        questions, dropped = check_questions(elements)
        if dropped:
            quiz_logger.log_dropped_questions(topic, dropped, len(elements))

        if not questions:
            error = GenerationError(
                kind=GenerationErrorKind.NO_VALID_QUESTIONS,
                message="Model output contained no valid questions",
                cause=f"{dropped} of {len(elements)} elements failed validation",
            )
            quiz_logger.log_no_valid_questions(error, topic, len(elements))
            return GenerationResult.failed(
                error, PipelineState.CHECKING, requested_count=requested, dropped_count=dropped
            )

        duration_ms = (time.time() - start_time) * 1000
        quiz_logger.log_ai_request(topic or "legacy", request.difficulty, duration_ms, len(questions), dropped)

        return GenerationResult.succeeded(questions, requested_count=requested, dropped_count=dropped)
