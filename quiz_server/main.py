import logging
import uvicorn
from fastapi import FastAPI, Depends, Request, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import List, Optional

from utils.config import Settings
from utils.logging import quiz_logger
from utils.request_middleware import RequestLoggingMiddleware, PerformanceLoggingMiddleware

from agents.quiz_agent import QuizAgent
from models.quiz_models import QuizQuestion, QuizRequest
from models.result_models import GenerationError, GenerationErrorKind, GenerationResult, PipelineState
from models.api_models import ErrorResponse, HealthResponse, CategoriesResponse

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Categories offered by the quiz client's picker
DEFAULT_CATEGORIES = [
    "Java", "C", "C++", "JavaScript", "React", "Node.js", "SQL", "Python",
    "Spring Boot", "Data Structures", "Git", "HTML & CSS",
]

ERROR_STATUS = {
    GenerationErrorKind.INVALID_REQUEST: 400,
    GenerationErrorKind.UPSTREAM_UNAVAILABLE: 502,
    GenerationErrorKind.UPSTREAM_MALFORMED_ENVELOPE: 502,
    GenerationErrorKind.MODEL_OUTPUT_UNPARSEABLE: 500,
    GenerationErrorKind.NO_VALID_QUESTIONS: 500,
}

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse},
                   502: {"model": ErrorResponse}, 504: {"model": ErrorResponse}}


def status_for(error: GenerationError) -> int:
    if error.kind is GenerationErrorKind.UPSTREAM_UNAVAILABLE and error.timed_out:
        return 504
    return ERROR_STATUS[error.kind]


def to_response(result: GenerationResult):
    if result.error:
        return JSONResponse(
            status_code=status_for(result.error),
            content=ErrorResponse(error=result.error.kind.value, detail=result.error.message).model_dump()
        )
    return result.questions


def create_app(settings: Optional[Settings] = None, quiz_agent: Optional[QuizAgent] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    quiz_logger.configure(log_file=settings.log_file, log_level=settings.log_level)

    if not settings.api_key_configured:
        logger.warning("GEMINI_API_KEY is not set; upstream calls will be rejected")

    app = FastAPI(
        title="AI Quiz Generator API",
        description="Generates validated multiple-choice quizzes on a topic using Gemini",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.quiz_agent = quiz_agent or QuizAgent(settings)

    app.add_middleware(PerformanceLoggingMiddleware, slow_request_threshold_ms=10000)
    app.add_middleware(RequestLoggingMiddleware, log_periodic_stats_interval=300)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, invalid_request_handler)
    register_routes(app)
    return app


async def invalid_request_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed query and path parameters share the InvalidRequest body."""
    fields = ", ".join(".".join(str(part) for part in err["loc"][1:]) or "request" for err in exc.errors())
    error = GenerationError(kind=GenerationErrorKind.INVALID_REQUEST, message=f"invalid or missing parameter: {fields}")
    quiz_logger.log_invalid_request(error)
    return to_response(GenerationResult.failed(error, PipelineState.VALIDATING))


def get_quiz_agent(request: Request) -> QuizAgent:
    return request.app.state.quiz_agent


def register_routes(app: FastAPI):

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request):
        return HealthResponse(status="ok", api_key_set=request.app.state.settings.api_key_configured)

    @app.get("/api/quiz/categories", response_model=CategoriesResponse)
    async def list_categories():
        return CategoriesResponse(categories=DEFAULT_CATEGORIES)

    @app.get("/api/quiz", response_model=List[QuizQuestion], responses=ERROR_RESPONSES)
    async def generate_quiz(
        topic: str = Query(..., description="Quiz topic"),
        difficulty: Optional[str] = Query(None, description="Optional difficulty level"),
        agent: QuizAgent = Depends(get_quiz_agent)
    ):
        result = await agent.generate(QuizRequest(topic=topic, difficulty=difficulty))
        return to_response(result)

    @app.get("/api/quiz/generate", response_model=List[QuizQuestion], responses=ERROR_RESPONSES)
    async def generate_legacy_quiz(agent: QuizAgent = Depends(get_quiz_agent)):
        result = await agent.generate(QuizRequest())
        return to_response(result)

    @app.get("/api/quiz/generate/{category}", response_model=List[QuizQuestion], responses=ERROR_RESPONSES)
    async def generate_category_quiz(category: str, agent: QuizAgent = Depends(get_quiz_agent)):
        result = await agent.generate(QuizRequest(topic=category))
        return to_response(result)

    @app.get("/api/quiz/generate/{category}/{difficulty}", response_model=List[QuizQuestion],
             responses=ERROR_RESPONSES)
    async def generate_category_difficulty_quiz(
        category: str,
        difficulty: str,
        agent: QuizAgent = Depends(get_quiz_agent)
    ):
        result = await agent.generate(QuizRequest(topic=category, difficulty=difficulty))
        return to_response(result)


app = create_app()


if __name__ == "__main__":
    uvicorn.run("quiz_server.main:app", host="0.0.0.0", port=8000, reload=True)
