"""
Unit tests for utils/logging.py
Tests: file output, failure counters by kind, reconfiguration.
"""

from models.result_models import GenerationError, GenerationErrorKind
from utils.logging import QuizLogger


def test_failures_are_counted_by_kind(tmp_path):
    qlog = QuizLogger(log_file=str(tmp_path / "quiz.log"))

    qlog.log_parse_failure(
        GenerationError(kind=GenerationErrorKind.MODEL_OUTPUT_UNPARSEABLE, message="bad", cause="x"),
        "Python", "not json",
    )
    qlog.log_envelope_violation(
        GenerationError(kind=GenerationErrorKind.UPSTREAM_MALFORMED_ENVELOPE, message="bad"), "Python"
    )
    qlog.log_ai_request("Python", None, 12.0, returned=9, dropped=1)

    stats = qlog.get_stats()
    assert stats["failures"] == {"ModelOutputUnparseable": 1, "UpstreamMalformedEnvelope": 1}
    assert stats["generations_succeeded"] == 1
    assert stats["questions_dropped"] == 1


def test_events_written_to_file(tmp_path):
    log_file = tmp_path / "nested" / "quiz.log"
    qlog = QuizLogger(log_file=str(log_file))

    qlog.log_dropped_questions("Git", dropped=2, total=10)
    qlog.log_periodic_stats()
    for handler in qlog.logger.handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert "DROPPED QUESTIONS | Topic: Git | Dropped: 2/10" in content
    assert "PERIODIC STATS" in content


def test_reconfigure_replaces_handlers(tmp_path):
    qlog = QuizLogger(log_file=str(tmp_path / "a.log"))
    qlog.configure(log_file=str(tmp_path / "b.log"), log_level="debug")

    assert len(qlog.logger.handlers) == 2
    assert qlog.log_file == str(tmp_path / "b.log")
