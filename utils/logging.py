import logging
import logging.handlers
import os
import json
import time
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any
from fastapi import Request

from models.result_models import GenerationError


class QuizLogger:
    """Request and generation-pipeline logger writing to a rotating file and the console"""

    def __init__(self,
                 log_file: str = "logs/app.log",
                 max_file_size: int = 10 * 1024 * 1024,  # 10MB
                 backup_count: int = 5,
                 log_level: str = "INFO"):
        self.configure(log_file, max_file_size, backup_count, log_level)

        self.stats = {
            "total_requests": 0,
            "generations_succeeded": 0,
            "questions_dropped": 0,
            "failures": Counter(),
            "start_time": time.time()
        }

    def configure(self,
                  log_file: str = "logs/app.log",
                  max_file_size: int = 10 * 1024 * 1024,
                  backup_count: int = 5,
                  log_level: str = "INFO"):
        self.log_file = log_file
        self.max_file_size = max_file_size
        self.backup_count = backup_count

        log_dir = Path(log_file).parent
        log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger("ai_quiz")
        self.logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        self.logger.propagate = False

        # Remove existing handlers to avoid duplicates on reconfigure
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        console_handler = logging.StreamHandler()

        formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)-20s | %(funcName)-15s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

        self.logger.info(f"📁 Logging to {log_file} (level {log_level.upper()})")

    def log_request_start(self, request: Request, endpoint: str, request_id: str = "-"):
        """Log the start of a request with details"""
        client_ip = request.client.host if request.client else "unknown"
        user_agent = request.headers.get("user-agent", "unknown")

        request_info = {
            "endpoint": endpoint,
            "request_id": request_id,
            "method": request.method,
            "client_ip": client_ip,
            "user_agent": user_agent[:100],
            "timestamp": datetime.now().isoformat()
        }

        self.logger.info(f"🔵 REQUEST START | {endpoint} | ID: {request_id} | IP: {client_ip}")
        return request_info

    def log_request_end(self, request_info: Dict[str, Any], duration_ms: float, status_code: int = 200):
        """Log the end of a request with timing"""
        self.stats["total_requests"] += 1
        status_emoji = "✅" if status_code < 400 else "❌"

        self.logger.info(
            f"{status_emoji} REQUEST END | {request_info['endpoint']} | ID: {request_info['request_id']} | "
            f"Duration: {duration_ms:.2f}ms | Status: {status_code}"
        )

    def log_ai_request(self, topic: str, difficulty: Optional[str], duration_ms: float,
                       returned: int, dropped: int):
        """Log a successful generation"""
        self.stats["generations_succeeded"] += 1
        self.stats["questions_dropped"] += dropped

        self.logger.info(
            f"🤖 AI REQUEST | Topic: {topic} | Difficulty: {difficulty or '-'} | "
            f"Returned: {returned} | Dropped: {dropped} | Duration: {duration_ms:.2f}ms"
        )

    def log_upstream_failure(self, error: GenerationError, topic: Optional[str]):
        self.stats["failures"][error.kind.value] += 1
        self.logger.warning(
            f"🌐 UPSTREAM UNAVAILABLE | Topic: {topic} | Status: {error.status_code} | "
            f"Timeout: {error.timed_out} | Cause: {error.cause}"
        )

    def log_envelope_violation(self, error: GenerationError, topic: Optional[str]):
        self.stats["failures"][error.kind.value] += 1
        self.logger.error(f"📦 MALFORMED ENVELOPE | Topic: {topic} | Cause: {error.cause}")

    def log_parse_failure(self, error: GenerationError, topic: Optional[str], text: str):
        self.stats["failures"][error.kind.value] += 1
        self.logger.error(
            f"🧩 UNPARSEABLE OUTPUT | Topic: {topic} | Cause: {error.cause} | "
            f"Text: {text[:200]!r}"
        )

    def log_dropped_questions(self, topic: Optional[str], dropped: int, total: int):
        """Log elements removed by the consistency check"""
        self.logger.warning(f"🗑️ DROPPED QUESTIONS | Topic: {topic} | Dropped: {dropped}/{total}")

    def log_no_valid_questions(self, error: GenerationError, topic: Optional[str], total: int):
        self.stats["failures"][error.kind.value] += 1
        self.logger.error(f"🚫 NO VALID QUESTIONS | Topic: {topic} | Elements: {total}")

    def log_invalid_request(self, error: GenerationError):
        self.stats["failures"][error.kind.value] += 1
        self.logger.info(f"⚠️ INVALID REQUEST | {error.message}")

    def log_error(self, error: Exception, endpoint: str, extra_context: Dict = None):
        """Log errors with context"""
        context = f" | Context: {json.dumps(extra_context)}" if extra_context else ""

        self.logger.error(
            f"💥 ERROR | {endpoint} | {type(error).__name__}: {str(error)}{context}",
            exc_info=True
        )

    def get_stats(self) -> Dict[str, Any]:
        uptime_hours = (time.time() - self.stats["start_time"]) / 3600

        return {
            "total_requests": self.stats["total_requests"],
            "generations_succeeded": self.stats["generations_succeeded"],
            "questions_dropped": self.stats["questions_dropped"],
            "failures": dict(self.stats["failures"]),
            "requests_per_hour": round(self.stats["total_requests"] / max(uptime_hours, 0.01), 2),
            "uptime_hours": round(uptime_hours, 2),
            "log_file_size_mb": round(os.path.getsize(self.log_file) / (1024*1024), 2) if os.path.exists(self.log_file) else 0
        }

    def log_periodic_stats(self):
        stats = self.get_stats()

        self.logger.info(
            f"📊 PERIODIC STATS | Requests: {stats['total_requests']} | "
            f"Succeeded: {stats['generations_succeeded']} | "
            f"Failures: {stats['failures']} | "
            f"Dropped: {stats['questions_dropped']} | "
            f"Req/Hour: {stats['requests_per_hour']} | "
            f"Uptime: {stats['uptime_hours']}h"
        )


# Global logger instance
quiz_logger = QuizLogger(
    log_file=os.getenv("LOG_FILE", "logs/app.log"),
    log_level=os.getenv("LOG_LEVEL", "INFO")
)


# Convenience functions for easy usage
def log_request_start(request: Request, endpoint: str, request_id: str = "-"):
    return quiz_logger.log_request_start(request, endpoint, request_id)

def log_request_end(request_info: Dict[str, Any], duration_ms: float, status_code: int = 200):
    quiz_logger.log_request_end(request_info, duration_ms, status_code)

def log_error(error: Exception, endpoint: str, extra_context: Dict = None):
    quiz_logger.log_error(error, endpoint, extra_context)

def log_periodic_stats():
    quiz_logger.log_periodic_stats()
