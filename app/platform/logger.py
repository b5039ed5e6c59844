import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from app.platform.config import settings

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str):
    """
    Creates a logger instance that writes to console AND a file.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    formatter = logging.Formatter(FORMAT)

    if settings.LOG_TO_FILE:
        # Create the logs directory lazily so importing never touches disk
        log_dir = os.path.join(os.getcwd(), settings.LOG_DIR)
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "seo_analyzer.log"), maxBytes=10_000_000, backupCount=5
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    return logger


@dataclass(frozen=True)
class StageEvent:
    """One pipeline stage transition."""
    request_id: str
    stage: str  # normalize, fetch-static, fetch-rendered, analyze, aggregate, recommend
    outcome: str  # started, success, failure, skipped
    detail: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class StageLogger:
    """
    Records pipeline stage transitions for a single request.

    Every event is kept in ``events`` and also emitted as a log record whose
    ``extra`` carries ``request_id``, ``stage`` and ``outcome``, so callers can
    either assert on the list or filter the log stream.
    """

    def __init__(self, request_id: str, logger: Optional[logging.Logger] = None):
        self.request_id = request_id
        self.logger = logger or get_logger("seo_analysis.pipeline")
        self.events: List[StageEvent] = []

    def record(self, stage: str, outcome: str, detail: Optional[str] = None) -> StageEvent:
        event = StageEvent(
            request_id=self.request_id, stage=stage, outcome=outcome, detail=detail
        )
        self.events.append(event)

        level = logging.WARNING if outcome == "failure" else logging.INFO
        message = f"[{self.request_id}] {stage}: {outcome}"
        if detail:
            message = f"{message} ({detail})"
        self.logger.log(
            level,
            message,
            extra={"request_id": self.request_id, "stage": stage, "outcome": outcome},
        )
        return event

    def started(self, stage: str, detail: Optional[str] = None) -> StageEvent:
        return self.record(stage, "started", detail)

    def success(self, stage: str, detail: Optional[str] = None) -> StageEvent:
        return self.record(stage, "success", detail)

    def failure(self, stage: str, detail: Optional[str] = None) -> StageEvent:
        return self.record(stage, "failure", detail)

    def skipped(self, stage: str, detail: Optional[str] = None) -> StageEvent:
        return self.record(stage, "skipped", detail)

    def transitions(self) -> List[tuple]:
        """(stage, outcome) pairs in the order they were recorded."""
        return [(event.stage, event.outcome) for event in self.events]
