"""
Render job state machine.

A job moves draft -> processing -> completed | failed. Progress is written
by the external render collaborator; the timeline does not lock while a job
is processing.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from splice.exceptions import InvalidStatusTransitionError

logger = logging.getLogger(__name__)


class RenderStatus(Enum):
    """Render job status."""

    DRAFT = "draft"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# Finished jobs may be rendered again
ALLOWED_TRANSITIONS: dict[RenderStatus, frozenset[RenderStatus]] = {
    RenderStatus.DRAFT: frozenset({RenderStatus.PROCESSING}),
    RenderStatus.PROCESSING: frozenset({RenderStatus.COMPLETED, RenderStatus.FAILED}),
    RenderStatus.COMPLETED: frozenset({RenderStatus.PROCESSING}),
    RenderStatus.FAILED: frozenset({RenderStatus.PROCESSING}),
}


@dataclass
class RenderJob:
    """Render job information."""

    project_id: str
    id: str = field(default_factory=lambda: str(uuid4()))
    status: RenderStatus = RenderStatus.DRAFT
    progress: int = 0
    current_stage: Optional[str] = None
    output_path: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error_message: Optional[str] = None

    def _transition(self, status: RenderStatus) -> None:
        if status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStatusTransitionError(self.status.value, status.value)
        logger.info(f"[RENDER JOB] {self.id}: {self.status.value} -> {status.value}")
        self.status = status

    def start(self) -> None:
        self._transition(RenderStatus.PROCESSING)
        self.progress = 0
        self.current_stage = None
        self.error_message = None
        self.completed_at = None
        self.started_at = datetime.now(timezone.utc)

    def update_progress(self, progress: int, stage: Optional[str] = None) -> None:
        """Record progress (clamped to 0-100). Only valid while processing."""
        if self.status is not RenderStatus.PROCESSING:
            raise InvalidStatusTransitionError(self.status.value, RenderStatus.PROCESSING.value)
        self.progress = max(0, min(100, int(progress)))
        if stage is not None:
            self.current_stage = stage

    def complete(self, output_path: Optional[str] = None) -> None:
        self._transition(RenderStatus.COMPLETED)
        self.progress = 100
        self.output_path = output_path
        self.completed_at = datetime.now(timezone.utc)

    def fail(self, error_message: str) -> None:
        self._transition(RenderStatus.FAILED)
        self.error_message = error_message
        self.completed_at = datetime.now(timezone.utc)
        logger.warning(f"[RENDER JOB] {self.id} failed: {error_message}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "id": self.id,
            "project_id": self.project_id,
            "status": self.status.value,
            "progress": self.progress,
            "current_stage": self.current_stage,
            "output_path": self.output_path,
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "error_message": self.error_message,
        }
