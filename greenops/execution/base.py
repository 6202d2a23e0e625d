"""
Base executor for applying deployment manifests.

Responsibilities:
- Define the abstract interface for all executors
- Common result types
- Execution history
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from greenops.utils.logging import get_logger

logger = get_logger(__name__)


class ExecutorType(str, Enum):
    """Types of executors."""

    KUBECTL = "kubectl"
    MOCK = "mock"


class ExecutionStatus(str, Enum):
    """Outcome of applying a manifest."""

    OK = "ok"
    DRY_RUN = "dry-run"
    ERROR = "error"


@dataclass
class ExecutionResult:
    """Result of applying a manifest."""

    status: ExecutionStatus
    message: str
    command: str | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None

    @property
    def is_success(self) -> bool:
        """Dry runs count as success; nothing failed."""
        return self.status in (ExecutionStatus.OK, ExecutionStatus.DRY_RUN)

    @property
    def duration_seconds(self) -> float | None:
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "message": self.message,
            "command": self.command,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "error": self.error,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }


class BaseExecutor(ABC):
    """
    Abstract base class for manifest executors.

    All executors must implement apply().
    """

    def __init__(self, executor_type: ExecutorType) -> None:
        self.executor_type = executor_type
        self._execution_history: list[ExecutionResult] = []

    @property
    def enabled(self) -> bool:
        """Whether apply() changes a real cluster."""
        return False

    @abstractmethod
    async def apply(self, manifest: str, plan_id: str) -> ExecutionResult:
        """
        Apply a manifest.

        Args:
            manifest: YAML manifest text
            plan_id: Plan the manifest belongs to

        Returns:
            ExecutionResult with status and captured output
        """
        pass

    def record_execution(self, result: ExecutionResult) -> None:
        """Record an execution result."""
        self._execution_history.append(result)
        # Keep only last 100 executions
        if len(self._execution_history) > 100:
            self._execution_history = self._execution_history[-100:]

    def get_execution_history(self, limit: int = 10) -> list[ExecutionResult]:
        """Get recent execution history, newest first."""
        return list(reversed(self._execution_history[-limit:]))

    def get_stats(self) -> dict[str, Any]:
        """Get executor statistics."""
        total = len(self._execution_history)
        counts = {status.value: 0 for status in ExecutionStatus}
        for result in self._execution_history:
            counts[result.status.value] += 1

        return {
            "executor_type": self.executor_type.value,
            "total_executions": total,
            **counts,
        }


class MockExecutor(BaseExecutor):
    """
    Mock executor for testing.

    Records applied manifests without touching a cluster.
    """

    def __init__(self) -> None:
        super().__init__(ExecutorType.MOCK)
        self.applied: list[tuple[str, str]] = []
        self._should_fail = False

    @property
    def enabled(self) -> bool:
        return True

    def set_should_fail(self, should_fail: bool) -> None:
        """Set whether apply() should fail."""
        self._should_fail = should_fail

    async def apply(self, manifest: str, plan_id: str) -> ExecutionResult:
        started_at = datetime.now(UTC)

        if self._should_fail:
            result = ExecutionResult(
                status=ExecutionStatus.ERROR,
                message="Mock apply failed",
                command="mock apply",
                error="Mock failure",
                started_at=started_at,
                completed_at=datetime.now(UTC),
            )
        else:
            self.applied.append((plan_id, manifest))
            result = ExecutionResult(
                status=ExecutionStatus.OK,
                message="Manifest applied by mock executor",
                command="mock apply",
                started_at=started_at,
                completed_at=datetime.now(UTC),
            )

        self.record_execution(result)
        logger.info("Mock apply completed", plan_id=plan_id, status=result.status.value)
        return result
