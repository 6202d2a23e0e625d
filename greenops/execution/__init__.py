"""
Execution layer for the placement planner.

This module provides executors that apply generated manifests to a
cluster (kubectl) or record them for tests (mock).
"""

from greenops.execution.base import (
    BaseExecutor,
    ExecutionResult,
    ExecutionStatus,
    ExecutorType,
    MockExecutor,
)
from greenops.execution.kubectl import (
    KubectlConfig,
    KubectlExecutor,
)

__all__ = [
    # Base
    "BaseExecutor",
    "ExecutionResult",
    "ExecutionStatus",
    "ExecutorType",
    "MockExecutor",
    # kubectl
    "KubectlConfig",
    "KubectlExecutor",
]
