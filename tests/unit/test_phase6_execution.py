"""
Unit tests for Phase 6: Execution Layer.

Tests cover:
- Execution results
- MockExecutor
- KubectlExecutor dry-run, success, failure and timeout paths
"""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from greenops.execution.base import ExecutionResult, ExecutionStatus, ExecutorType, MockExecutor
from greenops.execution.kubectl import KubectlConfig, KubectlExecutor

MANIFEST = "apiVersion: v1\nkind: Namespace\nmetadata:\n  name: greenops-app\n"


def _manifest_files(directory: Path) -> list[Path]:
    return sorted(directory.glob("greenops-plan-*.yaml"))


# =============================================================================
# Execution Result Tests
# =============================================================================


class TestExecutionResult:
    """Tests for ExecutionResult."""

    def test_dry_run_counts_as_success(self):
        assert ExecutionResult(ExecutionStatus.DRY_RUN, "dry").is_success is True
        assert ExecutionResult(ExecutionStatus.OK, "ok").is_success is True
        assert ExecutionResult(ExecutionStatus.ERROR, "bad").is_success is False

    def test_to_dict(self):
        data = ExecutionResult(ExecutionStatus.OK, "done", command="kubectl apply").to_dict()

        assert data["status"] == "ok"
        assert data["command"] == "kubectl apply"


# =============================================================================
# Mock Executor Tests
# =============================================================================


class TestMockExecutor:
    """Tests for MockExecutor."""

    @pytest.mark.asyncio
    async def test_apply(self, mock_executor):
        result = await mock_executor.apply(MANIFEST, "balanced")

        assert result.status == ExecutionStatus.OK
        assert mock_executor.applied == [("balanced", MANIFEST)]
        assert mock_executor.executor_type == ExecutorType.MOCK

    @pytest.mark.asyncio
    async def test_failure(self, mock_executor):
        mock_executor.set_should_fail(True)

        result = await mock_executor.apply(MANIFEST, "balanced")

        assert result.status == ExecutionStatus.ERROR
        assert mock_executor.applied == []

    @pytest.mark.asyncio
    async def test_history_and_stats(self, mock_executor):
        await mock_executor.apply(MANIFEST, "a")
        mock_executor.set_should_fail(True)
        await mock_executor.apply(MANIFEST, "b")

        assert len(mock_executor.get_execution_history()) == 2
        stats = mock_executor.get_stats()
        assert stats["total_executions"] == 2
        assert stats["ok"] == 1
        assert stats["error"] == 1
        assert stats["dry-run"] == 0


# =============================================================================
# Kubectl Executor Tests
# =============================================================================


class TestKubectlExecutor:
    """Tests for KubectlExecutor."""

    def test_build_command(self):
        executor = KubectlExecutor(KubectlConfig(context="prod"))

        assert executor.build_command("/tmp/m.yaml") == [
            "kubectl", "--context", "prod", "apply", "-f", "/tmp/m.yaml",
        ]

    def test_build_command_without_context(self):
        executor = KubectlExecutor(KubectlConfig(binary="/usr/local/bin/kubectl"))

        assert executor.build_command("m.yaml") == ["/usr/local/bin/kubectl", "apply", "-f", "m.yaml"]

    @pytest.mark.asyncio
    async def test_dry_run_keeps_file(self, tmp_path):
        executor = KubectlExecutor(KubectlConfig(enabled=False, manifest_dir=tmp_path))

        with patch.object(executor, "_run", new_callable=AsyncMock) as run:
            result = await executor.apply(MANIFEST, "max-green")

        run.assert_not_called()
        assert result.status == ExecutionStatus.DRY_RUN
        assert result.is_success is True

        files = _manifest_files(tmp_path)
        assert len(files) == 1
        assert files[0].read_text(encoding="utf-8") == MANIFEST
        assert result.command == f"kubectl apply -f {files[0]}"

    @pytest.mark.asyncio
    async def test_apply_success_removes_file(self, tmp_path):
        executor = KubectlExecutor(KubectlConfig(enabled=True, manifest_dir=tmp_path))

        with patch.object(
            executor, "_run", new_callable=AsyncMock, return_value=(0, "namespace/greenops-app created\n", "")
        ) as run:
            result = await executor.apply(MANIFEST, "balanced")

        cmd = run.call_args.args[0]
        assert cmd[:3] == ["kubectl", "apply", "-f"]
        assert result.status == ExecutionStatus.OK
        assert "created" in result.stdout
        assert _manifest_files(tmp_path) == []

    @pytest.mark.asyncio
    async def test_apply_nonzero_exit(self, tmp_path):
        executor = KubectlExecutor(KubectlConfig(enabled=True, manifest_dir=tmp_path))

        with patch.object(
            executor, "_run", new_callable=AsyncMock, return_value=(1, "", "error: forbidden")
        ):
            result = await executor.apply(MANIFEST, "budget")

        assert result.status == ExecutionStatus.ERROR
        assert result.message == "kubectl apply failed. Check server logs."
        assert result.stderr == "error: forbidden"
        assert _manifest_files(tmp_path) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [TimeoutError("timed out"), FileNotFoundError("kubectl")])
    async def test_apply_cannot_run(self, tmp_path, error):
        executor = KubectlExecutor(KubectlConfig(enabled=True, manifest_dir=tmp_path))

        with patch.object(executor, "_run", new_callable=AsyncMock, side_effect=error):
            result = await executor.apply(MANIFEST, "budget")

        assert result.status == ExecutionStatus.ERROR
        assert result.command is not None
        assert _manifest_files(tmp_path) == []

    @pytest.mark.asyncio
    async def test_write_failure(self, tmp_path):
        executor = KubectlExecutor(KubectlConfig(manifest_dir=tmp_path / "missing"))

        result = await executor.apply(MANIFEST, "budget")

        assert result.status == ExecutionStatus.ERROR
        assert result.command is None
        assert result.message == "Failed to write temporary YAML file for deployment."

    @pytest.mark.asyncio
    async def test_plan_id_is_sanitized_in_filename(self, tmp_path):
        executor = KubectlExecutor(KubectlConfig(manifest_dir=tmp_path))

        await executor.apply(MANIFEST, "../Max Green")

        files = _manifest_files(tmp_path)
        assert len(files) == 1
        assert files[0].name.startswith("greenops-plan----max-green-")

    @pytest.mark.asyncio
    async def test_run_real_process(self):
        executor = KubectlExecutor(KubectlConfig(enabled=True, timeout_seconds=10))

        returncode, stdout, stderr = await executor._run(["sh", "-c", "echo applied; echo warn >&2"])

        assert returncode == 0
        assert stdout.strip() == "applied"
        assert stderr.strip() == "warn"

    @pytest.mark.asyncio
    async def test_run_tolerates_invalid_utf8(self):
        executor = KubectlExecutor(KubectlConfig(enabled=True, timeout_seconds=10))

        returncode, stdout, stderr = await executor._run(
            ["sh", "-c", "printf 'ok \\377'; printf 'warn \\377' >&2"]
        )

        assert returncode == 0
        assert stdout == "ok \ufffd"
        assert stderr == "warn \ufffd"

    @pytest.mark.asyncio
    async def test_apply_with_binary_output_is_recorded(self, tmp_path):
        stub = tmp_path / "kubectl"
        stub.write_text("#!/bin/sh\nprintf 'created \\377'\nprintf '\\377' >&2\nexit 0\n")
        stub.chmod(0o755)
        executor = KubectlExecutor(
            KubectlConfig(enabled=True, binary=str(stub), manifest_dir=tmp_path, timeout_seconds=10)
        )

        result = await executor.apply(MANIFEST, "balanced")

        assert result.status == ExecutionStatus.OK
        assert result.stdout == "created \ufffd"
        assert result.stderr == "\ufffd"
        assert executor.get_execution_history() == [result]
        assert _manifest_files(tmp_path) == []

    @pytest.mark.asyncio
    async def test_run_timeout(self):
        executor = KubectlExecutor(KubectlConfig(enabled=True, timeout_seconds=0.1))

        with pytest.raises(TimeoutError):
            await executor._run(["sleep", "5"])
