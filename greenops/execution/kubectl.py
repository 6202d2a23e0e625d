"""
kubectl executor for applying generated manifests.

Responsibilities:
- Write the manifest to a temporary file
- Run ``kubectl [--context CTX] apply -f <file>`` with a timeout
- Capture stdout/stderr
- Dry-run mode: report the command without running it
"""

import asyncio
import os
import shlex
import tempfile
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from greenops.execution.base import (
    BaseExecutor,
    ExecutionResult,
    ExecutionStatus,
    ExecutorType,
)
from greenops.planning.manifest import safe_name
from greenops.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class KubectlConfig:
    """Configuration for the kubectl executor."""

    enabled: bool = False
    binary: str = "kubectl"
    context: str | None = None
    timeout_seconds: float = 120.0
    manifest_dir: Path | None = None  # defaults to the system temp dir


class KubectlExecutor(BaseExecutor):
    """
    Applies manifests with kubectl.

    When disabled every apply is a dry run; the manifest file is still
    written so the reported command can be run by hand.
    """

    def __init__(self, kubectl_config: KubectlConfig | None = None) -> None:
        super().__init__(ExecutorType.KUBECTL)
        self.kubectl_config = kubectl_config or KubectlConfig()

        if not self.kubectl_config.enabled:
            logger.warning("Cluster deploy disabled, kubectl apply will run in dry-run mode")

    @property
    def enabled(self) -> bool:
        return self.kubectl_config.enabled

    def build_command(self, manifest_path: Path | str) -> list[str]:
        """kubectl argv for applying one manifest file."""
        cmd = [self.kubectl_config.binary]
        if self.kubectl_config.context:
            cmd += ["--context", self.kubectl_config.context]
        cmd += ["apply", "-f", str(manifest_path)]
        return cmd

    def _write_manifest(self, manifest: str, plan_id: str) -> Path:
        directory = self.kubectl_config.manifest_dir or Path(tempfile.gettempdir())
        fd, path = tempfile.mkstemp(
            prefix=f"greenops-plan-{safe_name(plan_id)}-",
            suffix=".yaml",
            dir=str(directory),
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(manifest)
        return Path(path)

    async def apply(self, manifest: str, plan_id: str) -> ExecutionResult:
        started_at = datetime.now(UTC)

        try:
            manifest_path = self._write_manifest(manifest, plan_id)
        except OSError as e:
            logger.error("Failed to write manifest file", plan_id=plan_id, error=str(e))
            result = ExecutionResult(
                status=ExecutionStatus.ERROR,
                message="Failed to write temporary YAML file for deployment.",
                error=str(e),
                started_at=started_at,
                completed_at=datetime.now(UTC),
            )
            self.record_execution(result)
            return result

        cmd = self.build_command(manifest_path)
        command = shlex.join(cmd)

        if not self.enabled:
            logger.info("Dry run, would execute", command=command, plan_id=plan_id)
            result = ExecutionResult(
                status=ExecutionStatus.DRY_RUN,
                message=(
                    "Deployment recorded for analytics, but kubectl apply was not "
                    "executed because cluster deploy is disabled."
                ),
                command=command,
                started_at=started_at,
                completed_at=datetime.now(UTC),
            )
            self.record_execution(result)
            return result

        try:
            returncode, stdout, stderr = await self._run(cmd)
        except (OSError, TimeoutError) as e:
            logger.error("kubectl apply failed to run", command=command, error=str(e))
            result = ExecutionResult(
                status=ExecutionStatus.ERROR,
                message="kubectl apply failed. Check server logs.",
                command=command,
                error=str(e),
                started_at=started_at,
                completed_at=datetime.now(UTC),
            )
        else:
            if returncode == 0:
                logger.info("kubectl apply succeeded", plan_id=plan_id, stdout=stdout)
                if stderr:
                    logger.warning("kubectl apply stderr", stderr=stderr)
                result = ExecutionResult(
                    status=ExecutionStatus.OK,
                    message="Deployment applied to cluster via kubectl.",
                    command=command,
                    stdout=stdout,
                    stderr=stderr,
                    started_at=started_at,
                    completed_at=datetime.now(UTC),
                )
            else:
                logger.error(
                    "kubectl apply failed",
                    plan_id=plan_id,
                    returncode=returncode,
                    stderr=stderr,
                )
                result = ExecutionResult(
                    status=ExecutionStatus.ERROR,
                    message="kubectl apply failed. Check server logs.",
                    command=command,
                    stdout=stdout,
                    stderr=stderr,
                    error=f"kubectl exited with status {returncode}",
                    started_at=started_at,
                    completed_at=datetime.now(UTC),
                )
        finally:
            manifest_path.unlink(missing_ok=True)

        self.record_execution(result)
        return result

    async def _run(self, cmd: list[str]) -> tuple[int, str, str]:
        """Run a command, returning (returncode, stdout, stderr)."""
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.kubectl_config.timeout_seconds,
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise TimeoutError(f"kubectl command timed out: {shlex.join(cmd)}")

        return (
            process.returncode if process.returncode is not None else -1,
            stdout.decode(errors="replace") if stdout else "",
            stderr.decode(errors="replace") if stderr else "",
        )
