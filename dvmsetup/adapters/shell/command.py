"""
Shell adapter — runs apt-get, systemctl, sh and tar for the remediation phases.

Commands are argv lists, never shell strings. No timeout applies unless
the action sets one: ``apt-get upgrade`` on a Pi SD card can run for a
long time and must not be cut off.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path

from dvmsetup.adapters.base import Adapter, ExecutionContext
from dvmsetup.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Run one process and capture stdout and stderr.

    Action params:
        argv (list[str]): Command and arguments.
        env (dict[str, str]): Added to the inherited environment.
        timeout (float | None): Seconds before the process is killed.
        cwd (str): Working directory.
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.params.get("argv")
        if not isinstance(argv, list) or not argv:
            return False, "Missing required param: 'argv'"
        cwd = context.params.get("cwd")
        if cwd and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"
        return True, ""

    def _failed(self, context: ExecutionContext, error: str, **metadata) -> Receipt:
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=error,
            metadata=metadata,
        )

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.params
        argv = [str(a) for a in params["argv"]]
        timeout = params.get("timeout")
        command = " ".join(argv)
        extra_env = params.get("env")
        env = {**os.environ, **extra_env} if extra_env else None

        logger.info("$ %s", command)
        start = time.monotonic()
        try:
            proc = subprocess.run(
                argv,
                cwd=params.get("cwd"),
                env=env,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError:
            return self._failed(context, f"Command not found: {argv[0]}", command=command)
        except subprocess.TimeoutExpired:
            return self._failed(context, f"Command timed out after {timeout}s",
                                command=command, timeout=timeout)
        except OSError as e:
            return self._failed(context, f"Cannot run {argv[0]}: {e}", command=command)

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout, stderr = proc.stdout.strip(), proc.stderr.strip()

        if proc.returncode != 0:
            logger.debug("%s exited %d: %s", argv[0], proc.returncode, stderr)
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=stderr or f"Command exited with code {proc.returncode}",
                duration_ms=elapsed_ms,
                metadata={"command": command, "return_code": proc.returncode, "stdout": stdout},
            )

        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=stdout,
            duration_ms=elapsed_ms,
            metadata={"command": command, "return_code": 0, "stderr": stderr},
        )
