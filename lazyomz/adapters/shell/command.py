"""
Shell command adapter — run an external command and capture its output.

Every package-manager call, download, clone and installer run goes
through here. Commands are argv lists, never shell strings. A command
can be run as another account through ``sudo -Eu``.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import time

from lazyomz.adapters.base import Adapter, ExecutionContext
from lazyomz.core.models.action import Receipt

logger = logging.getLogger(__name__)


def _fmt_argv(argv: list[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def build_argv(
    argv: list[str],
    *,
    user: str | None = None,
    env: dict[str, str] | None = None,
) -> list[str]:
    """Prefix ``argv`` with ``sudo -Eu USER`` when running as another account.

    Extra environment is passed as ``KEY=VALUE`` arguments to sudo so it
    reaches the child even when sudo resets the environment.
    """
    if not user:
        return list(argv)
    assignments = [f"{key}={value}" for key, value in (env or {}).items()]
    return ["sudo", "-Eu", user, *assignments, *argv]


class ShellCommandAdapter(Adapter):
    """Execute commands and capture output.

    Action params:
        argv (list[str]): The command to execute.
        user (str): Run as this account via sudo (default: current account).
        env (dict): Extra environment variables for the command.
        input (str): Text fed to the command's stdin.
        capture (bool): Capture stdout/stderr (default: True). When False
            the command's output goes straight to the terminal.
    """

    @property
    def name(self) -> str:
        return "shell"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.params.get("argv")
        if not argv:
            return False, "Missing required param: 'argv'"
        if not isinstance(argv, list) or not all(isinstance(a, str) for a in argv):
            return False, "Param 'argv' must be a list of strings"
        if context.params.get("user") and shutil.which("sudo") is None:
            return False, "sudo is required to run commands as another user"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.params
        extra_env: dict[str, str] = params.get("env") or {}
        argv = build_argv(params["argv"], user=params.get("user"), env=extra_env)
        capture = params.get("capture", True)

        logger.debug("CMD %s", _fmt_argv(argv))
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                input=params.get("input"),
                capture_output=capture,
                text=True,
                env=dict(os.environ, **extra_env),
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command execution error: {e}",
                metadata={"argv": argv},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = result.stdout or ""
        stderr = (result.stderr or "").strip()

        if stderr:
            logger.debug("STDERR %s", stderr)

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=stdout,
                duration_ms=elapsed_ms,
                metadata={"argv": argv, "return_code": 0, "stderr": stderr},
            )

        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={
                "argv": argv,
                "return_code": result.returncode,
                "stdout": stdout.strip()[-2000:],
            },
        )
