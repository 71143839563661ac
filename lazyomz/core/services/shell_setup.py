"""
Shell setup — make zsh the target user's login shell.

Two outcomes short of failure: zsh is already the login shell (skipped,
nothing touched), or zsh gets installed if needed and ``chsh`` switches
to it. Not being able to obtain a zsh binary is fatal for the run.
"""

from __future__ import annotations

import logging
from pathlib import PurePath

from lazyomz.core.engine.context import StepContext
from lazyomz.core.models.action import Receipt
from lazyomz.core.services import probe
from lazyomz.core.services.packages import install_package

logger = logging.getLogger(__name__)

SHELL = "zsh"


def is_default_shell(login_shell: str, shell: str = SHELL) -> bool:
    return bool(login_shell) and PurePath(login_shell).name == shell


class ShellSetupStep:
    step_id = "shell"
    title = "Install zsh and make it the login shell"
    required = True

    def run(self, ctx: StepContext) -> Receipt:
        config = ctx.config
        if is_default_shell(config.login_shell):
            logger.info("Login shell of %s is already zsh (%s)", config.user, config.login_shell)
            return Receipt.skip(
                action_id=self.step_id,
                reason=f"default shell is already {config.login_shell}",
            )

        if not probe.command_exists(SHELL):
            install_package(ctx, SHELL)

        zsh_path = probe.resolve_command(SHELL)
        if zsh_path is None:
            return Receipt.failure(
                action_id=self.step_id,
                error="cannot find or install zsh, please install zsh manually",
            )

        logger.info("Switching login shell of %s to %s", config.user, zsh_path)
        receipt = ctx.run("shell.chsh", ["chsh", "-s", zsh_path, config.user], capture=False)
        if receipt.failed:
            return Receipt.failure(
                action_id=self.step_id,
                error=f"chsh failed: {receipt.error}",
                metadata={"zsh": zsh_path},
            )

        return Receipt.success(
            action_id=self.step_id,
            output=f"login shell of {config.user} set to {zsh_path}",
            metadata={"zsh": zsh_path},
        )
