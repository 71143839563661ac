"""
Framework installer — install oh-my-zsh when it is missing.

The official installer script is downloaded and piped to ``sh`` as the
target user. With a proxy configured, the script URL is proxied and the
installer's own clone is redirected through ``REMOTE`` so every nested
fetch goes through the proxy as well.
"""

from __future__ import annotations

import logging

from lazyomz.core.engine.context import StepContext
from lazyomz.core.models.action import Receipt
from lazyomz.core.services.packages import ensure_command

logger = logging.getLogger(__name__)

INSTALL_SCRIPT_URL = "https://github.com/ohmyzsh/ohmyzsh/raw/master/tools/install.sh"
REPOSITORY_URL = "https://github.com/ohmyzsh/ohmyzsh.git"

CURL = ["curl", "-fsSL", "-H", "Cache-Control: no-cache"]


def installer_env(ctx: StepContext) -> dict[str, str]:
    """Environment for the oh-my-zsh installer process."""
    env = {
        "ZSH": str(ctx.config.zsh),
        "RUNZSH": "no",             # don't exec into zsh when done
        "CHSH": "no",               # the shell step owns the login shell
    }
    if ctx.config.proxy:
        env["REMOTE"] = ctx.config.github_url(REPOSITORY_URL)
    return env


class FrameworkStep:
    step_id = "framework"
    title = "Install oh-my-zsh"
    required = True

    def run(self, ctx: StepContext) -> Receipt:
        config = ctx.config
        if config.zsh.is_dir() and config.zsh_custom.is_dir():
            logger.info("oh-my-zsh found at %s, skipping install", config.zsh)
            return Receipt.skip(
                action_id=self.step_id,
                reason=f"oh-my-zsh already installed at {config.zsh}",
            )

        for tool in ("git", "curl"):
            if not ensure_command(ctx, tool):
                logger.warning("%s is still missing; the installer will probably fail", tool)

        url = config.github_url(INSTALL_SCRIPT_URL)
        logger.info("Downloading oh-my-zsh installer from %s", url)
        script = ctx.run("framework.download", [*CURL, url])
        if script.failed:
            return Receipt.failure(
                action_id=self.step_id,
                error=f"cannot download installer: {script.error}",
                metadata={"url": url},
            )

        logger.info("Running oh-my-zsh installer as %s", config.user)
        installed = ctx.run(
            "framework.install",
            ["sh", "-s"],
            as_user=True,
            env=installer_env(ctx),
            input_text=script.output,
            capture=False,
        )
        if installed.failed:
            return Receipt.failure(
                action_id=self.step_id,
                error=f"oh-my-zsh installer failed: {installed.error}",
                metadata={"url": url},
            )

        if not config.zsh.is_dir():
            return Receipt.failure(
                action_id=self.step_id,
                error=f"installer finished but {config.zsh} does not exist",
            )

        return Receipt.success(
            action_id=self.step_id,
            output=f"oh-my-zsh installed at {config.zsh}",
            metadata={"url": url, "proxied": bool(config.proxy)},
        )
