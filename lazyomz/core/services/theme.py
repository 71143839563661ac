"""
Theme installer — download the lazyomz theme and activate it.

The theme file is fetched on every run so updates are picked up.
"""

from __future__ import annotations

import logging

from lazyomz.core.engine.context import StepContext
from lazyomz.core.models.action import Receipt
from lazyomz.core.services.framework import CURL
from lazyomz.core.services.zshrc import ZshrcError, patch_zshrc

logger = logging.getLogger(__name__)

THEME_NAME = "lazyomz"
THEME_BASE_URL = "https://github.com/xxxbrian/lazyomz/raw/main"


class ThemeStep:
    step_id = "theme"
    title = "Install the lazyomz theme"
    required = False

    def run(self, ctx: StepContext) -> Receipt:
        config = ctx.config
        custom_dir = config.zsh_custom
        themes_dir = custom_dir / "themes"

        made = ctx.run(
            "theme.mkdir",
            ["mkdir", "-p", str(themes_dir), str(custom_dir / "plugins" / THEME_NAME)],
            as_user=True,
        )
        if made.failed:
            return Receipt.failure(
                action_id=self.step_id,
                error=f"cannot create {themes_dir}: {made.error}",
            )

        url = config.github_url(f"{THEME_BASE_URL}/{THEME_NAME}.zsh-theme")
        theme_file = themes_dir / f"{THEME_NAME}.zsh-theme"
        logger.info("Downloading theme %s to %s", url, theme_file)
        fetched = ctx.run(
            "theme.download",
            [*CURL, url, "-o", str(theme_file)],
            as_user=True,
        )
        if fetched.failed:
            return Receipt.failure(
                action_id=self.step_id,
                error=f"cannot download theme: {fetched.error}",
                metadata={"url": url},
            )

        try:
            patch_zshrc(config.zshrc, lambda doc: doc.set_theme(THEME_NAME))
        except ZshrcError as e:
            return Receipt.failure(action_id=self.step_id, error=str(e))

        return Receipt.success(
            action_id=self.step_id,
            output=f'ZSH_THEME="{THEME_NAME}"',
            metadata={"url": url, "path": str(theme_file)},
        )
