"""
Preference patcher — small .zshrc tweaks, then the plugin installer.

Plugins are installed even when a tweak could not be applied; the step
then reports every problem it ran into.
"""

from __future__ import annotations

import logging

from lazyomz.core.engine.context import StepContext
from lazyomz.core.models.action import Receipt
from lazyomz.core.services import probe
from lazyomz.core.services.plugins import install_plugins
from lazyomz.core.services.zshrc import ZshrcError, patch_zshrc

logger = logging.getLogger(__name__)

BREW_NO_AUTO_UPDATE = "HOMEBREW_NO_AUTO_UPDATE"


class PreferencesStep:
    step_id = "preferences"
    title = "Apply zsh preferences and plugins"
    required = False

    def run(self, ctx: StepContext) -> Receipt:
        applied: list[str] = []
        errors: list[str] = []

        if probe.command_exists("brew"):
            logger.info("Disabling Homebrew auto-update in %s", ctx.config.zshrc)
            try:
                patch_zshrc(
                    ctx.config.zshrc,
                    lambda doc: doc.set_export(BREW_NO_AUTO_UPDATE, "true"),
                )
                applied.append(f"{BREW_NO_AUTO_UPDATE}=true")
            except ZshrcError as e:
                logger.warning("Cannot disable Homebrew auto-update: %s", e)
                errors.append(str(e))

        plugins = install_plugins(ctx)
        if plugins.failed:
            errors.append(plugins.error or "plugin install failed")

        metadata = {"applied": applied, "plugins": plugins.metadata}
        if errors:
            return Receipt.failure(
                action_id=self.step_id,
                error="\n".join(errors),
                metadata=metadata,
            )

        return Receipt.success(
            action_id=self.step_id,
            output="; ".join([*applied, plugins.output]),
            metadata=metadata,
        )
