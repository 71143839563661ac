"""
Plugin installer — clone missing plugins and set the enabled list.
"""

from __future__ import annotations

import logging

from lazyomz.core.engine.context import StepContext
from lazyomz.core.models.action import Receipt
from lazyomz.core.services.packages import ensure_command
from lazyomz.core.services.zshrc import ZshrcError, patch_zshrc

logger = logging.getLogger(__name__)

# plugin name → repository (None: ships with oh-my-zsh)
PLUGIN_SOURCES: dict[str, str | None] = {
    "git": None,
    "zsh-syntax-highlighting": "https://github.com/zsh-users/zsh-syntax-highlighting.git",
}
ENABLED_PLUGINS = list(PLUGIN_SOURCES)


def install_plugins(ctx: StepContext) -> Receipt:
    """Clone missing plugins, then rewrite ``plugins=(...)`` in .zshrc."""
    config = ctx.config
    plugin_dir = config.zsh_custom / "plugins"
    cloned: list[str] = []

    ensure_command(ctx, "git")

    for name, repo in PLUGIN_SOURCES.items():
        if repo is None:
            continue
        target = plugin_dir / name
        if target.is_dir():
            logger.debug("Plugin %s already present at %s", name, target)
            continue

        url = config.github_url(repo)
        logger.info("Cloning plugin %s from %s", name, url)
        receipt = ctx.run(
            f"plugins.clone.{name}",
            ["git", "clone", "--depth=1", url, str(target)],
            as_user=True,
        )
        if receipt.failed:
            return Receipt.failure(
                action_id="plugins",
                error=f"cannot clone {name}: {receipt.error}",
                metadata={"url": url},
            )
        cloned.append(name)

    logger.info("Enabling plugins in %s: %s", config.zshrc, " ".join(ENABLED_PLUGINS))
    try:
        patch_zshrc(config.zshrc, lambda doc: doc.set_plugins(ENABLED_PLUGINS))
    except ZshrcError as e:
        return Receipt.failure(action_id="plugins", error=str(e))

    return Receipt.success(
        action_id="plugins",
        output=f"plugins enabled: {' '.join(ENABLED_PLUGINS)}",
        metadata={"cloned": cloned},
    )
