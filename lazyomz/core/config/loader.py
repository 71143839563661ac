"""
Configuration loader — resolves the run configuration once at startup.

Reads the invoking user's environment (USER, HOME, SHELL, ZSH) and the
password database, applies the CLI options, and returns a frozen
BootstrapConfig. Nothing downstream reads os.environ for these values.
"""

from __future__ import annotations

import logging
import os
import pwd
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when the run configuration cannot be resolved."""


def github_url(url: str, proxy: str | None = None) -> str:
    """Rewrite a GitHub URL through a prefix proxy.

    >>> github_url("https://github.com/a/b", "https://proxy.test/")
    'https://proxy.test/https://github.com/a/b'
    """
    if not proxy:
        return url
    return f"{proxy.rstrip('/')}/{url.lstrip('/')}"


class BootstrapConfig(BaseModel):
    """Everything the provisioning steps need to know about this run."""

    model_config = ConfigDict(frozen=True)

    user: str                       # target account
    home: Path                      # target account's home directory
    effective_user: str             # account this process runs as
    login_shell: str = ""           # target account's current login shell
    proxy: str | None = None        # GitHub proxy prefix
    zsh: Path                       # oh-my-zsh root
    zsh_custom: Path                # oh-my-zsh custom directory

    @property
    def zshrc(self) -> Path:
        return self.home / ".zshrc"

    @property
    def run_as_self(self) -> bool:
        """True when commands for the target user need no sudo."""
        return self.user == self.effective_user

    def github_url(self, url: str) -> str:
        return github_url(url, self.proxy)


def _passwd_entry(user: str) -> pwd.struct_passwd | None:
    try:
        return pwd.getpwnam(user)
    except KeyError:
        return None


def _effective_user(env: Mapping[str, str]) -> str:
    try:
        return pwd.getpwuid(os.geteuid()).pw_name
    except KeyError:
        return env.get("USER", "")


def load_config(
    user: str | None = None,
    proxy: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> BootstrapConfig:
    """Build the run configuration.

    Args:
        user: Target account (default: the invoking account, ``$USER``).
        proxy: Optional GitHub proxy prefix.
        environ: Environment to read (default: ``os.environ``).

    Returns:
        Frozen BootstrapConfig.

    Raises:
        ConfigError: If the target user or its home cannot be resolved.
    """
    env = os.environ if environ is None else environ

    invoking_user = env.get("USER", "") or _effective_user(env)
    target = user or invoking_user
    if not target:
        raise ConfigError("Cannot determine the target user; pass --user.")

    entry = _passwd_entry(target)

    if target == invoking_user and env.get("HOME"):
        home = Path(env["HOME"])
    elif entry is not None:
        home = Path(entry.pw_dir)
    else:
        raise ConfigError(f"Unknown user: {target}")

    login_shell = entry.pw_shell if entry is not None else env.get("SHELL", "")

    zsh = Path(env["ZSH"]) if env.get("ZSH") else home / ".oh-my-zsh"

    config = BootstrapConfig(
        user=target,
        home=home,
        effective_user=_effective_user(env),
        login_shell=login_shell,
        proxy=proxy or None,
        zsh=zsh,
        zsh_custom=zsh / "custom",
    )
    logger.debug("Resolved config: %s", config.model_dump(mode="json"))
    return config
