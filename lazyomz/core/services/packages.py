"""
Package installer — install a system package with whatever manager exists.

Managers are probed in a fixed priority order and only the first one
found is used:

    brew     → brew install PKG            (as the target user)
    apt      → apt install -y PKG
    apt-get  → apt-get install -y PKG
    yum      → yum install -y PKG
    pacman   → pacman -S --noconfirm --needed PKG

No manager on the host is not an error: the install is skipped and the
caller re-probes for the tool it actually needs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lazyomz.core.engine.context import StepContext
from lazyomz.core.models.action import Receipt
from lazyomz.core.services import probe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManager:
    name: str
    install_args: tuple[str, ...]
    as_user: bool = False       # brew refuses to run as root

    def argv(self, package: str) -> list[str]:
        return [self.name, *self.install_args, package]


PACKAGE_MANAGERS: tuple[PackageManager, ...] = (
    PackageManager("brew", ("install",), as_user=True),
    PackageManager("apt", ("install", "-y")),
    PackageManager("apt-get", ("install", "-y")),
    PackageManager("yum", ("install", "-y")),
    PackageManager("pacman", ("-S", "--noconfirm", "--needed")),
)


def detect_package_manager() -> PackageManager | None:
    """First available manager in priority order, or None."""
    for manager in PACKAGE_MANAGERS:
        if probe.command_exists(manager.name):
            return manager
    return None


def install_package(ctx: StepContext, package: str) -> Receipt:
    """Install one package.

    Returns:
        ``ok`` when the manager succeeded, ``skipped`` when no supported
        manager exists, ``failed`` when the manager exited non-zero.
        A failing manager is not retried and no other manager is tried.
    """
    action_id = f"package.{package}"
    manager = detect_package_manager()
    if manager is None:
        logger.warning("No supported package manager found; cannot install %s", package)
        return Receipt.skip(
            adapter="packages",
            action_id=action_id,
            reason=f"no supported package manager to install {package}",
        )

    logger.info("Installing package %s with %s", package, manager.name)
    receipt = ctx.run(action_id, manager.argv(package), as_user=manager.as_user, capture=False)
    receipt.metadata["manager"] = manager.name
    if receipt.failed:
        logger.warning("%s failed to install %s: %s", manager.name, package, receipt.error)
    return receipt


def ensure_command(ctx: StepContext, command: str) -> bool:
    """Install the package of the same name if ``command`` is missing.

    Returns whether the command is available afterwards.
    """
    if probe.command_exists(command):
        return True
    install_package(ctx, command)
    return probe.command_exists(command)
