"""
Capability probe — is a command available on PATH?

Read-only. Never raises; a missing tool is just ``False``/``None``.
"""

from __future__ import annotations

import shutil


def resolve_command(name: str) -> str | None:
    """Absolute path of ``name`` on PATH, or None."""
    return shutil.which(name)


def command_exists(name: str) -> bool:
    return resolve_command(name) is not None
