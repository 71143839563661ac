"""
Commands and their outcomes.

An ``Action`` is one external command a step wants run. A ``Receipt`` is
the typed outcome of either a single command (``adapter="shell"``) or a
whole provisioning step (``adapter="step"``). Failures travel as
receipts, never as exceptions.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

Status = Literal["ok", "skipped", "failed"]


class Action(BaseModel):
    id: str                         # dotted, e.g. "plugins.clone.zsh-syntax-highlighting"
    adapter: str = "shell"
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """Outcome of a command or a step.

    ``skipped`` means there was nothing to do (zsh already the login
    shell, oh-my-zsh already present) or no way to do it that counts as
    an error (no package manager). For skips the reason lives in
    ``output``; for failures in ``error``.
    """

    action_id: str
    status: Status = "ok"
    adapter: str = "step"
    output: str = ""
    error: str | None = None
    duration_ms: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @property
    def detail(self) -> str:
        """The error for a failure, otherwise the output."""
        return (self.error or "") if self.failed else self.output

    @classmethod
    def success(cls, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(action_id=action_id, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(action_id=action_id, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, action_id: str, reason: str = "", **kwargs: Any) -> Receipt:
        return cls(action_id=action_id, status="skipped", output=reason, **kwargs)
