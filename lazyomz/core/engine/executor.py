"""
Engine executor — the provisioning pipeline.

Runs the steps in order and collects one receipt per step. A failed
*required* step stops the run; later steps are never started.

Flow:
    shell → framework → theme → preferences
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from lazyomz.adapters.registry import AdapterRegistry
from lazyomz.adapters.shell.command import ShellCommandAdapter
from lazyomz.core.config.loader import BootstrapConfig
from lazyomz.core.engine.context import StepContext
from lazyomz.core.models.action import Receipt

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent provisioning step."""

    step_id: str
    title: str
    required: bool

    def run(self, ctx: StepContext) -> Receipt:
        ...


@dataclass
class ProvisionReport:
    """Result of a pipeline run."""

    user: str = ""
    receipts: list[Receipt] = field(default_factory=list)
    aborted: bool = False

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def status(self) -> str:
        if self.aborted:
            return "failed"
        if self.failed:
            return "partial"
        return "ok"

    @property
    def exit_code(self) -> int:
        return 1 if self.aborted else 0

    def to_dict(self) -> dict:
        return {
            "user": self.user,
            "status": self.status,
            "aborted": self.aborted,
            "steps": [r.model_dump(mode="json") for r in self.receipts],
        }


def build_steps() -> list[Step]:
    from lazyomz.core.services.framework import FrameworkStep
    from lazyomz.core.services.preferences import PreferencesStep
    from lazyomz.core.services.shell_setup import ShellSetupStep
    from lazyomz.core.services.theme import ThemeStep

    return [ShellSetupStep(), FrameworkStep(), ThemeStep(), PreferencesStep()]


def create_context(
    config: BootstrapConfig,
    registry: AdapterRegistry | None = None,
) -> StepContext:
    """Step context wired to the real shell adapter unless one is given."""
    if registry is None:
        registry = AdapterRegistry()
        registry.register(ShellCommandAdapter())
    return StepContext(config=config, registry=registry)


def run_pipeline(
    ctx: StepContext,
    steps: Sequence[Step] | None = None,
    on_result: Callable[[Step, Receipt], None] | None = None,
) -> ProvisionReport:
    """Run steps in order, stopping at the first failed required step."""
    report = ProvisionReport(user=ctx.config.user)

    for step in build_steps() if steps is None else steps:
        logger.info("Running step %s: %s", step.step_id, step.title)
        try:
            receipt = step.run(ctx)
        except Exception as e:
            logger.exception("Step %s raised", step.step_id)
            receipt = Receipt.failure(
                action_id=step.step_id,
                error=f"Unexpected error: {e}",
            )

        report.receipts.append(receipt)

        status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.info("%s %s → %s", status_marker, step.step_id, receipt.status)
        if receipt.failed:
            logger.error("Step %s failed: %s", step.step_id, receipt.error)

        if on_result is not None:
            on_result(step, receipt)

        if receipt.failed and step.required:
            logger.error("Aborting: required step %s failed", step.step_id)
            report.aborted = True
            break

    return report
