"""
Mock adapter — universal test double for adapter operations.

Simulates the shell adapter without touching the host. Configurable to
return success, failure, or custom responses per action, and records
every call so tests can assert what would have run.
"""

from __future__ import annotations

from collections.abc import Callable

from lazyomz.adapters.base import Adapter, ExecutionContext
from lazyomz.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    By default, returns success for everything. Can be configured
    with custom responses or side effects per action ID.
    """

    def __init__(
        self,
        adapter_name: str = "shell",
        default_output: str = "",
    ):
        self._name = adapter_name
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._side_effects: dict[str, Callable[[ExecutionContext], None]] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    def calls_for(self, action_id: str) -> list[ExecutionContext]:
        """Calls whose action ID equals or starts with ``action_id``."""
        return [
            c for c in self._call_log
            if c.action.id == action_id or c.action.id.startswith(f"{action_id}.")
        ]

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        """Set a custom response for a specific action ID."""
        self._responses[action_id] = receipt

    def set_output(self, action_id: str, output: str) -> None:
        """Make a specific action succeed with the given stdout."""
        self._responses[action_id] = Receipt.success(
            adapter=self._name,
            action_id=action_id,
            output=output,
        )

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        """Configure a specific action to fail."""
        self._responses[action_id] = Receipt.failure(
            adapter=self._name,
            action_id=action_id,
            error=error,
        )

    def set_side_effect(
        self,
        action_id: str,
        effect: Callable[[ExecutionContext], None],
    ) -> None:
        """Run ``effect`` when the action executes (e.g. create a directory)."""
        self._side_effects[action_id] = effect

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)

        effect = self._side_effects.get(context.action.id)
        if effect is not None:
            effect(context)

        if context.action.id in self._responses:
            return self._responses[context.action.id]

        return Receipt.success(
            adapter=self._name,
            action_id=context.action.id,
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log, custom responses and side effects."""
        self._call_log.clear()
        self._responses.clear()
        self._side_effects.clear()
