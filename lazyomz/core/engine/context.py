"""
Step context — what every provisioning step receives.

Bundles the immutable run configuration with the adapter registry and
turns "run this command (as the target user)" into a dispatched Action.
"""

from __future__ import annotations

from dataclasses import dataclass

from lazyomz.adapters.registry import AdapterRegistry
from lazyomz.core.config.loader import BootstrapConfig
from lazyomz.core.models.action import Action, Receipt


@dataclass(frozen=True)
class StepContext:
    config: BootstrapConfig
    registry: AdapterRegistry

    def run(
        self,
        action_id: str,
        argv: list[str],
        *,
        as_user: bool = False,
        env: dict[str, str] | None = None,
        input_text: str | None = None,
        capture: bool = True,
    ) -> Receipt:
        """Run a command through the shell adapter.

        With ``as_user`` the command runs as the target user, so anything
        it creates is owned by that user.
        """
        user = self.config.user if as_user and not self.config.run_as_self else None
        params: dict = {"argv": argv, "capture": capture}
        if user:
            params["user"] = user
        if env:
            params["env"] = env
        if input_text is not None:
            params["input"] = input_text

        return self.registry.execute_action(Action(id=action_id, params=params))
