"""
Tests for adapter protocol, registry, mock, and shell adapters.
"""

from pathlib import Path

from lazyomz.adapters.base import ExecutionContext
from lazyomz.adapters.mock import MockAdapter
from lazyomz.adapters.registry import AdapterRegistry
from lazyomz.adapters.shell.command import ShellCommandAdapter, build_argv
from lazyomz.core.engine.context import StepContext
from lazyomz.core.models.action import Action, Receipt


def _shell_ctx(**params) -> ExecutionContext:
    return ExecutionContext(action=Action(id="test", adapter="shell", params=params))


# ── Mock Adapter Tests ───────────────────────────────────────────────


class TestMockAdapter:
    def test_default_success(self):
        mock = MockAdapter(adapter_name="test-mock")
        ctx = ExecutionContext(action=Action(id="op-1", adapter="test-mock"))
        receipt = mock.execute(ctx)
        assert receipt.ok
        assert mock.call_count == 1

    def test_custom_response(self):
        mock = MockAdapter()
        mock.set_response(
            "op-1",
            Receipt.success(adapter="mock", action_id="op-1", output="custom"),
        )
        receipt = mock.execute(ExecutionContext(action=Action(id="op-1", adapter="shell")))
        assert receipt.output == "custom"

    def test_set_failure(self):
        mock = MockAdapter()
        mock.set_failure("op-fail", error="Intentional failure")
        receipt = mock.execute(ExecutionContext(action=Action(id="op-fail", adapter="shell")))
        assert receipt.failed
        assert "Intentional failure" in receipt.error

    def test_side_effect(self, tmp_path: Path):
        mock = MockAdapter()
        mock.set_side_effect("mk", lambda c: (tmp_path / "made").mkdir())
        mock.execute(ExecutionContext(action=Action(id="mk", adapter="shell")))
        assert (tmp_path / "made").is_dir()

    def test_calls_for_prefix(self):
        mock = MockAdapter()
        for action_id in ("plugins.clone.a", "plugins.cloned", "theme.download"):
            mock.execute(ExecutionContext(action=Action(id=action_id, adapter="shell")))
        assert [c.action.id for c in mock.calls_for("plugins.clone")] == ["plugins.clone.a"]

    def test_reset(self):
        mock = MockAdapter()
        mock.set_failure("op-1")
        mock.execute(ExecutionContext(action=Action(id="op-1", adapter="shell")))
        mock.reset()
        assert mock.call_count == 0
        assert mock.execute(ExecutionContext(action=Action(id="op-1", adapter="shell"))).ok


# ── Receipt ─────────────────────────────────────────────────────────


class TestReceipt:
    def test_step_is_default_adapter(self):
        assert Receipt.success(action_id="theme").adapter == "step"

    def test_detail(self):
        assert Receipt.failure(action_id="theme", error="404").detail == "404"
        assert Receipt.skip(action_id="shell", reason="already zsh").detail == "already zsh"
        assert Receipt.success(action_id="theme", output="ok").detail == "ok"


# ── Registry Tests ──────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_dispatches_by_adapter_name(self):
        registry = AdapterRegistry()
        shell, other = MockAdapter(adapter_name="shell"), MockAdapter(adapter_name="other")
        registry.register(shell)
        registry.register(other)
        assert registry.execute_action(Action(id="op", adapter="other")).ok
        assert other.call_count == 1
        assert shell.call_count == 0

    def test_register_replaces_same_name(self):
        registry = AdapterRegistry()
        first, second = MockAdapter(), MockAdapter()
        registry.register(first)
        registry.register(second)
        registry.execute_action(Action(id="op"))
        assert first.call_count == 0
        assert second.call_count == 1

    def test_missing_adapter_fails(self):
        receipt = AdapterRegistry().execute_action(Action(id="test", adapter="nonexistent"))
        assert receipt.failed
        assert "No adapter registered" in receipt.error

    def test_validation_failure(self):
        registry = AdapterRegistry()
        registry.register(ShellCommandAdapter())
        receipt = registry.execute_action(Action(id="test", adapter="shell"))
        assert receipt.failed
        assert "Validation failed" in receipt.error

    def test_raising_adapter(self):
        class Exploding(MockAdapter):
            def execute(self, context):
                raise RuntimeError("kaboom")

        registry = AdapterRegistry()
        registry.register(Exploding(adapter_name="boom"))
        receipt = registry.execute_action(Action(id="op", adapter="boom"))
        assert receipt.failed
        assert "kaboom" in receipt.error

    def test_execute_adds_timing(self):
        registry = AdapterRegistry()
        registry.register(MockAdapter(adapter_name="test"))
        receipt = registry.execute_action(Action(id="op-1", adapter="test"))
        assert receipt.ok
        assert receipt.duration_ms >= 0


# ── Shell Command Adapter Tests ─────────────────────────────────────


class TestBuildArgv:
    def test_plain(self):
        assert build_argv(["git", "status"]) == ["git", "status"]

    def test_as_user_with_env(self):
        assert build_argv(["sh", "-s"], user="alice", env={"REMOTE": "x"}) == [
            "sudo", "-Eu", "alice", "REMOTE=x", "sh", "-s",
        ]


class TestShellCommandAdapter:
    def test_name(self):
        assert ShellCommandAdapter().name == "shell"

    def test_validate_missing_argv(self):
        valid, msg = ShellCommandAdapter().validate(_shell_ctx())
        assert not valid
        assert "argv" in msg

    def test_validate_string_argv(self):
        valid, msg = ShellCommandAdapter().validate(_shell_ctx(argv="echo hi"))
        assert not valid
        assert "list of strings" in msg

    def test_execute_echo(self):
        receipt = ShellCommandAdapter().execute(_shell_ctx(argv=["echo", "hello world"]))
        assert receipt.ok
        assert receipt.output == "hello world\n"
        assert receipt.metadata["return_code"] == 0

    def test_execute_failure(self):
        receipt = ShellCommandAdapter().execute(_shell_ctx(argv=["sh", "-c", "echo bad >&2; exit 3"]))
        assert receipt.failed
        assert receipt.error == "bad"
        assert receipt.metadata["return_code"] == 3

    def test_stdin_and_env(self):
        receipt = ShellCommandAdapter().execute(
            _shell_ctx(argv=["sh", "-s"], input='printf "%s" "$GREETING"', env={"GREETING": "hi"})
        )
        assert receipt.ok
        assert receipt.output == "hi"

    def test_missing_binary(self):
        receipt = ShellCommandAdapter().execute(_shell_ctx(argv=["lazyomz-no-such-binary"]))
        assert receipt.failed
        assert "Command execution error" in receipt.error


class TestStepContext:
    def test_run_as_self_has_no_user(self, config):
        mock = MockAdapter()
        registry = AdapterRegistry()
        registry.register(mock)
        StepContext(config=config, registry=registry).run("x", ["true"], as_user=True)
        assert "user" not in mock.call_log[0].params

    def test_run_for_other_user(self, config):
        mock = MockAdapter()
        registry = AdapterRegistry()
        registry.register(mock)
        ctx = StepContext(
            config=config.model_copy(update={"effective_user": "root"}),
            registry=registry,
        )
        ctx.run("x", ["true"], as_user=True, env={"A": "1"}, input_text="data")
        params = mock.call_log[0].params
        assert params["user"] == "alice"
        assert params["env"] == {"A": "1"}
        assert params["input"] == "data"

    def test_run_not_as_user(self, config):
        mock = MockAdapter()
        registry = AdapterRegistry()
        registry.register(mock)
        ctx = StepContext(
            config=config.model_copy(update={"effective_user": "root"}),
            registry=registry,
        )
        ctx.run("x", ["chsh"])
        assert "user" not in mock.call_log[0].params
