"""
Tests for the capability probe and the package installer.
"""

from conftest import make_context
from lazyomz.adapters.mock import MockAdapter
from lazyomz.core.config.loader import BootstrapConfig
from lazyomz.core.services import probe
from lazyomz.core.services.packages import (
    detect_package_manager,
    ensure_command,
    install_package,
)


class TestProbe:
    def test_exists(self, host_tools: set[str]):
        host_tools.add("git")
        assert probe.command_exists("git")
        assert probe.resolve_command("git") == "/usr/bin/git"

    def test_missing(self, host_tools: set[str]):
        assert not probe.command_exists("git")
        assert probe.resolve_command("git") is None


class TestDetectPackageManager:
    def test_none(self, host_tools: set[str]):
        assert detect_package_manager() is None

    def test_brew_wins(self, host_tools: set[str]):
        host_tools.update({"pacman", "apt", "brew"})
        assert detect_package_manager().name == "brew"

    def test_priority_order(self, host_tools: set[str]):
        host_tools.update({"pacman", "yum", "apt-get"})
        assert detect_package_manager().name == "apt-get"


class TestInstallPackage:
    def test_uses_first_manager(self, ctx, shell: MockAdapter, host_tools: set[str]):
        host_tools.update({"apt", "yum"})
        receipt = install_package(ctx, "zsh")
        assert receipt.ok
        assert receipt.metadata["manager"] == "apt"
        assert shell.call_count == 1
        assert shell.call_log[0].params["argv"] == ["apt", "install", "-y", "zsh"]
        assert "user" not in shell.call_log[0].params

    def test_pacman_args(self, ctx, shell: MockAdapter, host_tools: set[str]):
        host_tools.add("pacman")
        install_package(ctx, "git")
        assert shell.call_log[0].params["argv"] == [
            "pacman", "-S", "--noconfirm", "--needed", "git",
        ]

    def test_brew_runs_as_target_user(
        self, config: BootstrapConfig, shell: MockAdapter, host_tools: set[str]
    ):
        host_tools.add("brew")
        ctx = make_context(config.model_copy(update={"effective_user": "root"}), shell)
        install_package(ctx, "zsh")
        params = shell.call_log[0].params
        assert params["argv"] == ["brew", "install", "zsh"]
        assert params["user"] == "alice"

    def test_no_manager_is_skipped(self, ctx, shell: MockAdapter, host_tools: set[str]):
        receipt = install_package(ctx, "zsh")
        assert receipt.skipped
        assert "no supported package manager" in receipt.output
        assert shell.call_count == 0

    def test_failure_is_surfaced_without_fallback(
        self, ctx, shell: MockAdapter, host_tools: set[str]
    ):
        host_tools.update({"apt", "apt-get", "yum"})
        shell.set_failure("package.zsh", "E: Unable to locate package zsh")
        receipt = install_package(ctx, "zsh")
        assert receipt.failed
        assert "Unable to locate" in receipt.error
        assert shell.call_count == 1


class TestEnsureCommand:
    def test_present_installs_nothing(self, ctx, shell: MockAdapter, host_tools: set[str]):
        host_tools.update({"git", "apt"})
        assert ensure_command(ctx, "git")
        assert shell.call_count == 0

    def test_installs_missing(self, ctx, shell: MockAdapter, host_tools: set[str]):
        host_tools.add("apt")
        shell.set_side_effect("package.curl", lambda c: host_tools.add("curl"))
        assert ensure_command(ctx, "curl")
        assert shell.calls_for("package.curl")

    def test_still_missing(self, ctx, shell: MockAdapter, host_tools: set[str]):
        assert not ensure_command(ctx, "curl")
