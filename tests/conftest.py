"""
Shared test fixtures and configuration.
"""

import shutil
import textwrap
from pathlib import Path

import pytest

from lazyomz.adapters.mock import MockAdapter
from lazyomz.adapters.registry import AdapterRegistry
from lazyomz.core.config.loader import BootstrapConfig
from lazyomz.core.engine.context import StepContext

# What `omz` writes into a fresh ~/.zshrc, trimmed.
ZSHRC_TEMPLATE = textwrap.dedent("""\
    # Path to your oh-my-zsh installation.
    export ZSH="$HOME/.oh-my-zsh"

    # See https://github.com/ohmyzsh/ohmyzsh/wiki/Themes
    ZSH_THEME="robbyrussell"

    # ZSH_THEME_RANDOM_CANDIDATES=( "robbyrussell" "agnoster" )

    plugins=(git)

    source $ZSH/oh-my-zsh.sh
""")


def make_context(config: BootstrapConfig, shell: MockAdapter) -> StepContext:
    registry = AdapterRegistry()
    registry.register(shell)
    return StepContext(config=config, registry=registry)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """An empty home directory for the target user."""
    home = tmp_path / "home" / "alice"
    home.mkdir(parents=True)
    return home


@pytest.fixture
def config(home: Path) -> BootstrapConfig:
    zsh = home / ".oh-my-zsh"
    return BootstrapConfig(
        user="alice",
        home=home,
        effective_user="alice",
        login_shell="/bin/bash",
        zsh=zsh,
        zsh_custom=zsh / "custom",
    )


@pytest.fixture
def zshrc(config: BootstrapConfig) -> Path:
    """A ~/.zshrc as the oh-my-zsh installer leaves it."""
    config.zshrc.write_text(ZSHRC_TEMPLATE)
    return config.zshrc


@pytest.fixture
def omz(config: BootstrapConfig) -> Path:
    """An installed oh-my-zsh tree."""
    config.zsh_custom.mkdir(parents=True)
    return config.zsh


@pytest.fixture
def shell() -> MockAdapter:
    """Mock shell adapter; records every command instead of running it."""
    return MockAdapter(adapter_name="shell")


@pytest.fixture
def ctx(config: BootstrapConfig, shell: MockAdapter) -> StepContext:
    return make_context(config, shell)


@pytest.fixture
def host_tools(monkeypatch) -> set[str]:
    """Commands that exist on the fake host PATH. Add to it freely."""
    tools: set[str] = set()

    def which(name, *args, **kwargs):
        return f"/usr/bin/{name}" if name in tools else None

    monkeypatch.setattr(shutil, "which", which)
    return tools
