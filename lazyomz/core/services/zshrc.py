"""
.zshrc document — a small line-oriented parser and serializer.

The file is split into entries. Recognised directives get their own
entry:

    plugins=(...)        kind "plugins" (the list may span several lines)
    ZSH_THEME=...        kind "theme"
    export NAME=...      kind "export", name NAME

Everything else is kept as raw text. Rendering an unmodified document
returns the input byte-for-byte, and each setter only rewrites the
entries it owns.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

PLUGINS = "plugins"
THEME = "theme"
EXPORT = "export"

_PLUGINS_START = re.compile(r"^plugins=\(")
_LIST_END = re.compile(r"\) *$")
_THEME = re.compile(r"^ZSH_THEME=(.*)$")
_EXPORT = re.compile(r"^\s*export\s+([A-Za-z_][A-Za-z0-9_]*)=")


class ZshrcError(Exception):
    """Raised when the configuration file cannot be read or written."""


@dataclass
class Entry:
    text: str                   # raw text, including line endings
    kind: str | None = None
    name: str | None = None


def _ending(text: str) -> str:
    if text.endswith("\r\n"):
        return "\r\n"
    if text.endswith("\n"):
        return "\n"
    return ""


def _strip_ending(line: str) -> str:
    return line.rstrip("\r\n")


class ZshrcDocument:
    """Parsed .zshrc contents."""

    def __init__(self, entries: list[Entry] | None = None):
        self.entries: list[Entry] = list(entries or [])

    # ── Parsing / rendering ─────────────────────────────────────

    @classmethod
    def parse(cls, text: str) -> ZshrcDocument:
        lines = text.splitlines(keepends=True)
        entries: list[Entry] = []
        i = 0
        while i < len(lines):
            line = lines[i]
            content = _strip_ending(line)

            if _PLUGINS_START.match(content):
                end = cls._find_list_end(lines, i)
                if end is not None:
                    entries.append(Entry("".join(lines[i:end + 1]), kind=PLUGINS))
                    i = end + 1
                    continue
                logger.debug("Unterminated plugins=( at line %d, keeping as text", i + 1)
            elif _THEME.match(content):
                entries.append(Entry(line, kind=THEME))
                i += 1
                continue
            else:
                m = _EXPORT.match(content)
                if m:
                    entries.append(Entry(line, kind=EXPORT, name=m.group(1)))
                    i += 1
                    continue

            entries.append(Entry(line))
            i += 1

        return cls(entries)

    @staticmethod
    def _find_list_end(lines: list[str], start: int) -> int | None:
        """Index of the line closing the list opened on ``lines[start]``."""
        first = _strip_ending(lines[start])[len("plugins=("):]
        if _LIST_END.search(first):
            return start
        for j in range(start + 1, len(lines)):
            if _LIST_END.search(_strip_ending(lines[j])):
                return j
        return None

    def render(self) -> str:
        return "".join(e.text for e in self.entries)

    # ── Queries ─────────────────────────────────────────────────

    def find(self, kind: str, name: str | None = None) -> list[Entry]:
        return [
            e for e in self.entries
            if e.kind == kind and (name is None or e.name == name)
        ]

    @property
    def plugins(self) -> list[str] | None:
        """Plugin names from the first plugins directive, or None."""
        found = self.find(PLUGINS)
        if not found:
            return None
        body = found[0].text
        inner = body[body.index("(") + 1:body.rindex(")")]
        return inner.split()

    @property
    def theme(self) -> str | None:
        found = self.find(THEME)
        if not found:
            return None
        m = _THEME.match(_strip_ending(found[0].text))
        return m.group(1).strip().strip("\"'") if m else None

    # ── Edits ───────────────────────────────────────────────────

    def set_plugins(self, plugins: list[str]) -> None:
        """Replace the plugin list; extra plugins directives are dropped."""
        block = "plugins=(\n" + "".join(f"  {p}\n" for p in plugins) + ")"
        found = self.find(PLUGINS)
        if not found:
            self.append_line(block)
            return

        first = found[0]
        first.text = block + _ending(first.text)
        self.entries = [e for e in self.entries if e is first or e.kind != PLUGINS]

    def set_theme(self, name: str) -> None:
        """Point every ZSH_THEME line at ``name``; append one if absent."""
        line = f'ZSH_THEME="{name}"'
        found = self.find(THEME)
        if not found:
            self.append_line(line)
            return
        for entry in found:
            entry.text = line + _ending(entry.text)

    def remove_mentions(self, token: str) -> int:
        """Drop every entry whose text contains ``token``."""
        before = len(self.entries)
        self.entries = [e for e in self.entries if token not in e.text]
        return before - len(self.entries)

    def set_export(self, name: str, value: str) -> None:
        """Leave exactly one ``export NAME=value`` line, at the end."""
        self.remove_mentions(name)
        self.append_line(f"export {name}={value}")

    def append_line(self, line: str) -> None:
        if self.entries and not _ending(self.entries[-1].text):
            self.entries[-1].text += "\n"
        self.entries.extend(ZshrcDocument.parse(line + "\n").entries)


def load_zshrc(path: Path) -> ZshrcDocument:
    """Read and parse the (symlink-resolved) configuration file."""
    real = path.resolve()
    if not real.is_file():
        raise ZshrcError(f"{path} not found")
    try:
        with open(real, encoding="utf-8", errors="surrogateescape", newline="") as f:
            return ZshrcDocument.parse(f.read())
    except OSError as e:
        raise ZshrcError(f"Cannot read {path}: {e}") from e


def save_zshrc(path: Path, doc: ZshrcDocument) -> None:
    """Rewrite the real file in place so owner and mode are kept."""
    real = path.resolve()
    try:
        with open(real, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(doc.render())
    except OSError as e:
        raise ZshrcError(f"Cannot write {path}: {e}") from e
    logger.debug("Wrote %s", real)


def patch_zshrc(path: Path, *edits: Callable[[ZshrcDocument], object]) -> ZshrcDocument:
    """Load, apply each ``edit(doc)`` in order, save. Returns the document."""
    doc = load_zshrc(path)
    for edit in edits:
        edit(doc)
    save_zshrc(path, doc)
    return doc
