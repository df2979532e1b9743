"""
Context Assembler

Turns a workspace file snapshot into one annotated text block for the
system prompt. Every line of every surviving file is prefixed with its
1-based line number.

The assembler never trims for token budgets; it returns the full context,
or an empty string when no file survives filtering.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from modelrelay.core.ignore_rules import IgnoreRules

logger = logging.getLogger(__name__)

DEFAULT_WORK_DIR = "/home/project"

# Common patterns to ignore, similar to .gitignore
DEFAULT_IGNORE_PATTERNS = (
    "node_modules/**",
    ".git/**",
    "dist/**",
    "build/**",
    ".next/**",
    "coverage/**",
    ".cache/**",
    ".vscode/**",
    ".idea/**",
    "**/*.log",
    "**/.DS_Store",
    "**/npm-debug.log*",
    "**/yarn-debug.log*",
    "**/yarn-error.log*",
    "**/*lock.json",
    "**/*lock.yml",
)

CONTEXT_HEADER = (
    "Below are the code files present in the workspace:\n"
    "code format:\n"
    "<line number>|<line content>\n"
    "<codebase>\n"
)
CONTEXT_FOOTER = "\n</codebase>"


@dataclass(frozen=True)
class FileEntry:
    content: str
    is_binary: bool = False
    kind: str = "file"


@dataclass(frozen=True)
class FolderEntry:
    kind: str = "folder"


SnapshotEntry = Union[FileEntry, FolderEntry]
WorkspaceSnapshot = Mapping[str, Optional[SnapshotEntry]]


def entry_from_dict(data: Mapping[str, Any]) -> SnapshotEntry:
    """Build a snapshot entry from its JSON form (``type``/``kind`` key)."""
    kind = data.get("kind") or data.get("type")
    if kind == "folder":
        return FolderEntry()
    if kind == "file":
        return FileEntry(
            content=data.get("content") or "",
            is_binary=bool(data.get("is_binary", data.get("isBinary", False))),
        )
    raise ValueError(f"Unknown snapshot entry kind: {kind!r}")


def snapshot_from_dict(data: Mapping[str, Any]) -> Dict[str, Optional[SnapshotEntry]]:
    return {path: entry_from_dict(entry) if entry else None for path, entry in data.items()}


@dataclass(frozen=True)
class FileBlock:
    """One file rendered with line numbers, wrapped in its path delimiter."""
    path: str
    text: str


def number_lines(content: str) -> str:
    return "\n".join(f"{i}|{line}" for i, line in enumerate(content.split("\n"), start=1))


class ContextAssembler:
    """
    Builds the workspace context block.

    Args:
        ignore_patterns: Gitignore-style patterns, evaluated on paths relative
            to ``work_dir``
        work_dir: Workspace root prefix stripped before rule evaluation
    """

    def __init__(
        self,
        ignore_patterns: Optional[Iterable[str]] = DEFAULT_IGNORE_PATTERNS,
        work_dir: str = DEFAULT_WORK_DIR,
    ):
        self.rules = IgnoreRules(ignore_patterns or ())
        self.work_dir = work_dir.rstrip("/")

    def relative_path(self, path: str) -> str:
        prefix = self.work_dir + "/"
        if self.work_dir and path.startswith(prefix):
            return path[len(prefix):]
        return path.lstrip("/")

    def collect(self, snapshot: WorkspaceSnapshot) -> List[FileBlock]:
        """Filter the snapshot and render each surviving file, in key order."""
        blocks: List[FileBlock] = []
        for path, entry in snapshot.items():
            if entry is None:
                continue
            if isinstance(entry, Mapping):
                entry = entry_from_dict(entry)
            is_dir = isinstance(entry, FolderEntry)
            if self.rules.ignores(self.relative_path(path), is_dir=is_dir):
                continue
            if is_dir or entry.is_binary:
                continue
            blocks.append(FileBlock(
                path=path,
                text=f'<file path="{path}">\n{number_lines(entry.content)}\n</file>',
            ))
        logger.debug(f"Context: {len(blocks)} of {len(snapshot)} snapshot entries kept")
        return blocks

    @staticmethod
    def render(blocks: List[FileBlock]) -> str:
        if not blocks:
            return ""
        return CONTEXT_HEADER + "\n\n".join(block.text for block in blocks) + CONTEXT_FOOTER

    def assemble(self, snapshot: WorkspaceSnapshot) -> str:
        return self.render(self.collect(snapshot))
