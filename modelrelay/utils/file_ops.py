# modelrelay/utils/file_ops.py
"""
Workspace snapshot helpers for local use (CLI, tests).

The relay itself receives snapshots from its client; these helpers build
the same shape from a directory on disk.
"""

from pathlib import Path
import json
from typing import Any, Dict, Optional, Union
import logging

from modelrelay.core.context_assembler import DEFAULT_WORK_DIR, FileEntry, FolderEntry, SnapshotEntry

logger = logging.getLogger("ModelRelay.FileOps")

SNIFF_BYTES = 8192


def is_binary_file(path: Union[str, Path]) -> bool:
    """
    Simple binary detection: look for NULL bytes or invalid UTF-8.
    """
    try:
        with open(path, "rb") as f:
            chunk = f.read(SNIFF_BYTES)
    except OSError as e:
        logger.warning(f"[is_binary_file] Cannot read {path}: {e}")
        return True
    if b"\x00" in chunk:
        return True
    try:
        chunk.decode("utf-8")
        return False
    except UnicodeDecodeError:
        return True


def load_workspace_snapshot(
    directory: Union[str, Path],
    work_dir: str = DEFAULT_WORK_DIR,
) -> Dict[str, SnapshotEntry]:
    """
    Walk ``directory`` and build a workspace snapshot.

    Args:
        directory: Local directory to read
        work_dir: Prefix the snapshot paths are rooted at

    Returns:
        Mapping of ``{work_dir}/{relative path}`` to file/folder entries,
        in sorted path order
    """
    root = Path(directory)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    prefix = work_dir.rstrip("/")
    snapshot: Dict[str, SnapshotEntry] = {}
    for item in sorted(root.rglob("*")):
        rel = item.relative_to(root).as_posix()
        key = f"{prefix}/{rel}"
        if item.is_dir():
            snapshot[key] = FolderEntry()
        elif item.is_file():
            if is_binary_file(item):
                snapshot[key] = FileEntry(content="", is_binary=True)
            else:
                snapshot[key] = FileEntry(content=item.read_text(encoding="utf-8", errors="ignore"))
    logger.debug(f"Loaded {len(snapshot)} entries from {root}")
    return snapshot


def read_json(path: Union[str, Path]) -> Optional[Any]:
    """Read a JSON document from disk; returns None if the file is missing."""
    p = Path(path)
    if not p.exists():
        logger.error(f"[read_json] File not found: {path}")
        return None
    return json.loads(p.read_text(encoding="utf-8"))
