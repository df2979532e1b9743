"""
Gitignore-style path rules.

Semantics follow .gitignore:
  - blank lines and ``#`` comments are skipped
  - ``!pattern`` re-includes a path; the last matching rule wins
  - a pattern with no slash (other than a trailing one) matches at any depth
  - a trailing ``/`` restricts the rule to directories
  - ``**`` matches across path separators; a trailing ``/**`` matches
    everything inside a directory
  - a path inside an ignored directory cannot be re-included
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IgnoreRule:
    source: str
    regex: Pattern
    negated: bool = False
    dir_only: bool = False

    def matches(self, path: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        return self.regex.match(path) is not None


def _translate(pattern: str) -> str:
    out: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("/**", i) and i + 3 == n:
            out.append("/.*")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        elif pattern[i] == "[":
            k = i + 1
            if pattern[k:k + 1] == "!":
                k += 1
            # a ']' directly after the opening bracket belongs to the set
            j = pattern.find("]", k + 1)
            if j == -1:
                out.append(re.escape("["))
                i += 1
                continue
            body = pattern[k:j].replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
            out.append("[" + ("^" if k > i + 1 else "") + body + "]")
            i = j + 1
        elif pattern[i] == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return "".join(out)


def compile_rule(line: str) -> Optional[IgnoreRule]:
    """Compile one .gitignore line; returns None for blanks and comments."""
    source = line
    line = line.rstrip("\r\n").rstrip(" ")
    if not line or line.startswith("#"):
        return None

    negated = line.startswith("!")
    if negated:
        line = line[1:]
    elif line.startswith("\\"):
        line = line[1:]

    dir_only = line.endswith("/")
    line = line.rstrip("/")
    if not line:
        return None

    anchored = "/" in line
    line = line.lstrip("/")
    if not anchored and not line.startswith("**/"):
        line = "**/" + line

    try:
        regex = re.compile("^" + _translate(line) + "$")
    except re.error as e:
        logger.warning(f"Skipping invalid ignore pattern '{source}': {e}")
        return None
    return IgnoreRule(source=source, regex=regex, negated=negated, dir_only=dir_only)


class IgnoreRules:
    """An ordered rule set evaluated against workspace-relative paths."""

    def __init__(self, patterns: Optional[Iterable[str]] = None):
        self._rules: List[IgnoreRule] = []
        if patterns:
            self.add(patterns)

    def add(self, patterns: Iterable[str]) -> "IgnoreRules":
        for pattern in patterns:
            rule = compile_rule(pattern)
            if rule is not None:
                self._rules.append(rule)
        return self

    @property
    def patterns(self) -> List[str]:
        return [rule.source for rule in self._rules]

    def __len__(self) -> int:
        return len(self._rules)

    def _match(self, path: str, is_dir: bool) -> bool:
        ignored = False
        for rule in self._rules:
            if rule.matches(path, is_dir):
                ignored = not rule.negated
        return ignored

    def ignores(self, path: str, is_dir: bool = False) -> bool:
        """
        Check whether a relative path is ignored.

        Args:
            path: Workspace-relative, ``/``-separated path
            is_dir: Whether the path names a directory
        """
        path = path.strip("/")
        if not path or not self._rules:
            return False
        parts = path.split("/")
        for depth in range(1, len(parts)):
            if self._match("/".join(parts[:depth]), is_dir=True):
                return True
        return self._match(path, is_dir)
