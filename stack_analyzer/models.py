"""Data model for parsed Go stack dumps.

A dump is a list of goroutines. Each goroutine carries its call stack, the
frame that created it and, when the runtime was asked to keep traceback
ancestors, a chain of originating goroutines.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

# Upper bound for walking an ancestor chain when no explicit limit is given.
DEFAULT_MAX_ANCESTOR_DEPTH = 1000


@dataclass
class Frame:
    """A single call-stack entry."""
    function: str = ""
    file: str = ""
    line: int = 0  # 0 = unset

    def is_empty(self) -> bool:
        return not self.function and not self.file and self.line == 0

    def location(self) -> str:
        if not self.file:
            return ""
        return f"{self.file}:{self.line}"

    def to_dict(self) -> Dict[str, Any]:
        return {"function": self.function, "file": self.file, "line": self.line}


@dataclass
class Goroutine:
    """One goroutine record from a dump."""
    id: int
    status: str = ""
    wait_millis: int = 0
    locked_to_thread: bool = False
    stack: List[Frame] = field(default_factory=list)
    frames_elided: bool = False
    # Always present; an empty Frame when the dump has no "created by" section
    created_by: Frame = field(default_factory=Frame)
    ancestor: Optional["Goroutine"] = None

    @property
    def wait_minutes(self) -> int:
        return self.wait_millis // 60000

    def has_creator(self) -> bool:
        return not self.created_by.is_empty()

    def ancestors(self, max_depth: int = DEFAULT_MAX_ANCESTOR_DEPTH) -> Iterator["Goroutine"]:
        """Yield the originating goroutines, nearest first.

        Stops after ``max_depth`` links so a corrupted chain cannot run away.
        """
        current = self.ancestor
        depth = 0
        while current is not None and depth < max_depth:
            yield current
            current = current.ancestor
            depth += 1

    def chain_depth(self, max_depth: int = DEFAULT_MAX_ANCESTOR_DEPTH) -> int:
        return sum(1 for _ in self.ancestors(max_depth))

    def to_dict(self, max_depth: int = DEFAULT_MAX_ANCESTOR_DEPTH) -> Dict[str, Any]:
        """JSON-ready view; the ancestor chain is nested and bounded."""
        root = self._fields_dict()
        node = root
        for ancestor in self.ancestors(max_depth):
            child = ancestor._fields_dict()
            node["ancestor"] = child
            node = child
        return root

    def _fields_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status,
            "wait_millis": self.wait_millis,
            "locked_to_thread": self.locked_to_thread,
            "stack": [f.to_dict() for f in self.stack],
            "frames_elided": self.frames_elided,
            "created_by": self.created_by.to_dict(),
            "ancestor": None,
        }


class ErrorKind(Enum):
    """What the parser expected when a line failed to parse."""
    INVALID_HEADER = "invalid goroutine header"
    INVALID_ANCESTOR = "invalid ancestor ID"
    INVALID_FUNCTION = "invalid function call"
    INVALID_FILE_LINE = "invalid file:line ref"
    ANCESTOR_TOO_DEEP = "ancestor chain too deep"
    TRUNCATED = "unexpected end of input"


@dataclass(frozen=True)
class ParseError:
    """A recoverable parse failure tied to one input line."""
    kind: ErrorKind
    line_number: int  # 1-based
    line: str

    @property
    def message(self) -> str:
        return self.kind.value

    def __str__(self) -> str:
        return f"{self.message} on line {self.line_number}: {self.line}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.name,
            "message": self.message,
            "line_number": self.line_number,
            "line": self.line,
        }


@dataclass
class ParseResult:
    """Goroutines recovered from a dump plus the errors met on the way."""
    goroutines: List[Goroutine] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)

    def __iter__(self):
        # Allows ``records, errors = result``
        yield self.goroutines
        yield self.errors

    def as_tuple(self) -> Tuple[List[Goroutine], List[ParseError]]:
        return self.goroutines, self.errors

    @property
    def frame_count(self) -> int:
        return sum(len(g.stack) for g in self.goroutines)
