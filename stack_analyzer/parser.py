"""Go stack dump parser.

Turns the text a Go program prints on panic (or on SIGQUIT, or from
``runtime.Stack``) into Goroutine records. Parsing is a single pass over the
lines through a small state machine. A malformed line costs only the
goroutine it belongs to: the error is recorded, that goroutine is dropped,
and parsing resumes at the next ``goroutine`` header.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Tuple, Union

from .models import (
    DEFAULT_MAX_ANCESTOR_DEPTH,
    ErrorKind,
    Frame,
    Goroutine,
    ParseError,
    ParseResult,
)
from .tokenizers import (
    CREATED_BY_PREFIX,
    FRAMES_ELIDED_LINE,
    GOROUTINE_PREFIX,
    ORIGINATING_FROM_PREFIX,
    parse_ancestor_id,
    parse_file_line,
    parse_func,
    parse_goroutine_header,
)

logger = logging.getLogger(__name__)


class ParserState(Enum):
    HEADER = "header"
    STACK_FUNC = "stack_func"
    STACK_FILE = "stack_file"
    CREATED_BY = "created_by"
    CREATED_BY_FUNC = "created_by_func"
    CREATED_BY_FILE = "created_by_file"
    ORIGINATING_FROM = "originating_from"


def split_lines(text: Union[str, bytes]) -> List[str]:
    """Split on newlines, keeping a final unterminated line and dropping CRs."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class GoroutineParser:
    """State machine over the lines of one dump.

    An instance may be reused for several dumps one after another; every
    call to :meth:`parse_text` starts from a clean state.
    """

    def __init__(self, max_ancestor_depth: int = DEFAULT_MAX_ANCESTOR_DEPTH):
        self.max_ancestor_depth = max_ancestor_depth
        self.result: Optional[ParseResult] = None
        self._reset()

    def _reset(self) -> None:
        self._state = ParserState.HEADER
        # Goroutine being built; only added to the result once complete
        self._staged: Optional[Goroutine] = None
        # Node of the staged chain that frames are attached to
        self._current: Optional[Goroutine] = None
        self._depth = 0
        self._frame: Optional[Frame] = None
        self._line_num = 0
        self._line = ""

    def parse_text(self, text: Union[str, bytes]) -> ParseResult:
        self._reset()
        self.result = ParseResult()
        lines = split_lines(text)

        i = 0
        while i < len(lines):
            self._line_num = i + 1
            self._line = lines[i]
            if self._step(lines[i]):
                # replay the same line under the new state
                continue
            i += 1

        self._finish()
        logger.debug(
            "Parsed %d goroutines (%d frames) with %d errors from %d lines",
            len(self.result.goroutines), self.result.frame_count,
            len(self.result.errors), len(lines),
        )
        return self.result

    def _step(self, line: str) -> bool:
        """Feed one line; return True when it must be processed again."""
        state = self._state

        if state == ParserState.HEADER:
            if not line.startswith(GOROUTINE_PREFIX):
                return False
            g = parse_goroutine_header(line[len(GOROUTINE_PREFIX):])
            if g is None:
                self._abort(ErrorKind.INVALID_HEADER)
                return False
            self._staged = g
            self._current = g
            self._depth = 0
            self._state = ParserState.STACK_FUNC
            return False

        if state == ParserState.ORIGINATING_FROM:
            ancestor_id = parse_ancestor_id(line)
            if ancestor_id is None:
                self._abort(ErrorKind.INVALID_ANCESTOR)
                return False
            if self._depth >= self.max_ancestor_depth:
                self._abort(ErrorKind.ANCESTOR_TOO_DEEP)
                return False
            ancestor = Goroutine(id=ancestor_id)
            self._current.ancestor = ancestor
            self._current = ancestor
            self._depth += 1
            self._state = ParserState.STACK_FUNC
            return False

        if state in (ParserState.STACK_FUNC, ParserState.CREATED_BY_FUNC):
            if line.startswith(CREATED_BY_PREFIX):
                line = line[len(CREATED_BY_PREFIX):]
            creator = state == ParserState.CREATED_BY_FUNC
            frame = parse_func(line, creator=creator)
            if frame is None:
                if line == FRAMES_ELIDED_LINE:
                    self._current.frames_elided = True
                    self._state = ParserState.CREATED_BY
                    return False
                if line.startswith(ORIGINATING_FROM_PREFIX):
                    self._state = ParserState.ORIGINATING_FROM
                    return True
                self._abort(ErrorKind.INVALID_FUNCTION)
                return False
            self._frame = frame
            if creator:
                self._current.created_by = frame
                self._state = ParserState.CREATED_BY_FILE
            else:
                self._current.stack.append(frame)
                self._state = ParserState.STACK_FILE
            return False

        if state in (ParserState.STACK_FILE, ParserState.CREATED_BY_FILE):
            location = parse_file_line(line)
            if location is None:
                self._abort(ErrorKind.INVALID_FILE_LINE)
                return False
            self._frame.file, self._frame.line = location
            self._frame = None
            self._state = ParserState.CREATED_BY
            return False

        # ParserState.CREATED_BY
        if line.startswith(CREATED_BY_PREFIX):
            self._state = ParserState.CREATED_BY_FUNC
            return True
        if not line:
            self._commit()
            return False
        # another frame of the same stack
        self._state = ParserState.STACK_FUNC
        return True

    def _commit(self) -> None:
        self.result.goroutines.append(self._staged)
        self._staged = None
        self._current = None
        self._frame = None
        self._state = ParserState.HEADER

    def _abort(self, kind: ErrorKind) -> None:
        error = ParseError(kind=kind, line_number=self._line_num, line=self._line)
        self.result.errors.append(error)
        if self._staged is not None:
            logger.debug("Dropping goroutine %d: %s", self._staged.id, error)
        else:
            logger.debug("%s", error)
        self._staged = None
        self._current = None
        self._frame = None
        self._state = ParserState.HEADER

    def _finish(self) -> None:
        if self._staged is None:
            return
        if self._state == ParserState.CREATED_BY:
            self._commit()
        else:
            self._abort(ErrorKind.TRUNCATED)


def parse(text: Union[str, bytes],
          max_ancestor_depth: int = DEFAULT_MAX_ANCESTOR_DEPTH,
          ) -> Tuple[List[Goroutine], List[ParseError]]:
    """Parse a dump into ``(goroutines, errors)``. Never raises on bad input."""
    return GoroutineParser(max_ancestor_depth=max_ancestor_depth).parse_text(text).as_tuple()
