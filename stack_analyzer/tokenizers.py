"""Line tokenizers for Go stack dumps.

Each function looks at a single line and either returns the structure it
found or ``None``. None of them raise on malformed input; deciding what a
failed line means is left to the parser.

Example dump section::

    goroutine 18 [chan receive, 5 minutes, locked to thread]:
    main.(*Worker).run(0xc000010000, 0x1)
    	/home/user/app/worker.go:42 +0x1d
    created by main.main in goroutine 1
    	/home/user/app/main.go:17 +0x85
"""
from __future__ import annotations

import re
from typing import Optional, Tuple

from .models import Frame, Goroutine

GOROUTINE_PREFIX = "goroutine "
CREATED_BY_PREFIX = "created by "
ORIGINATING_FROM_PREFIX = "[originating from goroutine "
FRAMES_ELIDED_LINE = "...additional frames elided..."

# "<id> [<status>(, <N> minutes)?(, locked to thread)?]:"
GOROUTINE_HEADER_RE = re.compile(
    r"^(?P<id>[0-9]+) \["
    r"(?P<status>[^,\]]+)"
    r"(?:, (?P<minutes>[0-9]+) minutes)?"
    r"(?P<locked>, locked to thread)?"
    r"\]:$"
)

# "[originating from goroutine <id>]:"
ORIGINATING_FROM_RE = re.compile(
    r"^\[originating from goroutine (?P<id>[0-9]+)\]:$"
)

_DIGITS = "0123456789"


def parse_goroutine_header(text: str) -> Optional[Goroutine]:
    """Parse the part of a header line after ``"goroutine "``."""
    match = GOROUTINE_HEADER_RE.match(text)
    if not match:
        return None
    minutes = match.group("minutes")
    return Goroutine(
        id=int(match.group("id")),
        status=match.group("status"),
        wait_millis=int(minutes) * 60 * 1000 if minutes else 0,
        locked_to_thread=match.group("locked") is not None,
    )


def parse_ancestor_id(line: str) -> Optional[int]:
    match = ORIGINATING_FROM_RE.match(line)
    if not match:
        return None
    return int(match.group("id"))


def parse_func(line: str, creator: bool = False) -> Optional[Frame]:
    """Parse a function line into a Frame with only ``function`` set.

    In creator mode the name is the text up to the first space, which drops
    the ``in goroutine N`` suffix newer runtimes append; a line that starts
    with a space is kept whole. Otherwise the line
    must end its name with one balanced argument list; method receivers such
    as ``pkg.(*T).Method(...)`` are a complete group followed by the real
    argument list, and the last group is the one that counts.
    """
    if creator:
        if not line:
            return None
        space = line.find(" ")
        if space > 0:
            return Frame(function=line[:space])
        return Frame(function=line)

    open_index = -1
    close_index = -1
    for i, c in enumerate(line):
        if c == "(":
            if open_index != -1 and close_index == -1:
                # nested or unterminated group
                return None
            open_index = i
            close_index = -1
        elif c == ")":
            if open_index == -1 or close_index != -1:
                return None
            close_index = i
    if open_index <= 0 or close_index == -1:
        return None
    return Frame(function=line[:open_index])


def parse_file_line(line: str) -> Optional[Tuple[str, int]]:
    """Parse ``\\t<file>:<line>[ +0xoffset]`` into ``(file, line)``.

    The first colon directly followed by a digit separates the path from the
    line number, so paths like ``C:/go/src/x.go`` keep their drive letter.
    The digit run must end at a space or at the end of the line.
    """
    if not line.startswith("\t") or line.startswith("\t\t"):
        return None
    text = line[1:]

    boundary = -1
    for i in range(len(text) - 1):
        if text[i] == ":" and text[i + 1] in _DIGITS:
            boundary = i
            break
    if boundary == -1:
        return None

    number = 0
    for c in text[boundary + 1:]:
        if c == " ":
            break
        if c not in _DIGITS:
            return None
        number = number * 10 + int(c)
    return text[:boundary], number
