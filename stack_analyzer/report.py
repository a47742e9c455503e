"""Plain-text and JSON views of parsed goroutines."""
from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Sequence

from .models import DEFAULT_MAX_ANCESTOR_DEPTH, Goroutine, ParseError


def _summary_line(g: Goroutine) -> str:
    parts = [f"ID: {g.id}"]
    if g.status:
        parts.append(f"State: {g.status}")
    if g.wait_millis:
        parts.append(f"Wait (ms): {g.wait_millis}")
    if g.locked_to_thread:
        parts.append("Locked to Thread")
    if g.frames_elided:
        parts.append("Frames Elided")
    if g.ancestor is not None:
        parts.append(f"Originator ID: {g.ancestor.id}")
    return " | ".join(parts)


def _format_single(g: Goroutine, indent: str) -> List[str]:
    lines = [f"{indent}{_summary_line(g)}"]
    total = len(g.stack)
    for i, frame in enumerate(g.stack):
        # outermost call gets number 1
        lines.append(f"{indent}  #{total - i:<3} {frame.function}")
        lines.append(f"{indent}        {frame.location()}")
    if g.created_by.file:
        lines.append(f"{indent}  Created by {g.created_by.function}")
        lines.append(f"{indent}        {g.created_by.location()}")
    return lines


def format_goroutine(g: Goroutine, max_depth: int = DEFAULT_MAX_ANCESTOR_DEPTH) -> str:
    """Render one goroutine, then its originating goroutines indented below it."""
    lines = _format_single(g, "")
    for depth, ancestor in enumerate(g.ancestors(max_depth), 1):
        indent = "    " * depth
        lines.append(f"{indent}Originating from:")
        lines.extend(_format_single(ancestor, indent))
    return "\n".join(lines)


def format_errors(errors: Sequence[ParseError]) -> str:
    return "\n".join(f"  line {e.line_number}: {e.message}: {e.line!r}" for e in errors)


def format_report(goroutines: Sequence[Goroutine], errors: Sequence[ParseError],
                  max_depth: int = DEFAULT_MAX_ANCESTOR_DEPTH) -> str:
    sections = []
    sections.append("=" * 80)
    sections.append(f"GOROUTINES ({len(goroutines)})")
    sections.append("=" * 80)
    for g in goroutines:
        sections.append("")
        sections.append(format_goroutine(g, max_depth))
    if errors:
        sections.append("")
        sections.append("=" * 80)
        sections.append(f"PARSE ERRORS ({len(errors)})")
        sections.append("=" * 80)
        sections.append(format_errors(errors))
    return "\n".join(sections)


def format_summary(goroutines: Sequence[Goroutine], errors: Sequence[ParseError]) -> str:
    statuses = Counter(g.status for g in goroutines)
    lines = [
        "DUMP SUMMARY",
        "=" * 60,
        f"Goroutines: {len(goroutines)}",
        f"Frames: {sum(len(g.stack) for g in goroutines)}",
        f"Locked to thread: {sum(1 for g in goroutines if g.locked_to_thread)}",
        f"With ancestors: {sum(1 for g in goroutines if g.ancestor is not None)}",
        f"Parse errors: {len(errors)}",
    ]
    if statuses:
        lines.append("")
        lines.append("STATUSES:")
        for status, count in statuses.most_common():
            lines.append(f"  - {status} ({count})")
    return "\n".join(lines)


def result_to_dict(goroutines: Sequence[Goroutine], errors: Sequence[ParseError],
                   max_depth: int = DEFAULT_MAX_ANCESTOR_DEPTH) -> Dict[str, Any]:
    return {
        "goroutines": [g.to_dict(max_depth) for g in goroutines],
        "errors": [e.to_dict() for e in errors],
    }
