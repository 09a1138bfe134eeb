#!/usr/bin/env python3
"""
retrospective.py
--------------------
Keep / Problem / Try sections of retrospective records.

A retrospective is stored as one content string:

    ## Keep
    <keep>

    ## Problem
    <problem>

    ## Try
    <try>

The three sections are an editing view derived from that text; they are
never stored separately.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

SECTION_HEADERS = ("Keep", "Problem", "Try")

_HEADER_RE = re.compile(r"^## (Keep|Problem|Try)[ \t]*$", re.MULTILINE)


@dataclass(frozen=True)
class RetrospectiveSections:
    """The three editable parts of a retrospective."""

    keep: str = ""
    problem: str = ""
    try_: str = ""

    @property
    def has_content(self) -> bool:
        """True when any section holds text."""
        return bool(self.keep or self.problem or self.try_)


def compose(sections: RetrospectiveSections) -> str:
    """
    Join sections into retrospective content.

    Each section body is stripped, so re-composing a split result is stable.
    """
    return (
        f"## Keep\n{sections.keep.strip()}\n\n"
        f"## Problem\n{sections.problem.strip()}\n\n"
        f"## Try\n{sections.try_.strip()}"
    )


def split(content: str) -> RetrospectiveSections:
    """
    Recover sections from retrospective content.

    Text before the first header, and sections that are missing, come back
    empty. A section body may span several paragraphs.

    Args:
        content: Stored retrospective content

    Returns:
        RetrospectiveSections
    """
    bodies = {name: "" for name in SECTION_HEADERS}
    matches = list(_HEADER_RE.finditer(content or ""))

    for i, match in enumerate(matches):
        start = match.end()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(content)
        bodies[match.group(1)] = content[start:end].strip("\n").rstrip()

    return RetrospectiveSections(
        keep=bodies["Keep"], problem=bodies["Problem"], try_=bodies["Try"]
    )
