"""Markdown scanning helpers.

Small line-based helpers shared by the renderer and the linter:
- slugify(text) -> str: GitHub-style heading anchor
- find_headings(lines) -> list[Heading]: ATX headings outside code fences
- find_fences(lines) -> list[tuple[int, int]]: code fence spans
- fenced_lines(lines) -> set[int]: line indices inside (or delimiting) fences
- find_tables(lines) -> list[Table]: pipe tables outside code fences
- find_anchor_links(lines) -> list[AnchorLink]: in-page [text](#anchor) links
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)\s*#*\s*$")
FENCE_PATTERN = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
TABLE_SEPARATOR_PATTERN = re.compile(r"^\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|?\s*$")
ANCHOR_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(#([^)\s]+)\)")


@dataclass
class Heading:
    """An ATX heading (# Title)."""

    level: int
    text: str
    line: int  # 0-based line index


@dataclass
class Table:
    """A pipe table: header cells plus data rows."""

    header: list[str]
    rows: list[list[str]] = field(default_factory=list)
    line: int = 0  # 0-based index of the header row


@dataclass
class AnchorLink:
    """An in-page link such as [Summary](#summary)."""

    text: str
    anchor: str
    line: int


def slugify(text: str) -> str:
    """Convert heading text to a GitHub-style anchor.

    Examples:
        "Summary" -> "summary"
        "2. Open/Closed Principle (OCP)" -> "2-openclosed-principle-ocp"
    """
    slug = text.strip().lower()
    slug = re.sub(r"[^\w\- ]", "", slug)
    return slug.replace(" ", "-")


def find_fences(lines: list[str]) -> list[tuple[int, int]]:
    """Return (start, end) line indices of code fences, markers included.

    An unclosed fence runs to the last line.
    """
    fences = []
    fence: str | None = None
    start = 0

    for i, line in enumerate(lines):
        match = FENCE_PATTERN.match(line)
        if fence is None:
            if match:
                fence = match.group(1)
                start = i
        elif (
            match
            and match.group(1)[0] == fence[0]
            and len(match.group(1)) >= len(fence)
            and not line.strip()[len(match.group(1)):].strip()
        ):
            fences.append((start, i))
            fence = None

    if fence is not None:
        fences.append((start, len(lines) - 1))
    return fences


def fenced_lines(lines: list[str]) -> set[int]:
    """Return indices of lines inside code fences, fence markers included."""
    inside: set[int] = set()
    for start, end in find_fences(lines):
        inside.update(range(start, end + 1))
    return inside


def find_headings(lines: list[str]) -> list[Heading]:
    """Find ATX headings, skipping anything inside code fences."""
    fenced = fenced_lines(lines)
    headings = []
    for i, line in enumerate(lines):
        if i in fenced:
            continue
        match = HEADING_PATTERN.match(line)
        if match:
            headings.append(Heading(level=len(match.group(1)), text=match.group(2), line=i))
    return headings


def heading_anchors(headings: list[Heading]) -> set[str]:
    """Compute the anchor set for headings, with GitHub duplicate suffixes."""
    anchors: set[str] = set()
    counts: dict[str, int] = {}
    for heading in headings:
        slug = slugify(heading.text)
        if slug in counts:
            counts[slug] += 1
            anchors.add(f"{slug}-{counts[slug]}")
        else:
            counts[slug] = 0
            anchors.add(slug)
    return anchors


def split_row(line: str) -> list[str]:
    """Split a table row into stripped cells, honoring escaped pipes."""
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]
    return [cell.strip().replace("\\|", "|") for cell in re.split(r"(?<!\\)\|", row)]


def escape_cell(text: str) -> str:
    """Escape text for use inside a table cell."""
    return " ".join(text.split()).replace("|", "\\|")


def find_tables(lines: list[str]) -> list[Table]:
    """Find pipe tables (header row + separator row + data rows)."""
    fenced = fenced_lines(lines)
    tables = []
    i = 0
    while i < len(lines) - 1:
        line = lines[i]
        if (
            i not in fenced
            and "|" in line
            and (i + 1) not in fenced
            and TABLE_SEPARATOR_PATTERN.match(lines[i + 1].strip())
        ):
            table = Table(header=split_row(line), line=i)
            j = i + 2
            while j < len(lines) and j not in fenced and lines[j].strip().startswith("|"):
                table.rows.append(split_row(lines[j]))
                j += 1
            tables.append(table)
            i = j
        else:
            i += 1
    return tables


def find_anchor_links(lines: list[str]) -> list[AnchorLink]:
    """Find in-page anchor links outside code fences."""
    fenced = fenced_lines(lines)
    links = []
    for i, line in enumerate(lines):
        if i in fenced:
            continue
        for match in ANCHOR_LINK_PATTERN.finditer(line):
            links.append(AnchorLink(text=match.group(1), anchor=match.group(2), line=i))
    return links
