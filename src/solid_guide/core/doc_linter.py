"""Documentation linter for SOLID guide documents.

Checks a Markdown document for the structure every guide must keep:
- Exactly five principle sections, in SRP -> OCP -> LSP -> ISP -> DIP order
- A "bad" and a "good" labeled example per section, each with a code block
- A closing table with one row per principle, in the same order
- In-page anchor links (table of contents) that resolve to a heading

Findings are returned as a LintReport; nothing here raises on a bad
document. Anchor problems are warnings, everything else is an error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import structlog

from solid_guide.core.catalog import Principle, match_principle
from solid_guide.utils.markdown import (
    Heading,
    fenced_lines,
    find_anchor_links,
    find_fences,
    find_headings,
    find_tables,
    heading_anchors,
)

logger = structlog.get_logger(__name__)

Severity = Literal["error", "warning"]

BAD_LABEL = re.compile(r"\bbad\b", re.IGNORECASE)
GOOD_LABEL = re.compile(r"\bgood\b", re.IGNORECASE)
BOLD_LABEL = re.compile(r"^\s*\*\*([^*]+)\*\*")

# Principle sections are level-2 headings
SECTION_LEVEL = 2


@dataclass
class LintIssue:
    """A single linter finding."""

    code: str
    message: str
    line: int | None = None  # 1-based
    severity: Severity = "error"

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "line": self.line,
            "severity": self.severity,
        }

    def __str__(self) -> str:
        where = f"line {self.line}: " if self.line else ""
        return f"[{self.severity}] {where}{self.message} ({self.code})"


@dataclass
class LintReport:
    """Result of linting one document."""

    issues: list[LintIssue] = field(default_factory=list)
    sections_found: list[str] = field(default_factory=list)
    summary_rows: int = 0
    source: str | None = None

    @property
    def errors(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def ok(self) -> bool:
        """True if the document has no errors (warnings allowed)."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "ok": self.ok,
            "sections_found": self.sections_found,
            "summary_rows": self.summary_rows,
            "issues": [i.to_dict() for i in self.issues],
        }


@dataclass
class _Section:
    principle: Principle
    heading: Heading
    end: int  # exclusive line index


def _find_sections(headings: list[Heading], total_lines: int) -> list[_Section]:
    """Collect principle sections and where each one ends."""
    sections = []
    for i, heading in enumerate(headings):
        if heading.level != SECTION_LEVEL:
            continue
        principle = match_principle(heading.text)
        if principle is None:
            continue

        end = total_lines
        for later in headings[i + 1 :]:
            if later.level <= SECTION_LEVEL:
                end = later.line
                break
        sections.append(_Section(principle=principle, heading=heading, end=end))
    return sections


def _check_section_order(sections: list[_Section], report: LintReport) -> None:
    """Rule (a): five sections, no duplicates, teaching order."""
    expected = Principle.ordered()
    found = [s.principle for s in sections]

    if len(found) != len(expected):
        report.issues.append(
            LintIssue(
                code="section_count",
                message=f"Expected {len(expected)} principle sections, found {len(found)}",
            )
        )

    for principle in expected:
        if principle not in found:
            report.issues.append(
                LintIssue(
                    code="missing_section",
                    message=f"Missing section for {principle.full_name} ({principle.name})",
                )
            )

    seen: set[Principle] = set()
    for section in sections:
        if section.principle in seen:
            report.issues.append(
                LintIssue(
                    code="duplicate_section",
                    message=f"Duplicate section for {section.principle.name}",
                    line=section.heading.line + 1,
                )
            )
        seen.add(section.principle)

    unique = list(dict.fromkeys(found))
    if unique != [p for p in expected if p in unique]:
        order = " -> ".join(p.name for p in expected)
        report.issues.append(
            LintIssue(
                code="section_order",
                message=f"Principle sections out of order: expected {order}, "
                f"found {' -> '.join(p.name for p in found)}",
            )
        )


def _example_labels(
    lines: list[str],
    section: _Section,
    headings: list[Heading],
    fenced: set[int],
) -> list[tuple[str, int]]:
    """Find ("bad"|"good", line) labels inside a section."""
    sub_headings = {
        h.line: h.text
        for h in headings
        if section.heading.line < h.line < section.end and h.level > SECTION_LEVEL
    }

    labels = []
    for i in range(section.heading.line + 1, section.end):
        if i in fenced:
            continue
        if i in sub_headings:
            text = sub_headings[i]
        else:
            match = BOLD_LABEL.match(lines[i])
            if not match:
                continue
            text = match.group(1)

        if BAD_LABEL.search(text):
            labels.append(("bad", i))
        elif GOOD_LABEL.search(text):
            labels.append(("good", i))
    return labels


def _check_section_examples(
    lines: list[str],
    section: _Section,
    headings: list[Heading],
    fenced: set[int],
    fence_starts: list[int],
    report: LintReport,
) -> None:
    """Rule (b): bad and good labeled examples, each followed by code."""
    labels = _example_labels(lines, section, headings, fenced)
    name = section.principle.name
    first: dict[str, int] = {}

    for idx, (kind, line) in enumerate(labels):
        if kind in first:
            continue
        first[kind] = line

        boundary = labels[idx + 1][1] if idx + 1 < len(labels) else section.end
        if not any(line < start < boundary for start in fence_starts):
            report.issues.append(
                LintIssue(
                    code=f"{kind}_example_without_code",
                    message=f"{name}: {kind} example has no code block",
                    line=line + 1,
                )
            )

    for kind in ("bad", "good"):
        if kind not in first:
            report.issues.append(
                LintIssue(
                    code=f"missing_{kind}_example",
                    message=f"{name}: missing {kind} example",
                    line=section.heading.line + 1,
                )
            )

    if "bad" in first and "good" in first and first["good"] < first["bad"]:
        report.issues.append(
            LintIssue(
                code="example_order",
                message=f"{name}: good example appears before bad example",
                line=first["good"] + 1,
            )
        )


def _check_summary_table(
    lines: list[str],
    sections: list[_Section],
    report: LintReport,
) -> None:
    """Rule (c): closing table with one row per principle, in order."""
    tables = find_tables(lines)
    after = max((s.heading.line for s in sections), default=-1)
    closing = [t for t in tables if t.line > after]

    if not closing:
        report.issues.append(
            LintIssue(
                code="missing_summary_table",
                message="No closing summary table after the principle sections",
            )
        )
        return

    table = closing[-1]
    report.summary_rows = len(table.rows)
    expected = Principle.ordered()

    if len(table.rows) != len(expected):
        report.issues.append(
            LintIssue(
                code="summary_row_count",
                message=f"Summary table has {len(table.rows)} rows, expected {len(expected)}",
                line=table.line + 1,
            )
        )

    matched = []
    for offset, row in enumerate(table.rows):
        cell = row[0] if row else ""
        principle = match_principle(cell)
        if principle is None:
            report.issues.append(
                LintIssue(
                    code="summary_row_unknown",
                    message=f"Summary row does not name a principle: {cell!r}",
                    line=table.line + 3 + offset,
                )
            )
            continue
        matched.append(principle)

    for principle in expected:
        if principle not in matched:
            report.issues.append(
                LintIssue(
                    code="summary_row_missing",
                    message=f"Summary table has no row for {principle.name}",
                    line=table.line + 1,
                )
            )

    if matched != [p for p in expected if p in matched]:
        report.issues.append(
            LintIssue(
                code="summary_row_order",
                message="Summary table rows are out of order: "
                + " -> ".join(p.name for p in matched),
                line=table.line + 1,
            )
        )


def _check_anchor_links(
    lines: list[str],
    headings: list[Heading],
    report: LintReport,
) -> None:
    """Every in-page link must point at an existing heading anchor."""
    anchors = heading_anchors(headings)
    for link in find_anchor_links(lines):
        if link.anchor not in anchors:
            report.issues.append(
                LintIssue(
                    code="broken_anchor",
                    message=f"Link '{link.text}' points to missing anchor #{link.anchor}",
                    line=link.line + 1,
                    severity="warning",
                )
            )


def lint_document(text: str, source: str | None = None) -> LintReport:
    """Lint a guide document.

    Args:
        text: Markdown document content
        source: Optional label (file path) for the report

    Returns:
        LintReport with all findings
    """
    lines = text.splitlines()
    fenced = fenced_lines(lines)
    fence_starts = [start for start, _ in find_fences(lines)]
    headings = find_headings(lines)
    sections = _find_sections(headings, len(lines))

    report = LintReport(
        sections_found=[s.principle.code for s in sections],
        source=source,
    )

    _check_section_order(sections, report)
    for section in sections:
        _check_section_examples(lines, section, headings, fenced, fence_starts, report)
    _check_summary_table(lines, sections, report)
    _check_anchor_links(lines, headings, report)

    if report.ok:
        logger.debug(
            "doc_linter.completed",
            source=source,
            warnings=len(report.warnings),
        )
    else:
        logger.warning(
            "doc_linter.failed",
            source=source,
            errors=len(report.errors),
            warnings=len(report.warnings),
        )
    return report


def lint_file(path: Path) -> LintReport:
    """Lint a guide file.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")
    return lint_document(path.read_text(encoding="utf-8"), source=str(path))
