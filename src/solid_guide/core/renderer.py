"""Guide rendering module.

Responsibilities:
- Render the principle catalog as a single Markdown document
- Keep the fixed section sub-structure per principle
- Write the rendered guide to disk

Output structure (Markdown):
# {title}
{intro}
## Table of Contents         (optional, anchor links)
## N. {principle title}      (x5, teaching order)
   **Definition:** ...
   {rationale}
   ### Bad example + code block
   ### Good example + code block
## Summary                   (optional, one table row per principle)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import structlog

from solid_guide.config.app_config import AppConfig, load_app_config
from solid_guide.core.catalog import PrincipleCatalog, PrincipleEntry, load_catalog
from solid_guide.utils.markdown import escape_cell, slugify

logger = structlog.get_logger(__name__)

TOC_HEADING = "Table of Contents"
SUMMARY_HEADING = "Summary"
BAD_EXAMPLE_HEADING = "Bad example"
GOOD_EXAMPLE_HEADING = "Good example"
SUMMARY_COLUMNS = ("Principle", "Definition", "Benefit")
BACKTICK_RUN = re.compile(r"`+")


@dataclass
class RenderOptions:
    """Options controlling guide output."""

    title: str
    intro: str
    code_language: str = "python"
    include_toc: bool = True
    include_summary: bool = True

    @classmethod
    def from_config(cls, config: AppConfig | None = None) -> RenderOptions:
        """Build options from app config defaults."""
        render = (config or load_app_config()).render
        return cls(
            title=render.title,
            intro=render.intro,
            code_language=render.code_language,
            include_toc=render.include_toc,
            include_summary=render.include_summary,
        )


def section_heading(entry: PrincipleEntry) -> str:
    """Heading text for an entry's section, e.g. "1. Single Responsibility..."."""
    return f"{entry.position}. {entry.title}"


def section_anchor(entry: PrincipleEntry) -> str:
    return slugify(section_heading(entry))


def _code_block(code: str, language: str) -> list[str]:
    """Fence a sample; the fence outlasts any backtick run inside it."""
    longest = max((len(run) for run in BACKTICK_RUN.findall(code)), default=0)
    fence = "`" * max(3, longest + 1)
    return [f"{fence}{language}", code.rstrip("\n"), fence]


def render_entry(entry: PrincipleEntry, options: RenderOptions | None = None) -> str:
    """Render one principle section.

    Args:
        entry: The principle entry
        options: Render options (defaults from config)

    Returns:
        Markdown for the section, without a trailing newline
    """
    options = options or RenderOptions.from_config()

    lines = [
        f"## {section_heading(entry)}",
        "",
        f"**Definition:** {entry.definition}",
        "",
        entry.rationale,
        "",
        f"### {BAD_EXAMPLE_HEADING}",
        "",
        *_code_block(entry.bad_example, options.code_language),
        "",
        f"### {GOOD_EXAMPLE_HEADING}",
        "",
        *_code_block(entry.good_example, options.code_language),
    ]
    return "\n".join(lines)


def render_toc(catalog: PrincipleCatalog, include_summary: bool = True) -> str:
    """Render the table of contents with in-page anchor links."""
    lines = [f"## {TOC_HEADING}", ""]
    for entry in catalog:
        lines.append(f"- [{section_heading(entry)}](#{section_anchor(entry)})")
    if include_summary:
        lines.append(f"- [{SUMMARY_HEADING}](#{slugify(SUMMARY_HEADING)})")
    return "\n".join(lines)


def render_summary(catalog: PrincipleCatalog) -> str:
    """Render the closing comparison table, one row per principle."""
    lines = [
        f"## {SUMMARY_HEADING}",
        "",
        "| " + " | ".join(SUMMARY_COLUMNS) + " |",
        "|" + "|".join("---" for _ in SUMMARY_COLUMNS) + "|",
    ]
    for entry in catalog:
        cells = [entry.title, entry.definition, entry.benefit]
        lines.append("| " + " | ".join(escape_cell(c) for c in cells) + " |")
    return "\n".join(lines)


def render_guide(
    catalog: PrincipleCatalog | None = None,
    options: RenderOptions | None = None,
) -> str:
    """Render the full guide.

    Args:
        catalog: Catalog to render (defaults to the loaded default catalog)
        options: Render options (defaults from config)

    Returns:
        Markdown document ending with a single newline
    """
    if catalog is None:
        catalog = load_catalog()
    options = options or RenderOptions.from_config()

    blocks = [f"# {options.title}"]
    if options.intro.strip():
        blocks.append(options.intro.strip())
    if options.include_toc:
        blocks.append(render_toc(catalog, include_summary=options.include_summary))
    for entry in catalog:
        blocks.append(render_entry(entry, options))
    if options.include_summary:
        blocks.append(render_summary(catalog))

    document = "\n\n".join(blocks) + "\n"
    logger.debug(
        "renderer.guide_rendered",
        entries=len(catalog),
        toc=options.include_toc,
        summary=options.include_summary,
        chars=len(document),
    )
    return document


def write_guide(
    path: Path,
    catalog: PrincipleCatalog | None = None,
    options: RenderOptions | None = None,
) -> Path:
    """Render the guide and write it to a file.

    Parent directories are created if needed.

    Returns:
        Path of the written file
    """
    document = render_guide(catalog, options)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document, encoding="utf-8")
    logger.info("renderer.guide_written", path=str(path), chars=len(document))
    return path
