"""Tests for guide rendering."""

import dataclasses

from solid_guide.config.app_config import DEFAULT_TITLE
from solid_guide.core.catalog import build_catalog
from solid_guide.core.doc_linter import lint_document
from solid_guide.core.renderer import (
    RenderOptions,
    render_entry,
    render_guide,
    render_summary,
    render_toc,
    section_anchor,
    section_heading,
    write_guide,
)


def _options(**overrides) -> RenderOptions:
    options = RenderOptions(title="Guide", intro="Intro text.")
    for key, value in overrides.items():
        setattr(options, key, value)
    return options


class TestRenderEntry:
    """One principle section."""

    def test_fixed_sub_structure(self, catalog):
        """Heading -> definition -> rationale -> bad -> good."""
        entry = catalog["ocp"]
        text = render_entry(entry, _options())

        positions = [
            text.index("## 2. Open/Closed Principle (OCP)"),
            text.index(f"**Definition:** {entry.definition}"),
            text.index(entry.rationale),
            text.index("### Bad example"),
            text.index("### Good example"),
        ]
        assert positions == sorted(positions)

    def test_code_blocks_use_language(self, catalog):
        text = render_entry(catalog["srp"], _options(code_language="py"))
        assert text.count("```py\n") == 2

    def test_samples_included_verbatim(self, catalog):
        entry = catalog["dip"]
        text = render_entry(entry, _options())
        assert f"```python\n{entry.bad_example}\n```" in text
        assert f"```python\n{entry.good_example}\n```" in text

    def test_sample_with_backtick_fence_stays_inside_block(self, catalog):
        srp = dataclasses.replace(catalog["srp"], bad_example='doc = """\n```\n"""')
        patched = build_catalog([srp, *list(catalog)[1:]])

        text = render_guide(patched, _options())

        assert "````python\n" in text
        assert lint_document(text).issues == []

    def test_section_heading_and_anchor(self, catalog):
        entry = catalog["lsp"]
        assert section_heading(entry) == "3. Liskov Substitution Principle (LSP)"
        assert section_anchor(entry) == "3-liskov-substitution-principle-lsp"


class TestRenderToc:
    """Table of contents."""

    def test_one_link_per_principle_plus_summary(self, catalog):
        toc = render_toc(catalog)
        links = [line for line in toc.splitlines() if line.startswith("- [")]
        assert len(links) == 6
        assert links[0] == (
            "- [1. Single Responsibility Principle (SRP)]"
            "(#1-single-responsibility-principle-srp)"
        )
        assert links[-1] == "- [Summary](#summary)"

    def test_without_summary_link(self, catalog):
        toc = render_toc(catalog, include_summary=False)
        assert "#summary" not in toc


class TestRenderSummary:
    """Closing comparison table."""

    def test_header_and_rows(self, catalog):
        lines = render_summary(catalog).splitlines()
        assert lines[0] == "## Summary"
        assert lines[2] == "| Principle | Definition | Benefit |"
        rows = lines[4:]
        assert len(rows) == 5
        assert rows[0].startswith("| Single Responsibility Principle (SRP) |")
        assert rows[4].endswith(f"| {catalog['dip'].benefit} |")


class TestRenderGuide:
    """Full document."""

    def test_defaults_from_config(self, guide_text):
        assert guide_text.startswith(f"# {DEFAULT_TITLE}\n")
        assert "## Table of Contents" in guide_text
        assert "## Summary" in guide_text

    def test_sections_in_teaching_order(self, guide_text, catalog):
        positions = [guide_text.index(f"## {section_heading(e)}") for e in catalog]
        assert positions == sorted(positions)

    def test_summary_is_last(self, guide_text):
        assert guide_text.rindex("## ") == guide_text.index("## Summary")

    def test_ends_with_single_newline(self, guide_text):
        assert guide_text.endswith("|\n")
        assert not guide_text.endswith("\n\n")

    def test_without_toc(self, catalog):
        text = render_guide(catalog, _options(include_toc=False))
        assert "Table of Contents" not in text
        assert text.startswith("# Guide\n\nIntro text.\n\n## 1. ")

    def test_without_summary(self, catalog):
        text = render_guide(catalog, _options(include_summary=False))
        assert "## Summary" not in text
        assert "#summary" not in text

    def test_empty_intro_is_skipped(self, catalog):
        text = render_guide(catalog, _options(intro="  ", include_toc=False))
        assert text.startswith("# Guide\n\n## 1. ")

    def test_loads_default_catalog(self, guide_text):
        assert render_guide() == guide_text


class TestWriteGuide:
    """Writing the rendered guide to disk."""

    def test_writes_file(self, tmp_path, catalog, guide_text):
        path = write_guide(tmp_path / "docs" / "SOLID.md", catalog)

        assert path.exists()
        assert path.read_text(encoding="utf-8") == guide_text

    def test_overwrites_existing(self, tmp_path, catalog):
        path = tmp_path / "SOLID.md"
        path.write_text("old", encoding="utf-8")

        write_guide(path, catalog, _options(title="New"))

        assert path.read_text(encoding="utf-8").startswith("# New\n")
