"""Core modules for the SOLID guide.

- catalog: Principle enum, PrincipleEntry, catalog loading and validation
- renderer: Catalog -> Markdown guide
- doc_linter: Structural checks for guide documents
"""

__all__ = [
    "catalog",
    "renderer",
    "doc_linter",
]
