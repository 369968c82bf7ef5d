"""SOLID guide: principle catalog, Markdown renderer and documentation linter."""
