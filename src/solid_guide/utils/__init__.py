"""Markdown helpers shared by the renderer and the doc linter."""
