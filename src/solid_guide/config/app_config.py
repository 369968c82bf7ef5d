"""Application configuration loader.

Loads configuration from config/solid_guide_v1.yaml (relative to the
working directory), or from the file named by SOLID_GUIDE_CONFIG.
Missing files fall back to built-in defaults.

Usage:
    from solid_guide.config.app_config import load_app_config

    config = load_app_config()
    title = config.render.title
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("config/solid_guide_v1.yaml")
CONFIG_ENV_VAR = "SOLID_GUIDE_CONFIG"

DEFAULT_TITLE = "SOLID Principles in Django"
DEFAULT_INTRO = (
    "SOLID is a set of five object-oriented design principles that keep code "
    "easy to change. Each section below states a principle, explains why it "
    "matters, and contrasts a bad example with a refactored good example "
    "taken from everyday Django code."
)


@dataclass
class RenderConfig:
    """Defaults for rendering the guide."""

    title: str = DEFAULT_TITLE
    intro: str = DEFAULT_INTRO
    code_language: str = "python"
    include_toc: bool = True
    include_summary: bool = True


@dataclass
class LintConfig:
    """Defaults for the documentation linter."""

    fail_on_warnings: bool = False


@dataclass
class AppConfig:
    """Application-wide configuration."""

    catalog_file: str | None = None
    render: RenderConfig = field(default_factory=RenderConfig)
    lint: LintConfig = field(default_factory=LintConfig)

    def catalog_path(self) -> Path | None:
        """Get configured catalog path, or None for the bundled catalog."""
        if self.catalog_file:
            return Path(self.catalog_file).expanduser()
        return None


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "catalog_file": None,
        "render": {
            "title": DEFAULT_TITLE,
            "intro": DEFAULT_INTRO,
            "code_language": "python",
            "include_toc": True,
            "include_summary": True,
        },
        "lint": {
            "fail_on_warnings": False,
        },
    }


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return value


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    render_data = _section(data, "render")
    render = RenderConfig(
        title=render_data.get("title", DEFAULT_TITLE),
        intro=render_data.get("intro", DEFAULT_INTRO),
        code_language=render_data.get("code_language", "python"),
        include_toc=render_data.get("include_toc", True),
        include_summary=render_data.get("include_summary", True),
    )

    lint_data = _section(data, "lint")
    lint = LintConfig(
        fail_on_warnings=lint_data.get("fail_on_warnings", False),
    )

    return AppConfig(
        catalog_file=data.get("catalog_file"),
        render=render,
        lint=lint,
    )


def get_config_path() -> Path:
    """Resolve the config file location (env var wins over default)."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.

    Raises:
        ValueError: If the file or one of its sections is not a mapping
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    config_path = get_config_path()

    if config_path.exists():
        logger.debug("loading_app_config", source=str(config_path))
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping: {config_path}")
    else:
        logger.debug("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
