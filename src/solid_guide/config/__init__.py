"""Configuration package for the SOLID guide."""

from solid_guide.config.app_config import (
    AppConfig,
    LintConfig,
    RenderConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "LintConfig",
    "RenderConfig",
    "clear_config_cache",
    "load_app_config",
]
