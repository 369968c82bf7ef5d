"""Shared pytest fixtures.

Every test runs with the config file pointed at a missing path inside
tmp_path, so a developer's local config/solid_guide_v1.yaml never leaks
into the suite. Catalog and config caches are cleared around each test,
and any logging setup done by the CLI is undone afterwards.
"""

import copy
from pathlib import Path

import pytest
import structlog
import yaml

from solid_guide.config.app_config import CONFIG_ENV_VAR, clear_config_cache
from solid_guide.core.catalog import BUNDLED_CATALOG, clear_catalog_cache, load_catalog
from solid_guide.core.renderer import render_guide

_BUNDLED_DATA = yaml.safe_load(BUNDLED_CATALOG.read_text(encoding="utf-8"))


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Isolate config and caches from the working directory."""
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing_config.yaml"))
    clear_config_cache()
    clear_catalog_cache()
    yield
    clear_config_cache()
    clear_catalog_cache()
    structlog.reset_defaults()


@pytest.fixture
def catalog_data():
    """Fresh copy of the bundled catalog data (safe to mutate)."""
    return copy.deepcopy(_BUNDLED_DATA)


@pytest.fixture
def catalog():
    """The bundled catalog."""
    return load_catalog(force_reload=True)


@pytest.fixture
def guide_text(catalog):
    """The guide rendered with default options."""
    return render_guide(catalog)


@pytest.fixture
def write_yaml(tmp_path):
    """Factory: write data as YAML under tmp_path and return the path."""

    def _write(data, name: str = "catalog.yaml") -> Path:
        path = tmp_path / name
        path.write_text(
            yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        return path

    return _write
