"""Principle catalog module.

Responsibilities:
- Define the five SOLID principles in their teaching order
- Load principle entries from the bundled YAML data file
- Validate entries (count, order, required fields, titles, sample length)
- Expose an immutable, ordered catalog

Data file schema (principles_v1):
    $schema: solid_guide/principles_v1
    entries:
      - code: srp
        title: ...
        definition: ...
        rationale: ...
        bad_example: |
          ...
        good_example: |
          ...
        benefit: ...
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
import yaml

from solid_guide.config.app_config import load_app_config

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

SCHEMA_ID = "solid_guide/principles_v1"
BUNDLED_CATALOG = Path(__file__).parent.parent / "data" / "principles_v1.yaml"

# Illustrative samples stay short: fewer than 15 lines each
MAX_EXAMPLE_LINES = 14

REQUIRED_FIELDS = (
    "title",
    "definition",
    "rationale",
    "bad_example",
    "good_example",
    "benefit",
)


# =============================================================================
# ERRORS
# =============================================================================


class CatalogError(Exception):
    """Raised when catalog data fails validation."""

    def __init__(self, errors: list[str], source: str | None = None):
        self.errors = errors
        self.source = source
        where = f" ({source})" if source else ""
        super().__init__(
            f"Invalid principle catalog{where}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


class UnknownPrincipleError(Exception):
    """Raised when a code does not match any principle."""

    def __init__(self, value: str):
        self.value = value
        codes = ", ".join(p.code for p in Principle.ordered())
        super().__init__(f"Unknown principle '{value}'. Expected one of: {codes}")


class AmbiguousPrincipleError(Exception):
    """Raised when a name prefix matches more than one principle."""

    def __init__(self, value: str, candidates: list[Principle]):
        self.value = value
        self.candidates = candidates
        super().__init__(
            f"Principle '{value}' is ambiguous. Candidates:\n"
            + "\n".join(f"  - {c.code}: {c.full_name}" for c in candidates)
        )


# =============================================================================
# DATA CLASSES
# =============================================================================


class Principle(Enum):
    """The five SOLID principles, declared in teaching order."""

    SRP = ("srp", "Single Responsibility Principle")
    OCP = ("ocp", "Open/Closed Principle")
    LSP = ("lsp", "Liskov Substitution Principle")
    ISP = ("isp", "Interface Segregation Principle")
    DIP = ("dip", "Dependency Inversion Principle")

    def __init__(self, code: str, full_name: str):
        self.code = code
        self.full_name = full_name

    @classmethod
    def ordered(cls) -> list[Principle]:
        """Return principles in teaching order (SRP -> DIP)."""
        return list(cls)

    @property
    def position(self) -> int:
        """1-based position in the teaching order."""
        return Principle.ordered().index(self) + 1

    def _matches_prefix(self, prefix: str) -> bool:
        """True if the full name, or any word in it, starts with prefix."""
        full_name = self.full_name.lower()
        if full_name.startswith(prefix):
            return True
        return any(word.startswith(prefix) for word in re.split(r"[\s/]+", full_name))

    @classmethod
    def from_code(cls, value: str) -> Principle:
        """Resolve a code, member name or name prefix to a principle.

        Args:
            value: e.g. "ocp", "OCP", "open", "Liskov Substitution", "segreg"

        Returns:
            The matching Principle

        Raises:
            UnknownPrincipleError: If nothing matches
            AmbiguousPrincipleError: If a prefix matches several principles
        """
        normalized = value.strip().lower()
        if not normalized:
            raise UnknownPrincipleError(value)

        # Exact code match first
        for principle in cls:
            if normalized == principle.code:
                return principle

        matches = [p for p in cls if p._matches_prefix(normalized)]

        if len(matches) == 0:
            raise UnknownPrincipleError(value)
        elif len(matches) == 1:
            return matches[0]
        else:
            raise AmbiguousPrincipleError(value, matches)


def match_principle(text: str) -> Principle | None:
    """Find the principle a heading or table cell refers to.

    A full name ("single responsibility principle", any case) anywhere in
    the text wins over an upper-case code as a whole word ("SRP").
    """
    lowered = text.lower()
    for principle in Principle.ordered():
        if principle.full_name.lower() in lowered:
            return principle
    for principle in Principle.ordered():
        if re.search(rf"\b{principle.name}\b", text):
            return principle
    return None


@dataclass(frozen=True)
class PrincipleEntry:
    """One documentation entry: a principle with its before/after samples."""

    principle: Principle
    title: str
    definition: str
    rationale: str
    bad_example: str
    good_example: str
    benefit: str

    @property
    def position(self) -> int:
        return self.principle.position

    @property
    def code(self) -> str:
        return self.principle.code

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for YAML/JSON serialization."""
        return {
            "code": self.principle.code,
            "title": self.title,
            "definition": self.definition,
            "rationale": self.rationale,
            "bad_example": self.bad_example,
            "good_example": self.good_example,
            "benefit": self.benefit,
        }


@dataclass(frozen=True)
class PrincipleCatalog:
    """Ordered, immutable collection of the five principle entries."""

    entries: tuple[PrincipleEntry, ...]

    def __iter__(self) -> Iterator[PrincipleEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, key: Principle | str) -> PrincipleEntry:
        principle = key if isinstance(key, Principle) else Principle.from_code(key)
        for entry in self.entries:
            if entry.principle is principle:
                return entry
        raise KeyError(principle.code)

    @property
    def principles(self) -> list[Principle]:
        return [entry.principle for entry in self.entries]

    def to_dict(self) -> dict[str, Any]:
        return {
            "$schema": SCHEMA_ID,
            "entries": [entry.to_dict() for entry in self.entries],
        }


# Module-level cache for the default catalog
_cached_catalog: PrincipleCatalog | None = None


# =============================================================================
# VALIDATION
# =============================================================================


def _count_lines(sample: str) -> int:
    """Count lines in a code sample, ignoring trailing newlines."""
    return len(sample.rstrip("\n").splitlines())


def _validate_entry_dicts(entries: list[Any]) -> list[str]:
    """Validate a list of raw entry mappings."""
    errors = []
    expected = Principle.ordered()

    if len(entries) != len(expected):
        errors.append(f"Expected {len(expected)} entries, found {len(entries)}")

    seen: list[Principle] = []
    for i, entry in enumerate(entries):
        label = f"Entry {i + 1}"

        if not isinstance(entry, dict):
            errors.append(f"{label}: must be a mapping")
            continue

        principle = None
        code = entry.get("code")
        if not code:
            errors.append(f"{label}: missing code")
        else:
            try:
                principle = Principle.from_code(str(code))
            except (UnknownPrincipleError, AmbiguousPrincipleError):
                errors.append(f"{label}: unknown principle code '{code}'")
            else:
                label = f"Entry {i + 1} ({principle.code})"
                if principle in seen:
                    errors.append(f"{label}: duplicate principle")
                seen.append(principle)

        for field_name in REQUIRED_FIELDS:
            value = entry.get(field_name)
            if not isinstance(value, str) or not value.strip():
                errors.append(f"{label}: missing {field_name}")

        # Rendered headings and summary rows are recognised by the title
        title = entry.get("title")
        if principle is not None and isinstance(title, str) and title.strip():
            if match_principle(title) is not principle:
                errors.append(
                    f"{label}: title must name {principle.full_name} "
                    f"or {principle.name}"
                )

        for field_name in ("bad_example", "good_example"):
            value = entry.get(field_name)
            if isinstance(value, str) and _count_lines(value) > MAX_EXAMPLE_LINES:
                errors.append(
                    f"{label}: {field_name} has {_count_lines(value)} lines "
                    f"(max {MAX_EXAMPLE_LINES})"
                )

    if len(seen) == len(set(seen)) and seen != expected[: len(seen)]:
        order = " -> ".join(p.name for p in expected)
        errors.append(f"Entries out of order: expected {order}")

    return errors


def validate_catalog_data(data: Any) -> list[str]:
    """Validate raw catalog data loaded from YAML.

    Args:
        data: Parsed YAML document

    Returns:
        List of error messages (empty if valid)
    """
    if not isinstance(data, dict):
        return ["Catalog root must be a mapping"]

    errors = []

    if "$schema" not in data:
        errors.append("Missing $schema field")
    elif data["$schema"] != SCHEMA_ID:
        errors.append(f"Unsupported $schema: {data['$schema']} (expected {SCHEMA_ID})")

    entries = data.get("entries")
    if not isinstance(entries, list):
        errors.append("entries must be a list")
        return errors

    errors.extend(_validate_entry_dicts(entries))
    return errors


def _dict_to_entry(data: dict[str, Any]) -> PrincipleEntry:
    """Convert a validated mapping to a PrincipleEntry."""
    return PrincipleEntry(
        principle=Principle.from_code(str(data["code"])),
        title=data["title"].strip(),
        definition=data["definition"].strip(),
        rationale=data["rationale"].strip(),
        bad_example=data["bad_example"].rstrip("\n"),
        good_example=data["good_example"].rstrip("\n"),
        benefit=data["benefit"].strip(),
    )


# =============================================================================
# PUBLIC API
# =============================================================================


def build_catalog(entries: Sequence[PrincipleEntry]) -> PrincipleCatalog:
    """Build a catalog from in-memory entries.

    Args:
        entries: Entries in teaching order

    Returns:
        PrincipleCatalog

    Raises:
        CatalogError: If the entries break any catalog rule
    """
    errors = _validate_entry_dicts([entry.to_dict() for entry in entries])
    if errors:
        raise CatalogError(errors)
    return PrincipleCatalog(entries=tuple(entries))


def parse_catalog(data: Any, source: str | None = None) -> PrincipleCatalog:
    """Validate parsed YAML data and convert it to a catalog.

    Raises:
        CatalogError: If validation fails
    """
    errors = validate_catalog_data(data)
    if errors:
        raise CatalogError(errors, source=source)

    entries = tuple(_dict_to_entry(e) for e in data["entries"])
    return PrincipleCatalog(entries=entries)


def load_catalog(path: Path | None = None, force_reload: bool = False) -> PrincipleCatalog:
    """Load the principle catalog from YAML.

    With no path, the catalog file configured in the app config is used,
    falling back to the bundled principles_v1.yaml. That default catalog
    is cached.

    Args:
        path: Explicit catalog file. Never cached.
        force_reload: If True, ignore the cached default catalog.

    Returns:
        PrincipleCatalog with five entries in teaching order.

    Raises:
        FileNotFoundError: If the catalog file doesn't exist
        CatalogError: If the file is not valid YAML or fails validation
    """
    global _cached_catalog

    if path is None:
        if _cached_catalog is not None and not force_reload:
            return _cached_catalog
        catalog_path = load_app_config().catalog_path() or BUNDLED_CATALOG
    else:
        catalog_path = Path(path)

    if not catalog_path.exists():
        raise FileNotFoundError(f"Catalog not found: {catalog_path}")

    try:
        data = yaml.safe_load(catalog_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise CatalogError([f"Invalid YAML: {e}"], source=str(catalog_path)) from e

    catalog = parse_catalog(data, source=str(catalog_path))
    logger.debug("catalog.loaded", source=str(catalog_path), entries=len(catalog))

    if path is None:
        _cached_catalog = catalog
    return catalog


def clear_catalog_cache() -> None:
    """Clear the default catalog cache.

    Useful for testing or when the catalog file is edited at runtime.
    """
    global _cached_catalog
    _cached_catalog = None
