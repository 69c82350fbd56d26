"""
Agenda Catalog - Loads agenda metadata and attaches the built-in checks.

The agendas resource is a JSON array:

    [{"id": "one-small", "title": "...", "description": "...", "difficulty": 1.0}, ...]

Loading rules:
- Entries are joined to checks by id
- Entries with no check still load; they always fail with the
  "no check available" verdict
- Malformed entries are skipped with a warning
- If the resource cannot be read at all, the catalog is empty and the
  game has zero rounds
"""

from __future__ import annotations
import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Sequence

from .checks import CHECKS, get_check
from .rule import Rule, RuleMetadata
from .selector import max_rounds

logger = logging.getLogger(__name__)

DEFAULT_AGENDAS_PATH = Path(__file__).resolve().parent.parent / "data" / "agendas.json"

MIN_DIFFICULTY = 0.0
MAX_DIFFICULTY = 10.0


@dataclass
class ValidationResult:
    """Result of validating agenda metadata, with errors and warnings."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class RuleCatalog(Sequence[Rule]):
    """
    Ordered, read-only collection of loaded agendas.

    Behaves like a sequence (catalog order is the order of the resource)
    and supports lookup by id.
    """

    def __init__(self, rules: Sequence[Rule] = ()):
        self._rules = tuple(rules)
        self._by_id = {rule.id: rule for rule in self._rules}

    def __getitem__(self, index):
        return self._rules[index]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._by_id
        return item in self._rules

    def __repr__(self) -> str:
        return f"RuleCatalog({[rule.id for rule in self._rules]!r})"

    def get(self, rule_id: str) -> Rule | None:
        return self._by_id.get(rule_id)

    @property
    def ids(self) -> list[str]:
        return [rule.id for rule in self._rules]

    @property
    def max_rounds(self) -> int:
        return max_rounds(self._rules)

    def unchecked_ids(self) -> list[str]:
        """Ids of agendas that have no built-in check."""
        return [rule.id for rule in self._rules if rule.id not in CHECKS]


def _validate_record(idx: int, record: Any, seen: set[str]) -> str | None:
    """Return an error message for a malformed record, or None."""
    if not isinstance(record, dict):
        return f"agendas[{idx}] must be an object"
    rule_id = record.get("id")
    if not isinstance(rule_id, str) or not rule_id.strip():
        return f"agendas[{idx}].id must be a non-empty string"
    if rule_id in seen:
        return f"agendas[{idx}] repeats id '{rule_id}'"
    difficulty = record.get("difficulty", 0)
    if isinstance(difficulty, bool) or not isinstance(difficulty, (int, float)):
        return f"agendas[{idx}] ('{rule_id}') difficulty must be a number"
    if not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
        return (
            f"agendas[{idx}] ('{rule_id}') difficulty {difficulty} "
            f"is outside {MIN_DIFFICULTY}-{MAX_DIFFICULTY}"
        )
    return None


def parse_metadata(records: Any) -> tuple[list[RuleMetadata], ValidationResult]:
    """
    Turn raw agenda records into metadata, skipping malformed entries.

    Raises ValueError if the document is not a list at all.
    """
    if not isinstance(records, list):
        raise ValueError("Agendas resource must be a JSON array of agenda objects.")

    errors: list[str] = []
    warnings: list[str] = []
    seen: set[str] = set()
    metadata: list[RuleMetadata] = []

    for idx, record in enumerate(records):
        error = _validate_record(idx, record, seen)
        if error:
            errors.append(error)
            continue
        rule_id = record["id"]
        seen.add(rule_id)
        metadata.append(RuleMetadata(
            id=rule_id,
            title=str(record.get("title", rule_id)),
            description=str(record.get("description", "")),
            difficulty=float(record.get("difficulty", 0)),
        ))
        if rule_id not in CHECKS:
            warnings.append(f"Agenda '{rule_id}' has no check and can never be satisfied")

    return metadata, ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def attach_checks(metadata: Sequence[RuleMetadata]) -> RuleCatalog:
    """Join metadata to the built-in checks by id."""
    return RuleCatalog([
        Rule(
            id=meta.id,
            title=meta.title,
            description=meta.description,
            difficulty=meta.difficulty,
            check=get_check(meta.id),
        )
        for meta in metadata
    ])


def build_catalog(records: Any) -> RuleCatalog:
    """Build a catalog from already-parsed records, logging skipped entries."""
    metadata, result = parse_metadata(records)
    for error in result.errors:
        logger.warning("Skipping agenda: %s", error)
    for warning in result.warnings:
        logger.warning(warning)
    return attach_checks(metadata)


async def load_catalog(path: str | Path | None = None) -> RuleCatalog:
    """
    Load the agendas resource and attach checks.

    Any failure (missing file, bad JSON, wrong shape) is logged and
    results in an empty catalog.
    """
    path = Path(path) if path is not None else DEFAULT_AGENDAS_PATH
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        catalog = build_catalog(json.loads(text))
    except (OSError, ValueError) as e:
        logger.error("Error loading agendas from %s: %s", path, e)
        return RuleCatalog()

    logger.info("Loaded %d agenda(s) from %s", len(catalog), path)
    return catalog
