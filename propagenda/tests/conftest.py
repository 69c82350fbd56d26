"""
Pytest fixtures for prop.agenda tests.
"""

import itertools
import random

import pytest

from ..engine_core.board import BoardObject
from ..engine_core.catalog import RuleCatalog, attach_checks
from ..engine_core.rule import RuleMetadata
from ..session import SessionManager, GameLoop


_ids = itertools.count(1)


def make_object(
    row: int = 0,
    col: int = 0,
    obj_type: str = "shape",
    name: str = "circle",
    size: str = "M",
    color: str = "blue",
    obj_id: str | None = None,
) -> BoardObject:
    """Build a board object with sensible defaults."""
    return BoardObject(
        id=obj_id or f"obj_{next(_ids)}",
        type=obj_type,
        name=name,
        size=size,
        color=color,
        row=row,
        col=col,
    )


def make_catalog(*entries: tuple[str, float]) -> RuleCatalog:
    """Catalog from (id, difficulty) pairs, titles derived from ids."""
    return attach_checks([
        RuleMetadata(id=rule_id, title=rule_id.replace("-", " ").title(), difficulty=difficulty)
        for rule_id, difficulty in entries
    ])


@pytest.fixture
def obj():
    """Factory for board objects."""
    return make_object


@pytest.fixture
def catalog() -> RuleCatalog:
    """All eight built-in agendas with spread-out difficulties."""
    return make_catalog(
        ("one-small", 0.5),
        ("one-per-row", 2.0),
        ("second-column-orange", 2.5),
        ("snails-purple", 3.0),
        ("two-in-fourth", 4.0),
        ("squares-same-column", 4.5),
        ("all-different", 6.5),
        ("mysterious", 8.0),
    )


@pytest.fixture
def seeded_random():
    """Deterministic uniform source."""
    return random.Random(1234).random


@pytest.fixture
def session_manager() -> SessionManager:
    return SessionManager()


@pytest.fixture
def game_loop(session_manager, catalog) -> GameLoop:
    """A started game on an empty board."""
    session = session_manager.create_session(catalog, seed=7)
    loop = GameLoop(session)
    loop.start()
    return loop
