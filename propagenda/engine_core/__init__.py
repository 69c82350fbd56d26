"""
Engine Core - Agenda evaluation and progression.

The engine is stateless:
1. Loads agenda metadata and attaches a check to each agenda
2. Evaluates an agenda against a board snapshot (Verdict)
3. Selects the next agenda from completion history
"""

from .board import BoardObject, ObjectType, Size, Color, GRID_SIZE, EMOJIS
from .rule import Rule, RuleMetadata, Verdict
from .checks import CHECKS, evaluate
from .catalog import RuleCatalog, load_catalog, build_catalog, DEFAULT_AGENDAS_PATH
from .selector import select_next, max_rounds, MAX_ROUNDS

__all__ = [
    "BoardObject",
    "ObjectType",
    "Size",
    "Color",
    "GRID_SIZE",
    "EMOJIS",
    "Rule",
    "RuleMetadata",
    "Verdict",
    "CHECKS",
    "evaluate",
    "RuleCatalog",
    "load_catalog",
    "build_catalog",
    "DEFAULT_AGENDAS_PATH",
    "select_next",
    "max_rounds",
    "MAX_ROUNDS",
]
