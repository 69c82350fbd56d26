"""
Rules and Verdicts - The agenda contract.

An agenda (rule) couples static metadata loaded from the agendas resource
with a pure evaluation function over a board snapshot. Evaluating a rule
yields a Verdict: pass/fail plus advisory hints for the player.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .board import BoardObject


@dataclass(frozen=True)
class Verdict:
    """
    Result of evaluating one rule against one board snapshot.

    Hints are ordered and may be partial: some rules only reveal a hint
    once the board is heading in the right direction.
    """
    satisfied: bool
    hints: tuple[str, ...] = ()

    @classmethod
    def passed(cls) -> Verdict:
        return cls(satisfied=True)

    @classmethod
    def failed(cls, *hints: str) -> Verdict:
        return cls(satisfied=False, hints=tuple(hints))

    def to_dict(self) -> dict:
        return {"satisfied": self.satisfied, "hints": list(self.hints)}


CheckFn = Callable[[Sequence[BoardObject]], Verdict]


@dataclass(frozen=True)
class RuleMetadata:
    """One record of the agendas resource."""
    id: str
    title: str
    description: str = ""
    difficulty: float = 0.0


@dataclass(frozen=True)
class Rule:
    """
    An agenda: metadata plus its evaluator.

    Immutable after construction. `check` is looked up by id in the
    built-in registry when the catalog is loaded.
    """
    id: str
    title: str
    description: str
    difficulty: float
    check: CheckFn = field(compare=False, repr=False)

    def evaluate(self, objects: Sequence[BoardObject]) -> Verdict:
        return self.check(objects)

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            id=self.id,
            title=self.title,
            description=self.description,
            difficulty=self.difficulty,
        )
