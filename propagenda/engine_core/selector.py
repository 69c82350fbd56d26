"""
Agenda Selector - Picks the next agenda from the catalog.

Selection is a weighted random draw over the agendas not yet completed.
Weights decay exponentially with the gap between an agenda's normalized
difficulty and the game's progress, so easy agendas dominate early and
harder ones surface as the easy ones are used up.

The uniform source is injected so games and tests can be reproduced:

    rng = random.Random(42)
    rule = select_next(catalog, completed_ids, random=rng.random)
"""

from __future__ import annotations
import math
import random as _random
from typing import Callable, Sequence

from .rule import Rule


MAX_ROUNDS = 10

# Steepness of the difficulty bias
WEIGHT_SHARPNESS = 3.0

RandomSource = Callable[[], float]


def max_rounds(catalog: Sequence[Rule]) -> int:
    """Number of rounds in a game: capped by the catalog size."""
    return min(MAX_ROUNDS, len(catalog))


def progress(catalog: Sequence[Rule], remaining: Sequence[Rule]) -> float:
    """Fraction of the full catalog already consumed."""
    if not catalog:
        return 0.0
    return 1 - len(remaining) / len(catalog)


def selection_weight(rule: Rule, current_progress: float) -> float:
    """Agendas whose normalized difficulty is near the current progress weigh most."""
    return math.exp(-(rule.difficulty / 10 - current_progress) * WEIGHT_SHARPNESS)


def remaining_rules(catalog: Sequence[Rule], completed_ids: Sequence[str]) -> list[Rule]:
    completed = set(completed_ids)
    return [rule for rule in catalog if rule.id not in completed]


def select_next(
    catalog: Sequence[Rule],
    completed_ids: Sequence[str],
    random: RandomSource | None = None,
) -> Rule | None:
    """
    Select the next agenda, or None when the game is over.

    Args:
        catalog: All loaded agendas, in catalog order
        completed_ids: Ids of completed agendas, in completion order
        random: Zero-argument callable returning a float in [0, 1)

    Returns:
        The chosen Rule, or None if the round limit is reached or no
        agenda remains
    """
    if len(completed_ids) >= max_rounds(catalog):
        return None

    remaining = remaining_rules(catalog, completed_ids)
    if not remaining:
        return None

    current_progress = progress(catalog, remaining)
    weights = [selection_weight(rule, current_progress) for rule in remaining]

    draw = (random or _random.random)() * sum(weights)
    for rule, weight in zip(remaining, weights):
        draw -= weight
        if draw <= 0:
            return rule

    # Floating point drift can leave a sliver after the walk
    return remaining[0]
