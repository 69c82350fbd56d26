"""
Agenda Checks - One pure evaluator per agenda id.

Every check takes the list of objects on the board and returns a Verdict.
Checks never mutate the objects, keep no state and use no randomness, so
the same board always produces the same Verdict.

Hint conventions:
- Positions are 1-based "(row,col)"
- Most checks report every violation they find
- all-different stops at the first colliding pair
"""

from __future__ import annotations
from itertools import combinations
from types import MappingProxyType
from typing import Mapping, Sequence

from .board import BoardObject, GRID_SIZE, ObjectType, Size, Color
from .rule import CheckFn, Verdict


NO_CHECK_HINT = "No check available for this agenda."

MIN_DIFFERENT_ITEMS = 3
MIN_FOOD_ITEMS = 3


def one_small(objects: Sequence[BoardObject]) -> Verdict:
    small = [o for o in objects if o.size == Size.SMALL.value]
    if not small:
        return Verdict.failed("No small items found on the board.")
    return Verdict.passed()


def second_column_orange(objects: Sequence[BoardObject]) -> Verdict:
    # An empty second column passes
    bad = [
        o for o in objects
        if o.col == 1 and o.color != Color.ORANGE.value
    ]
    if bad:
        return Verdict.failed(*(
            f"Item at ({o.row + 1},2) is {o.color}, not orange." for o in bad
        ))
    return Verdict.passed()


def two_in_fourth(objects: Sequence[BoardObject]) -> Verdict:
    in_fourth = [o for o in objects if o.col == 3]
    total = len(objects)

    hints = []
    if total != 2:
        hints.append(f"Board has {total} items, needs exactly 2.")
    if len(in_fourth) < 2:
        hints.append(f"Only {len(in_fourth)} items in fourth column, need 2.")
    if any(o.col != 3 for o in objects):
        hints.append("Found items outside fourth column.")

    return Verdict(
        satisfied=total == 2 and len(in_fourth) == 2,
        hints=tuple(hints),
    )


def all_different(objects: Sequence[BoardObject]) -> Verdict:
    """
    At least three items, no two of the same kind and no two of the same size.

    Pairs are scanned in board order and only the first colliding pair is
    reported, even if later pairs collide too.
    """
    for a, b in combinations(objects, 2):
        hints = []
        if a.type == b.type and a.name == b.name:
            hints.append(f"Items at {a.position} and {b.position} are the same kind ({a.name}).")
        if a.size == b.size:
            hints.append(f"Items at {a.position} and {b.position} are both size {a.size}.")
        if hints:
            return Verdict.failed(*hints)

    if len(objects) < MIN_DIFFERENT_ITEMS:
        return Verdict.failed(
            f"Need at least {MIN_DIFFERENT_ITEMS} items (currently have {len(objects)})."
        )
    return Verdict.passed()


def one_per_row(objects: Sequence[BoardObject]) -> Verdict:
    occupied = {o.row for o in objects}
    hints = [
        f"Row {r + 1} is empty." for r in range(GRID_SIZE) if r not in occupied
    ]
    return Verdict(satisfied=not hints, hints=tuple(hints))


def snails_purple(objects: Sequence[BoardObject]) -> Verdict:
    bad = [
        o for o in objects
        if o.is_a(ObjectType.ANIMAL.value, "snail") and o.color != Color.PURPLE.value
    ]
    if bad:
        return Verdict.failed(*(
            f"Snail at {o.position} is {o.color}, not purple." for o in bad
        ))
    return Verdict.passed()


def squares_same_column(objects: Sequence[BoardObject]) -> Verdict:
    squares = [o for o in objects if o.is_a(ObjectType.SHAPE.value, "square")]
    if len(squares) < 2:
        return Verdict.passed()

    # The first square sets the target column
    col = squares[0].col
    if any(s.col != col for s in squares):
        return Verdict.failed(f"Put all squares in column {col + 1}")
    return Verdict.passed()


def mysterious(objects: Sequence[BoardObject]) -> Verdict:
    foods = [o for o in objects if o.type == ObjectType.FOOD.value]
    dinos = [o for o in objects if o.is_a(ObjectType.ANIMAL.value, "dinosaur")]

    hints = []
    satisfied = True
    if len(foods) < MIN_FOOD_ITEMS:
        satisfied = False
        # Only hint once the player has started putting food down
        if foods:
            hints.append("There should be more food on the board…")
    if dinos:
        satisfied = False
        hints.append("Something about dinosaurs seems… unwanted.")
    return Verdict(satisfied=satisfied, hints=tuple(hints))


CHECKS: Mapping[str, CheckFn] = MappingProxyType({
    "one-small": one_small,
    "second-column-orange": second_column_orange,
    "two-in-fourth": two_in_fourth,
    "all-different": all_different,
    "one-per-row": one_per_row,
    "snails-purple": snails_purple,
    "squares-same-column": squares_same_column,
    "mysterious": mysterious,
})


def no_check(objects: Sequence[BoardObject]) -> Verdict:
    """Evaluator for agendas with no registered check."""
    return Verdict.failed(NO_CHECK_HINT)


def get_check(rule_id: str) -> CheckFn:
    return CHECKS.get(rule_id, no_check)


def evaluate(rule_id: str, objects: Sequence[BoardObject]) -> Verdict:
    """
    Evaluate an agenda against a board snapshot.

    Unknown ids are not an error: they get the "no check available"
    verdict.
    """
    return get_check(rule_id)(objects)


def list_check_ids() -> list[str]:
    """Return the ids of all built-in checks."""
    return list(CHECKS.keys())
