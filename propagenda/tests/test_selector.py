"""
Tests for agenda selection.

Tests:
- Terminal conditions (round limit, empty catalog, nothing remaining)
- Weighted walk with an injected uniform source
- Difficulty bias early in the game
"""

import math
import random
from collections import Counter

import pytest

from ..engine_core.selector import (
    MAX_ROUNDS,
    max_rounds,
    progress,
    remaining_rules,
    select_next,
    selection_weight,
)
from .conftest import make_catalog


class TestTerminalConditions:

    def test_empty_catalog(self):
        assert select_next([], []) is None
        assert select_next([], [], random=lambda: 0.5) is None

    def test_round_limit_reached(self, catalog):
        completed = catalog.ids[:max_rounds(catalog)]
        assert select_next(catalog, completed, random=lambda: 0.0) is None

    def test_round_limit_caps_at_ten(self):
        big = make_catalog(*((f"rule-{i}", float(i % 10)) for i in range(15)))
        assert max_rounds(big) == MAX_ROUNDS
        completed = [f"rule-{i}" for i in range(10)]
        assert select_next(big, completed, random=lambda: 0.3) is None

    def test_small_catalog_rounds(self):
        small = make_catalog(("one-small", 1.0), ("mysterious", 9.0))
        assert max_rounds(small) == 2
        assert select_next(small, ["one-small", "mysterious"]) is None

    def test_completed_ids_limit_counts_unknown_ids(self):
        """The round limit is on history length, not on catalog matches."""
        small = make_catalog(("one-small", 1.0), ("mysterious", 9.0))
        assert select_next(small, ["x", "y"], random=lambda: 0.0) is None


class TestWeightedWalk:

    def test_zero_draw_picks_first_remaining(self, catalog):
        rule = select_next(catalog, ["one-small"], random=lambda: 0.0)
        assert rule.id == "one-per-row"

    def test_high_draw_picks_last_remaining(self, catalog):
        rule = select_next(catalog, [], random=lambda: 0.999999)
        assert rule.id == "mysterious"

    def test_exhausted_walk_falls_back_to_first(self, catalog):
        rule = select_next(catalog, ["one-small"], random=lambda: 1.5)
        assert rule.id == "one-per-row"

    def test_never_returns_completed(self, catalog):
        rng = random.Random(99)
        completed = ["one-small", "mysterious", "all-different"]
        for _ in range(200):
            rule = select_next(catalog, completed, random=rng.random)
            assert rule.id not in completed

    def test_same_seed_same_choice(self, catalog):
        first = select_next(catalog, [], random=random.Random(5).random)
        second = select_next(catalog, [], random=random.Random(5).random)
        assert first == second

    def test_walk_matches_weights(self, catalog):
        """A draw landing inside the second weight band selects the second rule."""
        weights = [selection_weight(rule, 0.0) for rule in catalog]
        total = sum(weights)
        u = (weights[0] + weights[1] / 2) / total
        assert select_next(catalog, [], random=lambda: u).id == catalog[1].id


class TestWeights:

    def test_progress_uses_full_catalog(self, catalog):
        remaining = remaining_rules(catalog, ["one-small", "one-per-row"])
        assert progress(catalog, remaining) == pytest.approx(1 - 6 / 8)

    def test_progress_empty_catalog(self):
        assert progress([], []) == 0.0

    def test_weight_formula(self, catalog):
        rule = catalog.get("snails-purple")
        assert selection_weight(rule, 0.25) == pytest.approx(math.exp(-(0.3 - 0.25) * 3))

    def test_easy_rules_weigh_more_at_start(self, catalog):
        easy = selection_weight(catalog.get("one-small"), 0.0)
        hard = selection_weight(catalog.get("mysterious"), 0.0)
        assert easy > hard

    def test_progress_scales_all_weights_equally(self, catalog):
        easy, hard = catalog.get("one-small"), catalog.get("mysterious")
        early = selection_weight(easy, 0.0) / selection_weight(hard, 0.0)
        late = selection_weight(easy, 0.9) / selection_weight(hard, 0.9)
        assert early == pytest.approx(late)
        assert selection_weight(hard, 0.9) > selection_weight(hard, 0.0)


class TestDistribution:

    def test_easy_agendas_favored_at_start(self, catalog, seeded_random):
        """Regression: with a fixed seed, easier agendas come up more often."""
        counts = Counter(
            select_next(catalog, [], random=seeded_random).id for _ in range(4000)
        )
        assert counts["one-small"] > counts["two-in-fourth"] > counts["mysterious"]
        assert counts["one-per-row"] > counts["all-different"]
        assert sum(counts.values()) == 4000

    def test_every_remaining_agenda_reachable(self, catalog, seeded_random):
        counts = Counter(
            select_next(catalog, [], random=seeded_random).id for _ in range(4000)
        )
        assert set(counts) == set(catalog.ids)
