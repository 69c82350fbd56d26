"""
Tests for sessions and the game loop.

Tests:
- Board changes and the one-object-per-cell rule
- Completing agendas and reaching game over
- Restart and stats
- Session manager lifecycle
"""

import pytest

from ..session import (
    GameLoop,
    GameStats,
    SessionState,
    InvalidMoveError,
    GameOverError,
    AgendaNotSatisfiedError,
)
from .conftest import make_catalog, make_object


def satisfy_one_small(loop: GameLoop):
    obj = loop.place_object("shape", "star", 0, 0)
    loop.update_object(obj.id, size="S")


class TestBoardChanges:

    def test_place_object_defaults(self, game_loop):
        obj = game_loop.place_object("animal", "snail", 2, 3)
        assert obj.size == "M"
        assert obj.color == "blue"
        assert (obj.row, obj.col) == (2, 3)
        assert game_loop.session.objects == [obj]

    def test_place_counts_moves(self, game_loop):
        game_loop.place_object("animal", "snail", 0, 0)
        game_loop.place_object("food", "taco", 0, 1)
        stats = game_loop.session.stats
        assert stats.total_moves == 2
        assert stats.objects_placed == 2

    def test_occupied_cell_rejected(self, game_loop):
        game_loop.place_object("animal", "snail", 1, 1)
        with pytest.raises(InvalidMoveError, match="occupied"):
            game_loop.place_object("food", "taco", 1, 1)
        assert len(game_loop.session.objects) == 1
        assert game_loop.session.stats.total_moves == 1

    def test_outside_grid_rejected(self, game_loop):
        with pytest.raises(InvalidMoveError, match="outside"):
            game_loop.place_object("animal", "snail", 5, 0)

    def test_name_must_match_type(self, game_loop):
        with pytest.raises(InvalidMoveError, match="not a valid food"):
            game_loop.place_object("food", "snail", 0, 0)

    def test_unknown_type_rejected(self, game_loop):
        with pytest.raises(InvalidMoveError, match="Unknown object type"):
            game_loop.place_object("vehicle", "car", 0, 0)

    def test_update_object(self, game_loop):
        obj = game_loop.place_object("animal", "snail", 0, 0)
        updated = game_loop.update_object(obj.id, color="purple")
        assert updated.color == "purple"
        assert updated.size == "M"
        assert updated.id == obj.id
        assert game_loop.session.objects == [updated]
        assert game_loop.session.stats.total_moves == 2
        assert game_loop.session.stats.objects_placed == 1

    def test_update_keeps_old_snapshot(self, game_loop):
        obj = game_loop.place_object("animal", "snail", 0, 0)
        snapshot = tuple(game_loop.session.objects)
        game_loop.update_object(obj.id, size="L")
        assert snapshot[0].size == "M"

    def test_update_invalid_color(self, game_loop):
        obj = game_loop.place_object("animal", "snail", 0, 0)
        with pytest.raises(InvalidMoveError, match="Unknown color"):
            game_loop.update_object(obj.id, color="pink")
        assert game_loop.session.objects[0].color == "blue"

    def test_update_unknown_object(self, game_loop):
        with pytest.raises(InvalidMoveError, match="No object"):
            game_loop.update_object("missing", size="S")

    def test_remove_object(self, game_loop):
        obj = game_loop.place_object("animal", "snail", 0, 0)
        game_loop.remove_object(obj.id)
        assert game_loop.session.objects == []
        assert game_loop.session.stats.total_moves == 2

    def test_remove_frees_cell(self, game_loop):
        obj = game_loop.place_object("animal", "snail", 0, 0)
        game_loop.remove_object(obj.id)
        game_loop.place_object("food", "taco", 0, 0)


class TestProgression:

    def test_start_selects_agenda(self, game_loop):
        assert game_loop.session.current_rule is not None
        assert game_loop.session.state == SessionState.ACTIVE

    def test_verdict_tracks_board(self, session_manager):
        session = session_manager.create_session(make_catalog(("one-small", 1.0)))
        loop = GameLoop(session)
        loop.start()
        assert not loop.verdict().satisfied
        satisfy_one_small(loop)
        assert loop.verdict().satisfied

    def test_complete_unsatisfied_agenda_rejected(self, session_manager):
        session = session_manager.create_session(make_catalog(("one-small", 1.0)))
        loop = GameLoop(session)
        loop.start()
        with pytest.raises(AgendaNotSatisfiedError):
            loop.complete_agenda()
        assert session.completed_ids == []

    def test_complete_moves_to_next(self, session_manager):
        catalog = make_catalog(("one-small", 1.0), ("snails-purple", 3.0))
        session = session_manager.create_session(catalog)
        # Always take the first remaining agenda
        loop = GameLoop(session, random=lambda: 0.0)
        assert loop.start().id == "one-small"

        satisfy_one_small(loop)
        next_rule = loop.complete_agenda()
        assert next_rule.id == "snails-purple"
        assert session.completed_ids == ["one-small"]
        assert loop.status().round_number == 2

    def test_last_agenda_ends_game(self, session_manager):
        session = session_manager.create_session(make_catalog(("one-small", 1.0)))
        loop = GameLoop(session)
        loop.start()
        satisfy_one_small(loop)
        assert loop.complete_agenda() is None
        assert session.state == SessionState.GAME_OVER

        status = loop.status()
        assert status.game_over
        assert status.agenda is None
        assert status.round_number == status.total_rounds == 1
        assert not status.verdict.satisfied

    def test_moves_rejected_after_game_over(self, session_manager):
        session = session_manager.create_session(make_catalog(("one-small", 1.0)))
        loop = GameLoop(session)
        loop.start()
        satisfy_one_small(loop)
        loop.complete_agenda()
        with pytest.raises(GameOverError):
            loop.place_object("food", "taco", 4, 4)
        with pytest.raises(GameOverError):
            loop.complete_agenda()

    def test_empty_catalog_is_over_at_once(self, session_manager):
        session = session_manager.create_session(make_catalog())
        loop = GameLoop(session)
        assert loop.start() is None
        assert session.state == SessionState.GAME_OVER
        assert loop.status().total_rounds == 0

    def test_full_game_with_seed(self, session_manager, catalog):
        """Play through by swapping in boards that satisfy each agenda."""
        boards = {
            "one-small": [make_object(0, 0, size="S")],
            "one-per-row": [make_object(r, 0) for r in range(5)],
            "second-column-orange": [],
            "snails-purple": [],
            "two-in-fourth": [make_object(0, 3), make_object(1, 3)],
            "squares-same-column": [],
            "all-different": [
                make_object(0, 0, "shape", "star", size="S"),
                make_object(1, 0, "animal", "lion", size="M"),
                make_object(2, 0, "food", "taco", size="L"),
            ],
            "mysterious": [
                make_object(0, 0, "food", "taco"),
                make_object(0, 1, "food", "salad"),
                make_object(0, 2, "food", "icecream"),
            ],
        }
        session = session_manager.create_session(catalog, seed=3)
        loop = GameLoop(session)
        loop.start()
        while session.current_rule is not None:
            session.objects = list(boards[session.current_rule.id])
            loop.complete_agenda()

        assert session.state == SessionState.GAME_OVER
        assert sorted(session.completed_ids) == sorted(catalog.ids)
        assert len(set(session.completed_ids)) == len(session.completed_ids)

    def test_restart(self, game_loop):
        game_loop.place_object("food", "taco", 0, 0)
        game_loop.session.completed_ids.append("one-small")
        game_loop.restart()
        session = game_loop.session
        assert session.objects == []
        assert session.completed_ids == []
        assert session.stats.total_moves == 0
        assert session.current_rule is not None
        assert session.state == SessionState.ACTIVE


class TestGameStats:

    def test_time_taken_format(self):
        stats = GameStats(started_at=1000.0)
        assert stats.time_taken(now=1000.0) == "0:00"
        assert stats.time_taken(now=1065.0) == "1:05"
        assert stats.elapsed_seconds(now=1600.0) == 600

    def test_clock_skew_clamped(self):
        assert GameStats(started_at=1000.0).elapsed_seconds(now=900.0) == 0


class TestSessionManager:

    def test_create_and_get(self, session_manager, catalog):
        session = session_manager.create_session(catalog)
        assert session_manager.get_session(session.session_id) is session
        assert session.session_id in session_manager.list_active_sessions()

    def test_end_session(self, session_manager, catalog):
        session = session_manager.create_session(catalog)
        assert session_manager.end_session(session.session_id, reason="user_ended")
        assert session.state == SessionState.ABANDONED
        assert session_manager.get_session(session.session_id) is None
        assert not session_manager.end_session(session.session_id)

    def test_cleanup_stale_sessions(self, session_manager, catalog):
        old = session_manager.create_session(catalog)
        fresh = session_manager.create_session(catalog)
        old.created_at -= 7200
        old.state = SessionState.GAME_OVER
        fresh.state = SessionState.GAME_OVER

        removed = session_manager.cleanup_stale_sessions(max_age_seconds=3600)
        assert removed == 1
        assert session_manager.get_session(old.session_id) is None
        assert session_manager.get_session(fresh.session_id) is fresh

    def test_cleanup_keeps_old_game_in_play(self, session_manager, catalog):
        session = session_manager.create_session(catalog)
        loop = GameLoop(session)
        loop.start()
        session.created_at -= 7200

        assert session_manager.cleanup_stale_sessions(max_age_seconds=3600) == 0
        assert session_manager.get_session(session.session_id) is session
        loop.place_object("food", "taco", 0, 0)

    def test_seeded_sessions_pick_same_first_agenda(self, session_manager, catalog):
        first = GameLoop(session_manager.create_session(catalog, seed=11)).start()
        second = GameLoop(session_manager.create_session(catalog, seed=11)).start()
        assert first.id == second.id
