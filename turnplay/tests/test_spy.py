"""
Tests for the spy game.

Tests:
- Seeded role assignment
- Role reveal, questioning and voting phases
- Vote tally and scoring
- Multi-round play and timeouts
"""

import pytest

from ..engine_core.move import Move, MoveType
from ..engine_core.state import GameStatus, deserialize_state, serialize_state
from ..errors import InvalidStateError
from ..games.registry import restore_game_engine
from ..games.spy import SPY_ROLE, SpyGame, get_location, tally_votes
from .conftest import play, seat


def ready_all(engine):
    for player in engine.state.players:
        play(engine, Move(player_id=player.id, type=MoveType.PLAYER_READY))


def ask(player_id, target_id, question="Is it noisy here?"):
    return Move(
        player_id=player_id,
        type=MoveType.ASK_QUESTION,
        data={"target_id": target_id, "question": question},
    )


def answer(player_id, text="Sometimes."):
    return Move(player_id=player_id, type=MoveType.ANSWER_QUESTION, data={"answer": text})


def vote(player_id, target_id):
    return Move(player_id=player_id, type=MoveType.VOTE, data={"target_id": target_id})


def innocents(engine):
    spy_id = engine.state.data["spy_player_id"]
    return [p.id for p in engine.state.players if p.id != spy_id]


class TestSetup:
    """Tests for starting a round."""

    def test_needs_three_players(self):
        engine = seat(SpyGame("g"), "p1", "p2")
        with pytest.raises(InvalidStateError):
            engine.start_game()

    def test_roles_assigned(self, spy_game):
        data = spy_game.state.data
        location = get_location(data["location"])

        assert data["phase"] == "role_reveal"
        assert data["spy_player_id"] in {"p1", "p2", "p3", "p4"}
        assert data["player_roles"][data["spy_player_id"]] == SPY_ROLE
        assert data["location_category"] == location.category

        roles = [data["player_roles"][pid] for pid in innocents(spy_game)]
        assert len(set(roles)) == 3
        assert all(role in location.roles for role in roles)

    def test_same_seed_same_assignment(self, spy_game):
        other = seat(SpyGame("other", total_rounds=1, seed=42), "p1", "p2", "p3", "p4")
        other.start_game()
        for key in ("location", "spy_player_id", "player_roles"):
            assert other.state.data[key] == spy_game.state.data[key]

    def test_seed_is_recorded_when_not_given(self):
        engine = seat(SpyGame("g"), "a", "b", "c")
        engine.start_game()
        assert isinstance(engine.state.data["seed"], int)

    def test_scores_start_at_zero(self, spy_game):
        assert spy_game.state.data["scores"] == {"p1": 0, "p2": 0, "p3": 0, "p4": 0}

    def test_role_info(self, spy_game):
        data = spy_game.state.data
        spy_view = spy_game.get_role_info(data["spy_player_id"])
        assert spy_view["role"] == SPY_ROLE
        assert "location" not in spy_view

        innocent = innocents(spy_game)[0]
        view = spy_game.get_role_info(innocent)
        assert view["location"] == data["location"]
        assert view["location_role"] == data["player_roles"][innocent]


class TestRoleReveal:
    """Tests for the ready phase."""

    def test_everyone_ready_starts_questioning(self, spy_game):
        ready_all(spy_game)
        data = spy_game.state.data
        assert data["phase"] == "questioning"
        assert data["current_questioner_id"] == "p1"
        assert spy_game.state.current_player_index == 0

    def test_ready_twice_rejected(self, spy_game):
        play(spy_game, Move(player_id="p2", type=MoveType.PLAYER_READY))
        assert not spy_game.validate_move(Move(player_id="p2", type=MoveType.PLAYER_READY))
        assert spy_game.active_player_ids() == ["p1", "p3", "p4"]

    def test_questions_not_allowed_during_reveal(self, spy_game):
        assert not spy_game.validate_move(ask("p1", "p2"))


class TestQuestioning:
    """Tests for the question and answer turns."""

    @pytest.fixture
    def questioning(self, spy_game):
        ready_all(spy_game)
        return spy_game

    def test_only_questioner_may_ask(self, questioning):
        assert questioning.validate_move(ask("p1", "p3"))
        assert not questioning.validate_move(ask("p2", "p3"))

    def test_cannot_ask_self_or_stranger(self, questioning):
        assert not questioning.validate_move(ask("p1", "p1"))
        assert not questioning.validate_move(ask("p1", "ghost"))

    def test_empty_question_rejected(self, questioning):
        assert not questioning.validate_move(ask("p1", "p2", "   "))

    def test_target_answers_then_next_questioner(self, questioning):
        play(questioning, ask("p1", "p3"))
        assert questioning.state.current_player_index == 2
        assert not questioning.validate_move(answer("p2"))
        assert not questioning.validate_move(ask("p1", "p2"))

        play(questioning, answer("p3", " At the counter. "))
        data = questioning.state.data
        assert data["question_history"] == [{
            "asker_id": "p1",
            "target_id": "p3",
            "question": "Is it noisy here?",
            "answer": "At the counter.",
        }]
        assert data["pending_question"] is None
        assert data["current_questioner_id"] == "p2"
        assert questioning.state.current_player_index == 1

    def test_skip_passes_turn(self, questioning):
        play(questioning, Move(player_id="p1", type=MoveType.SKIP_TURN))
        assert questioning.state.data["current_questioner_id"] == "p2"
        assert questioning.state.data["turns_taken"] == 1

    def test_voting_after_two_turns_per_player(self, spy_voting):
        data = spy_voting.state.data
        assert data["phase"] == "voting"
        assert data["turns_taken"] == 8
        assert spy_voting.active_player_ids() == ["p1", "p2", "p3", "p4"]


class TestVoting:
    """Tests for votes, tally and scoring."""

    def test_tally_picks_most_votes(self):
        assert tally_votes({"a": "y", "b": "x", "c": "x"}) == "x"

    def test_tally_tie_goes_to_first_voted(self):
        assert tally_votes({"a": "x", "b": "y"}) == "x"
        assert tally_votes({}) is None

    def test_cannot_vote_self_or_twice(self, spy_voting):
        assert not spy_voting.validate_move(vote("p1", "p1"))
        play(spy_voting, vote("p1", "p2"))
        assert not spy_voting.validate_move(vote("p1", "p3"))

    def test_spy_caught(self, spy_voting):
        spy_id = spy_voting.state.data["spy_player_id"]
        others = innocents(spy_voting)
        for voter in others:
            play(spy_voting, vote(voter, spy_id))
        play(spy_voting, vote(spy_id, others[0]))

        data = spy_voting.state.data
        assert data["last_outcome"]["spy_caught"] is True
        assert data["last_outcome"]["eliminated_id"] == spy_id
        for voter in others:
            assert data["scores"][voter] == 150
        assert data["scores"][spy_id] == -10

        # Single round: the game ends, earliest innocent seat wins the tie
        assert spy_voting.state.status == GameStatus.FINISHED
        assert spy_voting.state.winner == others[0]

    def test_spy_survives(self, spy_voting):
        spy_id = spy_voting.state.data["spy_player_id"]
        others = innocents(spy_voting)
        scapegoat = others[0]
        for voter in [p.id for p in spy_voting.state.players]:
            target = others[1] if voter == scapegoat else scapegoat
            play(spy_voting, vote(voter, target))

        data = spy_voting.state.data
        assert data["last_outcome"]["spy_caught"] is False
        assert data["last_outcome"]["eliminated_id"] == scapegoat
        assert data["scores"][spy_id] == 290
        for voter in others:
            assert data["scores"][voter] == -10
        assert spy_voting.state.winner == spy_id

    def test_no_winner_without_positive_score(self):
        engine = seat(SpyGame("g", total_rounds=1, seed=3), "a", "b", "c")
        engine.start_game()
        engine.state.data.update({"phase": "results", "scores": {"a": 0, "b": -10, "c": 0}})
        assert engine.check_win_condition() is None


class TestRounds:
    """Tests for multi-round play."""

    def test_next_round_keeps_scores(self):
        engine = seat(SpyGame("g", total_rounds=2, seed=9), "p1", "p2", "p3")
        engine.start_game()
        ready_all(engine)
        while engine.state.data["phase"] == "questioning":
            questioner = engine.state.data["current_questioner_id"]
            play(engine, Move(player_id=questioner, type=MoveType.SKIP_TURN))
        for player in engine.state.players:
            target = engine.state.players[(engine.state.player_index(player.id) + 1) % 3]
            play(engine, vote(player.id, target.id))

        assert engine.state.data["phase"] == "results"
        assert engine.state.status == GameStatus.PLAYING
        scores = dict(engine.state.data["scores"])

        play(engine, Move(player_id="p2", type=MoveType.NEXT_ROUND))
        data = engine.state.data
        assert data["current_round"] == 2
        assert data["phase"] == "role_reveal"
        assert data["votes"] == {}
        assert data["scores"] == scores

    def test_settings_survive_restore(self, spy_game):
        restored = restore_game_engine(serialize_state(spy_game.get_state()))
        assert isinstance(restored, SpyGame)
        assert restored.total_rounds == 1
        assert restored.seed == 42


class TestSnapshots:
    """Blob round trips in every phase."""

    def assert_round_trips(self, engine):
        state = engine.get_state()
        assert deserialize_state(serialize_state(state)) == state
        restored = restore_game_engine(serialize_state(state))
        assert restored.get_state() == state

    def test_pending_question(self, spy_game):
        ready_all(spy_game)
        play(spy_game, ask("p1", "p3"))
        assert spy_game.state.data["pending_question"] == "Is it noisy here?"
        self.assert_round_trips(spy_game)

    def test_voting_with_partial_votes(self, spy_voting):
        play(spy_voting, vote("p1", "p2"))
        self.assert_round_trips(spy_voting)

    def test_results_between_rounds(self):
        engine = seat(SpyGame("g", total_rounds=2, seed=9), "p1", "p2", "p3")
        engine.start_game()
        ready_all(engine)
        while engine.state.data["phase"] == "questioning":
            questioner = engine.state.data["current_questioner_id"]
            play(engine, Move(player_id=questioner, type=MoveType.SKIP_TURN))
        for voter, target in [("p1", "p2"), ("p2", "p3"), ("p3", "p1")]:
            play(engine, vote(voter, target))

        assert engine.state.data["phase"] == "results"
        assert engine.state.data["last_outcome"] is not None
        self.assert_round_trips(engine)

    def test_finished(self, spy_voting):
        spy_id = spy_voting.state.data["spy_player_id"]
        for player in spy_voting.state.players:
            target = innocents(spy_voting)[0] if player.id == spy_id else spy_id
            play(spy_voting, vote(player.id, target))

        assert spy_voting.state.status == GameStatus.FINISHED
        self.assert_round_trips(spy_voting)


class TestTimeouts:
    """Tests for default moves when a player runs out of time."""

    def test_timeout_in_reveal_is_ready(self, spy_game):
        move = spy_game.timeout_move("p3")
        assert move.type == "player-ready"
        assert spy_game.validate_move(move)

    def test_timeout_in_questioning(self, spy_game):
        ready_all(spy_game)
        skip = spy_game.timeout_move("p1")
        assert skip.type == "skip-turn"
        assert spy_game.timeout_move("p2") is None

        play(spy_game, ask("p1", "p2"))
        reply = spy_game.timeout_move("p2")
        assert reply.type == "answer-question"
        assert spy_game.validate_move(reply)

    def test_timeout_vote_targets_next_seat(self, spy_voting):
        move = spy_voting.timeout_move("p4")
        assert move.data["target_id"] == "p1"
        assert spy_voting.validate_move(move)
