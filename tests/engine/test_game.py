"""
Yahtzee - Game Engine Tests

Tests for turn flow, scoring guards, undo, collaborators, and game over.
"""

import logging

import pytest

from src.engine.base import ScoreCategory, TurnPhase
from src.engine.events import GameEvent
from src.engine.game import GameEngine


FILLER_HAND = (2, 2, 3, 3, 3)
CARD_ORDER = list(ScoreCategory)


def play_turns(game, play_hand, turns):
    """Score ``turns`` consecutive turns, filling each card in card order."""
    for turn in range(turns):
        category = CARD_ORDER[turn // len(game.players)]
        play_hand(game, FILLER_HAND)
        assert game.score_current_player(category), f"turn {turn}: {category.name}"


class BrokenSound:
    def on_dice_roll_started(self):
        raise RuntimeError("speaker unplugged")

    def on_die_held(self):
        raise RuntimeError("speaker unplugged")

    def on_category_scored(self):
        raise RuntimeError("speaker unplugged")

    def on_yahtzee_scored(self):
        raise RuntimeError("speaker unplugged")

    def on_game_over(self):
        raise RuntimeError("speaker unplugged")


class TestConstruction:
    def test_players_created_in_order(self):
        game = GameEngine(["Ann", " Bob "])
        assert [p.name for p in game.players] == ["Ann", "Bob"]
        assert [p.id for p in game.players] == [0, 1]
        assert game.current_player.name == "Ann"

    def test_no_players_rejected(self):
        with pytest.raises(ValueError):
            GameEngine([])

    def test_five_players_rejected(self):
        with pytest.raises(ValueError):
            GameEngine(["A", "B", "C", "D", "E"])

    def test_each_player_has_own_card(self):
        game = GameEngine(["Ann", "Bob"])
        assert game.players[0].score_card is not game.players[1].score_card


class TestTurnPhase:
    """Tests for the derived turn phase."""

    def test_awaiting_roll(self, rng, clock):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        assert game.turn_phase is TurnPhase.AWAITING_ROLL

    def test_rolling_or_holding(self, rng, clock):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        game.roll()
        assert game.turn_phase is TurnPhase.ROLLING_OR_HOLDING

    def test_must_score_after_three_rolls(self, rng, clock):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        for _ in range(3):
            assert game.roll()
            game.settle()
        assert game.turn_phase is TurnPhase.MUST_SCORE
        assert not game.roll()


class TestDiceCommands:
    def test_tick_settles_and_refreshes_scores(self, rng, clock):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        game.roll(now=0.0)
        assert game.current_player.score_card.potential_scores == {}

        assert game.tick(now=100.0)
        assert not game.dice.animating
        scores = game.current_player.score_card.potential_scores
        assert scores[ScoreCategory.CHANCE] == sum(game.dice.values)

    def test_toggle_hold_before_roll_rejected(self, rng, clock, sound):
        game = GameEngine(["Ann"], rng=rng, clock=clock, sound=sound)
        assert not game.toggle_hold(0)
        assert "die_held" not in sound.calls

    def test_toggle_hold(self, rng, clock, sound):
        game = GameEngine(["Ann"], rng=rng, clock=clock, sound=sound)
        game.roll()
        game.settle()
        assert game.toggle_hold(2)
        assert game.dice.dice[2].held
        assert sound.calls == ["dice_roll_started", "die_held"]


class TestScoringGuards:
    """Scoring is rejected unless the dice have been rolled and settled."""

    def test_before_first_roll(self, rng, clock):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        assert not game.can_score()
        assert not game.score_current_player(ScoreCategory.CHANCE)

    def test_while_animating(self, rng, clock):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        game.roll()
        assert not game.score_current_player(ScoreCategory.CHANCE)
        assert not game.current_player.score_card.is_scored(ScoreCategory.CHANCE)

    def test_category_already_scored(self, rng, clock, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        play_hand(game, (1, 2, 3, 4, 6))
        assert game.score_current_player(ScoreCategory.CHANCE)
        play_hand(game, (6, 6, 6, 6, 5))
        assert not game.score_current_player(ScoreCategory.CHANCE)
        assert game.current_player.score_card.get(ScoreCategory.CHANCE) == 16

    def test_score_records_potential_value(self, rng, clock, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        play_hand(game, (2, 2, 5, 5, 5))
        assert game.score_current_player(ScoreCategory.FULL_HOUSE)
        assert game.players[0].score_card.get(ScoreCategory.FULL_HOUSE) == 25

    def test_zero_score_allowed(self, rng, clock, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        play_hand(game, (1, 2, 3, 4, 6))
        assert game.score_current_player(ScoreCategory.YAHTZEE)
        assert game.players[0].score_card.get(ScoreCategory.YAHTZEE) == 0


class TestTurnRotation:
    def test_three_player_sequence(self, rng, clock, play_hand):
        game = GameEngine(["Ann", "Bob", "Cat"], rng=rng, clock=clock)
        seen = []
        for turn in range(10):
            play_hand(game, FILLER_HAND)
            game.score_current_player(CARD_ORDER[turn // 3])
            seen.append(game.current_player_index)
        assert seen == [1, 2, 0, 1, 2, 0, 1, 2, 0, 1]

    def test_next_turn_resets_dice_but_keeps_faces(self, rng, clock, play_hand):
        game = GameEngine(["Ann", "Bob"], rng=rng, clock=clock)
        play_hand(game, (4, 4, 4, 1, 2))
        game.toggle_hold(0)
        game.score_current_player(ScoreCategory.FOURS)

        assert game.dice.values == (4, 4, 4, 1, 2)
        assert game.dice.rolls_remaining == 3
        assert game.turn_phase is TurnPhase.AWAITING_ROLL
        assert not any(d.held for d in game.dice.dice)
        assert all(p.score_card.potential_scores == {} for p in game.players)


class TestUndo:
    """Tests for the single-level undo."""

    def test_nothing_to_undo(self, rng, clock):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        assert not game.can_undo
        assert not game.undo_last_score()

    def test_undo_restores_turn(self, rng, clock, play_hand):
        game = GameEngine(["Ann", "Bob"], rng=rng, clock=clock)
        play_hand(game, (3, 3, 3, 5, 5))
        game.score_current_player(ScoreCategory.CHANCE)
        assert game.current_player_index == 1

        assert game.undo_last_score()
        assert game.current_player_index == 0
        card = game.current_player.score_card
        assert not card.is_scored(ScoreCategory.CHANCE)
        assert game.turn_phase is TurnPhase.MUST_SCORE
        assert game.dice.values == (3, 3, 3, 5, 5)
        assert card.potential_scores[ScoreCategory.FULL_HOUSE] == 25

        assert game.score_current_player(ScoreCategory.FULL_HOUSE)
        assert card.get(ScoreCategory.FULL_HOUSE) == 25

    def test_second_undo_is_noop(self, rng, clock, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        play_hand(game, FILLER_HAND)
        game.score_current_player(ScoreCategory.ONES)
        assert game.undo_last_score()
        assert not game.undo_last_score()

    def test_undo_after_next_player_rolls(self, rng, clock, play_hand):
        game = GameEngine(["Ann", "Bob"], rng=rng, clock=clock)
        play_hand(game, FILLER_HAND)
        game.score_current_player(ScoreCategory.CHANCE)

        assert game.roll(now=0.0)
        game.settle()
        assert game.can_undo
        rolled = game.dice.values

        assert game.undo_last_score()
        assert game.current_player_index == 0
        assert not game.players[0].score_card.is_scored(ScoreCategory.CHANCE)
        assert game.turn_phase is TurnPhase.MUST_SCORE
        assert game.dice.values == rolled
        assert game.players[0].score_card.potential_scores[ScoreCategory.CHANCE] == sum(rolled)
        assert game.players[1].score_card.potential_scores == {}

    def test_undo_while_next_roll_tumbles(self, rng, clock, play_hand):
        game = GameEngine(["Ann", "Bob"], rng=rng, clock=clock)
        play_hand(game, FILLER_HAND)
        game.score_current_player(ScoreCategory.CHANCE)
        game.roll(now=0.0)
        assert game.dice.animating

        assert game.undo_last_score()
        assert not game.dice.animating
        assert game.dice.pending_frames == ()
        assert game.can_score()
        assert game.score_current_player(ScoreCategory.CHANCE)
        assert game.current_player_index == 1

    def test_undo_reverts_yahtzee_bonus(self, rng, clock, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        play_hand(game, (5, 5, 5, 5, 5))
        game.score_current_player(ScoreCategory.YAHTZEE)
        play_hand(game, (5, 5, 5, 5, 5))
        game.score_current_player(ScoreCategory.FIVES)
        card = game.players[0].score_card
        assert card.yahtzee_bonus_count == 1

        assert game.undo_last_score()
        assert card.yahtzee_bonus_count == 0
        assert not card.is_scored(ScoreCategory.FIVES)
        assert card.is_scored(ScoreCategory.YAHTZEE)

    def test_snapshot_contents(self, rng, clock, play_hand):
        game = GameEngine(["Ann", "Bob"], rng=rng, clock=clock)
        play_hand(game, FILLER_HAND)
        game.score_current_player(ScoreCategory.TWOS)
        snapshot = game.undo_snapshot
        assert snapshot.player_index == 0
        assert snapshot.category is ScoreCategory.TWOS
        assert snapshot.prior_bonus_count == 0


class TestJokerRulesInGame:
    def test_forced_upper_category(self, rng, clock, play_hand):
        game = GameEngine(["Ann"], joker_rules=lambda: True, rng=rng, clock=clock)
        play_hand(game, (3, 3, 3, 3, 3))
        assert game.score_current_player(ScoreCategory.YAHTZEE)

        play_hand(game, (3, 3, 3, 3, 3))
        assert not game.score_current_player(ScoreCategory.CHANCE)
        assert not game.score_current_player(ScoreCategory.LARGE_STRAIGHT)
        assert game.score_current_player(ScoreCategory.THREES)
        card = game.players[0].score_card
        assert card.get(ScoreCategory.THREES) == 15
        assert card.yahtzee_bonus_count == 1

    def test_joker_straight_value(self, rng, clock, play_hand):
        game = GameEngine(["Ann"], joker_rules=lambda: True, rng=rng, clock=clock)
        play_hand(game, (2, 2, 2, 2, 2))
        game.score_current_player(ScoreCategory.YAHTZEE)
        play_hand(game, (2, 2, 3, 3, 3))
        game.score_current_player(ScoreCategory.TWOS)

        play_hand(game, (2, 2, 2, 2, 2))
        assert game.score_current_player(ScoreCategory.LARGE_STRAIGHT)
        card = game.players[0].score_card
        assert card.get(ScoreCategory.LARGE_STRAIGHT) == 40
        assert card.grand_total == 50 + 4 + 40 + 100


class TestCollaborators:
    """Tests for sound, celebration, and result sink notifications."""

    def test_sound_sequence(self, rng, clock, sound, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock, sound=sound)
        play_hand(game, (1, 2, 3, 4, 6))
        game.score_current_player(ScoreCategory.CHANCE)
        assert sound.calls == ["dice_roll_started", "category_scored"]

    def test_yahtzee_notifies_celebration(self, rng, clock, sound, celebration, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock, sound=sound, celebration=celebration)
        play_hand(game, (6, 6, 6, 6, 6))
        game.score_current_player(ScoreCategory.YAHTZEE)
        assert sound.calls[-1] == "yahtzee_scored"
        assert "category_scored" not in sound.calls
        assert celebration.count == 1

    def test_zero_in_yahtzee_box_is_not_celebrated(self, rng, clock, sound, celebration, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock, sound=sound, celebration=celebration)
        play_hand(game, (1, 2, 3, 4, 6))
        game.score_current_player(ScoreCategory.YAHTZEE)
        assert sound.calls[-1] == "category_scored"
        assert celebration.count == 0

    def test_collaborator_errors_absorbed(self, rng, clock, play_hand, caplog):
        game = GameEngine(["Ann"], rng=rng, clock=clock, sound=BrokenSound())
        with caplog.at_level(logging.ERROR):
            play_hand(game, (1, 2, 3, 4, 6))
            assert game.score_current_player(ScoreCategory.CHANCE)
        assert game.players[0].score_card.get(ScoreCategory.CHANCE) == 16
        assert "on_category_scored" in caplog.text


class TestGameOver:
    def test_single_player_game(self, rng, clock, sound, sink, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock, sound=sound, result_sinks=[sink])
        play_turns(game, play_hand, 13)

        assert game.is_game_over
        assert sound.calls[-1] == "game_over"
        assert len(sink.games) == 1
        (result,) = sink.games[0]
        assert result.name == "Ann"
        assert result.grand_total == 64
        assert result.upper_total == 13
        assert result.lower_total == 51

    def test_no_commands_after_game_over(self, rng, clock, sink, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock, result_sinks=[sink])
        play_turns(game, play_hand, 13)

        assert not game.can_undo
        assert not game.undo_last_score()
        assert not game.roll()
        assert not game.can_score()
        assert len(sink.games) == 1

    def test_two_players_not_over_until_both_complete(self, rng, clock, sink, play_hand):
        game = GameEngine(["Ann", "Bob"], rng=rng, clock=clock, result_sinks=[sink])
        play_turns(game, play_hand, 25)
        assert game.players[0].score_card.is_complete
        assert not game.is_game_over
        assert sink.games == []

        play_hand(game, FILLER_HAND)
        game.score_current_player(ScoreCategory.CHANCE)
        assert game.is_game_over
        assert [r.name for r in sink.games[0]] == ["Ann", "Bob"]

    def test_failing_sink_does_not_block_others(self, rng, clock, sink, play_hand):
        class ExplodingSink:
            def record_game(self, results):
                raise ConnectionError("offline")

        game = GameEngine(["Ann"], rng=rng, clock=clock, result_sinks=[ExplodingSink(), sink])
        play_turns(game, play_hand, 13)
        assert len(sink.games) == 1


class TestStandings:
    def test_winner_and_standings(self, rng, clock, play_hand):
        game = GameEngine(["Ann", "Bob"], rng=rng, clock=clock)
        play_hand(game, (1, 1, 1, 1, 2))
        game.score_current_player(ScoreCategory.CHANCE)
        play_hand(game, (6, 6, 6, 6, 5))
        game.score_current_player(ScoreCategory.CHANCE)

        assert game.winner().name == "Bob"
        assert [p.name for p in game.standings()] == ["Bob", "Ann"]

    def test_ties_keep_seat_order(self):
        game = GameEngine(["Ann", "Bob", "Cat"])
        assert [p.name for p in game.standings()] == ["Ann", "Bob", "Cat"]

    def test_final_results(self):
        game = GameEngine(["Ann", "Bob"])
        assert [r.name for r in game.final_results()] == ["Ann", "Bob"]


class TestEvents:
    """Tests for change listeners."""

    def test_event_sequence(self, rng, clock, play_hand):
        game = GameEngine(["Ann", "Bob"], rng=rng, clock=clock)
        events = []
        game.subscribe(lambda payload: events.append(payload))

        play_hand(game, FILLER_HAND)
        game.score_current_player(ScoreCategory.THREES)
        game.undo_last_score()

        assert [p.event for p in events] == [
            GameEvent.DICE_ROLLED,
            GameEvent.DICE_SETTLED,
            GameEvent.CATEGORY_SCORED,
            GameEvent.TURN_ADVANCED,
            GameEvent.SCORE_UNDONE,
        ]
        scored = events[2]
        assert scored.player_index == 0
        assert scored.data == {"category": ScoreCategory.THREES, "value": 9}
        assert events[3].player_index == 1

    def test_yahtzee_event(self, rng, clock, play_hand):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        events = []
        game.subscribe(lambda payload: events.append(payload.event))
        play_hand(game, (4, 4, 4, 4, 4))
        game.score_current_player(ScoreCategory.YAHTZEE)
        assert GameEvent.YAHTZEE_SCORED in events

    def test_unsubscribe(self, rng, clock):
        game = GameEngine(["Ann"], rng=rng, clock=clock)
        events = []
        listener = events.append
        game.subscribe(listener)
        game.unsubscribe(listener)
        game.roll()
        assert events == []

    def test_listener_error_absorbed(self, rng, clock, caplog):
        game = GameEngine(["Ann"], rng=rng, clock=clock)

        def broken(payload):
            raise ValueError("bad listener")

        game.subscribe(broken)
        with caplog.at_level(logging.ERROR):
            assert game.roll()
        assert "DICE_ROLLED" in caplog.text
