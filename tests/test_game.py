import json

import pytest

from ai.base_player import BasePlayer
from ai.config import EngineConfig
from ai.expectation_ai import ExpectationAI
from ai.random_ai import RandomAI
from engine.board import Board, EndState, Turn
from engine.game import (
    END_PLY_LIMIT,
    END_STALEMATE,
    EVENT_CHALLENGE_VOID,
    EVENT_CHALLENGED,
    EVENT_INVALID,
    Game,
    GameConfig,
)
from engine.pieces import Colour, IllegalTurnError

W = Colour.WHITE
B = Colour.BLACK


class ScriptedPlayer(BasePlayer):
    """Replays a fixed list of answers."""

    def __init__(self, colour, placements=(), moves=(), challenge_answers=()):
        super().__init__(colour)
        self.placements = list(placements)
        self.moves = list(moves)
        self.challenge_answers = list(challenge_answers)
        self.second_best_requests = []

    def propose_placement(self, board, want_second_best, excluded=None):
        self.second_best_requests.append((want_second_best, excluded))
        return self.placements.pop(0)

    def propose_move(self, board, want_second_best, excluded=None):
        self.second_best_requests.append((want_second_best, excluded))
        return self.moves.pop(0)

    def challenges(self, board, turn):
        return self.challenge_answers.pop(0) if self.challenge_answers else False


class EventLog:
    def __init__(self):
        self.events = []

    def __call__(self, event, board, turn):
        self.events.append((event, turn))


def test_players_must_match_colours():
    with pytest.raises(ValueError):
        Game(ScriptedPlayer(B), ScriptedPlayer(W))


def test_challenge_forces_different_replay():
    white = ScriptedPlayer(W, placements=[0, 0, 1])
    black = ScriptedPlayer(B, challenge_answers=[True])
    log = EventLog()
    game = Game(white, black, observer=log)

    committed = game.play_ply()

    # The replay of 0 is rejected because it repeats the challenged turn.
    assert committed == Turn.place(W, 1)
    assert game.record.challenges == [0]
    assert white.second_best_requests == [(False, None), (True, Turn.place(W, 0)), (True, Turn.place(W, 0))]
    assert (EVENT_CHALLENGED, Turn.place(W, 0)) in log.events
    assert (EVENT_INVALID, Turn.place(W, 0)) in log.events
    assert game.board.top(1) is W
    assert game.board.count_pieces() == 1


def test_invalid_turn_is_requested_again():
    board = Board.from_stacks([[W, B, W], [], [], [], [], [], [], []], ply_count=4)
    white = ScriptedPlayer(W, placements=[0, 2])
    log = EventLog()
    game = Game(white, ScriptedPlayer(B), board=board, observer=log)
    assert game.play_ply() == Turn.place(W, 2)
    assert log.events[0] == (EVENT_INVALID, Turn.place(W, 0))


def test_repeated_invalid_turns_give_up():
    board = Board.from_stacks([[W, B, W], [], [], [], [], [], [], []], ply_count=4)
    white = ScriptedPlayer(W, placements=[0] * 3)
    game = Game(white, ScriptedPlayer(B), config=GameConfig(max_invalid_attempts=3), board=board)
    with pytest.raises(IllegalTurnError):
        game.play_ply()


def test_challenge_without_alternative_is_void(single_move_board):
    white = ScriptedPlayer(W, moves=[(0, 7)])
    black = ScriptedPlayer(B, challenge_answers=[True])
    log = EventLog()
    game = Game(white, black, board=single_move_board, observer=log)

    assert game.play_ply() == Turn.move(W, 0, 7)
    assert game.record.challenges == []
    assert (EVENT_CHALLENGE_VOID, Turn.move(W, 0, 7)) in log.events


def test_stalemate_ends_game_as_loss(stalemate_board):
    record = Game(ScriptedPlayer(W), ScriptedPlayer(B), board=stalemate_board).play()
    assert record.outcome == EndState.win(B)
    assert record.end_reason == END_STALEMATE
    assert record.plies == 0


def test_ply_limit_declares_draw():
    record = Game(ScriptedPlayer(W), ScriptedPlayer(B), config=GameConfig(max_plies=0)).play()
    assert record.outcome == EndState.draw()
    assert record.end_reason == END_PLY_LIMIT


def test_engine_finishes_winning_line(near_vertical_board):
    white = ExpectationAI(W, EngineConfig(depth=1, seed=1))
    black = RandomAI(B, seed=1)
    game = Game(white, black, board=near_vertical_board)
    record = game.play()
    assert record.turns == [Turn.place(W, 0)]
    assert record.outcome == EndState.win(W)


def test_engine_against_random_plays_to_completion():
    white = ExpectationAI(W, EngineConfig(depth=1, seed=5))
    black = RandomAI(B, seed=5, challenge_rate=0.5)
    record = Game(white, black, config=GameConfig(max_plies=60)).play()

    assert record.outcome is not None
    assert 0 < record.plies <= 60
    colours = [turn.colour for turn in record.turns]
    assert colours == [W if i % 2 == 0 else B for i in range(len(colours))]
    assert all(turn.kind == "place" for turn in record.turns[:16])


def test_engines_challenge_each_other():
    white = ExpectationAI(W, EngineConfig(depth=1, seed=2))
    black = ExpectationAI(B, EngineConfig(depth=1, seed=3))
    game = Game(white, black, config=GameConfig(max_plies=4))
    record = game.play()
    # A seeded engine always plays from its best bucket, which the opponent's identical search recognises.
    assert record.challenges == list(range(record.plies))


def test_record_export(tmp_path, near_vertical_board):
    white = ExpectationAI(W, EngineConfig(depth=0, seed=1))
    record = Game(white, RandomAI(B, seed=1), board=near_vertical_board).play()
    path = record.to_json(tmp_path / "games" / "game.json")
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["winner"] == "white"
    assert payload["is_draw"] is False
    assert payload["end_reason"] == "mill"
    assert payload["turns"] == [{"kind": "place", "colour": "white", "to": 0}]
