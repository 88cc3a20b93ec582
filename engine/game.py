"""Turn sequencing for a full game, including the second-best challenge."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from engine.board import Board, EndState, Turn
from engine.pieces import Colour, IllegalTurnError
from engine.rules import PHASE_PLACEMENT

if TYPE_CHECKING:
    from ai.base_player import BasePlayer

LOGGER = logging.getLogger(__name__)

END_MILL = "mill"
END_STALEMATE = "stalemate"
END_PLY_LIMIT = "ply_limit"

EVENT_PROPOSED = "proposed"
EVENT_INVALID = "invalid"
EVENT_CHALLENGED = "challenged"
EVENT_CHALLENGE_VOID = "challenge_void"
EVENT_COMMITTED = "committed"

Observer = Callable[[str, Board, Optional[Turn]], None]


@dataclass
class GameConfig:
    """Limits for one game."""

    max_plies: int = 200
    max_invalid_attempts: int = 50


@dataclass
class GameRecord:
    """Outcome and ordered turn history of a finished game."""

    outcome: Optional[EndState] = None
    end_reason: Optional[str] = None
    turns: List[Turn] = field(default_factory=list)
    challenges: List[int] = field(default_factory=list)

    @property
    def plies(self) -> int:
        return len(self.turns)

    def to_dict(self) -> Dict[str, object]:
        winner = None
        if self.outcome is not None and self.outcome.winner is not None:
            winner = self.outcome.winner.value
        return {
            "winner": winner,
            "is_draw": bool(self.outcome is not None and self.outcome.is_draw),
            "end_reason": self.end_reason,
            "plies": self.plies,
            "challenges": list(self.challenges),
            "turns": [turn.to_dict() for turn in self.turns],
        }

    def to_json(self, path: str | Path) -> Path:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as handle:
            json.dump(self.to_dict(), handle, indent=2)
        return out_path


class Game:
    """Drives two players over one board; White moves first."""

    def __init__(
        self,
        white: "BasePlayer",
        black: "BasePlayer",
        config: Optional[GameConfig] = None,
        board: Optional[Board] = None,
        observer: Optional[Observer] = None,
    ) -> None:
        if white.colour() is not Colour.WHITE or black.colour() is not Colour.BLACK:
            raise ValueError("Players must be given as (white, black).")
        self.players: Dict[Colour, "BasePlayer"] = {Colour.WHITE: white, Colour.BLACK: black}
        self.config = config or GameConfig()
        self.board = board if board is not None else Board()
        self.observer = observer
        self.record = GameRecord()

    def play(self) -> GameRecord:
        """Play until a mill, a stalemate, or the ply limit."""
        while not self.is_finished():
            self.play_ply()
        return self.record

    def is_finished(self) -> bool:
        if self.record.outcome is not None:
            return True

        result = self.board.game_over()
        if result is not None:
            reason = END_MILL if self.board.is_won() is not None else END_STALEMATE
            self._finish(result, reason)
            return True
        if self.record.plies >= self.config.max_plies:
            self._finish(EndState.draw(), END_PLY_LIMIT)
            return True
        return False

    def play_ply(self) -> Turn:
        """Ask for a turn, offer the opponent a challenge, then commit."""
        colour = self.board.side_to_move
        mover = self.players[colour]
        opponent = self.players[colour.opponent()]

        turn = self._request_turn(mover, want_second_best=False)
        self._notify(EVENT_PROPOSED, turn)

        if opponent.challenges(self.board, turn):
            if self._has_alternative(turn):
                LOGGER.info("Second best! %s must replay instead of %s", colour.value, turn)
                self.record.challenges.append(self.record.plies)
                self._notify(EVENT_CHALLENGED, turn)
                turn = self._request_turn(mover, want_second_best=True, excluded=turn)
            else:
                LOGGER.info("Challenge on %s is void: no alternative turn", turn)
                self._notify(EVENT_CHALLENGE_VOID, turn)

        self.board.do_turn(turn)
        self.record.turns.append(turn)
        self._notify(EVENT_COMMITTED, turn)
        LOGGER.debug("Ply %d committed: %s", self.record.plies, turn)
        return turn

    def _request_turn(self, player: "BasePlayer", want_second_best: bool, excluded: Optional[Turn] = None) -> Turn:
        colour = player.colour()
        for _ in range(self.config.max_invalid_attempts):
            if self.board.phase == PHASE_PLACEMENT:
                index = player.propose_placement(self.board, want_second_best, excluded)
                turn = Turn.place(colour, index)
            else:
                from_index, to_index = player.propose_move(self.board, want_second_best, excluded)
                turn = Turn.move(colour, from_index, to_index)

            if self.board.is_possible_turn(turn) and turn != excluded:
                return turn
            LOGGER.debug("Rejected turn %s from %s", turn, colour.value)
            self._notify(EVENT_INVALID, turn)
        raise IllegalTurnError(
            f"{colour.value} failed to give a legal turn in {self.config.max_invalid_attempts} attempts."
        )

    def _has_alternative(self, turn: Turn) -> bool:
        return any(candidate != turn for candidate in self.board.get_legal_turns(turn.colour))

    def _finish(self, result: EndState, reason: str) -> None:
        self.record.outcome = result
        self.record.end_reason = reason
        if reason == END_STALEMATE:
            LOGGER.warning("%s has no legal turn and loses", self.board.side_to_move.value)
        LOGGER.info("Game over after %d plies (%s): %s", self.record.plies, reason, result.describe())

    def _notify(self, event: str, turn: Optional[Turn]) -> None:
        if self.observer is not None:
            self.observer(event, self.board, turn)
