"""Random baseline player: uniformly random legal turns, never challenges."""

from __future__ import annotations

import random
from typing import Optional, Tuple

from ai.base_player import BasePlayer
from engine.board import TURN_MOVE, Board, NoLegalTurnsError, Turn
from engine.pieces import Colour


class RandomAI(BasePlayer):
    """Player that picks a random legal turn with its own seeded RNG."""

    def __init__(self, colour: Colour, seed: Optional[int] = None, challenge_rate: float = 0.0) -> None:
        super().__init__(colour)
        self._rng = random.Random(seed)
        self.challenge_rate = challenge_rate

    def _pick(self, board: Board, excluded: Optional[Turn]) -> Turn:
        turns = [turn for turn in board.get_legal_turns(self.colour()) if turn != excluded]
        if not turns:
            raise NoLegalTurnsError(f"{self.colour().value} has no legal turns.")
        return self._rng.choice(turns)

    def propose_placement(self, board: Board, want_second_best: bool, excluded: Optional[Turn] = None) -> int:
        return self._pick(board, excluded).to_index

    def propose_move(
        self, board: Board, want_second_best: bool, excluded: Optional[Turn] = None
    ) -> Tuple[int, int]:
        turn = self._pick(board, excluded)
        if turn.kind != TURN_MOVE or turn.from_index is None:
            raise RuntimeError(f"Expected a movement turn, got {turn}.")
        return turn.from_index, turn.to_index

    def challenges(self, board: Board, turn: Turn) -> bool:
        return self.challenge_rate > 0.0 and self._rng.random() < self.challenge_rate
