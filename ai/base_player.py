"""Player interface shared by humans and engines."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from engine.board import Board, Turn
from engine.pieces import Colour


class BasePlayer(ABC):
    """Abstract player contract used by the game driver."""

    def __init__(self, colour: Colour) -> None:
        self._colour = colour

    def colour(self) -> Colour:
        return self._colour

    @abstractmethod
    def propose_placement(self, board: Board, want_second_best: bool, excluded: Optional[Turn] = None) -> int:
        """Return the index of the place to put a new piece on."""
        raise NotImplementedError

    @abstractmethod
    def propose_move(
        self, board: Board, want_second_best: bool, excluded: Optional[Turn] = None
    ) -> Tuple[int, int]:
        """Return ``(from_index, to_index)`` for a movement-phase turn."""
        raise NotImplementedError

    @abstractmethod
    def challenges(self, board: Board, turn: Turn) -> bool:
        """Return whether this player calls "second best" on the opponent's ``turn``."""
        raise NotImplementedError
