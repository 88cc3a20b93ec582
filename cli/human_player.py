"""Console player that reads turns from standard input."""

from __future__ import annotations

import re
from typing import Callable, Optional, Tuple

from ai.base_player import BasePlayer
from engine.board import Board, Turn
from engine.pieces import Colour
from engine.rules import PLACE_COUNT

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

_SEPARATORS = re.compile(r"[\s,\-]+")


def parse_place_number(text: str) -> Optional[int]:
    """Parse a 1-based place number into a 0-based index."""
    try:
        number = int(text.strip())
    except ValueError:
        return None
    if 1 <= number <= PLACE_COUNT:
        return number - 1
    return None


def parse_move(text: str) -> Optional[Tuple[int, int]]:
    """Parse ``"<from> <to>"`` with 1-based place numbers."""
    parts = [part for part in _SEPARATORS.split(text.strip()) if part]
    if len(parts) != 2:
        return None
    from_index = parse_place_number(parts[0])
    to_index = parse_place_number(parts[1])
    if from_index is None or to_index is None:
        return None
    return from_index, to_index


def parse_yes_no(text: str) -> Optional[bool]:
    answer = text.strip().lower()
    if answer in {"y", "yes"}:
        return True
    if answer in {"n", "no"}:
        return False
    return None


class HumanPlayer(BasePlayer):
    """Prompts until well-formed input arrives; legality is checked by the game."""

    def __init__(self, colour: Colour, input_fn: InputFn = input, output_fn: OutputFn = print) -> None:
        super().__init__(colour)
        self._input = input_fn
        self._output = output_fn

    def propose_placement(self, board: Board, want_second_best: bool, excluded: Optional[Turn] = None) -> int:
        while True:
            index = parse_place_number(self._input(f"{self._name()}, place a piece (1-8)> "))
            if index is not None:
                return index
            self._output("Invalid input")

    def propose_move(
        self, board: Board, want_second_best: bool, excluded: Optional[Turn] = None
    ) -> Tuple[int, int]:
        while True:
            move = parse_move(self._input(f"{self._name()}, move a piece (1-8) (1-8)> "))
            if move is not None:
                return move
            self._output("Invalid input")

    def challenges(self, board: Board, turn: Turn) -> bool:
        while True:
            answer = parse_yes_no(self._input("Second best? (y/n)> "))
            if answer is not None:
                return answer
            self._output("Invalid input")

    def _name(self) -> str:
        return self.colour().value.capitalize()
