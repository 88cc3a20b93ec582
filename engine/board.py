"""Second Best board state, legal turn generation, and state encoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from engine.pieces import STACK_HEIGHT, Colour, IllegalTurnError, Place, Slot
from engine.rules import (
    LINE_LENGTH,
    PHASE_PLACEMENT,
    PLACE_COUNT,
    in_ring,
    is_ring_neighbour,
    move_targets,
    phase_for,
    ring_window,
)

TURN_PLACE = "place"
TURN_MOVE = "move"


class NoLegalTurnsError(RuntimeError):
    """Raised when a side is asked to choose a turn but has none."""


@dataclass(frozen=True)
class Turn:
    """A Second Best action: put a new piece down, or carry a top piece to another place."""

    kind: str
    colour: Colour
    to_index: int
    from_index: Optional[int] = None

    @classmethod
    def place(cls, colour: Colour, index: int) -> "Turn":
        return cls(kind=TURN_PLACE, colour=colour, to_index=index)

    @classmethod
    def move(cls, colour: Colour, from_index: int, to_index: int) -> "Turn":
        return cls(kind=TURN_MOVE, colour=colour, to_index=to_index, from_index=from_index)

    def describe(self) -> str:
        """Human-readable form with 1-based place numbers."""
        if self.kind == TURN_PLACE:
            return f"placed a {self.colour.value} piece at {self.to_index + 1}"
        return f"moved a {self.colour.value} piece from {self.from_index + 1} to {self.to_index + 1}"

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"kind": self.kind, "colour": self.colour.value, "to": self.to_index}
        if self.from_index is not None:
            payload["from"] = self.from_index
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "Turn":
        colour = Colour(payload["colour"])
        if payload["kind"] == TURN_PLACE:
            return cls.place(colour, int(payload["to"]))
        return cls.move(colour, int(payload["from"]), int(payload["to"]))


@dataclass(frozen=True)
class EndState:
    """Terminal result: a winner, or a draw when both colours complete a mill at once."""

    winner: Optional[Colour] = None
    is_draw: bool = False

    @classmethod
    def win(cls, colour: Colour) -> "EndState":
        return cls(winner=colour)

    @classmethod
    def draw(cls) -> "EndState":
        return cls(is_draw=True)

    def describe(self) -> str:
        if self.is_draw or self.winner is None:
            return "The game is a draw."
        return f"{self.winner.value.capitalize()} has won the game!"


class Board:
    """Ring of eight three-high stacks."""

    place_count: int = PLACE_COUNT

    def __init__(self, ply_count: int = 0) -> None:
        self.places: List[Place] = [Place() for _ in range(self.place_count)]
        self.ply_count = ply_count

    @classmethod
    def from_stacks(cls, stacks: Sequence[Sequence[Colour]], ply_count: Optional[int] = None) -> "Board":
        """Build a position from eight bottom-to-top colour lists."""
        if len(stacks) != PLACE_COUNT:
            raise ValueError(f"Expected {PLACE_COUNT} stacks, got {len(stacks)}.")
        board = cls()
        board.places = [Place.from_colours(stack) for stack in stacks]
        board.ply_count = board.count_pieces() if ply_count is None else ply_count
        return board

    def clone(self) -> "Board":
        """Copy all place state so the copy can be mutated independently."""
        cloned = Board.__new__(Board)
        cloned.places = [place.copy() for place in self.places]
        cloned.ply_count = self.ply_count
        return cloned

    def swap_colours(self) -> "Board":
        """Return a copy with every piece's colour inverted."""
        swapped = self.clone()
        for place in swapped.places:
            place.slots = [None if slot is None else slot.opponent() for slot in place.slots]
        return swapped

    @property
    def side_to_move(self) -> Colour:
        """White acts on even ply counts, Black on odd."""
        return Colour.WHITE if self.ply_count % 2 == 0 else Colour.BLACK

    @property
    def phase(self) -> str:
        return phase_for(self.count_pieces())

    def iter_indices(self) -> Iterable[int]:
        return range(self.place_count)

    def get_place(self, index: int) -> Place:
        return self.places[index]

    def top(self, index: int) -> Slot:
        return self.places[index].peek_top()

    def count_pieces(self) -> int:
        return sum(place.count_pieces() for place in self.places)

    def is_possible_turn(self, turn: Turn) -> bool:
        """Return whether ``turn`` may be applied. Never mutates and never raises."""
        if not in_ring(turn.to_index):
            return False
        if turn.kind == TURN_PLACE:
            return not self.places[turn.to_index].is_full()
        if turn.kind != TURN_MOVE or turn.from_index is None or not in_ring(turn.from_index):
            return False
        return (
            self.top(turn.from_index) is turn.colour
            and not self.places[turn.to_index].is_full()
            and is_ring_neighbour(turn.from_index, turn.to_index)
        )

    def do_turn(self, turn: Turn) -> None:
        """Apply a legal turn in place and advance the ply counter."""
        if not self.is_possible_turn(turn):
            raise IllegalTurnError(f"Illegal turn: {turn}")
        if turn.kind == TURN_MOVE:
            self.places[turn.from_index].remove_piece(turn.colour)
        self.places[turn.to_index].add_piece(turn.colour)
        self.ply_count += 1

    def get_legal_turns(self, colour: Optional[Colour] = None) -> List[Turn]:
        """Generate legal turns for ``colour`` (default: side to move) in the current phase."""
        colour = self.side_to_move if colour is None else colour
        turns: List[Turn] = []
        if self.phase == PHASE_PLACEMENT:
            for index in self.iter_indices():
                turn = Turn.place(colour, index)
                if self.is_possible_turn(turn):
                    turns.append(turn)
            return turns

        for index in self.iter_indices():
            if self.top(index) is not colour:
                continue
            for target in move_targets(index):
                turn = Turn.move(colour, index, target)
                if self.is_possible_turn(turn):
                    turns.append(turn)
        return turns

    def is_won(self) -> Optional[EndState]:
        """Detect vertical and horizontal mills; both colours at once is a draw."""
        winners = set()
        for index in self.iter_indices():
            for colour in Colour:
                if self.places[index].is_vertical_mill(colour):
                    winners.add(colour)
            tops = {self.top(i) for i in ring_window(index, LINE_LENGTH)}
            if len(tops) == 1:
                top = tops.pop()
                if top is not None:
                    winners.add(top)

        if len(winners) == 2:
            return EndState.draw()
        if winners:
            return EndState.win(winners.pop())
        return None

    def game_over(self) -> Optional[EndState]:
        """Return the result including stalemate: a side with no legal turn loses."""
        result = self.is_won()
        if result is not None:
            return result
        if not self.get_legal_turns(self.side_to_move):
            return EndState.win(self.side_to_move.opponent())
        return None

    def encode_state(self) -> np.ndarray:
        """Encode the position as (White, Black, side-to-move) planes over place x slot."""
        encoded = np.zeros((3, self.place_count, STACK_HEIGHT), dtype=np.float32)
        for index, place in enumerate(self.places):
            for level, slot in enumerate(place.slots):
                if slot is Colour.WHITE:
                    encoded[0, index, level] = 1.0
                elif slot is Colour.BLACK:
                    encoded[1, index, level] = 1.0
        encoded[2, :, :] = 1.0 if self.side_to_move is Colour.WHITE else 0.0
        return encoded

    def render_ascii(self) -> str:
        """Draw the ring as two facing columns, places numbered 1-8."""
        cells = [f"[{place.symbol}]" for place in self.places]
        lines = [
            f"4    {cells[3]} {cells[4]}    5",
            f"3   {cells[2]}   {cells[5]}   6",
            f"2   {cells[1]}   {cells[6]}   7",
            f"1    {cells[0]} {cells[7]}    8",
        ]
        return "\n".join(lines)
