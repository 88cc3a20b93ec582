"""Piece colours and the three-high stacks that make up the ring."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

STACK_HEIGHT = 3


class IllegalTurnError(ValueError):
    """Raised when a board or stack mutation breaks the game rules."""


class Colour(str, Enum):
    """Player colour."""

    WHITE = "white"
    BLACK = "black"

    def opponent(self) -> "Colour":
        return Colour.BLACK if self is Colour.WHITE else Colour.WHITE


COLOUR_SYMBOL: Dict[Colour, str] = {
    Colour.WHITE: "W",
    Colour.BLACK: "B",
}

EMPTY_SYMBOL = "."

# A slot is either a colour or None (empty).
Slot = Optional[Colour]


@dataclass
class Place:
    """One stack position on the ring, slots ordered bottom to top."""

    slots: List[Slot] = field(default_factory=lambda: [None] * STACK_HEIGHT)

    @classmethod
    def from_colours(cls, colours: Sequence[Colour]) -> "Place":
        """Build a stack from a bottom-to-top colour sequence."""
        if len(colours) > STACK_HEIGHT:
            raise IllegalTurnError(f"A place holds at most {STACK_HEIGHT} pieces, got {len(colours)}.")
        place = cls()
        for colour in colours:
            place.add_piece(Colour(colour))
        return place

    def copy(self) -> "Place":
        return Place(slots=list(self.slots))

    def is_full(self) -> bool:
        return all(slot is not None for slot in self.slots)

    def is_empty(self) -> bool:
        return all(slot is None for slot in self.slots)

    def count_pieces(self) -> int:
        return sum(1 for slot in self.slots if slot is not None)

    def peek_top(self) -> Slot:
        """Return the colour of the highest occupied slot, or None."""
        height = self.count_pieces()
        if height == 0:
            return None
        return self.slots[height - 1]

    def add_piece(self, colour: Colour) -> None:
        height = self.count_pieces()
        if height >= STACK_HEIGHT:
            raise IllegalTurnError(f"Cannot add a {colour.value} piece to a full place {self.symbol}.")
        self.slots[height] = colour

    def remove_piece(self, colour: Colour) -> None:
        """Pop the top piece; it must belong to ``colour``."""
        height = self.count_pieces()
        if height == 0:
            raise IllegalTurnError("Cannot remove a piece from an empty place.")
        if self.slots[height - 1] is not colour:
            raise IllegalTurnError(f"Top piece of {self.symbol} is not {colour.value}.")
        self.slots[height - 1] = None

    def is_vertical_mill(self, colour: Colour) -> bool:
        return all(slot is colour for slot in self.slots)

    @property
    def symbol(self) -> str:
        return "".join(EMPTY_SYMBOL if slot is None else COLOUR_SYMBOL[slot] for slot in self.slots)
