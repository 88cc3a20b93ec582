import pytest

from engine.board import Board
from engine.pieces import Colour

W = Colour.WHITE
B = Colour.BLACK


@pytest.fixture
def empty_board():
    return Board()


@pytest.fixture
def near_vertical_board():
    # Two White pieces stacked on place 0, White to place.
    return Board.from_stacks([[W, W], [], [], [], [], [], [], []], ply_count=2)


@pytest.fixture
def black_threat_board():
    # Places 0-2 are full with Black on top; Black completes a line at 3 or 7 next ply.
    return Board.from_stacks(
        [[W, W, B], [W, W, B], [W, W, B], [], [], [W], [], []],
        ply_count=10,
    )


@pytest.fixture
def stalemate_board():
    # Movement phase, White to move; White's only top piece (place 0) has all three targets full.
    return Board.from_stacks(
        [[B, W], [W, W, B], [], [W, W, B], [W, W, B], [W, B], [], [W, W, B]],
        ply_count=16,
    )


@pytest.fixture
def single_move_board():
    # Movement phase, White to move; the only legal turn is 0 -> 7.
    return Board.from_stacks(
        [[B, W], [W, W, B], [], [W, W, B], [W, W, B], [W, B, B], [], [W, B]],
        ply_count=16,
    )
