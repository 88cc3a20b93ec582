"""Expectation search AI for Second Best.

Candidate turns are scored by averaging over every continuation up to a fixed
depth, so the opponent is modelled as replying uniformly at random rather than
optimally. Terminal positions score +100 (win for the perspective colour),
-100 (loss) or 0 (draw); positions at the search horizon score 0.
"""

from __future__ import annotations

import logging
import random
from fractions import Fraction
from typing import Dict, List, Optional, Sequence, Tuple

from ai.base_player import BasePlayer
from ai.config import EngineConfig
from engine.board import TURN_MOVE, TURN_PLACE, Board, EndState, NoLegalTurnsError, Turn
from engine.pieces import Colour

LOGGER = logging.getLogger(__name__)

# Scores stay exact through the search so equal averages compare equal.
WIN_SCORE = Fraction(100)
LOSS_SCORE = Fraction(-100)
DRAW_SCORE = Fraction(0)
HORIZON_SCORE = Fraction(0)

ScoredTurn = Tuple[Turn, Fraction]


def terminal_score(result: EndState, perspective: Colour) -> Fraction:
    if result.is_draw or result.winner is None:
        return DRAW_SCORE
    return WIN_SCORE if result.winner is perspective else LOSS_SCORE


def partition_scores(scored: Sequence[ScoredTurn]) -> Tuple[List[Turn], List[Turn]]:
    """Split scored turns into the top-score bucket and the next distinct score bucket.

    With a single distinct score both buckets hold the same turns.
    """
    if not scored:
        raise NoLegalTurnsError("Cannot rank an empty candidate list.")
    distinct = sorted({value for _, value in scored}, reverse=True)
    best_value = distinct[0]
    second_value = distinct[1] if len(distinct) > 1 else best_value
    best = [turn for turn, value in scored if value == best_value]
    second = [turn for turn, value in scored if value == second_value]
    return best, second


class ExpectationAI(BasePlayer):
    """Engine-backed player: averaging search, best/second-best selection, challenges."""

    def __init__(
        self,
        colour: Colour,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(colour)
        self.config = config or EngineConfig()
        self._rng = rng if rng is not None else random.Random(self.config.seed)
        self._ttable: Dict[Tuple[bytes, int, str], Fraction] = {}

    @property
    def depth(self) -> int:
        return self.config.depth

    def score(self, turn: Turn, board: Board, perspective: Colour, depth_remaining: int) -> float:
        """Score ``turn`` on ``board`` for ``perspective``; the board itself is left untouched."""
        self._ttable.clear()
        return float(self.exact_score(turn, board, perspective, depth_remaining))

    def exact_score(self, turn: Turn, board: Board, perspective: Colour, depth_remaining: int) -> Fraction:
        child = board.clone()
        child.do_turn(turn)
        return self._expected_value(child, perspective, depth_remaining)

    def _expected_value(self, board: Board, perspective: Colour, depth: int) -> Fraction:
        key = None
        if self.config.use_transposition:
            key = self._transposition_key(board, depth, perspective)
            cached = self._ttable.get(key)
            if cached is not None:
                return cached

        result = board.game_over()
        if result is not None:
            value = terminal_score(result, perspective)
        elif depth <= 0:
            value = HORIZON_SCORE
        else:
            replies = board.get_legal_turns(board.side_to_move)
            total = sum(self.exact_score(reply, board, perspective, depth - 1) for reply in replies)
            value = Fraction(total) / len(replies)

        if key is not None:
            self._ttable[key] = value
        return value

    def score_candidates(self, colour: Colour, board: Board, depth: Optional[int] = None) -> List[ScoredTurn]:
        """Score every legal turn for ``colour`` in generation order, as exact fractions."""
        depth = self.depth if depth is None else depth
        candidates = board.get_legal_turns(colour)
        if not candidates:
            raise NoLegalTurnsError(f"{colour.value} has no legal turns.")

        self._ttable.clear()
        scored = [(turn, self.exact_score(turn, board, colour, depth)) for turn in candidates]
        self._log_diagnostics(scored)
        return scored

    def best_and_second_best(
        self, colour: Colour, board: Board, depth: Optional[int] = None
    ) -> Tuple[List[Turn], List[Turn]]:
        return partition_scores(self.score_candidates(colour, board, depth))

    def choose_turn(
        self,
        board: Board,
        want_second_best: bool = False,
        excluded: Optional[Turn] = None,
        colour: Optional[Colour] = None,
        depth: Optional[int] = None,
    ) -> Turn:
        """Pick uniformly among the requested bucket, never returning ``excluded``."""
        colour = self.colour() if colour is None else colour
        scored = self.score_candidates(colour, board, depth)
        best, second = partition_scores(scored)
        bucket = second if want_second_best else best

        if excluded is not None:
            bucket = [turn for turn in bucket if turn != excluded]
            if not bucket:
                remaining = [(turn, value) for turn, value in scored if turn != excluded]
                if not remaining:
                    raise NoLegalTurnsError(f"{colour.value} has no alternative to {excluded}.")
                bucket = partition_scores(remaining)[0]

        chosen = self._rng.choice(bucket)
        LOGGER.debug(
            "Expectation AI (%s) chose %s from %d tied candidates (second_best=%s)",
            colour.value,
            chosen,
            len(bucket),
            want_second_best,
        )
        return chosen

    def propose_placement(self, board: Board, want_second_best: bool, excluded: Optional[Turn] = None) -> int:
        turn = self.choose_turn(board, want_second_best=want_second_best, excluded=excluded)
        if turn.kind != TURN_PLACE:
            raise RuntimeError(f"Expected a placement turn, search produced {turn}.")
        LOGGER.info("Computer (%s) %s", self.colour().value, turn.describe())
        return turn.to_index

    def propose_move(
        self, board: Board, want_second_best: bool, excluded: Optional[Turn] = None
    ) -> Tuple[int, int]:
        turn = self.choose_turn(board, want_second_best=want_second_best, excluded=excluded)
        if turn.kind != TURN_MOVE or turn.from_index is None:
            raise RuntimeError(f"Expected a movement turn, search produced {turn}.")
        LOGGER.info("Computer (%s) %s", self.colour().value, turn.describe())
        return turn.from_index, turn.to_index

    def is_challenged(self, board: Board, proposed_turn: Turn, proposer_colour: Colour) -> bool:
        """Re-run the proposer's own search and report whether it played a best-bucket turn."""
        best, _ = self.best_and_second_best(proposer_colour, board, self.depth)
        return proposed_turn in best

    def challenges(self, board: Board, turn: Turn) -> bool:
        challenged = self.is_challenged(board, turn, turn.colour)
        LOGGER.debug("Expectation AI (%s) challenge on %s: %s", self.colour().value, turn, challenged)
        return challenged

    def _log_diagnostics(self, scored: List[ScoredTurn]) -> None:
        """Emit top-k candidate breakdown when DEBUG is enabled."""
        if not LOGGER.isEnabledFor(logging.DEBUG):
            return
        ranked = sorted(scored, key=lambda item: item[1], reverse=True)
        for idx, (turn, value) in enumerate(ranked[: self.config.debug_top_k], start=1):
            LOGGER.debug("Candidate #%d turn=%s score=%.3f", idx, turn, value)

    @staticmethod
    def _transposition_key(board: Board, depth: int, perspective: Colour) -> Tuple[bytes, int, str]:
        """Hashable key for cached expectation values."""
        return (board.encode_state().tobytes(), depth, perspective.value)
