"""Engine-vs-engine match runner for comparing search settings."""

from __future__ import annotations

import logging
import multiprocessing as mp
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ai.base_player import BasePlayer
from ai.config import EngineConfig
from ai.expectation_ai import ExpectationAI
from ai.random_ai import RandomAI
from engine.game import Game, GameConfig, GameRecord
from engine.pieces import Colour

LOGGER = logging.getLogger(__name__)


@dataclass
class PolicySpec:
    """Serializable player descriptor for workers."""

    kind: str  # expectation or random
    depth: int = 3
    use_transposition: bool = True
    challenge_rate: float = 0.0


@dataclass
class SelfPlayConfig:
    """Match generation config."""

    max_plies: int = 200
    parallel_workers: int = 1
    base_seed: Optional[int] = None
    log_every: int = 10


@dataclass
class EpisodeStats:
    """Summary from one game."""

    winner: Optional[Colour]
    is_draw: bool
    plies: int
    challenges: int
    end_reason: Optional[str]

    @classmethod
    def from_record(cls, record: GameRecord) -> "EpisodeStats":
        outcome = record.outcome
        return cls(
            winner=None if outcome is None else outcome.winner,
            is_draw=outcome is None or outcome.is_draw,
            plies=record.plies,
            challenges=len(record.challenges),
            end_reason=record.end_reason,
        )


def build_player_from_spec(spec: PolicySpec, colour: Colour, seed: Optional[int]) -> BasePlayer:
    if spec.kind == "expectation":
        config = EngineConfig(depth=spec.depth, seed=seed, use_transposition=spec.use_transposition)
        return ExpectationAI(colour, config)
    if spec.kind == "random":
        return RandomAI(colour, seed=seed, challenge_rate=spec.challenge_rate)
    raise ValueError(f"Unsupported PolicySpec kind: {spec.kind}")


def _simulate_single_game(white: BasePlayer, black: BasePlayer, max_plies: int) -> EpisodeStats:
    game = Game(white, black, config=GameConfig(max_plies=max_plies))
    return EpisodeStats.from_record(game.play())


def _parallel_worker(
    game_index: int,
    white_spec: PolicySpec,
    black_spec: PolicySpec,
    max_plies: int,
    base_seed: Optional[int],
) -> EpisodeStats:
    seed = None if base_seed is None else base_seed + game_index
    white = build_player_from_spec(white_spec, Colour.WHITE, seed=seed)
    black = build_player_from_spec(black_spec, Colour.BLACK, seed=None if seed is None else seed + 9973)
    return _simulate_single_game(white, black, max_plies=max_plies)


class SelfPlayRunner:
    """Runs bot-vs-bot games and returns per-game stats."""

    def __init__(self, config: SelfPlayConfig) -> None:
        self.config = config

    def run_games(self, white: BasePlayer, black: BasePlayer, n_games: int) -> List[EpisodeStats]:
        results: List[EpisodeStats] = []
        for game_index in range(n_games):
            stats = _simulate_single_game(white, black, max_plies=self.config.max_plies)
            results.append(stats)
            self._log_progress("serial", game_index, n_games, stats)
        return results

    def run_games_from_specs(self, white_spec: PolicySpec, black_spec: PolicySpec, n_games: int) -> List[EpisodeStats]:
        if self.config.parallel_workers <= 1:
            base_seed = self.config.base_seed
            white = build_player_from_spec(white_spec, Colour.WHITE, seed=base_seed)
            black = build_player_from_spec(black_spec, Colour.BLACK, seed=None if base_seed is None else base_seed + 1)
            return self.run_games(white, black, n_games=n_games)

        args = [
            (idx, white_spec, black_spec, self.config.max_plies, self.config.base_seed)
            for idx in range(n_games)
        ]
        with mp.Pool(processes=self.config.parallel_workers) as pool:
            results = pool.starmap(_parallel_worker, args)

        for idx, stats in enumerate(results):
            self._log_progress("parallel", idx, n_games, stats)
        return results

    @staticmethod
    def summarize(results: Sequence[EpisodeStats]) -> Dict[str, int]:
        summary = {"white_wins": 0, "black_wins": 0, "draws": 0, "challenges": 0}
        for stats in results:
            summary["challenges"] += stats.challenges
            if stats.is_draw:
                summary["draws"] += 1
            elif stats.winner is Colour.WHITE:
                summary["white_wins"] += 1
            elif stats.winner is Colour.BLACK:
                summary["black_wins"] += 1
        return summary

    def _log_progress(self, mode: str, game_index: int, n_games: int, stats: EpisodeStats) -> None:
        if (game_index + 1) % max(1, self.config.log_every) != 0:
            return
        LOGGER.info(
            "Self-play %s game %d/%d | winner=%s draw=%s plies=%d challenges=%d",
            mode,
            game_index + 1,
            n_games,
            stats.winner,
            stats.is_draw,
            stats.plies,
            stats.challenges,
        )
