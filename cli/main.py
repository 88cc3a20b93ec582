"""CLI entrypoint for playing Second Best in the terminal."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from ai.base_player import BasePlayer
from ai.config import EngineConfig
from ai.expectation_ai import ExpectationAI
from ai.random_ai import RandomAI
from cli.human_player import HumanPlayer
from engine.board import Board, Turn
from engine.game import (
    EVENT_CHALLENGE_VOID,
    EVENT_CHALLENGED,
    EVENT_COMMITTED,
    EVENT_INVALID,
    EVENT_PROPOSED,
    Game,
    GameConfig,
)
from engine.pieces import Colour

PLAYER_KINDS = ("human", "bot", "random")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Second Best in the terminal. White always starts.")
    parser.add_argument("--white", type=str, default="human", choices=PLAYER_KINDS, help="Who plays White")
    parser.add_argument("--black", type=str, default="bot", choices=PLAYER_KINDS, help="Who plays Black")
    parser.add_argument("--depth", type=int, default=None, help="Search depth for bot players")
    parser.add_argument("--seed", type=int, default=None, help="Deterministic tie-break seed")
    parser.add_argument("--config", type=str, default=None, help="Path to engine config JSON")
    parser.add_argument("--max-plies", type=int, default=200, help="Declare a draw after this many plies")
    parser.add_argument("--export", type=str, default=None, help="Write the finished game to this JSON file")
    parser.add_argument("--log-level", type=str, default="INFO", help="Python logging level")
    return parser.parse_args(argv)


def build_engine_config(args: argparse.Namespace) -> EngineConfig:
    config = EngineConfig.from_json(args.config) if args.config else EngineConfig()
    if args.depth is not None:
        config.depth = args.depth
    if args.seed is not None:
        config.seed = args.seed
    # Re-validate after CLI overrides.
    return EngineConfig(**config.to_dict())


def player_seed(engine_config: EngineConfig, colour: Colour) -> Optional[int]:
    """Give Black its own random stream when a seed is set."""
    seed = engine_config.seed
    if seed is not None and colour is Colour.BLACK:
        seed += 1
    return seed


def build_player(kind: str, colour: Colour, engine_config: EngineConfig) -> BasePlayer:
    seed = player_seed(engine_config, colour)
    if kind == "human":
        return HumanPlayer(colour)
    if kind == "bot":
        config = EngineConfig(**{**engine_config.to_dict(), "seed": seed})
        return ExpectationAI(colour, config)
    if kind == "random":
        return RandomAI(colour, seed=seed)
    raise ValueError(f"Unsupported player kind: {kind}")


def print_event(event: str, board: Board, turn: Optional[Turn]) -> None:
    if event == EVENT_INVALID:
        print("That move is not possible, try again.")
    elif event == EVENT_PROPOSED and turn is not None:
        preview = board.clone()
        preview.do_turn(turn)
        print()
        print(f"{turn.colour.value.capitalize()} {turn.describe()}.")
        print(preview.render_ascii())
    elif event == EVENT_CHALLENGED:
        print("Second best! Try a new move.")
    elif event == EVENT_CHALLENGE_VOID:
        print("Second best called, but there is no other move. The move stands.")
    elif event == EVENT_COMMITTED:
        print()
        print(board.render_ascii())
        print(f"Turn: {board.side_to_move.value} | Pieces: {board.count_pieces()} | Phase: {board.phase}")


def run_cli(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    logger = logging.getLogger("second_best.cli")

    engine_config = build_engine_config(args)
    white = build_player(args.white, Colour.WHITE, engine_config)
    black = build_player(args.black, Colour.BLACK, engine_config)

    logger.info("Starting Second Best. White=%s Black=%s depth=%d", args.white, args.black, engine_config.depth)
    print("Welcome to 'Second Best'. Places are numbered 1-8; moves are '<from> <to>'.")

    game = Game(white, black, config=GameConfig(max_plies=args.max_plies), observer=print_event)
    print(game.board.render_ascii())
    record = game.play()

    print()
    if record.outcome is not None:
        print(record.outcome.describe())
    if args.export:
        path = record.to_json(args.export)
        logger.info("Game exported to %s", path)


if __name__ == "__main__":
    run_cli()
