"""CLI command to run bot-vs-bot Second Best matches."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Optional, Sequence

from arena.self_play import PolicySpec, SelfPlayConfig, SelfPlayRunner

POLICY_KINDS = ("expectation", "random")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run Second Best self-play matches.")
    parser.add_argument("--games", type=int, default=10, help="Number of games")
    parser.add_argument("--white", type=str, default="expectation", choices=POLICY_KINDS)
    parser.add_argument("--black", type=str, default="random", choices=POLICY_KINDS)
    parser.add_argument("--white-depth", type=int, default=2, help="Search depth for White")
    parser.add_argument("--black-depth", type=int, default=2, help="Search depth for Black")
    parser.add_argument("--max-plies", type=int, default=200, help="Ply limit per game")
    parser.add_argument("--workers", type=int, default=1, help="Parallel worker processes")
    parser.add_argument("--seed", type=int, default=None, help="Base seed")
    parser.add_argument("--log-level", type=str, default="INFO", help="Python logging level")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    runner = SelfPlayRunner(
        SelfPlayConfig(
            max_plies=args.max_plies,
            parallel_workers=args.workers,
            base_seed=args.seed,
            log_every=max(1, args.games // 10),
        )
    )
    results = runner.run_games_from_specs(
        white_spec=PolicySpec(kind=args.white, depth=args.white_depth),
        black_spec=PolicySpec(kind=args.black, depth=args.black_depth),
        n_games=args.games,
    )
    print(json.dumps(runner.summarize(results), indent=2))


if __name__ == "__main__":
    main()
