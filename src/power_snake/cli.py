"""Command-line tools for headless Power Snake sessions."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys

logger = logging.getLogger(__name__)

# Synthetic frame spacing for headless runs (60 Hz).
_FRAME_MS = 1000.0 / 60.0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="power-snake",
        description="Headless Power Snake simulation, replay and config tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play one game on autopilot and print its record.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override it).",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--grid-size", type=int, default=None)
    sim_p.add_argument("--opponents", type=int, default=None)
    sim_p.add_argument(
        "--wrap", action="store_true", help="Wrap around the grid edges.",
    )
    sim_p.add_argument(
        "--no-power-ups", action="store_true", help="Disable power-ups.",
    )
    sim_p.add_argument("--max-ticks", type=int, default=2000)
    sim_p.add_argument(
        "--record", type=str, default=None,
        help="Write a replay log of the session to this path.",
    )

    # --- replay ---
    replay_p = sub.add_parser("replay", help="Re-run a recorded session.")
    replay_p.add_argument("path", help="Path to a replay log.")

    # --- config ---
    config_p = sub.add_parser("config", help="Print the default configuration.")
    config_p.add_argument(
        "--output", type=str, default=None,
        help="Write the configuration to this path instead.",
    )

    return parser


def _run_simulate(args: argparse.Namespace) -> int:
    from power_snake.config import GameConfig
    from power_snake.engine import PLAYER_ID, GameEngine
    from power_snake.policy import greedy_food_policy

    config = GameConfig.load(args.config) if args.config else GameConfig()
    overrides: dict = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.grid_size is not None:
        overrides["grid_size"] = args.grid_size
    if args.opponents is not None:
        overrides["opponents"] = args.opponents
    if args.wrap:
        overrides["wall_mode"] = "wrap"
    if args.no_power_ups:
        overrides["power_ups_enabled"] = False
    if not args.record:
        overrides["record_replay"] = False
    if overrides:
        try:
            config = dataclasses.replace(config, **overrides)
        except ValueError as exc:
            logger.error("Invalid configuration: %s", exc)
            return 2

    engine = GameEngine(config, policies={PLAYER_ID: greedy_food_policy})
    now = 0.0
    engine.start(now)
    while not engine.game_over and engine.tick < args.max_ticks:
        now += _FRAME_MS
        engine.frame(now)
    if not engine.game_over:
        engine.end()

    if args.record:
        engine.replay_log.save(args.record)
    print(engine.session_record().model_dump_json())  # noqa: T201
    return 0


def _run_replay(args: argparse.Namespace) -> int:
    from power_snake.replay import ReplayLog, replay

    record = replay(ReplayLog.load(args.path))
    print(record.model_dump_json())  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    from power_snake.config import GameConfig

    config = GameConfig()
    if args.output:
        config.save(args.output)
    else:
        print(json.dumps(config.to_dict(), indent=2))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``power-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "replay": _run_replay,
        "config": _run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
