"""
Sprouts CLI - Main entry point.

Create, inspect, extend and self-play Sprouts games stored as JSON.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sprouts_engine import (
    EngineConfig,
    GameSettings,
    InvalidGameStateError,
    Player,
    RandomPlayer,
    SproutsEngine,
    SproutsError,
    play_game,
)


def load_engine_config(config_path: Optional[str]) -> EngineConfig:
    """
    Load engine configuration from YAML (defaults when no path given).

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If YAML is invalid
    """
    if config_path is None:
        return EngineConfig()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        return EngineConfig.from_yaml(path)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")
    except TypeError as e:
        raise ValueError(f"Unknown option in {config_path}: {e}")


def read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text()


def write_text(target: Optional[str], text: str) -> None:
    if target is None or target == "-":
        print(text)
    else:
        Path(target).write_text(text + "\n")


def print_json(data: Dict[str, Any]) -> None:
    print(json.dumps(data, indent=2))


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Sprouts CLI - play and validate Sprouts games",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # New 3-point game saved to a file
  sprouts-cli new --points 3 --output game.json

  # List synthesizable moves for the player to move
  sprouts-cli moves game.json

  # Connect two points (optionally through a waypoint) and save
  sprouts-cli apply game.json point-0 point-1 --waypoint 330 160 --output game.json

  # Random self-play
  sprouts-cli play --points 4 --seed 7

  # Validate a stored game and print statistics
  sprouts-cli check game.json
"""
    )

    # Global arguments
    parser.add_argument(
        "--config",
        default=None,
        help="Engine config YAML (default: built-in defaults)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override log level (DEBUG, INFO, WARNING, ERROR)"
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # new command
    new = subparsers.add_parser('new', help='Create a new game')
    new.add_argument('--points', type=int, default=None, help='Starting points (2-6)')
    new.add_argument('--players', nargs=2, default=['player-1', 'player-2'], metavar=('FIRST', 'SECOND'))
    new.add_argument('--id', default=None, help='Game id (default: random uuid)')
    new.add_argument('--output', default=None, help='Output file (default: stdout)')

    # moves command
    moves = subparsers.add_parser('moves', help='List legal moves for the player to move')
    moves.add_argument('state', help='Game state JSON file ("-" for stdin)')

    # apply command
    apply = subparsers.add_parser('apply', help='Connect two points for the player to move')
    apply.add_argument('state', help='Game state JSON file ("-" for stdin)')
    apply.add_argument('from_id', help='Start point id')
    apply.add_argument('to_id', help='End point id (same as start for a loop)')
    apply.add_argument('--waypoint', nargs=2, type=float, default=None, metavar=('X', 'Y'))
    apply.add_argument('--output', default=None, help='Output file (default: stdout)')

    # play command
    play = subparsers.add_parser('play', help='Random self-play')
    play.add_argument('--points', type=int, default=None, help='Starting points (2-6)')
    play.add_argument('--seed', type=int, default=None, help='Seed for both players')
    play.add_argument('--output', default=None, help='Write the final state to this file')

    # check command
    check = subparsers.add_parser('check', help='Validate a stored game')
    check.add_argument('state', help='Game state JSON file ("-" for stdin)')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        config = load_engine_config(args.config)
        if args.log_level:
            config = EngineConfig(
                tolerance=config.tolerance,
                synthesis=config.synthesis,
                game=config.game,
                log_level=args.log_level,
            )
        engine = SproutsEngine(config)

        if args.command == 'new':
            settings = _settings(config, args.points)
            players = [Player(id=p, name=p) for p in args.players]
            state = engine.create_initial_state(settings, players, game_id=args.id)
            write_text(args.output, engine.serialize_state(state))

        elif args.command == 'moves':
            state = engine.deserialize_state(read_text(args.state))
            listed = engine.get_legal_moves(state, state.current.id)
            print_json({
                'player_id': state.current.id,
                'legal_pairs': state.metadata.legal_moves_remaining,
                'moves': [
                    {
                        'from_id': m.action.from_id,
                        'to_id': m.action.to_id,
                        'new_point': list(m.action.new_point_position),
                        'samples': len(m.action.path),
                    }
                    for m in listed
                ],
            })

        elif args.command == 'apply':
            state = engine.deserialize_state(read_text(args.state))
            waypoint = tuple(args.waypoint) if args.waypoint else None
            plan = engine.plan_move(state, state.current.id, args.from_id, args.to_id, waypoint)
            if plan.move is None:
                raise SproutsError(plan.result.code, plan.result.message)
            state = engine.apply_move(state, plan.move)
            write_text(args.output, engine.serialize_state(state))

        elif args.command == 'play':
            settings = _settings(config, args.points)
            players = [Player(id='random-1', name='Random 1', is_ai=True),
                       Player(id='random-2', name='Random 2', is_ai=True)]
            state = engine.create_initial_state(settings, players)
            seed = args.seed if args.seed is not None else config.synthesis.seed
            agents = {
                'random-1': RandomPlayer(seed=seed),
                'random-2': RandomPlayer(seed=seed + 1),
            }
            record = play_game(engine, state, agents)
            if args.output:
                write_text(args.output, engine.serialize_state(record.final_state))
            print_json({
                'winner': record.winner,
                'reason': record.reason,
                'moves_played': record.moves_played,
                'statistics': engine.statistics(record.final_state).to_dict(),
            })

        elif args.command == 'check':
            state = engine.deserialize_state(read_text(args.state))
            over = engine.is_terminal(state)
            print_json({
                'valid': True,
                'game_id': state.id,
                'winner': over.winner if over else None,
                'statistics': engine.statistics(state).to_dict(),
            })

    except InvalidGameStateError as e:
        print(f"Invalid game state: {e}", file=sys.stderr)
        sys.exit(1)
    except (SproutsError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _settings(config: EngineConfig, points: Optional[int]) -> GameSettings:
    if points is None:
        return config.game
    return GameSettings(
        point_count=points,
        canvas_width=config.game.canvas_width,
        canvas_height=config.game.canvas_height,
        canvas_padding=config.game.canvas_padding,
    )


if __name__ == '__main__':
    main()
