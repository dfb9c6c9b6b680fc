"""
Turnplay CLI - Command-line interface for the engine.

Usage:
    turnplay games                          List game types
    turnplay simulate <game_type>           Bot-vs-bot game
    turnplay serve                          Run the HTTP API
"""

import argparse
import asyncio
import json
import random
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Turnplay - Turn-based games with bot opponents",
        prog="turnplay",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Games command
    subparsers.add_parser("games", help="List registered game types")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a bot-vs-bot game")
    simulate_parser.add_argument("game_type", help="Game type, e.g. tic_tac_toe")
    simulate_parser.add_argument("--difficulty", default="hard", help="First bot difficulty")
    simulate_parser.add_argument("--opponent", default="easy", help="Second bot difficulty")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    simulate_parser.add_argument("--mode", default=None, help="RPS mode: best-of-3 or best-of-5")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    from .config import Settings
    from .logging_config import setup_logging

    settings = Settings.from_env()
    setup_logging(args.log_level or settings.log_level, settings.log_file)

    if args.command == "games":
        cmd_games(args)
    elif args.command == "simulate":
        cmd_simulate(args, settings)
    elif args.command == "serve":
        cmd_serve(args, settings)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_games(args):
    """List registered game types."""
    from .bots import get_available_difficulties
    from .games import get_game_metadata, list_game_types

    for game_type in list_game_types():
        meta = get_game_metadata(game_type)
        bots = ", ".join(get_available_difficulties(game_type)) or "no bots"
        print(f"{game_type:<22} {meta.name:<22} {meta.min_players}-{meta.max_players} players  ({bots})")


def cmd_simulate(args, settings):
    """Play a game between two bots and print the final state."""
    from .errors import TurnplayError

    try:
        state = asyncio.run(simulate(
            args.game_type,
            difficulty=args.difficulty,
            opponent=args.opponent,
            seed=args.seed,
            mode=args.mode,
            settings=settings,
        ))
    except TurnplayError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    print(json.dumps(state.to_dict(), indent=2))
    winner = state.get_player(state.winner) if state.winner else None
    print(f"\nResult: {winner.name + ' wins' if winner else 'draw'} ({state.status.value})")


async def simulate(game_type, difficulty="hard", opponent="easy", seed=None, mode=None, settings=None):
    """Run a bot-vs-bot game through the session manager."""
    from .engine_core.state import GameStatus
    from .session import GameSessionManager

    manager = GameSessionManager(settings=settings, rng=random.Random(seed))
    options = {"mode": mode} if mode else {}
    state = await manager.create_game(game_type, **options)
    game_id = state.game_id

    await manager.add_bot(game_id, difficulty, name=f"Bot 1 ({difficulty})")
    await manager.add_bot(game_id, opponent, name=f"Bot 2 ({opponent})")
    await manager.start_game(game_id)

    state = await manager.get_state(game_id)
    while state.status == GameStatus.PLAYING:
        before = state.to_dict()
        state = await manager.run_bot_turns(game_id)
        if state.to_dict() == before:
            break
    return state


def cmd_serve(args, settings):
    """Run the HTTP API."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api import create_app

    uvicorn.run(create_app(settings=settings), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
