"""
Brass CLI - Command-line interface for the engine.

Usage:
    brass new --players alice bob [--seed N]        Create a game and print it
    brass simulate --players 2 [--seed N]           Play a seeded all-pass game to the end
    brass serve [--host H] [--port P]               Run the HTTP API
"""

from __future__ import annotations
import argparse
import logging
import sys

from .config import Settings, configure_logging
from .engine_core.action import Action
from .engine_core.engine import GameEngine, GameSummary
from .engine_core.enums import GamePhase
from .engine_core.state import GameState
from .games.birmingham.setup import GameConfig, GameSetupError, create_game


logger = logging.getLogger(__name__)

# A pass-only game ends in well under this many actions
MAX_SIMULATION_STEPS = 10_000


def simulate_pass_game(state: GameState, engine: GameEngine | None = None) -> int:
    """
    Drive a game to the end with every player passing their first card.

    Income is collected whenever a round closes, except after the last
    round of the game. Returns the number of actions taken.
    """
    engine = engine or GameEngine()
    steps = 0
    while state.phase == GamePhase.PLAYING:
        if steps >= MAX_SIMULATION_STEPS:
            raise RuntimeError(f"Game {state.game_id} did not finish in {MAX_SIMULATION_STEPS} actions")
        player = state.current_player
        round_before, era_before = state.current_round, state.era

        result = engine.execute_action(state, Action.pass_turn(player.player_id, player.hand[0].card_id))
        if not result.success:
            raise RuntimeError(f"Pass rejected for {player.player_id}: {result.errors}")
        steps += 1

        round_closed = state.current_round != round_before or state.era != era_before
        if round_closed and state.phase != GamePhase.FINISHED:
            engine.collect_income(state)
    return steps


def print_summary(summary: GameSummary, turn_order: list[str]) -> None:
    print(f"Game: {summary.game_id}")
    print(f"Phase: {summary.phase.value}  Era: {summary.era}  Round: {summary.round}/{summary.max_rounds}")
    print(f"Turn order: {', '.join(turn_order)}")
    for p in summary.players:
        marker = "*" if p.player_id == summary.current_player_id else " "
        print(f" {marker} {p.player_id:<12} £{p.money:<4} income {p.income:<4} "
              f"VP {p.victory_points:<4} cards {p.hand_size}")


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Brass - Rules engine for Brass: Birmingham",
        prog="brass",
    )
    parser.add_argument("--log-level", help="Logging level (default from BRASS_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # New command
    new_parser = subparsers.add_parser("new", help="Create a game and print its summary")
    new_parser.add_argument("--players", nargs="+", required=True, help="Player ids, 2 to 4")
    new_parser.add_argument("--seed", type=int, help="Seed for the shuffle")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a seeded all-pass game")
    simulate_parser.add_argument("--players", type=int, default=2, help="Number of players")
    simulate_parser.add_argument("--seed", type=int, default=0, help="Seed for the shuffle")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    configure_logging(level=args.log_level.upper() if args.log_level else None)

    if args.command == "new":
        cmd_new(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_new(args):
    """Create a game and print it."""
    try:
        state = create_game(GameConfig(player_count=len(args.players)), args.players, seed=args.seed)
    except GameSetupError as e:
        print(f"Error: {e}")
        sys.exit(1)

    engine = GameEngine()
    print_summary(engine.get_game_summary(state), [e.player_id for e in state.turn_order])


def cmd_simulate(args):
    """Play an all-pass game and print the standings."""
    player_ids = [f"player-{n}" for n in range(1, args.players + 1)]
    try:
        state = create_game(GameConfig(player_count=args.players), player_ids, seed=args.seed)
    except GameSetupError as e:
        print(f"Error: {e}")
        sys.exit(1)

    engine = GameEngine()
    steps = simulate_pass_game(state, engine)

    print(f"Game {state.game_id} finished after {steps} actions")
    print(f"Winner: {engine.determine_winner(state)}")
    for s in engine.final_standings(state):
        print(f"  {s.placement}. {s.player_id:<12} VP {s.victory_points:<4} "
              f"income {s.income:<4} £{s.money}")


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn
    from .api import create_app

    settings = Settings.from_env()
    logger.info("Serving on %s:%d (%s)", args.host, args.port, settings.env)
    uvicorn.run(create_app(settings=settings), host=args.host, port=args.port,
                log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
