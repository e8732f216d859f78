"""
Gammon CLI - Command-line interface for the engine.

Usage:
    gammon selfplay [--games N] [--opponent P]   Play bot-vs-bot games
    gammon propose [--dice A B]                  Show the bot's choice for the opening
"""

from __future__ import annotations
import argparse
import random
import sys

from .api.service import GameService
from .bots.expectimax_bot import ExpectimaxBot
from .bots.policy import FirstLegalPolicy, RandomPolicy
from .config import configure_logging, get_settings
from .engine_core.game import BackgammonGame
from .engine_core.state import BackgammonState, Player


# White's policy in selfplay; None means the search bot
OPPONENTS = {
    "search": lambda seed: None,
    "random": lambda seed: RandomPolicy(seed=seed),
    "first": lambda seed: FirstLegalPolicy(),
}


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Gammon - Backgammon Automa Engine",
        prog="gammon",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Selfplay command
    selfplay_parser = subparsers.add_parser("selfplay", help="Play bot-vs-bot games")
    selfplay_parser.add_argument("--games", type=int, default=1, help="Number of games")
    selfplay_parser.add_argument("--budget-ms", type=int, default=settings.time_budget_ms,
                                 help="Search time per move")
    selfplay_parser.add_argument("--seed", type=int, default=settings.seed, help="Dice seed")
    selfplay_parser.add_argument("--max-turns", type=int, default=500,
                                 help="Abandon a game after this many turns")
    selfplay_parser.add_argument("--quiet", action="store_true", help="Only print results")
    selfplay_parser.add_argument("--opponent", choices=sorted(OPPONENTS), default="search",
                                 help="Policy for White; Black always searches")

    # Propose command
    propose_parser = subparsers.add_parser("propose", help="Search the opening position")
    propose_parser.add_argument("--dice", type=int, nargs=2, metavar=("FIRST", "SECOND"),
                                help="Fixed dice instead of a roll")
    propose_parser.add_argument("--budget-ms", type=int, default=settings.time_budget_ms,
                                help="Search time")
    propose_parser.add_argument("--seed", type=int, default=settings.seed, help="Dice seed")

    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper())

    if args.command == "selfplay":
        cmd_selfplay(args)
    elif args.command == "propose":
        cmd_propose(args)
    else:
        parser.print_help()
        sys.exit(1)


def _make_service(seed: int | None) -> GameService:
    settings = get_settings()
    game = BackgammonGame()
    rng = random.Random(seed)
    bot = ExpectimaxBot(
        max_depth=settings.max_search_depth,
        significance_margin=settings.significance_margin,
        game=game,
        rng=rng,
    )
    return GameService(game=game, rng=rng, bot=bot)


def cmd_selfplay(args):
    """Play bot-vs-bot games and report the winners."""
    service = _make_service(args.seed)
    opponent = OPPONENTS[args.opponent](args.seed)
    wins = {Player.BLACK: 0, Player.WHITE: 0}

    for number in range(1, args.games + 1):
        seed = None if args.seed is None else args.seed + number - 1
        service.new_game(seed)
        turns = 0
        while not service.state.is_terminal() and turns < args.max_turns:
            mover = service.state.player_to_move
            dice = tuple(service.state.dice)
            policy = opponent if mover is Player.WHITE else None
            decisions = service.play_bot_turn(args.budget_ms, policy=policy)
            turns += 1
            if not args.quiet:
                print(f"\n{mover.display_name} rolls {dice[0]}-{dice[1]}")
                for decision in decisions:
                    print(f"  {decision.description} "
                          f"(value {decision.value:.4f}, {decision.expanded_nodes} nodes)")
                print(render_board(service.state))

        if service.state.is_terminal():
            winner = service.state.winner()
            wins[winner] += 1
            print(f"Game {number}: {winner.display_name} wins after {turns} turns")
        else:
            print(f"Game {number}: abandoned after {turns} turns")

    print(f"\nBlack {wins[Player.BLACK]} - White {wins[Player.WHITE]}")


def cmd_propose(args):
    """Show the bot's decision and diagnostics for the opening position."""
    service = _make_service(args.seed)
    if args.dice:
        try:
            service.state.set_dice(*args.dice)
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)

    print(render_board(service.state))
    response = service.propose_move(args.budget_ms)

    print(f"\nChosen action: {response.action} ({response.description})")
    print(f"Value: {response.value:.6f}")
    if len(response.tied_actions) > 1:
        print(f"Tied: {response.tied_actions}")
    for depth, line in response.depth_lines.items():
        print(f"  {line}")
    print(f"Expanded nodes: {response.expanded_nodes}")
    print(f"Max depth: {response.max_depth}")


def render_board(state: BackgammonState) -> str:
    """
    Text drawing of the board.

    Top row is points 13-24, bottom row 12-1; each cell shows the owner
    letter and disk count.
    """
    def cell(point: int) -> str:
        owner = state.owner(point)
        if owner is Player.NONE:
            return " . "
        letter = "B" if owner is Player.BLACK else "W"
        return f"{letter}{state.count(point):<2}"

    top = " ".join(f"{p:>3}" for p in range(13, 25))
    bottom = " ".join(f"{p:>3}" for p in range(12, 0, -1))
    lines = [
        top,
        " ".join(cell(p) for p in range(13, 25)),
        " ".join(cell(p) for p in range(12, 0, -1)),
        bottom,
        (f"bar B:{state.count(Player.BLACK.bar_point)} W:{state.count(Player.WHITE.bar_point)}"
         f"  off B:{state.borne_off(Player.BLACK)} W:{state.borne_off(Player.WHITE)}"
         f"  dice {state.dice[0]}-{state.dice[1]}"
         f"  {state.player_to_move.display_name} to move"),
    ]
    return "\n".join(lines)


if __name__ == "__main__":
    main()
