"""Initial-placement simulation runner.

Generates boards and runs the snake-order initial placement for every
player through the build simulator and turn controller, choosing spots at
random.  Reports whether every placement committed and how long it took.

Usage::

    python -m hexboard.simulate --games 20 --players 4 --seed 7
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from . import board_generator, log, settings
from .engine.turn_controller import GameContext, TurnController
from .models.board import Board
from .models.build import InitialPlacement
from .rng import SeededRandom

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

_DEFAULT_NUM_GAMES = 10
_DEFAULT_NUM_PLAYERS = 4
_MAX_PLAYERS = 6

# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def run_initial_placement(seed: int | str, num_players: int) -> Board:
    """Generate a board and place every player's two settlements and roads.

    Raises:
        RuntimeError: If a placement cannot be completed or committed.
    """
    rng = SeededRandom(seed)
    board = board_generator.generate_board(rng)
    controller = TurnController(
        GameContext(board=board, player_ids=list(range(num_players)))
    )

    for owner_id in controller.initial_placement_order():
        simulator = controller.begin_build(owner_id, InitialPlacement())
        while True:
            spots = simulator.get_next_valid_spots()
            if spots.is_complete:
                break
            assert spots.build_type is not None and spots.spot_ids is not None
            if not spots.spot_ids:
                raise RuntimeError(
                    f'Player {owner_id} has no legal {spots.build_type} spot'
                )
            simulator.build(spots.build_type, rng.choice(sorted(spots.spot_ids)))
        result = controller.commit(simulator)
        if not result.success:
            raise RuntimeError(f'Player {owner_id}: {result.error_message}')
    return board


def run_simulation(
    num_games: int = _DEFAULT_NUM_GAMES,
    num_players: int = _DEFAULT_NUM_PLAYERS,
    start_seed: int = 0,
    verbose: bool = False,
) -> dict[str, object]:
    """Run *num_games* placements and return a results dict.

    Returns a dict with keys:
    - ``completed``: number of games where every placement committed.
    - ``failures``: list of ``(seed, message)`` for the others.
    - ``elapsed``: total wall-clock time in seconds.
    """
    completed = 0
    failures: list[tuple[int, str]] = []
    t0 = time.monotonic()
    for game_idx in range(num_games):
        seed = start_seed + game_idx
        try:
            board = run_initial_placement(seed, num_players)
        except RuntimeError as exc:
            failures.append((seed, str(exc)))
            logger.warning('seed %d: %s', seed, exc)
            continue
        completed += 1
        if verbose:
            print(
                f'  seed {seed:4d}: {len(board.settlements)} settlements, '
                f'{len(board.roads)} roads, robber at {board.robber_coord}'
            )
    elapsed = time.monotonic() - t0

    _print_report(num_games, completed, failures, elapsed)
    return {'completed': completed, 'failures': failures, 'elapsed': elapsed}


def _print_report(
    num_games: int,
    completed: int,
    failures: list[tuple[int, str]],
    elapsed: float,
) -> None:
    """Print a summary report to stdout."""
    print('=' * 50)
    print('Initial Placement Simulation')
    print('=' * 50)
    print(f'Games run:       {num_games}')
    print(f'Completed:       {completed}')
    print(f'Failed:          {len(failures)}')
    print(f'Elapsed:         {elapsed:.2f}s')
    for seed, message in failures:
        print(f'  seed {seed}: {message}')
    print('=' * 50)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def _parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description='Initial placement simulation runner')
    parser.add_argument(
        '--games', type=int, default=_DEFAULT_NUM_GAMES, help='Number of games to run'
    )
    parser.add_argument(
        '--players',
        type=int,
        choices=range(1, _MAX_PLAYERS + 1),
        default=_DEFAULT_NUM_PLAYERS,
        help='Number of players',
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Starting RNG seed (default: HEXBOARD_SEED, else 0)',
    )
    parser.add_argument(
        '-v', '--verbose', action='store_true', help='Print per-game results'
    )
    args = parser.parse_args(argv)
    if args.seed is None:
        try:
            args.seed = int(settings.SEED) if settings.SEED is not None else 0
        except ValueError:
            parser.error(f'HEXBOARD_SEED must be an integer, got {settings.SEED!r}')
    return args


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    log.configure_logging()
    results = run_simulation(
        num_games=args.games,
        num_players=args.players,
        start_seed=args.seed,
        verbose=args.verbose,
    )
    return 0 if not results['failures'] else 1


if __name__ == '__main__':
    sys.exit(main())
