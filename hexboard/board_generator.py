"""Board generation algorithm.

Generates a hexagonal board of a given radius (radius 2 is the standard
19-tile board) with shuffled terrain and spiral-ordered number tokens.

Terrain
-------
The terrain distribution is flattened into a pool, shuffled with the
injected RNG, and one value is popped per tile in enumeration order (see
:func:`hex_coords.hexes_in_radius`).

Number tokens
-------------
Tokens are not shuffled.  One of the six outer corners is chosen at random
and the board is walked as a counter-clockwise spiral from that corner
inward to the centre.  Tokens are laid in the fixed
:data:`NUMBER_TOKENS_ORDER` along that walk, skipping the desert.  This is
the printed rulebook's method; the fixed sequence keeps 6 and 8 apart
without an explicit adjacency check.

Corners are named by their direction from the centre::

    top-left     (0, -1, +1)
    left         (-1, 0, +1)
    bottom-left  (-1, +1, 0)
    bottom-right (0, +1, -1)
    right        (+1, 0, -1)
    top-right    (+1, -1, 0)

The spiral walks them counter-clockwise, so the step along a ring side from
corner i is ``corner[i + 1] - corner[i]`` in that order.  The random start
is drawn from the clockwise listing returned by :func:`board_corners`
(top-left, top-right, right, bottom-right, bottom-left, left), so a given
``next_int`` draw always names the same corner.

Any mismatch between a pool and the tiles it must cover raises
:class:`GenerationError`; nothing is truncated or recycled.
"""

from __future__ import annotations

import logging

from . import hex_coords, settings
from .hex_coords import CubeCoord
from .models.board import Board, TerrainType
from .rng import RandomSource

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Board constants
# ---------------------------------------------------------------------------

# Standard terrain distribution (sums to 19).
TERRAIN_DISTRIBUTION: dict[TerrainType, int] = {
    TerrainType.FOREST: 4,
    TerrainType.HILL: 3,
    TerrainType.PASTURE: 4,
    TerrainType.FIELD: 4,
    TerrainType.MOUNTAIN: 3,
    TerrainType.DESERT: 1,
}

# Standard number tokens in their printed (alphabetical) order.
NUMBER_TOKENS_ORDER: list[int] = [5, 2, 6, 3, 8, 10, 9, 12, 11, 4, 8, 10, 9, 4, 5, 6, 3, 11]

# Unit corner directions in counter-clockwise walk order.
_CORNER_DIRECTIONS: list[tuple[int, int, int]] = [
    (0, -1, 1),  # top-left
    (-1, 0, 1),  # left
    (-1, 1, 0),  # bottom-left
    (0, 1, -1),  # bottom-right
    (1, 0, -1),  # right
    (1, -1, 0),  # top-right
]

# Start-corner candidates, clockwise from top-left; indexed by ``next_int``.
_START_CORNER_DIRECTIONS: list[tuple[int, int, int]] = [
    _CORNER_DIRECTIONS[0],  # top-left
    _CORNER_DIRECTIONS[5],  # top-right
    _CORNER_DIRECTIONS[4],  # right
    _CORNER_DIRECTIONS[3],  # bottom-right
    _CORNER_DIRECTIONS[2],  # bottom-left
    _CORNER_DIRECTIONS[1],  # left
]


class GenerationError(ValueError):
    """Raised when generation inputs do not match the board they must cover."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_board(
    rng: RandomSource,
    terrain_distribution: dict[TerrainType, int] | None = None,
    number_tokens: list[int] | None = None,
    radius: int | None = None,
) -> Board:
    """Generate and return a board.

    Args:
        rng: Injected random source; the same seed yields the same board.
        terrain_distribution: Count per terrain type.  Must sum to the tile
            count.  Defaults to :data:`TERRAIN_DISTRIBUTION`.
        number_tokens: Tokens in assignment order.  Must have one entry per
            non-desert tile.  Defaults to :data:`NUMBER_TOKENS_ORDER`.
        radius: Board radius; defaults to ``settings.BOARD_RADIUS``.

    Returns:
        A :class:`Board` with every tile set and the robber on the desert.

    Raises:
        GenerationError: On any pool / tile-count mismatch, or if the layout
            has no desert for the robber.
    """
    if terrain_distribution is None:
        terrain_distribution = TERRAIN_DISTRIBUTION
    if number_tokens is None:
        number_tokens = NUMBER_TOKENS_ORDER
    if radius is None:
        radius = settings.BOARD_RADIUS

    board = Board()
    _assign_terrain(board, rng, terrain_distribution, radius)
    _assign_number_tokens(board, rng, number_tokens, radius)

    logger.info(
        'Generated board: %d tiles, robber at %s', len(board.tiles), board.robber_coord
    )
    return board


def board_corners(radius: int) -> list[CubeCoord]:
    """Return the six outer corner tiles of a board, clockwise from top-left."""
    if radius < 1:
        raise ValueError(f'A board of radius {radius} has no corners')
    return [
        CubeCoord(q=dq * radius, r=dr * radius, s=ds * radius)
        for dq, dr, ds in _START_CORNER_DIRECTIONS
    ]


def spiral_coords(start_corner: CubeCoord) -> list[CubeCoord]:
    """Return every tile from *start_corner* spiralling inward to the centre.

    Each ring is walked counter-clockwise starting at the corner on the same
    ray as *start_corner*; the centre comes last.

    Raises:
        ValueError: If *start_corner* is neither the centre nor a corner.
    """
    q, r, s = start_corner.as_tuple()
    radius = max(abs(q), abs(r), abs(s))
    if radius == 0:
        return [start_corner]
    direction = (q // radius, r // radius, s // radius)
    if direction not in _CORNER_DIRECTIONS or (q, r, s) != tuple(
        c * radius for c in direction
    ):
        raise ValueError(f'Spiral must start at a board corner, got {start_corner}')
    first_side = _CORNER_DIRECTIONS.index(direction)

    result: list[CubeCoord] = []
    for ring in range(radius, 0, -1):
        coord = CubeCoord(q=direction[0] * ring, r=direction[1] * ring, s=direction[2] * ring)
        for side in range(6):
            here = _CORNER_DIRECTIONS[(first_side + side) % 6]
            there = _CORNER_DIRECTIONS[(first_side + side + 1) % 6]
            step = CubeCoord(q=there[0] - here[0], r=there[1] - here[1], s=there[2] - here[2])
            for _ in range(ring):
                result.append(coord)
                coord = hex_coords.add(coord, step)
    result.append(CubeCoord(q=0, r=0, s=0))
    return result


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _assign_terrain(
    board: Board,
    rng: RandomSource,
    distribution: dict[TerrainType, int],
    radius: int,
) -> None:
    """Shuffle the terrain pool and create one tile per board position."""
    positions = hex_coords.hexes_in_radius(radius)
    pool = [
        terrain for terrain, count in distribution.items() for _ in range(count)
    ]
    if len(pool) != len(positions):
        raise GenerationError(
            f'Terrain pool size ({len(pool)}) does not match tile count '
            f'({len(positions)})'
        )
    rng.shuffle(pool)
    for coord in positions:
        board.update_tile(coord, terrain_type=pool.pop())


def _assign_number_tokens(
    board: Board,
    rng: RandomSource,
    number_tokens: list[int],
    radius: int,
) -> None:
    """Lay tokens along the spiral and park the robber on the first desert."""
    productive = sum(
        1 for t in board.tiles.values() if t.terrain_type != TerrainType.DESERT
    )
    if len(number_tokens) != productive:
        raise GenerationError(
            f'Number token count ({len(number_tokens)}) does not match '
            f'non-desert tile count ({productive})'
        )
    if productive == len(board.tiles):
        raise GenerationError('Layout has no desert tile for the robber')

    if radius == 0:
        start = CubeCoord(q=0, r=0, s=0)
    else:
        corners = board_corners(radius)
        start = corners[rng.next_int(0, len(corners) - 1)]
    logger.debug('Number token spiral starts at %s', start)

    token_iter = iter(number_tokens)
    for coord in spiral_coords(start):
        tile = board.tiles[coord.id]
        if tile.terrain_type == TerrainType.DESERT:
            tile.number_token = None
            if board.robber_coord is None:
                board.update_robber_coord(coord)
        else:
            tile.number_token = next(token_iter)
