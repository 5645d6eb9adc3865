"""Hex-grid coordinate algebra.

Tiles, vertices and edges all live in the same integer cube-coordinate space
(q, r, s) and are told apart by arithmetic class.  See
https://www.redblobgames.com/grids/hexagons/#coordinates-cube for the tile
part of the scheme.

Coordinate classes
------------------
* Tile:   ``q + r + s == 0``
* Vertex: ``|q + r + s| == 1``.  A vertex is a tile centre plus one unit
  vector, so it is shared by exactly three tiles.
* Edge:   exactly two of ``|q|, |r|, |s|`` are odd.  An edge is the pointwise
  sum of the two vertices it joins.

Vertex order around a tile
--------------------------
The six corners of tile H are returned in a fixed rotational order.  Index i
sits at ``30 + 60 * i`` degrees (counter-clockwise, y up)::

    0: H + (+1,  0,  0)    30 deg
    1: H + ( 0, -1,  0)    90 deg
    2: H + ( 0,  0, +1)   150 deg
    3: H + (-1,  0,  0)   210 deg
    4: H + ( 0, +1,  0)   270 deg
    5: H + ( 0,  0, -1)   330 deg

Renderers rely on this order to project vertices to pixels.

Every function taking a classed coordinate raises ``ValueError`` when given a
coordinate of the wrong class.
"""

from __future__ import annotations

import pydantic


class CubeCoord(pydantic.BaseModel):
    """An integer cube coordinate.  May denote a tile, a vertex or an edge."""

    model_config = pydantic.ConfigDict(frozen=True)

    q: int
    r: int
    s: int

    @property
    def id(self) -> str:
        """Canonical ``"q,r,s"`` id."""
        return coord_to_id(self)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.q, self.r, self.s)

    def __str__(self) -> str:
        return coord_to_id(self)


# A location is accepted wherever callers may hold either form.
Location = CubeCoord | str

# Six tile neighbour directions, indexed 0-5.
_HEX_DIRECTIONS: list[tuple[int, int, int]] = [
    (1, -1, 0),
    (1, 0, -1),
    (0, 1, -1),
    (-1, 1, 0),
    (-1, 0, 1),
    (0, -1, 1),
]

# Tile centre -> corner offsets in rotational order (index 0 at 30 degrees).
_VERTEX_OFFSETS: list[tuple[int, int, int]] = [
    (1, 0, 0),
    (0, -1, 0),
    (0, 0, 1),
    (-1, 0, 0),
    (0, 1, 0),
    (0, 0, -1),
]

# Vertex -> neighbouring vertex offsets.  Which triple applies depends on the
# vertex's sum (+1 or -1).
_VERTEX_STEPS_DOWN: list[tuple[int, int, int]] = [(-1, -1, 0), (-1, 0, -1), (0, -1, -1)]
_VERTEX_STEPS_UP: list[tuple[int, int, int]] = [(1, 0, 1), (0, 1, 1), (1, 1, 0)]

# Vertex -> adjacent tile offsets (only the three yielding a tile are kept).
_UNIT_OFFSETS: list[tuple[int, int, int]] = [
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
]

# ---------------------------------------------------------------------------
# Arithmetic and ids
# ---------------------------------------------------------------------------


def add(a: CubeCoord, b: CubeCoord) -> CubeCoord:
    """Return the pointwise sum of two coordinates."""
    return CubeCoord(q=a.q + b.q, r=a.r + b.r, s=a.s + b.s)


def subtract(a: CubeCoord, b: CubeCoord) -> CubeCoord:
    """Return the pointwise difference ``a - b``."""
    return CubeCoord(q=a.q - b.q, r=a.r - b.r, s=a.s - b.s)


def _offset(coord: CubeCoord, delta: tuple[int, int, int]) -> CubeCoord:
    dq, dr, ds = delta
    return CubeCoord(q=coord.q + dq, r=coord.r + dr, s=coord.s + ds)


def coord_to_id(coord: CubeCoord) -> str:
    """Return the canonical ``"q,r,s"`` id of *coord*."""
    return f'{coord.q},{coord.r},{coord.s}'


def id_to_coord(coord_id: str) -> CubeCoord:
    """Parse a canonical id back into a coordinate.

    Raises:
        ValueError: If *coord_id* is not three comma-separated integers.
    """
    parts = coord_id.split(',')
    if len(parts) != 3:
        raise ValueError(f'Malformed coordinate id: {coord_id!r}')
    try:
        q, r, s = (int(p) for p in parts)
    except ValueError as exc:
        raise ValueError(f'Malformed coordinate id: {coord_id!r}') from exc
    return CubeCoord(q=q, r=r, s=s)


def location_to_id(location: Location) -> str:
    """Normalise a coordinate-or-id argument to an id."""
    if isinstance(location, str):
        return location
    return coord_to_id(location)


def location_to_coord(location: Location) -> CubeCoord:
    """Normalise a coordinate-or-id argument to a coordinate."""
    if isinstance(location, str):
        return id_to_coord(location)
    return location


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def is_valid_hex(coord: CubeCoord) -> bool:
    """Return True if *coord* is a tile coordinate."""
    return coord.q + coord.r + coord.s == 0


def is_valid_vertex(coord: CubeCoord) -> bool:
    """Return True if *coord* is a vertex coordinate."""
    return abs(coord.q + coord.r + coord.s) == 1


def is_valid_edge(coord: CubeCoord) -> bool:
    """Return True if exactly two of the components are odd."""
    odd = sum(1 for c in (coord.q, coord.r, coord.s) if c % 2 == 1)
    return odd == 2


def _require_hex(coord: CubeCoord) -> None:
    if not is_valid_hex(coord):
        raise ValueError(f'Not a tile coordinate: {coord}')


def _require_vertex(coord: CubeCoord) -> None:
    if not is_valid_vertex(coord):
        raise ValueError(f'Not a vertex coordinate: {coord}')


def _require_edge(coord: CubeCoord) -> None:
    if not is_valid_edge(coord):
        raise ValueError(f'Not an edge coordinate: {coord}')


# ---------------------------------------------------------------------------
# Tiles
# ---------------------------------------------------------------------------


def get_adj_hexes(hex_coord: CubeCoord) -> list[CubeCoord]:
    """Return the 6 neighbouring tile coordinates in direction order."""
    _require_hex(hex_coord)
    return [_offset(hex_coord, d) for d in _HEX_DIRECTIONS]


def hexes_in_radius(radius: int) -> list[CubeCoord]:
    """Return every tile within *radius* of the origin.

    Ordered by q ascending, then r ascending.  The generator assigns terrain
    in this order.
    """
    if radius < 0:
        raise ValueError(f'Radius must be non-negative, got {radius}')
    result: list[CubeCoord] = []
    for q in range(-radius, radius + 1):
        for r in range(max(-radius, -q - radius), min(radius, -q + radius) + 1):
            result.append(CubeCoord(q=q, r=r, s=-q - r))
    return result


def get_vertices_from_hex(hex_coord: CubeCoord) -> list[CubeCoord]:
    """Return the 6 corners of a tile in rotational order (index 0 at 30 deg)."""
    _require_hex(hex_coord)
    return [_offset(hex_coord, d) for d in _VERTEX_OFFSETS]


def get_vertex_index(hex_coord: CubeCoord, vertex: CubeCoord) -> int | None:
    """Return the rotational index of *vertex* around *hex_coord*.

    Returns None if the vertex is not a corner of that tile.
    """
    _require_hex(hex_coord)
    _require_vertex(vertex)
    diff = subtract(vertex, hex_coord).as_tuple()
    if diff in _VERTEX_OFFSETS:
        return _VERTEX_OFFSETS.index(diff)
    return None


def get_edges_from_hex(hex_coord: CubeCoord) -> list[CubeCoord]:
    """Return the 6 sides of a tile; side i joins corners i and i+1."""
    vertices = get_vertices_from_hex(hex_coord)
    return [
        get_edge_from_vertices(vertices[i], vertices[(i + 1) % 6]) for i in range(6)
    ]


# ---------------------------------------------------------------------------
# Vertices
# ---------------------------------------------------------------------------


def get_adj_hexes_from_vertex(vertex: CubeCoord) -> list[CubeCoord]:
    """Return the three tile coordinates sharing *vertex*.

    Whether those tiles exist on a given board is the board's business.
    """
    _require_vertex(vertex)
    candidates = (_offset(vertex, d) for d in _UNIT_OFFSETS)
    return [c for c in candidates if is_valid_hex(c)]


def are_vertices_adjacent(v1: CubeCoord, v2: CubeCoord) -> bool:
    """Return True if *v1* and *v2* are joined by an edge."""
    _require_vertex(v1)
    _require_vertex(v2)
    diff = subtract(v2, v1).as_tuple()
    return diff in _VERTEX_STEPS_DOWN or diff in _VERTEX_STEPS_UP


def get_adj_vertices_from_vertex(vertex: CubeCoord) -> list[CubeCoord]:
    """Return the 3 vertices one edge away from *vertex*."""
    _require_vertex(vertex)
    steps = (
        _VERTEX_STEPS_DOWN
        if is_valid_vertex(_offset(vertex, _VERTEX_STEPS_DOWN[0]))
        else _VERTEX_STEPS_UP
    )
    return [_offset(vertex, d) for d in steps]


def get_adj_edges_from_vertex(vertex: CubeCoord) -> list[CubeCoord]:
    """Return the 3 edges that end at *vertex*."""
    return [
        get_edge_from_vertices(vertex, n) for n in get_adj_vertices_from_vertex(vertex)
    ]


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------


def get_edge_from_vertices(v1: CubeCoord, v2: CubeCoord) -> CubeCoord:
    """Return the edge joining two adjacent vertices.

    Raises:
        ValueError: If either input is not a vertex or the two do not share
            an edge.
    """
    edge = add(v1, v2)
    # Parity alone passes for two same-sum vertices, so check adjacency too.
    if not are_vertices_adjacent(v1, v2) or not is_valid_edge(edge):
        raise ValueError(f'Vertices {v1} and {v2} do not share an edge')
    return edge


def get_vertices_from_edge(edge: CubeCoord) -> tuple[CubeCoord, CubeCoord]:
    """Return the two vertices joined by *edge*.

    The even component is twice the shared component of both vertices; the
    odd ones split as ``(x + 1) / 2`` and ``(x - 1) / 2``.
    """
    _require_edge(edge)
    q, r, s = edge.as_tuple()
    if q % 2 == 0:
        return (
            CubeCoord(q=q // 2, r=(r + 1) // 2, s=(s + 1) // 2),
            CubeCoord(q=q // 2, r=(r - 1) // 2, s=(s - 1) // 2),
        )
    if r % 2 == 0:
        return (
            CubeCoord(q=(q + 1) // 2, r=r // 2, s=(s + 1) // 2),
            CubeCoord(q=(q - 1) // 2, r=r // 2, s=(s - 1) // 2),
        )
    return (
        CubeCoord(q=(q + 1) // 2, r=(r + 1) // 2, s=s // 2),
        CubeCoord(q=(q - 1) // 2, r=(r - 1) // 2, s=s // 2),
    )
