"""Placement rules engine.

Pure queries over a :class:`Board`: where a player may put a settlement, a
road or a city, plus the production and robber lookups built on the same
geometry.  Nothing here mutates the board.

The set-returning queries and the single-spot predicates agree with each
other, so the predicates can re-check a spot at commit time without
recomputing the whole set.
"""

from __future__ import annotations

import collections

from .. import hex_coords
from ..hex_coords import Location
from ..models.board import (
    PRODUCTION_TABLE,
    Board,
    ResourceType,
    SettlementLevel,
    Tile,
)
from ..models.build import BuildType

# Pieces each player owns for the whole game.
ASSET_LIMITS: dict[BuildType, int] = {
    BuildType.ROAD: 15,
    BuildType.SETTLEMENT: 5,
    BuildType.CITY: 4,
}

# ---------------------------------------------------------------------------
# Settlements
# ---------------------------------------------------------------------------


def get_valid_settlement_spots(board: Board, owner_id: int | None = None) -> set[str]:
    """Return the vertex ids where a settlement may be placed.

    A spot must be on the board, unoccupied and not next to any settlement
    (the distance rule).  With *owner_id* it must also touch one of that
    player's roads; pass None during initial placement.
    """
    valid = (
        set(board.all_vertex_ids())
        - set(board.settlements)
        - board.get_settlement_neighbor_ids()
    )
    if owner_id is None:
        return valid
    return valid & board.get_player_road_vertex_ids(owner_id)


def is_settlement_spot_valid(
    board: Board, location: Location, owner_id: int | None = None
) -> bool:
    """Return True if a settlement may be placed at *location*."""
    vertex = hex_coords.location_to_coord(location)
    if not board.has_vertex(vertex) or vertex.id in board.settlements:
        return False
    neighbours = hex_coords.get_adj_vertices_from_vertex(vertex)
    if any(n.id in board.settlements for n in neighbours):
        return False
    if owner_id is None:
        return True
    return any(
        board.get_road_owner(hex_coords.get_edge_from_vertices(vertex, n)) == owner_id
        for n in neighbours
    )


# ---------------------------------------------------------------------------
# Roads
# ---------------------------------------------------------------------------


def get_valid_road_spots(
    board: Board,
    owner_id: int,
    seed_settlement_ids: set[str] | None = None,
) -> set[str]:
    """Return the edge ids where *owner_id* may place a road.

    Breadth-first search over vertices, starting at *seed_settlement_ids*
    (default: all of the owner's settlements):

    * an edge holding the owner's road is walked to its far vertex;
    * an empty edge is a result and is not walked;
    * an edge holding another player's road is a dead end;
    * a vertex holding another player's settlement yields no empty edges,
      though the owner's own roads still lead through it.

    The result covers the whole reachable frontier, so roads chain along
    the owner's network rather than only next to settlements.
    """
    if seed_settlement_ids is None:
        seed_settlement_ids = board.get_player_settlement_ids(owner_id)

    visited: set[str] = set(seed_settlement_ids)
    queue: collections.deque[str] = collections.deque(sorted(seed_settlement_ids))
    result: set[str] = set()

    while queue:
        vertex_id = queue.popleft()
        vertex = hex_coords.id_to_coord(vertex_id)
        occupant = board.get_settlement_owner(vertex_id)
        blocked = occupant is not None and occupant != owner_id

        for neighbour in hex_coords.get_adj_vertices_from_vertex(vertex):
            edge = hex_coords.get_edge_from_vertices(vertex, neighbour)
            if not board.has_edge(edge):
                continue
            road_owner = board.get_road_owner(edge)
            if road_owner is None:
                if not blocked:
                    result.add(edge.id)
            elif road_owner == owner_id and neighbour.id not in visited:
                visited.add(neighbour.id)
                queue.append(neighbour.id)
    return result


def is_road_spot_valid(
    board: Board, location: Location, owner_id: int | None = None
) -> bool:
    """Return True if a road may be placed at *location*.

    Without *owner_id* this only checks the edge is on the board and empty.
    With it, one end of the edge must be the owner's settlement, or a vertex
    free of other players' settlements that touches one of the owner's
    roads.
    """
    edge = hex_coords.location_to_coord(location)
    if not board.has_edge(edge) or edge.id in board.roads:
        return False
    if owner_id is None:
        return True
    for vertex in hex_coords.get_vertices_from_edge(edge):
        occupant = board.get_settlement_owner(vertex)
        if occupant == owner_id:
            return True
        if occupant is not None:
            continue
        for other in hex_coords.get_adj_edges_from_vertex(vertex):
            if other != edge and board.get_road_owner(other) == owner_id:
                return True
    return False


def is_road_connected_to_settlement(
    board: Board,
    edge_location: Location,
    settlement_location: Location,
    owner_id: int,
) -> bool:
    """Return True if the edge ends at the given settlement owned by *owner_id*."""
    edge = hex_coords.location_to_coord(edge_location)
    settlement_id = hex_coords.location_to_id(settlement_location)
    if settlement_id not in {v.id for v in hex_coords.get_vertices_from_edge(edge)}:
        return False
    return board.get_settlement_owner(settlement_id) == owner_id


# ---------------------------------------------------------------------------
# Cities
# ---------------------------------------------------------------------------


def get_valid_city_spots(board: Board, owner_id: int) -> set[str]:
    """Return ids of the owner's settlements that can be upgraded."""
    return {
        s.id
        for s in board.filter(
            'settlements',
            lambda s: s.owner_id == owner_id and s.level == SettlementLevel.SETTLEMENT,
        )
    }


def is_city_spot_valid(board: Board, location: Location, owner_id: int) -> bool:
    settlement = board.get_settlement(location)
    return (
        settlement is not None
        and settlement.owner_id == owner_id
        and settlement.level == SettlementLevel.SETTLEMENT
    )


def get_remaining_assets(board: Board, owner_id: int) -> dict[BuildType, int]:
    """Return how many more of each piece *owner_id* can place.

    Upgrading to a city returns the settlement piece to the player's supply.
    """
    roads = len(board.filter('roads', lambda r: r.owner_id == owner_id))
    owned = board.filter('settlements', lambda s: s.owner_id == owner_id)
    cities = sum(1 for s in owned if s.level == SettlementLevel.CITY)
    settlements = len(owned) - cities
    return {
        BuildType.ROAD: ASSET_LIMITS[BuildType.ROAD] - roads,
        BuildType.SETTLEMENT: ASSET_LIMITS[BuildType.SETTLEMENT] - settlements,
        BuildType.CITY: ASSET_LIMITS[BuildType.CITY] - cities,
    }


# ---------------------------------------------------------------------------
# Production and robber
# ---------------------------------------------------------------------------


def get_tile_production(
    board: Board, tile: Tile, check_robber: bool = False
) -> ResourceType | None:
    """Return the resource a tile produces, or None.

    With *check_robber*, a tile under the robber produces nothing.
    """
    if check_robber and board.robber_coord == tile.coord:
        return None
    return PRODUCTION_TABLE.get(tile.terrain_type)


def is_productive_tile(board: Board, tile: Tile) -> bool:
    """Return True if the tile has a token, a resource and no robber."""
    return (
        get_tile_production(board, tile, check_robber=True) is not None
        and tile.number_token is not None
    )


def get_resources_at_vertex(board: Board, location: Location) -> list[ResourceType]:
    """Return the resources of the tiles around a vertex (desert skipped)."""
    resources: list[ResourceType] = []
    for tile in board.get_tiles_at_vertex(location):
        resource = get_tile_production(board, tile)
        if resource is not None:
            resources.append(resource)
    return resources


def get_robbable_tile_ids(board: Board) -> list[str]:
    """Return ids of every tile the robber may move to."""
    return [t.id for t in board.filter('tiles', lambda t: t.coord != board.robber_coord)]


def get_robbable_settlement_ids(
    board: Board, owner_id: int, tile_location: Location
) -> list[str]:
    """Return ids of other players' settlements on the corners of a tile."""
    tile = hex_coords.location_to_coord(tile_location)
    result: list[str] = []
    for vertex in hex_coords.get_vertices_from_hex(tile):
        occupant = board.get_settlement_owner(vertex)
        if occupant is not None and occupant != owner_id:
            result.append(vertex.id)
    return result
