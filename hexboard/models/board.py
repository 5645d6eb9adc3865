"""Board data models.

The board stores tiles, roads, settlements and trading posts in plain dicts
keyed by canonical coordinate id (``"q,r,s"``).  The set of legal vertex and
edge ids is derived from the tiles and memoised.
"""

from __future__ import annotations

import enum
import typing

import pydantic

from .. import hex_coords
from ..hex_coords import CubeCoord, Location


class TerrainType(enum.StrEnum):
    """Terrain tile types."""

    FOREST = 'forest'
    HILL = 'hill'
    PASTURE = 'pasture'
    FIELD = 'field'
    MOUNTAIN = 'mountain'
    DESERT = 'desert'


class ResourceType(enum.StrEnum):
    """The five resource types produced by terrain."""

    LUMBER = 'lumber'
    BRICK = 'brick'
    WOOL = 'wool'
    WHEAT = 'wheat'
    ORE = 'ore'


# Map from terrain to the resource it produces (desert excluded).
PRODUCTION_TABLE: dict[TerrainType, ResourceType] = {
    TerrainType.FOREST: ResourceType.LUMBER,
    TerrainType.HILL: ResourceType.BRICK,
    TerrainType.PASTURE: ResourceType.WOOL,
    TerrainType.FIELD: ResourceType.WHEAT,
    TerrainType.MOUNTAIN: ResourceType.ORE,
}


class SettlementLevel(enum.IntEnum):
    """Building level on a vertex."""

    SETTLEMENT = 1
    CITY = 2


class Tile(pydantic.BaseModel):
    """A single terrain tile."""

    coord: CubeCoord
    terrain_type: TerrainType
    number_token: int | None = None  # None for desert

    @property
    def id(self) -> str:
        return self.coord.id


class Settlement(pydantic.BaseModel):
    """A settlement (level 1) or city (level 2) on a vertex."""

    coord: CubeCoord
    owner_id: int
    level: SettlementLevel = SettlementLevel.SETTLEMENT

    @property
    def id(self) -> str:
        return self.coord.id


class Road(pydantic.BaseModel):
    """A road on an edge."""

    coord: CubeCoord
    owner_id: int

    @property
    def id(self) -> str:
        return self.coord.id


class TradingPost(pydantic.BaseModel):
    """A harbour attached to a tile.

    ``index_list`` holds the corner indices (see
    :func:`hex_coords.get_vertices_from_hex`) from which the post can be used;
    ``trade_list`` maps a resource (or ``'generic'``) to its trade ratio.
    """

    coord: CubeCoord
    index_list: list[int] = pydantic.Field(default_factory=list)
    trade_list: dict[str, int] = pydantic.Field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.coord.id

    def vertex_ids(self) -> list[str]:
        """Return the ids of the vertices that give access to this post."""
        corners = hex_coords.get_vertices_from_hex(self.coord)
        return [corners[i].id for i in self.index_list]


CollectionName = typing.Literal['tiles', 'roads', 'settlements', 'trading_posts']
_COLLECTIONS: tuple[str, ...] = typing.get_args(CollectionName)


class Board(pydantic.BaseModel):
    """The complete board state."""

    tiles: dict[str, Tile] = pydantic.Field(default_factory=dict)
    roads: dict[str, Road] = pydantic.Field(default_factory=dict)
    settlements: dict[str, Settlement] = pydantic.Field(default_factory=dict)
    trading_posts: dict[str, TradingPost] = pydantic.Field(default_factory=dict)
    robber_coord: CubeCoord | None = None

    # Derived from ``tiles``; reset whenever a tile is created or removed.
    _vertex_ids: frozenset[str] | None = pydantic.PrivateAttr(default=None)
    _edge_ids: frozenset[str] | None = pydantic.PrivateAttr(default=None)

    # ------------------------------------------------------------------
    # Tiles
    # ------------------------------------------------------------------

    def get_tile(self, location: Location) -> Tile | None:
        return self.tiles.get(hex_coords.location_to_id(location))

    def update_tile(
        self,
        location: Location,
        terrain_type: TerrainType | None = None,
        number_token: int | None = None,
    ) -> Tile:
        """Create a tile or override its terrain and/or number token.

        ``None`` arguments leave the existing value untouched.  Creating a
        tile requires a terrain type.
        """
        coord = hex_coords.location_to_coord(location)
        if not hex_coords.is_valid_hex(coord):
            raise ValueError(f'Not a tile coordinate: {coord}')
        tile = self.tiles.get(coord.id)
        if tile is None:
            if terrain_type is None:
                raise ValueError(f'Tile {coord} does not exist; terrain type required')
            tile = Tile(coord=coord, terrain_type=terrain_type, number_token=number_token)
            self.tiles[coord.id] = tile
            self._reset_derived()
            return tile
        if terrain_type is not None:
            tile.terrain_type = terrain_type
        if number_token is not None:
            tile.number_token = number_token
        return tile

    def remove_tile(self, location: Location) -> Tile | None:
        tile = self.tiles.pop(hex_coords.location_to_id(location), None)
        if tile is not None:
            self._reset_derived()
        return tile

    def swap_tiles(
        self,
        location_a: Location,
        location_b: Location,
        swap_terrain: bool = True,
        swap_tokens: bool = True,
    ) -> None:
        """Exchange terrain and/or number tokens between two existing tiles."""
        tile_a = self.get_tile(location_a)
        tile_b = self.get_tile(location_b)
        if tile_a is None or tile_b is None:
            raise ValueError(f'Cannot swap missing tiles: {location_a}, {location_b}')
        if swap_terrain:
            tile_a.terrain_type, tile_b.terrain_type = (
                tile_b.terrain_type,
                tile_a.terrain_type,
            )
        if swap_tokens:
            tile_a.number_token, tile_b.number_token = (
                tile_b.number_token,
                tile_a.number_token,
            )

    def search_tile_ids_by_terrain(self, terrain_type: TerrainType) -> list[str]:
        return [t.id for t in self.tiles.values() if t.terrain_type == terrain_type]

    def search_tile_ids_by_number_token(self, number_token: int) -> list[str]:
        return [t.id for t in self.tiles.values() if t.number_token == number_token]

    def update_robber_coord(self, location: Location) -> None:
        """Move the robber onto an existing tile."""
        coord = hex_coords.location_to_coord(location)
        if coord.id not in self.tiles:
            raise ValueError(f'Robber must sit on a board tile, got {coord}')
        self.robber_coord = coord

    # ------------------------------------------------------------------
    # Roads
    # ------------------------------------------------------------------

    def get_road(self, location: Location) -> Road | None:
        return self.roads.get(hex_coords.location_to_id(location))

    def update_road(self, location: Location, owner_id: int) -> Road:
        """Place a road.  Roads are write-once; re-owning one raises."""
        coord = hex_coords.location_to_coord(location)
        if not hex_coords.is_valid_edge(coord):
            raise ValueError(f'Not an edge coordinate: {coord}')
        road = self.roads.get(coord.id)
        if road is not None:
            if road.owner_id != owner_id:
                raise ValueError(
                    f'Road {coord} already owned by player {road.owner_id}'
                )
            return road
        road = Road(coord=coord, owner_id=owner_id)
        self.roads[coord.id] = road
        return road

    def remove_road(self, location: Location) -> Road | None:
        return self.roads.pop(hex_coords.location_to_id(location), None)

    def get_road_owner(self, location: Location) -> int | None:
        road = self.get_road(location)
        return road.owner_id if road is not None else None

    # ------------------------------------------------------------------
    # Settlements
    # ------------------------------------------------------------------

    def get_settlement(self, location: Location) -> Settlement | None:
        return self.settlements.get(hex_coords.location_to_id(location))

    def update_settlement(
        self,
        location: Location,
        owner_id: int | None = None,
        level: SettlementLevel | int | None = None,
    ) -> Settlement:
        """Create a settlement or change the level of an existing one.

        A settlement's owner never changes; passing a different ``owner_id``
        for an occupied vertex raises.
        """
        coord = hex_coords.location_to_coord(location)
        if not hex_coords.is_valid_vertex(coord):
            raise ValueError(f'Not a vertex coordinate: {coord}')
        settlement = self.settlements.get(coord.id)
        if settlement is None:
            if owner_id is None:
                raise ValueError(f'New settlement at {coord} needs an owner')
            settlement = Settlement(
                coord=coord,
                owner_id=owner_id,
                level=SettlementLevel(level or SettlementLevel.SETTLEMENT),
            )
            self.settlements[coord.id] = settlement
            return settlement
        if owner_id is not None and owner_id != settlement.owner_id:
            raise ValueError(
                f'Settlement {coord} already owned by player {settlement.owner_id}'
            )
        if level is not None:
            settlement.level = SettlementLevel(level)
        return settlement

    def remove_settlement(self, location: Location) -> Settlement | None:
        return self.settlements.pop(hex_coords.location_to_id(location), None)

    def get_settlement_owner(self, location: Location) -> int | None:
        settlement = self.get_settlement(location)
        return settlement.owner_id if settlement is not None else None

    # ------------------------------------------------------------------
    # Trading posts
    # ------------------------------------------------------------------

    def get_trading_post(self, location: Location) -> TradingPost | None:
        return self.trading_posts.get(hex_coords.location_to_id(location))

    def update_trading_post(
        self,
        location: Location,
        index_list: list[int],
        trade_list: dict[str, int] | None = None,
    ) -> TradingPost:
        coord = hex_coords.location_to_coord(location)
        if not hex_coords.is_valid_hex(coord):
            raise ValueError(f'Not a tile coordinate: {coord}')
        if any(i not in range(6) for i in index_list):
            raise ValueError(f'Corner indices must be 0-5, got {index_list}')
        post = TradingPost(
            coord=coord, index_list=list(index_list), trade_list=dict(trade_list or {})
        )
        self.trading_posts[coord.id] = post
        return post

    # ------------------------------------------------------------------
    # Generic queries
    # ------------------------------------------------------------------

    def filter(
        self,
        collection_name: CollectionName,
        predicate: typing.Callable[[typing.Any], bool],
    ) -> list[typing.Any]:
        """Return the items of a collection for which *predicate* is true."""
        if collection_name not in _COLLECTIONS:
            raise ValueError(f'Unknown board collection: {collection_name!r}')
        collection: dict[str, typing.Any] = getattr(self, collection_name)
        return [item for item in collection.values() if predicate(item)]

    # ------------------------------------------------------------------
    # Derived geometry
    # ------------------------------------------------------------------

    def all_vertex_ids(self) -> frozenset[str]:
        """Return every vertex id touched by at least one tile."""
        if self._vertex_ids is None:
            self._vertex_ids = frozenset(
                v.id
                for tile in self.tiles.values()
                for v in hex_coords.get_vertices_from_hex(tile.coord)
            )
        return self._vertex_ids

    def all_edge_ids(self) -> frozenset[str]:
        """Return every edge id bordering at least one tile."""
        if self._edge_ids is None:
            self._edge_ids = frozenset(
                e.id
                for tile in self.tiles.values()
                for e in hex_coords.get_edges_from_hex(tile.coord)
            )
        return self._edge_ids

    def has_vertex(self, location: Location) -> bool:
        return hex_coords.location_to_id(location) in self.all_vertex_ids()

    def has_edge(self, location: Location) -> bool:
        return hex_coords.location_to_id(location) in self.all_edge_ids()

    def get_adj_vertex_ids(self, location: Location) -> list[str]:
        """Return on-board neighbours of a vertex (3 inland, 2 on the coast)."""
        vertex = hex_coords.location_to_coord(location)
        return [
            n.id
            for n in hex_coords.get_adj_vertices_from_vertex(vertex)
            if self.has_vertex(n)
        ]

    def get_tiles_at_vertex(self, location: Location) -> list[Tile]:
        """Return the board tiles sharing a vertex (1 to 3)."""
        vertex = hex_coords.location_to_coord(location)
        tiles = (
            self.tiles.get(h.id) for h in hex_coords.get_adj_hexes_from_vertex(vertex)
        )
        return [t for t in tiles if t is not None]

    def get_player_settlement_ids(self, owner_id: int) -> set[str]:
        return {sid for sid, s in self.settlements.items() if s.owner_id == owner_id}

    def get_player_road_vertex_ids(self, owner_id: int) -> set[str]:
        """Return ids of every vertex touched by one of the owner's roads."""
        result: set[str] = set()
        for road in self.roads.values():
            if road.owner_id == owner_id:
                result.update(v.id for v in hex_coords.get_vertices_from_edge(road.coord))
        return result

    def get_settlement_neighbor_ids(self) -> set[str]:
        """Return ids of every vertex adjacent to an existing settlement."""
        result: set[str] = set()
        for settlement in self.settlements.values():
            result.update(
                n.id for n in hex_coords.get_adj_vertices_from_vertex(settlement.coord)
            )
        return result

    def _reset_derived(self) -> None:
        self._vertex_ids = None
        self._edge_ids = None
