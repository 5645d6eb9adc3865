"""Unit tests for the placement rules engine."""

from __future__ import annotations

import unittest

from hexboard import board_generator, hex_coords
from hexboard.engine import rules
from hexboard.hex_coords import CubeCoord
from hexboard.models.board import Board, ResourceType, SettlementLevel, TerrainType
from hexboard.models.build import BuildType
from hexboard.rng import SeededRandom

# A central vertex, touching tiles (0,0,0), (1,-1,0) and (1,0,-1).
_V = '1,0,0'


def _c(q: int, r: int, s: int) -> CubeCoord:
    return CubeCoord(q=q, r=r, s=s)


def _uniform_board() -> Board:
    b = Board()
    for coord in hex_coords.hexes_in_radius(2):
        b.update_tile(coord, terrain_type=TerrainType.FIELD, number_token=6)
    return b


class TestSettlementSpots(unittest.TestCase):
    """Tests for settlement placement."""

    def test_empty_board_every_vertex_open(self) -> None:
        self.assertEqual(len(rules.get_valid_settlement_spots(_uniform_board())), 54)

    def test_distance_rule(self) -> None:
        """A settlement removes itself and its three neighbours."""
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        spots = rules.get_valid_settlement_spots(b)
        self.assertEqual(len(spots), 50)
        self.assertNotIn(_V, spots)
        for neighbour in ('0,-1,0', '0,0,-1', '1,-1,-1'):
            self.assertNotIn(neighbour, spots)

    def test_no_open_spot_next_to_a_settlement(self) -> None:
        """On a populated board no open spot borders an occupied vertex."""
        b = board_generator.generate_board(SeededRandom(11))
        for vertex_id in ('1,0,0', '-1,0,0', '0,2,-1', '-2,1,0'):
            b.update_settlement(vertex_id, owner_id=0)
        occupied = set(b.settlements)
        for spot in rules.get_valid_settlement_spots(b):
            neighbours = {
                n.id
                for n in hex_coords.get_adj_vertices_from_vertex(
                    hex_coords.id_to_coord(spot)
                )
            }
            self.assertFalse(neighbours & occupied, spot)

    def test_owner_needs_a_road(self) -> None:
        """With an owner, only vertices on that owner's roads qualify."""
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        self.assertEqual(rules.get_valid_settlement_spots(b, 0), set())
        b.update_road('1,-1,0', owner_id=0)
        b.update_road('1,-2,1', owner_id=0)
        self.assertEqual(rules.get_valid_settlement_spots(b, 0), {'1,-1,1'})
        self.assertEqual(rules.get_valid_settlement_spots(b, 1), set())

    def test_predicate_agrees_with_set(self) -> None:
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        b.update_road('1,-1,0', owner_id=0)
        b.update_road('1,-2,1', owner_id=0)
        for owner in (None, 0, 1):
            spots = rules.get_valid_settlement_spots(b, owner)
            for vertex_id in b.all_vertex_ids():
                self.assertEqual(
                    rules.is_settlement_spot_valid(b, vertex_id, owner),
                    vertex_id in spots,
                    (owner, vertex_id),
                )

    def test_off_board_vertex_invalid(self) -> None:
        self.assertFalse(rules.is_settlement_spot_valid(_uniform_board(), '5,-4,0'))


class TestRoadSpots(unittest.TestCase):
    """Tests for road placement."""

    def test_edges_at_lone_settlement(self) -> None:
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        self.assertEqual(
            rules.get_valid_road_spots(b, 0), {'1,-1,0', '1,0,-1', '2,-1,-1'}
        )

    def test_no_settlement_no_spots(self) -> None:
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        self.assertEqual(rules.get_valid_road_spots(b, 1), set())

    def test_roads_extend_along_network(self) -> None:
        """The search walks the owner's roads to their far ends."""
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        b.update_road('1,-1,0', owner_id=0)
        self.assertEqual(
            rules.get_valid_road_spots(b, 0),
            {'1,0,-1', '2,-1,-1', '1,-2,1', '0,-1,1'},
        )

    def test_opponent_settlement_blocks_extension(self) -> None:
        """A vertex held by another player yields no new edges."""
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        b.update_road('1,-1,0', owner_id=0)
        b.update_road('1,-2,1', owner_id=0)
        unblocked = rules.get_valid_road_spots(b, 0)
        self.assertIn('1,-3,2', unblocked)
        self.assertIn('2,-3,1', unblocked)

        b.update_settlement('1,-1,1', owner_id=1)
        self.assertEqual(
            rules.get_valid_road_spots(b, 0), {'1,0,-1', '2,-1,-1', '0,-1,1'}
        )

    def test_opponent_road_is_dead_end(self) -> None:
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        b.update_road('1,-1,0', owner_id=1)
        spots = rules.get_valid_road_spots(b, 0)
        self.assertEqual(spots, {'1,0,-1', '2,-1,-1'})

    def test_never_returns_an_occupied_edge(self) -> None:
        b = board_generator.generate_board(SeededRandom(3))
        b.update_settlement(_V, owner_id=0)
        for road in ('1,-1,0', '1,-2,1', '1,0,-1'):
            b.update_road(road, owner_id=0)
        b.update_road('2,-1,-1', owner_id=1)
        self.assertFalse(rules.get_valid_road_spots(b, 0) & set(b.roads))

    def test_seed_settlements_pin_the_search(self) -> None:
        """Only edges at the given settlement are offered."""
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        b.update_settlement('-1,0,0', owner_id=0)
        spots = rules.get_valid_road_spots(b, 0, {'-1,0,0'})
        self.assertEqual(len(spots), 3)
        for edge_id in spots:
            vertices = {v.id for v in hex_coords.get_vertices_from_edge(hex_coords.id_to_coord(edge_id))}
            self.assertIn('-1,0,0', vertices)

    def test_coastal_settlement_ignores_off_board_edges(self) -> None:
        b = Board()
        b.update_tile(_c(0, 0, 0), terrain_type=TerrainType.HILL)
        b.update_settlement(_V, owner_id=0)
        self.assertEqual(rules.get_valid_road_spots(b, 0), {'1,-1,0', '1,0,-1'})

    def test_predicate_agrees_with_set(self) -> None:
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        b.update_road('1,-1,0', owner_id=0)
        b.update_road('1,-2,1', owner_id=0)
        b.update_settlement('1,-1,1', owner_id=1)
        spots = rules.get_valid_road_spots(b, 0)
        for edge_id in b.all_edge_ids():
            self.assertEqual(
                rules.is_road_spot_valid(b, edge_id, 0), edge_id in spots, edge_id
            )

    def test_predicate_without_owner(self) -> None:
        b = _uniform_board()
        b.update_road('1,-1,0', owner_id=0)
        self.assertFalse(rules.is_road_spot_valid(b, '1,-1,0'))
        self.assertTrue(rules.is_road_spot_valid(b, '1,0,-1'))
        self.assertFalse(rules.is_road_spot_valid(b, '9,-9,0'))

    def test_road_connected_to_settlement(self) -> None:
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        self.assertTrue(rules.is_road_connected_to_settlement(b, '1,-1,0', _V, 0))
        self.assertTrue(rules.is_road_connected_to_settlement(b, '2,-1,-1', _V, 0))
        self.assertFalse(rules.is_road_connected_to_settlement(b, '1,-2,1', _V, 0))
        self.assertFalse(rules.is_road_connected_to_settlement(b, '1,-1,0', _V, 1))


class TestCities(unittest.TestCase):
    """Tests for city upgrades and piece supply."""

    def test_only_own_level_one_settlements(self) -> None:
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        b.update_settlement('0,0,1', owner_id=0, level=SettlementLevel.CITY)
        b.update_settlement('-1,1,-1', owner_id=1)
        self.assertEqual(rules.get_valid_city_spots(b, 0), {_V})
        self.assertTrue(rules.is_city_spot_valid(b, _V, 0))
        self.assertFalse(rules.is_city_spot_valid(b, '0,0,1', 0))
        self.assertFalse(rules.is_city_spot_valid(b, '-1,1,-1', 0))
        self.assertFalse(rules.is_city_spot_valid(b, '0,-1,0', 0))

    def test_remaining_assets(self) -> None:
        """A city returns its settlement piece to the supply."""
        b = _uniform_board()
        b.update_settlement(_V, owner_id=0)
        b.update_settlement('0,0,1', owner_id=0, level=SettlementLevel.CITY)
        b.update_road('1,-1,0', owner_id=0)
        b.update_road('1,0,-1', owner_id=0)
        self.assertEqual(
            rules.get_remaining_assets(b, 0),
            {BuildType.ROAD: 13, BuildType.SETTLEMENT: 4, BuildType.CITY: 3},
        )
        self.assertEqual(rules.get_remaining_assets(b, 1), rules.ASSET_LIMITS)


class TestProduction(unittest.TestCase):
    """Tests for production and robber lookups."""

    def setUp(self) -> None:
        self.board = Board()
        self.board.update_tile(_c(0, 0, 0), terrain_type=TerrainType.DESERT)
        self.board.update_tile(_c(1, -1, 0), terrain_type=TerrainType.HILL, number_token=8)
        self.board.update_tile(_c(1, 0, -1), terrain_type=TerrainType.FOREST, number_token=5)
        self.board.update_robber_coord(_c(0, 0, 0))

    def test_tile_production(self) -> None:
        hill = self.board.get_tile('1,-1,0')
        desert = self.board.get_tile('0,0,0')
        assert hill is not None and desert is not None
        self.assertEqual(rules.get_tile_production(self.board, hill), ResourceType.BRICK)
        self.assertIsNone(rules.get_tile_production(self.board, desert))

    def test_robber_blocks_production(self) -> None:
        self.board.update_robber_coord('1,-1,0')
        hill = self.board.get_tile('1,-1,0')
        assert hill is not None
        self.assertEqual(rules.get_tile_production(self.board, hill), ResourceType.BRICK)
        self.assertIsNone(rules.get_tile_production(self.board, hill, check_robber=True))
        self.assertFalse(rules.is_productive_tile(self.board, hill))

    def test_productive_tile(self) -> None:
        forest = self.board.get_tile('1,0,-1')
        desert = self.board.get_tile('0,0,0')
        assert forest is not None and desert is not None
        self.assertTrue(rules.is_productive_tile(self.board, forest))
        self.assertFalse(rules.is_productive_tile(self.board, desert))

    def test_resources_at_vertex(self) -> None:
        self.assertEqual(
            sorted(rules.get_resources_at_vertex(self.board, _V)),
            sorted([ResourceType.BRICK, ResourceType.LUMBER]),
        )

    def test_robbable_tiles_exclude_robber(self) -> None:
        self.assertEqual(
            sorted(rules.get_robbable_tile_ids(self.board)), ['1,-1,0', '1,0,-1']
        )

    def test_robbable_settlements(self) -> None:
        self.board.update_settlement(_V, owner_id=0)
        self.board.update_settlement('0,0,1', owner_id=1)
        self.assertEqual(
            rules.get_robbable_settlement_ids(self.board, 0, '0,0,0'), ['0,0,1']
        )
        self.assertEqual(
            rules.get_robbable_settlement_ids(self.board, 1, '0,0,0'), ['1,0,0']
        )


if __name__ == '__main__':
    unittest.main()
