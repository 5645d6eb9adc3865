"""Speculative build sequencer.

A :class:`BuildSimulator` stages a multi-step build (initial settlement and
road, free roads, ...) on a private deep copy of the board.  Each step is
checked against the legal spots computed by the previous
:meth:`BuildSimulator.get_next_valid_spots` call, and every step can be
undone in LIFO order.  Only the finished stack is handed to the turn
controller, which re-validates it and applies it to the real board.

Typical use::

    sim = BuildSimulator(board, owner_id=0, mode=InitialPlacement())
    spots = sim.get_next_valid_spots()       # SETTLEMENT, all open vertices
    sim.build(BuildType.SETTLEMENT, vertex_id)
    spots = sim.get_next_valid_spots()       # ROAD, edges at that vertex
    sim.build(BuildType.ROAD, edge_id)
    sim.get_next_valid_spots().is_complete   # True
"""

from __future__ import annotations

import collections
import logging
import typing

from .. import hex_coords
from ..hex_coords import Location
from ..models.board import Board, SettlementLevel
from ..models.build import (
    BuildAction,
    BuildType,
    CityOnly,
    InitialPlacement,
    NextSpots,
    RoadOnly,
    SettlementOnly,
    SimulationMode,
)
from . import rules

logger = logging.getLogger(__name__)

# Steps in one initial placement: a settlement then a road.
_INITIAL_PLACEMENT_STEPS = 2


class SimulatorStateError(RuntimeError):
    """Raised when the simulator is driven out of order."""


class BuildSimulator:
    """Rollback-capable build sequencer for one player and one mode."""

    def __init__(self, board: Board, owner_id: int, mode: SimulationMode) -> None:
        self._board = board.model_copy(deep=True)
        self.owner_id = owner_id
        self.mode = mode
        self._stack: list[BuildAction] = []
        self._counts: collections.Counter[BuildType] = collections.Counter()
        # Pieces the player still has; caps every per-type limit.
        self._supply = rules.get_remaining_assets(self._board, owner_id)
        self._last_spots: NextSpots | None = None
        self.last_build_type: BuildType | None = None
        self.last_build_id: str | None = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def board(self) -> Board:
        """The private board with every staged build applied.  Do not mutate."""
        return self._board

    @property
    def build_stack(self) -> list[BuildAction]:
        return list(self._stack)

    @property
    def last_spots(self) -> NextSpots | None:
        """The most recent result of :meth:`get_next_valid_spots`, if still current."""
        return self._last_spots

    @property
    def is_complete(self) -> bool:
        return self._next_build_type() is None

    def count(self, build_type: BuildType) -> int:
        return self._counts[build_type]

    def peek(self) -> BuildAction | None:
        """Return the most recent staged build without removing it."""
        return self._stack[-1] if self._stack else None

    # ------------------------------------------------------------------
    # Sequencing
    # ------------------------------------------------------------------

    def get_next_valid_spots(self) -> NextSpots:
        """Compute and cache the legal spots for the next step.

        Returns a :class:`NextSpots` whose ``spot_ids`` is None once the
        sequence is complete.
        """
        build_type = self._next_build_type()
        if build_type is None:
            spots = NextSpots()
        else:
            spots = NextSpots(
                build_type=build_type, spot_ids=frozenset(self._compute_spots(build_type))
            )
            logger.debug(
                'Player %d next %s: %d spots',
                self.owner_id,
                build_type,
                len(spots.spot_ids or ()),
            )
        self._last_spots = spots
        return spots

    def build(self, build_type: BuildType | str, location: Location) -> bool:
        """Stage one build on the private board.

        Returns False, leaving everything unchanged, if the sequence is
        complete, *build_type* is not the expected step, or *location* is not
        among the spots last computed.

        Raises:
            SimulatorStateError: If no spots have been computed since the
                last build or rollback.
            ValueError: If *build_type* is not a :class:`BuildType`.
        """
        build_type = BuildType(build_type)
        spots = self._last_spots
        if spots is None:
            raise SimulatorStateError(
                'No valid spots computed; call get_next_valid_spots() before build()'
            )
        if spots.spot_ids is None or spots.build_type != build_type:
            return False
        if self._counts[build_type] >= self._limit(build_type):
            return False
        spot_id = hex_coords.location_to_id(location)
        if spot_id not in spots.spot_ids:
            return False

        coord = hex_coords.id_to_coord(spot_id)
        self._apply(build_type, spot_id)
        self._stack.append(BuildAction(build_type=build_type, coord=coord))
        self._counts[build_type] += 1
        self.last_build_type = build_type
        self.last_build_id = spot_id
        self._last_spots = None
        logger.debug('Player %d staged %s at %s', self.owner_id, build_type, spot_id)
        return True

    def rollback(self) -> bool:
        """Undo the most recent staged build.  Returns False if there is none."""
        if not self._stack:
            return False
        action = self._stack.pop()
        self._revert(action)
        self._counts[action.build_type] -= 1

        top = self.peek()
        self.last_build_type = top.build_type if top is not None else None
        self.last_build_id = top.id if top is not None else None
        self._last_spots = None
        logger.debug(
            'Player %d rolled back %s at %s', self.owner_id, action.build_type, action.id
        )
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _next_build_type(self) -> BuildType | None:
        """Return the type of the next step, or None when the sequence is done."""
        mode = self.mode
        if isinstance(mode, InitialPlacement):
            if len(self._stack) >= _INITIAL_PLACEMENT_STEPS:
                return None
            if self.last_build_type is None or self.last_build_type == BuildType.ROAD:
                return BuildType.SETTLEMENT
            return BuildType.ROAD
        elif isinstance(mode, RoadOnly):
            build_type = BuildType.ROAD
        elif isinstance(mode, SettlementOnly):
            build_type = BuildType.SETTLEMENT
        elif isinstance(mode, CityOnly):
            build_type = BuildType.CITY
        else:
            typing.assert_never(mode)
        done = self._counts[build_type] >= self._limit(build_type)
        return None if done else build_type

    def _limit(self, build_type: BuildType) -> int:
        """Return how many builds of *build_type* are allowed, capped by supply."""
        return min(self._mode_limit(build_type), self._supply[build_type])

    def _mode_limit(self, build_type: BuildType) -> int:
        mode = self.mode
        if isinstance(mode, InitialPlacement):
            return 0 if build_type == BuildType.CITY else 1
        elif isinstance(mode, RoadOnly):
            return mode.max_roads if build_type == BuildType.ROAD else 0
        elif isinstance(mode, SettlementOnly):
            return mode.max_settlements if build_type == BuildType.SETTLEMENT else 0
        elif isinstance(mode, CityOnly):
            return mode.max_cities if build_type == BuildType.CITY else 0
        else:
            typing.assert_never(mode)

    def _compute_spots(self, build_type: BuildType) -> set[str]:
        board = self._board
        if build_type == BuildType.SETTLEMENT:
            # Initial settlements need not touch a road.
            owner = None if isinstance(self.mode, InitialPlacement) else self.owner_id
            return rules.get_valid_settlement_spots(board, owner)
        if build_type == BuildType.ROAD:
            if isinstance(self.mode, InitialPlacement):
                # Pinned to the settlement just placed, not the whole network.
                assert self.last_build_id is not None
                return rules.get_valid_road_spots(
                    board, self.owner_id, {self.last_build_id}
                )
            return rules.get_valid_road_spots(board, self.owner_id)
        return rules.get_valid_city_spots(board, self.owner_id)

    def _apply(self, build_type: BuildType, spot_id: str) -> None:
        if build_type == BuildType.SETTLEMENT:
            self._board.update_settlement(
                spot_id, self.owner_id, SettlementLevel.SETTLEMENT
            )
        elif build_type == BuildType.ROAD:
            self._board.update_road(spot_id, self.owner_id)
        else:
            self._board.update_settlement(spot_id, self.owner_id, SettlementLevel.CITY)

    def _revert(self, action: BuildAction) -> None:
        if action.build_type == BuildType.SETTLEMENT:
            self._board.remove_settlement(action.id)
        elif action.build_type == BuildType.ROAD:
            self._board.remove_road(action.id)
        else:
            self._board.update_settlement(action.id, level=SettlementLevel.SETTLEMENT)


def is_valid_build(
    board: Board,
    owner_id: int,
    build_stack: list[BuildAction],
    mode: SimulationMode,
) -> bool:
    """Replay *build_stack* on a fresh simulator and report whether every step holds.

    Used at commit time to re-check a sequence built elsewhere against the
    authoritative board.
    """
    simulator = BuildSimulator(board, owner_id, mode)
    for action in build_stack:
        simulator.get_next_valid_spots()
        if not simulator.build(action.build_type, action.coord):
            logger.warning(
                'Player %d: %s at %s failed re-validation',
                owner_id,
                action.build_type,
                action.id,
            )
            return False
    return True
