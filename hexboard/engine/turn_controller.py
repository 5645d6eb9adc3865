"""Per-turn build controller.

The controller is the single writer of the authoritative board.  It hands
out :class:`BuildSimulator` instances for speculative work and applies a
finished build stack in one step after re-validating it.
"""

from __future__ import annotations

import collections
import logging

import pydantic

from ..models.board import Board, SettlementLevel
from ..models.build import (
    BuildAction,
    BuildResult,
    BuildType,
    InitialPlacement,
    SimulationMode,
)
from . import rules
from .build_simulator import BuildSimulator, is_valid_build

logger = logging.getLogger(__name__)


class GameContext(pydantic.BaseModel):
    """Everything a turn needs, passed explicitly rather than shared globally."""

    board: Board
    player_ids: list[int]


class TurnController:
    """Owns the authoritative board for the duration of a game."""

    def __init__(self, context: GameContext) -> None:
        self.context = context

    @property
    def board(self) -> Board:
        return self.context.board

    def initial_placement_order(self) -> list[int]:
        """Return the snake order for initial placement (1..N then N..1)."""
        ids = list(self.context.player_ids)
        return ids + ids[::-1]

    def begin_build(self, owner_id: int, mode: SimulationMode) -> BuildSimulator:
        """Return a simulator for *owner_id* on a copy of the board.

        The simulator caps every limit at the pieces *owner_id* has left.

        Raises:
            ValueError: If *owner_id* is not in this game.
        """
        if owner_id not in self.context.player_ids:
            raise ValueError(f'Unknown player id: {owner_id}')
        return BuildSimulator(self.board, owner_id, mode)

    def commit(self, simulator: BuildSimulator) -> BuildResult:
        """Re-validate a finished build stack and apply it to the board.

        The stack is checked twice: replayed through a fresh simulator, and
        walked action by action with the single-spot rule predicates.
        Either every action is applied or none is.  Rule violations come
        back as an unsuccessful :class:`BuildResult`.
        """
        owner_id = simulator.owner_id
        stack = simulator.build_stack
        if not stack:
            return BuildResult(success=False, error_message='Nothing to commit.')
        if not simulator.is_complete:
            return BuildResult(
                success=False, error_message='Build sequence is incomplete.'
            )
        remaining = rules.get_remaining_assets(self.board, owner_id)
        for build_type, count in collections.Counter(a.build_type for a in stack).items():
            if count > remaining[build_type]:
                return BuildResult(
                    success=False,
                    error_message=f'No {build_type.lower()} pieces remaining.',
                )
        if not is_valid_build(self.board, owner_id, stack, simulator.mode):
            logger.warning('Player %d: commit rejected by re-validation', owner_id)
            return BuildResult(
                success=False,
                error_message='Build sequence is no longer valid on this board.',
            )
        if not self._passes_spot_checks(owner_id, stack, simulator.mode):
            return BuildResult(
                success=False,
                error_message='Build sequence failed the placement rule check.',
            )

        for action in stack:
            _apply(self.board, owner_id, action)
        logger.info(
            'Player %d committed %s',
            owner_id,
            ', '.join(f'{a.build_type}@{a.id}' for a in stack),
        )
        return BuildResult(success=True, applied=stack)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _passes_spot_checks(
        self, owner_id: int, stack: list[BuildAction], mode: SimulationMode
    ) -> bool:
        """Check each action with the rule predicates on a scratch board.

        Initial-placement settlements skip the road requirement, and their
        road must end at the settlement placed just before it.
        """
        scratch = self.board.model_copy(deep=True)
        initial = isinstance(mode, InitialPlacement)
        settlement_id: str | None = None
        for action in stack:
            if action.build_type == BuildType.SETTLEMENT:
                valid = rules.is_settlement_spot_valid(
                    scratch, action.coord, None if initial else owner_id
                )
                settlement_id = action.id
            elif action.build_type == BuildType.ROAD:
                valid = rules.is_road_spot_valid(scratch, action.coord, owner_id)
                if valid and initial:
                    valid = (
                        settlement_id is not None
                        and rules.is_road_connected_to_settlement(
                            scratch, action.coord, settlement_id, owner_id
                        )
                    )
            else:
                valid = rules.is_city_spot_valid(scratch, action.coord, owner_id)
            if not valid:
                logger.warning(
                    'Player %d: %s at %s failed the placement rule check',
                    owner_id,
                    action.build_type,
                    action.id,
                )
                return False
            _apply(scratch, owner_id, action)
        return True


def _apply(board: Board, owner_id: int, action: BuildAction) -> None:
    if action.build_type == BuildType.SETTLEMENT:
        board.update_settlement(action.coord, owner_id, SettlementLevel.SETTLEMENT)
    elif action.build_type == BuildType.ROAD:
        board.update_road(action.coord, owner_id)
    else:
        board.update_settlement(action.coord, owner_id, SettlementLevel.CITY)
