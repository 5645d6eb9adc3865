"""Build simulator data models.

A simulator mode is a tagged union: each variant carries the limits it
needs, and the ``kind`` discriminator names the variant on the wire.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal

import pydantic

from ..hex_coords import CubeCoord


class BuildType(enum.StrEnum):
    """Things a player can build on the board."""

    SETTLEMENT = 'SETTLEMENT'
    ROAD = 'ROAD'
    CITY = 'CITY'


class BuildMode(enum.StrEnum):
    """Discriminator values for the simulator mode variants."""

    INITIAL_PLACEMENT = 'INITIAL_PLACEMENT'
    ROAD_ONLY = 'ROAD_ONLY'
    SETTLEMENT_ONLY = 'SETTLEMENT_ONLY'
    CITY_ONLY = 'CITY_ONLY'


class InitialPlacement(pydantic.BaseModel):
    """One settlement followed by one road pinned to it."""

    model_config = pydantic.ConfigDict(frozen=True)

    kind: Literal[BuildMode.INITIAL_PLACEMENT] = BuildMode.INITIAL_PLACEMENT


class RoadOnly(pydantic.BaseModel):
    """Up to ``max_roads`` roads chained off the player's network."""

    model_config = pydantic.ConfigDict(frozen=True)

    kind: Literal[BuildMode.ROAD_ONLY] = BuildMode.ROAD_ONLY
    max_roads: int = pydantic.Field(default=1, ge=1)


class SettlementOnly(pydantic.BaseModel):
    """Up to ``max_settlements`` settlements on the player's roads."""

    model_config = pydantic.ConfigDict(frozen=True)

    kind: Literal[BuildMode.SETTLEMENT_ONLY] = BuildMode.SETTLEMENT_ONLY
    max_settlements: int = pydantic.Field(default=1, ge=1)


class CityOnly(pydantic.BaseModel):
    """Up to ``max_cities`` settlement-to-city upgrades."""

    model_config = pydantic.ConfigDict(frozen=True)

    kind: Literal[BuildMode.CITY_ONLY] = BuildMode.CITY_ONLY
    max_cities: int = pydantic.Field(default=1, ge=1)


SimulationMode = Annotated[
    InitialPlacement | RoadOnly | SettlementOnly | CityOnly,
    pydantic.Field(discriminator='kind'),
]


class BuildAction(pydantic.BaseModel):
    """One entry on the build stack."""

    model_config = pydantic.ConfigDict(frozen=True)

    build_type: BuildType
    coord: CubeCoord

    @property
    def id(self) -> str:
        return self.coord.id


class NextSpots(pydantic.BaseModel):
    """The next legal step of a build sequence.

    ``spot_ids`` is None once the sequence is complete; an empty set means
    the step is required but nothing is currently legal.
    """

    build_type: BuildType | None = None
    spot_ids: frozenset[str] | None = None

    @property
    def is_complete(self) -> bool:
        return self.spot_ids is None


class BuildResult(pydantic.BaseModel):
    """Outcome of committing a build sequence to the authoritative board."""

    success: bool
    error_message: str | None = None
    # Actions applied, in build order (empty on failure).
    applied: list[BuildAction] = pydantic.Field(default_factory=list)
