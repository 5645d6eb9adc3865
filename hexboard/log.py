"""Logging setup for command-line use of the library."""

import logging

from . import settings

SIMULATOR_LOGGER = 'hexboard.engine.build_simulator'


class SimulatorNoiseFilter(logging.Filter):
    """Drop per-step build simulator debug records unless tracing is enabled."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Return False for simulator DEBUG records when tracing is off."""
        if settings.TRACE_BUILDS:
            return True
        return not (
            record.name == SIMULATOR_LOGGER and record.levelno <= logging.DEBUG
        )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging and install the simulator noise filter."""
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, SimulatorNoiseFilter) for f in handler.filters):
            handler.addFilter(SimulatorNoiseFilter())
