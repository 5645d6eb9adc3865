"""Library settings read from environment variables."""

import os

LOG_LEVEL: str = os.environ.get('HEXBOARD_LOG_LEVEL', 'INFO').upper()
BOARD_RADIUS: int = int(os.environ.get('HEXBOARD_BOARD_RADIUS', '2'))
# Unset means boards are seeded from system entropy.
SEED: str | None = os.environ.get('HEXBOARD_SEED') or None
TRACE_BUILDS: bool = os.environ.get('HEXBOARD_TRACE_BUILDS', '') not in ('', '0')
