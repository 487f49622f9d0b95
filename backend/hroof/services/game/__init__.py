"""Game domain services: grid, connectivity, turns and the buzzer.

This package contains the pure game engine. Nothing here touches the
database or the network, so the same functions run inside the HTTP
service and inside every room client.
"""

from .grid import (
    ROWS,
    COLS,
    GREEN,
    RED,
    EMPTY,
    TEAMS,
    is_interior_cell,
    other_team,
)
from .engine import BoardState, GameSnapshot
from .buzzer import BuzzerSnapshot
