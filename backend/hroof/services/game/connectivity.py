"""Win detection: full-line sweeps and border-to-border paths.

Every predicate looks at the whole board. Nothing is cached between
calls, so callers are free to evaluate any board they like.
"""

from typing import Iterable, Optional, Set, Tuple

from .grid import Board, GREEN, RED

Cell = Tuple[int, int]

# 8-way adjacency
DIRECTIONS = (
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (-1, 1), (1, -1), (1, 1),
)


def flood_fill(board: Board, seeds: Iterable[Cell], color: str) -> Set[Cell]:
    """Return every cell of ``color`` reachable from the given seeds."""
    rows = len(board)
    cols = len(board[0]) if rows else 0
    reached: Set[Cell] = set()
    stack = list(seeds)
    while stack:
        row, col = stack.pop()
        if (row, col) in reached:
            continue
        if not (0 <= row < rows and 0 <= col < cols) or board[row][col] != color:
            continue
        reached.add((row, col))
        for dr, dc in DIRECTIONS:
            stack.append((row + dr, col + dc))
    return reached


def has_green_path(board: Board) -> bool:
    """Green links the top interior row to the bottom interior row."""
    rows, cols = len(board), len(board[0])
    reached = flood_fill(board, [(1, col) for col in range(1, cols - 1)], GREEN)
    return any((rows - 2, col) in reached for col in range(1, cols - 1))


def has_red_path(board: Board) -> bool:
    """Red links the left interior column to the right interior column."""
    rows, cols = len(board), len(board[0])
    reached = flood_fill(board, [(row, 1) for row in range(1, rows - 1)], RED)
    return any((row, cols - 2) in reached for row in range(1, rows - 1))


def has_path(board: Board, team: str) -> bool:
    return has_green_path(board) if team == GREEN else has_red_path(board)


def sweep_winner(board: Board) -> Optional[str]:
    rows, cols = len(board), len(board[0])
    for col in range(1, cols - 1):
        if all(board[row][col] == GREEN for row in range(1, rows - 1)):
            return GREEN
    for row in range(1, rows - 1):
        if all(board[row][col] == RED for col in range(1, cols - 1)):
            return RED
    return None


def check_winner(board: Board) -> Optional[str]:
    """Sweeps first, then the green path, then the red path."""
    winner = sweep_winner(board)
    if winner:
        return winner
    if has_green_path(board):
        return GREEN
    if has_red_path(board):
        return RED
    return None
