import random
from typing import List, Optional

from hroof.errors import InvalidInput

ROWS = 7
COLS = 7

GREEN = 'green'
RED = 'red'
EMPTY = ''
TEAMS = (GREEN, RED)
COLORS = (EMPTY, GREEN, RED)

ARABIC_LETTERS = list('أبتثجحخدذرزسشصضطعغفقكلمنهوي')
ARABIC_NUMERALS = list('٣٤')

Board = List[List[str]]


def other_team(team: str) -> str:
    return RED if team == GREEN else GREEN


def is_interior_cell(row: int, col: int, rows: int = ROWS, cols: int = COLS) -> bool:
    """True for every cell off the outer ring; only these may be colored."""
    return 0 < row < rows - 1 and 0 < col < cols - 1


def border_color(row: int, col: int, rows: int = ROWS, cols: int = COLS) -> Optional[str]:
    """Color a border cell shows, derived from its position.

    Left/right columns (corners included) belong to red, top/bottom rows to
    green. Interior cells have no border color.
    """
    if is_interior_cell(row, col, rows, cols):
        return None
    if col == 0 or col == cols - 1:
        return RED
    return GREEN


def empty_board(rows: int = ROWS, cols: int = COLS) -> Board:
    return [[EMPTY for _ in range(cols)] for _ in range(rows)]


def copy_board(board: Board) -> Board:
    return [list(row) for row in board]


def normalize_color(value) -> str:
    if value is None or value == EMPTY:
        return EMPTY
    if value in TEAMS:
        return value
    raise InvalidInput(f'Unknown color: {value!r}')


def validate_team(value) -> str:
    if value not in TEAMS:
        raise InvalidInput(f'Unknown team: {value!r}')
    return value


def validate_board(board, rows: int = ROWS, cols: int = COLS) -> Board:
    if not isinstance(board, list) or len(board) != rows:
        raise InvalidInput(f'Board must have {rows} rows')
    for r, row in enumerate(board):
        if not isinstance(row, list) or len(row) != cols:
            raise InvalidInput(f'Board rows must have {cols} cells')
        for c, cell in enumerate(row):
            if cell not in COLORS:
                raise InvalidInput(f'Unknown cell value: {cell!r}')
            # Border colors are implied, never stored
            if cell != EMPTY and not is_interior_cell(r, c, rows, cols):
                raise InvalidInput(f'Border cell ({r}, {c}) must be empty')
    return board


def validate_letters(letters, rows: int = ROWS, cols: int = COLS) -> Board:
    if not isinstance(letters, list) or len(letters) != rows:
        raise InvalidInput(f'Letters must have {rows} rows')
    for r, row in enumerate(letters):
        if not isinstance(row, list) or len(row) != cols:
            raise InvalidInput(f'Letter rows must have {cols} cells')
        for c, glyph in enumerate(row):
            if not isinstance(glyph, str):
                raise InvalidInput('Letters must be strings')
            if glyph and not is_interior_cell(r, c, rows, cols):
                raise InvalidInput(f'Border cell ({r}, {c}) has no letter')
    return letters


def generate_letters(rows: int = ROWS, cols: int = COLS, rng=None) -> Board:
    """Lay out a fresh glyph for every interior cell.

    The pool is the alphabet plus one or two numerals, shuffled. If the
    interior outgrows the pool it is reshuffled and reused, so duplicates
    are possible on larger boards.
    """
    rng = rng or random
    numeral_count = rng.randint(1, 2)
    pool = ARABIC_LETTERS + rng.sample(ARABIC_NUMERALS, numeral_count)
    rng.shuffle(pool)

    letters = [[EMPTY for _ in range(cols)] for _ in range(rows)]
    idx = 0
    for row in range(1, rows - 1):
        for col in range(1, cols - 1):
            if idx >= len(pool):
                rng.shuffle(pool)
                idx = 0
            letters[row][col] = pool[idx]
            idx += 1
    return letters
