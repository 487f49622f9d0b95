"""Turn and score state machine.

A game is ``in_progress`` while ``winner`` is None and ``finished`` once it
is set. Every function here returns a new snapshot and leaves its input
untouched, so a client can compute the next state before writing it.
"""

from typing import Dict, Optional

from hroof.errors import InvalidInput
from .grid import (
    Board,
    GREEN,
    RED,
    TEAMS,
    copy_board,
    empty_board,
    generate_letters,
    is_interior_cell,
    normalize_color,
    other_team,
    validate_board,
    validate_letters,
    validate_team,
)
from .connectivity import check_winner, has_path


class BoardState:
    """The ``current_state`` payload of a game: cells, glyphs, scores, latches."""

    def __init__(self, board: Optional[Board] = None, letters: Optional[Board] = None,
                 scores: Optional[Dict[str, int]] = None,
                 connections: Optional[Dict[str, bool]] = None):
        self.board = board if board is not None else empty_board()
        self.letters = letters if letters is not None else empty_board()
        self.scores = {GREEN: 0, RED: 0}
        self.scores.update(scores or {})
        self.connections = {GREEN: False, RED: False}
        self.connections.update(connections or {})

    def copy(self) -> 'BoardState':
        return BoardState(
            board=copy_board(self.board),
            letters=copy_board(self.letters),
            scores=dict(self.scores),
            connections=dict(self.connections),
        )

    def to_dict(self) -> dict:
        return {
            'board': copy_board(self.board),
            'letters': copy_board(self.letters),
            'greenScore': self.scores[GREEN],
            'redScore': self.scores[RED],
            'greenConnections': self.connections[GREEN],
            'redConnections': self.connections[RED],
        }

    @classmethod
    def from_dict(cls, data) -> 'BoardState':
        if not isinstance(data, dict):
            raise InvalidInput('current_state must be an object')
        board = validate_board(data.get('board'))
        letters = data.get('letters')
        letters = validate_letters(letters) if letters is not None else empty_board()
        scores = {}
        for team, key in ((GREEN, 'greenScore'), (RED, 'redScore')):
            value = data.get(key)
            if value is None:
                value = 0
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInput(f'{key} must be an integer')
            if value < 0:
                raise InvalidInput(f'{key} must not be negative')
            scores[team] = value
        # Older records were written without the latches
        connections = {
            GREEN: bool(data.get('greenConnections', False)),
            RED: bool(data.get('redConnections', False)),
        }
        return cls(board=copy_board(board), letters=copy_board(letters),
                   scores=scores, connections=connections)

    def __eq__(self, other):
        if not isinstance(other, BoardState):
            return NotImplemented
        return self.to_dict() == other.to_dict()


class GameSnapshot:
    """Everything a replace-game write carries: state, whose turn, winner."""

    def __init__(self, state: Optional[BoardState] = None, current_team: str = GREEN,
                 winner: Optional[str] = None):
        self.state = state if state is not None else BoardState()
        self.current_team = current_team
        self.winner = winner

    @property
    def is_finished(self) -> bool:
        return self.winner is not None

    def copy(self) -> 'GameSnapshot':
        return GameSnapshot(self.state.copy(), self.current_team, self.winner)

    def to_record(self) -> dict:
        return {
            'current_state': self.state.to_dict(),
            'current_team': self.current_team,
            'winner': self.winner,
        }

    @classmethod
    def from_record(cls, record) -> 'GameSnapshot':
        if not isinstance(record, dict):
            raise InvalidInput('Game record must be an object')
        winner = record.get('winner')
        if winner is not None:
            validate_team(winner)
        return cls(
            state=BoardState.from_dict(record.get('current_state')),
            current_team=validate_team(record.get('current_team')),
            winner=winner,
        )

    def __eq__(self, other):
        if not isinstance(other, GameSnapshot):
            return NotImplemented
        return self.to_record() == other.to_record()


def new_game(rng=None) -> GameSnapshot:
    return GameSnapshot(BoardState(letters=generate_letters(rng=rng)), GREEN, None)


def update_connections(state: BoardState) -> None:
    """Credit each team once per connection episode.

    A latch going false -> true adds a point; true -> false only clears it.
    Sweeps are ignored here.
    """
    for team in TEAMS:
        connected = has_path(state.board, team)
        if connected and not state.connections[team]:
            state.scores[team] += 1
            state.connections[team] = True
        elif not connected:
            state.connections[team] = False


def apply_tile_update(snapshot: GameSnapshot, row: int, col: int, color,
                      is_host: bool = True) -> GameSnapshot:
    """Color (or clear) one cell and advance the turn.

    Non-host callers and border cells get the same snapshot object back
    unchanged. A finished game is not guarded here; callers decide whether
    to accept tile updates after a winner is recorded.
    """
    if not is_host or not is_interior_cell(row, col, len(snapshot.state.board),
                                           len(snapshot.state.board[0])):
        return snapshot
    color = normalize_color(color)

    state = snapshot.state.copy()
    state.board[row][col] = color
    update_connections(state)
    winner = check_winner(state.board)
    return GameSnapshot(state, other_team(snapshot.current_team), winner)


def reset_round(snapshot: GameSnapshot, rng=None) -> GameSnapshot:
    """Fresh board and letters; scores and turn carry over."""
    state = BoardState(
        letters=generate_letters(rng=rng),
        scores=dict(snapshot.state.scores),
    )
    return GameSnapshot(state, snapshot.current_team, None)


def reset_full(snapshot: GameSnapshot, rng=None) -> GameSnapshot:
    """Round reset plus zeroed scores and green to move.

    Re-arming the buzzer is the caller's second write.
    """
    return GameSnapshot(BoardState(letters=generate_letters(rng=rng)), GREEN, None)
