"""Authoritative room store.

Each function is one request/response operation on a room's records.
Missing rooms come back as ``None``; bad input raises ``InvalidInput``
before anything is written. Writes replace the whole record. Passing
``expected_version`` turns a write into a conditional one that raises
``StaleWrite`` when someone else wrote first.
"""

import json
import random
import string
from typing import List, Optional

from flask import current_app
from sqlalchemy import update

from hroof import db
from hroof.errors import InvalidInput, StaleWrite
from hroof.models import Game, BuzzerState, Player
from hroof.services.game import GameSnapshot, BuzzerSnapshot
from hroof.services.game.engine import new_game
from hroof.services.game.grid import validate_team


def generate_room_code(length: int = 6) -> str:
    """Random numeric room code. Collisions are not checked."""
    return ''.join(random.choices(string.digits, k=length))


def _clean_name(value, field: str, max_length: int) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f'{field} is required')
    value = value.strip()
    if len(value) > max_length:
        raise InvalidInput(f'{field} must be at most {max_length} characters')
    return value


def _room_key(room_id) -> str:
    return str(room_id or '').strip()


def _parse_version(expected_version) -> Optional[int]:
    if expected_version is None:
        return None
    if isinstance(expected_version, bool):
        raise InvalidInput('expected_version must be an integer')
    try:
        return int(expected_version)
    except (TypeError, ValueError):
        raise InvalidInput('expected_version must be an integer')


def _write_row(model, key_column, key: str, values: dict, expected_version=None) -> bool:
    """Replace one row in a single UPDATE and bump its version.

    With ``expected_version`` the version match is part of the WHERE clause,
    so of two writers holding the same version only one can land. Returns
    False when no row has ``key``; raises ``StaleWrite`` on a version miss.
    """
    expected = _parse_version(expected_version)
    stmt = update(model).where(key_column == key)
    if expected is not None:
        stmt = stmt.where(model.version == expected)
    stmt = stmt.values(version=model.version + 1, **values).execution_options(synchronize_session=False)
    result = db.session.execute(stmt)
    db.session.commit()
    if result.rowcount:
        return True
    current = db.session.get(model, key)
    if current is None:
        return False
    raise StaleWrite(current_version=current.version)


def create_game(green_team_name, red_team_name, rng=None) -> Game:
    max_length = int(current_app.config.get('MAX_TEAM_NAME_LENGTH', 64))
    green_team_name = _clean_name(green_team_name, 'green_team_name', max_length)
    red_team_name = _clean_name(red_team_name, 'red_team_name', max_length)

    snapshot = new_game(rng=rng)
    record = snapshot.to_record()
    game = Game(
        id=generate_room_code(int(current_app.config.get('ROOM_CODE_LENGTH', 6))),
        green_team_name=green_team_name,
        red_team_name=red_team_name,
        current_state=json.dumps(record['current_state'], ensure_ascii=False),
        current_team=record['current_team'],
        winner=None,
        version=0,
    )
    game.buzzer = BuzzerState(active=True, version=0)
    db.session.add(game)
    db.session.commit()
    current_app.logger.info(f"[create] game={game.id} green={green_team_name!r} red={red_team_name!r}")
    return game


def fetch_game(room_id) -> Optional[Game]:
    key = _room_key(room_id)
    if not key:
        return None
    return db.session.get(Game, key)


def replace_game(room_id, current_state, current_team, winner,
                 expected_version=None) -> Optional[Game]:
    # Validate the whole record before touching the row
    snapshot = GameSnapshot.from_record({
        'current_state': current_state,
        'current_team': current_team,
        'winner': winner,
    })
    record = snapshot.to_record()
    written = _write_row(Game, Game.id, _room_key(room_id), {
        'current_state': json.dumps(record['current_state'], ensure_ascii=False),
        'current_team': record['current_team'],
        'winner': record['winner'],
    }, expected_version=expected_version)
    if not written:
        return None
    game = fetch_game(room_id)
    current_app.logger.info(
        f"[replace] game={game.id} version={game.version} turn={game.current_team} winner={game.winner}"
    )
    return game


def delete_game(room_id) -> bool:
    game = fetch_game(room_id)
    if not game:
        return False
    db.session.delete(game)
    db.session.commit()
    current_app.logger.info(f"[delete] game={game.id}")
    return True


def fetch_buzzer(room_id) -> Optional[BuzzerState]:
    key = _room_key(room_id)
    if not key:
        return None
    return db.session.get(BuzzerState, key)


def replace_buzzer(room_id, active, buzzed_team=None, buzzed_player=None, buzzed_at=None,
                   expected_version=None) -> Optional[BuzzerState]:
    if not isinstance(active, bool):
        raise InvalidInput('active must be true or false')
    snapshot = BuzzerSnapshot.from_dict({
        'active': active,
        'buzzed_team': buzzed_team,
        'buzzed_player': buzzed_player,
        'buzzed_at': buzzed_at,
    })
    written = _write_row(BuzzerState, BuzzerState.game_id, _room_key(room_id), {
        'active': snapshot.active,
        'buzzed_team': snapshot.buzzed_team,
        'buzzed_player': snapshot.buzzed_player,
        'buzzed_at': snapshot.buzzed_at,
    }, expected_version=expected_version)
    if not written:
        return None
    buzzer = fetch_buzzer(room_id)
    if buzzer.active:
        current_app.logger.info(f"[buzz-reset] game={buzzer.game_id} version={buzzer.version}")
    else:
        current_app.logger.info(
            f"[buzz] game={buzzer.game_id} team={buzzer.buzzed_team} player={buzzer.buzzed_player!r} version={buzzer.version}"
        )
    return buzzer


def fetch_players(room_id) -> List[Player]:
    key = _room_key(room_id)
    if not key:
        return []
    return Player.query.filter_by(game_id=key).order_by(Player.id).all()


def upsert_player(room_id, username, team) -> Optional[Player]:
    max_length = int(current_app.config.get('MAX_USERNAME_LENGTH', 64))
    username = _clean_name(username, 'username', max_length)
    team = validate_team(team)
    game = fetch_game(room_id)
    if not game:
        return None

    player = Player.query.filter_by(game_id=game.id, username=username).first()
    if player:
        player.team = team
    else:
        player = Player(game_id=game.id, username=username, team=team)
    db.session.add(player)
    db.session.commit()
    current_app.logger.info(f"[join] game={game.id} username={username!r} team={team}")
    return player
