"""Room clients: a cached projection of one room kept fresh by polling.

Every client, the host included, reads the authoritative records on a
fixed interval and replaces its projection wholesale. Host actions run
the engine locally on the projection and write the whole record back.
With ``conditional_writes`` on (the default) each write carries the
version the client last read. A rejected tile write is recomputed from a
fresh read. A rejected buzz means another player got there first.
"""

import logging
import threading
from typing import List, Optional

from hroof.errors import StaleWrite, TransportError
from hroof.services.game import GameSnapshot, BuzzerSnapshot
from hroof.services.game import buzzer as buzzer_engine
from hroof.services.game import engine
from hroof.services.game.grid import validate_team
from .events import EventRegistry, GAME, BUZZER, PLAYERS

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SEC = 2.0


class RoomSession:
    def __init__(self, transport, room_id: str, username: Optional[str] = None, is_host: bool = False,
                 poll_interval: float = DEFAULT_POLL_INTERVAL_SEC, conditional_writes: bool = True,
                 write_retries: int = 3, events: Optional[EventRegistry] = None, rng=None):
        self.transport = transport
        self.room_id = str(room_id).strip()
        self.username = username
        self.is_host = is_host
        self.poll_interval = poll_interval
        self.conditional_writes = conditional_writes
        self.write_retries = write_retries
        self.events = events or EventRegistry()
        self.rng = rng

        self.game: Optional[GameSnapshot] = None
        self.game_version: Optional[int] = None
        self.team_names = {'green': None, 'red': None}
        self.buzzer: Optional[BuzzerSnapshot] = None
        self.players: List[dict] = []
        self.team: Optional[str] = None
        self.ended = False
        self.last_error: Optional[str] = None

    @property
    def buzzer_claimant(self) -> Optional[str]:
        if self.buzzer and self.buzzer.is_locked:
            return self.buzzer.buzzed_player
        return None

    # ---- Reading ----

    def refresh(self) -> bool:
        """Pull all three records and replace the projection.

        Returns False when the store could not be read; the previous
        projection is then left exactly as it was.
        """
        try:
            game_record = self.transport.fetch_game(self.room_id)
            buzzer_record = self.transport.fetch_buzzer(self.room_id) if game_record else None
            player_records = self.transport.fetch_players(self.room_id) if game_record else []
        except TransportError as exc:
            self.last_error = str(exc)
            logger.warning(f"[refresh-failed] room={self.room_id} error={exc}")
            return False

        self.last_error = None
        if not game_record:
            if not self.ended:
                logger.info(f"[room-gone] room={self.room_id}")
            self.ended = True
            return True

        self._apply_game_record(game_record)
        if buzzer_record:
            self._set_buzzer(BuzzerSnapshot.from_dict(buzzer_record))
        self._set_players(player_records)
        return True

    def poll(self, stop_event: Optional[threading.Event] = None, max_cycles: Optional[int] = None) -> int:
        """Refresh every ``poll_interval`` seconds until stopped or the room is gone."""
        stop_event = stop_event or threading.Event()
        cycles = 0
        while not stop_event.is_set() and not self.ended:
            self.refresh()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            stop_event.wait(self.poll_interval)
        return cycles

    def _apply_game_record(self, record: dict) -> None:
        self.team_names = {
            'green': record.get('green_team_name'),
            'red': record.get('red_team_name'),
        }
        self._set_game(GameSnapshot.from_record(record), record.get('version'))

    def _set_game(self, snapshot: GameSnapshot, version: Optional[int]) -> None:
        changed = snapshot != self.game
        self.game = snapshot
        self.game_version = version
        if changed:
            self.events.publish(self.room_id, GAME, snapshot)

    def _set_buzzer(self, snapshot: BuzzerSnapshot) -> None:
        changed = snapshot != self.buzzer
        self.buzzer = snapshot
        if changed:
            self.events.publish(self.room_id, BUZZER, snapshot)

    def _set_players(self, records: list) -> None:
        records = list(records or [])
        changed = records != self.players
        self.players = records
        if not self.is_host and self.username:
            mine = next((p for p in records if p.get('username') == self.username), None)
            if mine:
                self.team = mine.get('team')
        if changed:
            self.events.publish(self.room_id, PLAYERS, records)

    def _ensure_loaded(self) -> bool:
        if self.game is None and not self.ended:
            self.refresh()
        return self.game is not None and not self.ended

    # ---- Host actions ----

    def update_tile(self, row: int, col: int, color) -> bool:
        """Color one cell and pass the turn. Returns True once written."""
        if not self.is_host or not self._ensure_loaded():
            return False
        for attempt in range(self.write_retries + 1):
            current = self.game
            if current.is_finished:
                return False
            nxt = engine.apply_tile_update(current, row, col, color, is_host=self.is_host)
            if nxt is current:
                return False
            try:
                return self._write_game(nxt)
            except StaleWrite:
                logger.info(f"[tile-retry] room={self.room_id} attempt={attempt + 1}")
                if not self.refresh() or self.ended:
                    return False
        logger.warning(f"[tile-abandoned] room={self.room_id} row={row} col={col}")
        return False

    def reset_round(self) -> bool:
        if not self.is_host or not self._ensure_loaded():
            return False
        return self._write_game(engine.reset_round(self.game, rng=self.rng), conditional=False)

    def reset_all(self) -> bool:
        if not self.is_host or not self._ensure_loaded():
            return False
        if not self._write_game(engine.reset_full(self.game, rng=self.rng), conditional=False):
            return False
        return self.reset_buzzer()

    def reset_buzzer(self) -> bool:
        if not self.is_host or not self._ensure_loaded():
            return False
        armed = buzzer_engine.reset(self.buzzer or BuzzerSnapshot())
        result = self.transport.replace_buzzer(self.room_id, armed.to_dict())
        if result is None:
            self.ended = True
            return False
        armed.version = result.get('version', armed.version)
        self._set_buzzer(armed)
        return True

    def stop_game(self) -> bool:
        if not self.is_host:
            return False
        self.transport.delete_game(self.room_id)
        self.leave()
        return True

    def _write_game(self, snapshot: GameSnapshot, conditional: bool = True) -> bool:
        expected = self.game_version if (conditional and self.conditional_writes) else None
        result = self.transport.replace_game(self.room_id, snapshot.to_record(), expected_version=expected)
        if result is None:
            self.ended = True
            return False
        self._set_game(snapshot, result.get('version'))
        return True

    # ---- Player actions ----

    def select_team(self, team: str) -> bool:
        team = validate_team(team)
        if not self.username:
            return False
        result = self.transport.upsert_player(self.room_id, self.username, team)
        if result is None:
            self.ended = True
            return False
        self.team = team
        others = [p for p in self.players if p.get('username') != self.username]
        self._set_players(others + [{'game_id': self.room_id, 'username': self.username, 'team': team}])
        return True

    def buzz(self) -> bool:
        """Claim the buzzer. Returns False if it was already taken."""
        if not self.team or not self.username or not self._ensure_loaded():
            return False
        current = self.buzzer or BuzzerSnapshot()
        claimed = buzzer_engine.buzz(current, self.team, self.username)
        if claimed is current:
            return False
        expected = current.version if self.conditional_writes else None
        try:
            result = self.transport.replace_buzzer(self.room_id, claimed.to_dict(), expected_version=expected)
        except StaleWrite:
            logger.info(f"[buzz-lost] room={self.room_id} player={self.username!r}")
            self.refresh()
            return False
        if result is None:
            self.ended = True
            return False
        claimed.version = result.get('version', claimed.version)
        self._set_buzzer(claimed)
        return True

    def leave(self) -> None:
        """Stop observing the room; nothing is sent to the store."""
        self.ended = True
        self.events.clear(self.room_id)
