"""Request/response access to the room store's HTTP API.

``ApiTransport`` maps status codes onto the error taxonomy: 404 becomes
``None``, 400 ``InvalidInput``, 409 ``StaleWrite`` and anything else that
is not a success ``TransportError``. Subclasses only supply ``_request``.
"""

from typing import Any, Optional, Tuple

import requests

from hroof.errors import InvalidInput, StaleWrite, TransportError


class ApiTransport:
    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> Tuple[int, Any]:
        raise NotImplementedError

    def _call(self, method: str, path: str, payload: Optional[dict] = None, allow_missing: bool = False):
        status, body = self._request(method, path, payload)
        message = body.get('error') if isinstance(body, dict) else None
        if status == 404 and allow_missing:
            return None
        if status == 400:
            raise InvalidInput(message or 'Invalid request')
        if status == 409:
            raise StaleWrite(message or 'Record changed since it was last read',
                             current_version=(body or {}).get('version'))
        if status >= 400:
            raise TransportError(message or f'{method} {path} failed with {status}', status_code=status)
        return body

    def create_game(self, green_team_name: str, red_team_name: str) -> dict:
        return self._call('POST', '/api/games', {
            'green_team_name': green_team_name,
            'red_team_name': red_team_name,
        })

    def fetch_game(self, room_id: str) -> Optional[dict]:
        return self._call('GET', f'/api/games/{room_id}', allow_missing=True)

    def replace_game(self, room_id: str, record: dict, expected_version: Optional[int] = None) -> Optional[dict]:
        payload = dict(record)
        if expected_version is not None:
            payload['expected_version'] = expected_version
        return self._call('PUT', f'/api/games/{room_id}', payload, allow_missing=True)

    def delete_game(self, room_id: str) -> dict:
        return self._call('DELETE', f'/api/games/{room_id}')

    def fetch_buzzer(self, room_id: str) -> Optional[dict]:
        return self._call('GET', f'/api/buzzer/{room_id}', allow_missing=True)

    def replace_buzzer(self, room_id: str, record: dict, expected_version: Optional[int] = None) -> Optional[dict]:
        payload = dict(record)
        if expected_version is not None:
            payload['expected_version'] = expected_version
        return self._call('PUT', f'/api/buzzer/{room_id}', payload, allow_missing=True)

    def fetch_players(self, room_id: str) -> list:
        return self._call('GET', f'/api/players/{room_id}') or []

    def upsert_player(self, room_id: str, username: str, team: str) -> Optional[dict]:
        return self._call('POST', '/api/players', {
            'game_id': room_id,
            'username': username,
            'team': team,
        }, allow_missing=True)


class HttpTransport(ApiTransport):
    def __init__(self, base_url: str, timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method, path, payload=None):
        try:
            res = self.session.request(method, f'{self.base_url}{path}', json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f'{method} {path} failed: {exc}') from exc
        try:
            body = res.json()
        except ValueError:
            body = None
        return res.status_code, body
