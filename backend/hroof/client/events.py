"""Local change notification for room clients.

Listeners register per (room id, topic) and get a handle back for
unsubscribing. Topics mirror the three records a room owns.
"""

import logging
from typing import Any, Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

GAME = 'game'
BUZZER = 'buzzer'
PLAYERS = 'players'
TOPICS = (GAME, BUZZER, PLAYERS)

Listener = Callable[[Any], None]


class Subscription:
    def __init__(self, registry: 'EventRegistry', key: Tuple[str, str], listener: Listener):
        self._registry = registry
        self._key = key
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._registry._remove(self._key, self._listener)
            self.active = False


class EventRegistry:
    def __init__(self):
        self._listeners: Dict[Tuple[str, str], List[Listener]] = {}

    def subscribe(self, room_id: str, topic: str, listener: Listener) -> Subscription:
        if topic not in TOPICS:
            raise ValueError(f'Unknown topic: {topic!r}')
        key = (room_id, topic)
        self._listeners.setdefault(key, []).append(listener)
        return Subscription(self, key, listener)

    def publish(self, room_id: str, topic: str, payload: Any) -> int:
        """Deliver ``payload`` to every listener; returns how many were called."""
        listeners = list(self._listeners.get((room_id, topic), ()))
        for listener in listeners:
            try:
                listener(payload)
            except Exception:
                logger.exception(f"[event-listener] room={room_id} topic={topic} listener failed")
        return len(listeners)

    def listener_count(self, room_id: str, topic: str) -> int:
        return len(self._listeners.get((room_id, topic), ()))

    def clear(self, room_id: str) -> None:
        for key in [k for k in self._listeners if k[0] == room_id]:
            del self._listeners[key]

    def _remove(self, key: Tuple[str, str], listener: Listener) -> None:
        listeners = self._listeners.get(key)
        if not listeners:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            return
        if not listeners:
            del self._listeners[key]
