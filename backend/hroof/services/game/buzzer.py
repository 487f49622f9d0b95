from datetime import datetime, timezone
from typing import Optional

from hroof.errors import InvalidInput
from .grid import TEAMS


def utc_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


class BuzzerSnapshot:
    """Armed while ``active``; locked with a claimant otherwise."""

    def __init__(self, active: bool = True, buzzed_team: Optional[str] = None,
                 buzzed_player: Optional[str] = None, buzzed_at: Optional[str] = None,
                 version: int = 0):
        self.active = active
        self.buzzed_team = buzzed_team
        self.buzzed_player = buzzed_player
        self.buzzed_at = buzzed_at
        self.version = version

    @property
    def is_locked(self) -> bool:
        return not self.active

    def to_dict(self) -> dict:
        return {
            'active': self.active,
            'buzzed_team': self.buzzed_team,
            'buzzed_player': self.buzzed_player,
            'buzzed_at': self.buzzed_at,
        }

    @classmethod
    def from_dict(cls, data) -> 'BuzzerSnapshot':
        if not isinstance(data, dict):
            raise InvalidInput('Buzzer state must be an object')
        active = bool(data.get('active'))
        team = data.get('buzzed_team')
        if team is not None and team not in TEAMS:
            raise InvalidInput(f'Unknown team: {team!r}')
        if active:
            return cls(active=True, version=int(data.get('version') or 0))
        return cls(
            active=False,
            buzzed_team=team,
            buzzed_player=data.get('buzzed_player'),
            buzzed_at=data.get('buzzed_at'),
            version=int(data.get('version') or 0),
        )

    def __eq__(self, other):
        if not isinstance(other, BuzzerSnapshot):
            return NotImplemented
        return self.to_dict() == other.to_dict()


def buzz(buzzer: BuzzerSnapshot, team: Optional[str], player: Optional[str],
         now: Optional[datetime] = None) -> BuzzerSnapshot:
    """Claim the buzzer for ``player``.

    A player without a team, or a buzzer that is already locked, leaves the
    snapshot as it is.
    """
    if not team or not player:
        return buzzer
    if team not in TEAMS:
        raise InvalidInput(f'Unknown team: {team!r}')
    if buzzer.is_locked:
        return buzzer
    return BuzzerSnapshot(False, team, player, utc_timestamp(now), buzzer.version)


def reset(buzzer: BuzzerSnapshot) -> BuzzerSnapshot:
    return BuzzerSnapshot(True, None, None, None, buzzer.version)
