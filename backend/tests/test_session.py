import random
import threading

import pytest

from hroof.client import RoomSession
from hroof.errors import InvalidInput, TransportError


def _host(transport, room, **kwargs):
    session = RoomSession(transport, room, username='host', is_host=True, rng=random.Random(11), **kwargs)
    assert session.refresh()
    return session


def _player(transport, room, username, team, **kwargs):
    session = RoomSession(transport, room, username=username, **kwargs)
    assert session.refresh()
    assert session.select_team(team)
    return session


def test_refresh_builds_projection(transport, room):
    host = _host(transport, room)
    assert host.game.current_team == 'green'
    assert host.team_names == {'green': 'Falcons', 'red': 'Lions'}
    assert host.buzzer.active
    assert host.players == []
    assert host.game_version == 0


def test_host_tile_update_writes_and_flips_turn(transport, room, client):
    host = _host(transport, room)
    assert host.update_tile(2, 2, 'green')
    record = client.get(f'/api/games/{room}').get_json()
    assert record['current_state']['board'][2][2] == 'green'
    assert record['current_team'] == 'red'
    assert host.game.current_team == 'red'
    assert host.game_version == 1


def test_non_host_and_border_updates_are_noops(transport, room):
    player = _player(transport, room, 'sara', 'green')
    assert not player.update_tile(2, 2, 'green')
    host = _host(transport, room)
    calls = len(transport.calls)
    assert not host.update_tile(0, 3, 'green')
    assert len(transport.calls) == calls


def test_players_see_host_changes_after_refresh(transport, room):
    host = _host(transport, room)
    player = _player(transport, room, 'sara', 'green')
    for row in range(1, 6):
        assert host.update_tile(row, 3, 'green')
        if row < 5:
            # Keep green's column intact while red moves elsewhere
            assert host.update_tile(row, 1, 'red')
    assert host.game.winner == 'green'
    assert host.game.state.scores['green'] == 1

    assert player.game.winner is None
    player.refresh()
    assert player.game.winner == 'green'
    assert player.game.state.scores['green'] == 1
    assert player.game == host.game


def test_finished_game_rejects_tile_updates(transport, room):
    host = _host(transport, room)
    for row in range(1, 6):
        host.update_tile(row, 3, 'green')
        if row < 5:
            host.update_tile(row, 5, 'red')
    assert host.game.is_finished
    assert not host.update_tile(5, 5, 'red')


def test_stale_tile_write_is_recomputed(transport, room):
    host = _host(transport, room)
    other_host = _host(transport, room)
    assert other_host.update_tile(2, 2, 'green')

    # host still holds version 0; its write is rejected, re-read and recomputed
    assert host.update_tile(3, 3, 'red')
    assert host.game.state.board[2][2] == 'green'
    assert host.game.state.board[3][3] == 'red'
    assert host.game.current_team == 'green'
    assert host.game_version == 2


def test_unconditional_writes_lose_concurrent_changes(transport, room):
    host = _host(transport, room, conditional_writes=False)
    other_host = _host(transport, room, conditional_writes=False)
    assert other_host.update_tile(2, 2, 'green')
    assert host.update_tile(3, 3, 'red')
    host.refresh()
    assert host.game.state.board[2][2] == ''
    assert host.game.state.board[3][3] == 'red'


def test_round_reset_keeps_scores(transport, room):
    host = _host(transport, room)
    for row in range(1, 6):
        host.update_tile(row, 2, 'green')
        if row < 5:
            host.update_tile(row, 4, 'red')
    letters = host.game.state.letters
    team = host.game.current_team
    assert host.reset_round()
    assert host.game.winner is None
    assert host.game.state.scores['green'] == 1
    assert host.game.current_team == team
    assert host.game.state.letters != letters
    assert all(cell == '' for row in host.game.state.board for cell in row)


def test_full_reset_rearms_buzzer(transport, room):
    host = _host(transport, room)
    player = _player(transport, room, 'sara', 'red')
    host.update_tile(3, 3, 'green')
    assert player.buzz()

    assert host.reset_all()
    assert host.game.current_team == 'green'
    assert host.game.state.scores == {'green': 0, 'red': 0}
    assert host.buzzer.active
    player.refresh()
    assert player.buzzer.active
    assert player.buzzer_claimant is None


def test_first_buzz_wins_with_conditional_writes(transport, room):
    sara = _player(transport, room, 'sara', 'green')
    omar = _player(transport, room, 'omar', 'red')
    # Both saw the buzzer armed in the same polling window
    assert sara.buzzer.active and omar.buzzer.active
    assert sara.buzz()
    assert not omar.buzz()
    assert omar.buzzer_claimant == 'sara'


def test_buzz_race_without_conditional_writes(transport, room):
    sara = _player(transport, room, 'sara', 'green', conditional_writes=False)
    omar = _player(transport, room, 'omar', 'red', conditional_writes=False)
    assert sara.buzz()
    assert omar.buzz()
    sara.refresh()
    assert sara.buzzer_claimant == 'omar'


def test_buzz_while_locked_is_ignored(transport, room):
    sara = _player(transport, room, 'sara', 'green')
    assert sara.buzz()
    calls = len(transport.calls)
    assert not sara.buzz()
    assert len(transport.calls) == calls


def test_player_without_team_cannot_buzz(transport, room):
    watcher = RoomSession(transport, room, username='watcher')
    watcher.refresh()
    assert not watcher.buzz()


def test_select_team_validates(transport, room):
    player = RoomSession(transport, room, username='sara')
    with pytest.raises(InvalidInput):
        player.select_team('blue')


def test_team_restored_from_player_list(transport, room, client):
    client.post('/api/players', json={'game_id': room, 'username': 'sara', 'team': 'red'})
    returning = RoomSession(transport, room, username='sara')
    returning.refresh()
    assert returning.team == 'red'


def test_events_fire_on_changes_only(transport, room):
    host = _host(transport, room)
    player = RoomSession(transport, room, username='sara')
    seen = []
    player.events.subscribe(room, 'game', lambda snap: seen.append(snap.current_team))
    player.refresh()
    player.refresh()
    assert seen == ['green']
    host.update_tile(2, 2, 'green')
    player.refresh()
    assert seen == ['green', 'red']


def test_stop_game_ends_every_session(transport, room):
    host = _host(transport, room)
    player = _player(transport, room, 'sara', 'green')
    assert host.stop_game()
    assert host.ended
    player.refresh()
    assert player.ended
    assert player.poll(max_cycles=5) == 0


def test_transport_failure_keeps_projection(transport, room):
    player = _player(transport, room, 'sara', 'green')
    before = player.game

    def broken(*args, **kwargs):
        raise TransportError('store unreachable')

    player.transport.fetch_game = broken
    assert not player.refresh()
    assert player.last_error == 'store unreachable'
    assert player.game is before
    assert not player.ended


def test_poll_runs_until_stopped(transport, room):
    player = RoomSession(transport, room, username='sara', poll_interval=0.001)
    assert player.poll(max_cycles=3) == 3
    stop = threading.Event()
    stop.set()
    assert player.poll(stop_event=stop) == 0
