def _flush(sio_client):
    try:
        sio_client.get_received('/ws')
    except Exception:
        pass


def test_socket_connect_and_join(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    _flush(sio_client)

    sio_client.emit('join_game', {'game_code': '123456'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'joined' and pkt['args'][0]['room'] == 'game:123456' for pkt in received)


def test_join_requires_game_code(sio_client):
    _flush(sio_client)
    sio_client.emit('join_game', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'error' for pkt in received)


def test_ping_pong(sio_client):
    _flush(sio_client)
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_writes_emit_state_update(client, sio_client, room):
    sio_client.emit('join_game', {'game_code': room}, namespace='/ws')
    _flush(sio_client)

    client.post('/api/players', json={'game_id': room, 'username': 'sara', 'team': 'green'})
    client.put(f'/api/buzzer/{room}', json={'active': False, 'buzzed_team': 'green', 'buzzed_player': 'sara',
                                            'buzzed_at': '2026-01-01T00:00:00Z'})
    game = client.get(f'/api/games/{room}').get_json()
    client.put(f'/api/games/{room}', json={'current_state': game['current_state'], 'current_team': 'red',
                                          'winner': None})

    events = sio_client.get_received('/ws')
    topics = [e['args'][0]['topic'] for e in events if e['name'] == 'state_update']
    assert topics == ['players', 'buzzer', 'game']
    assert all(e['args'][0]['game_code'] == room for e in events if e['name'] == 'state_update')


def test_leave_stops_updates(client, sio_client, room):
    sio_client.emit('join_game', {'game_code': room}, namespace='/ws')
    sio_client.emit('leave_game', {'game_code': room}, namespace='/ws')
    _flush(sio_client)
    client.post('/api/players', json={'game_id': room, 'username': 'sara', 'team': 'green'})
    assert not any(e['name'] == 'state_update' for e in sio_client.get_received('/ws'))


def test_delete_emits_session_ended(client, sio_client, room):
    sio_client.emit('join_game', {'game_code': room}, namespace='/ws')
    _flush(sio_client)
    client.delete(f'/api/games/{room}')
    events = sio_client.get_received('/ws')
    assert any(e['name'] == 'session_ended' and e['args'][0]['game_code'] == room for e in events)
