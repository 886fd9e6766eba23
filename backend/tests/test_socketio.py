def test_socket_connect_and_join(sio_client):
    assert sio_client.is_connected('/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)

    sio_client.emit('join_game', {'sessionKey': 'abc'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'joined' and pkt['args'][0]['room'] == 'game:abc' for pkt in received)


def test_join_requires_session_key(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_game', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'error' for pkt in received)


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_moves_notify_session_room(client, sio_client, card_pairs):
    client.post('/api/games/start', json={'sessionKey': 'live'})
    sio_client.emit('join_game', {'sessionKey': 'live'}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    pairs = card_pairs('live')
    for pair in pairs:
        client.post('/api/games/live/submit', json={'cards': list(pair)})

    events = sio_client.get_received('/ws')
    updates = [e for e in events if e['name'] == 'state_update']
    assert len(updates) == 8
    assert updates[0]['args'][0] == {'sessionKey': 'live'}
    completed = [e for e in events if e['name'] == 'game_completed']
    assert len(completed) == 1
    assert completed[0]['args'][0]['attempts'] == 8
    assert completed[0]['args'][0]['completionTime'] is not None
    assert completed[0]['args'][0]['score'] >= 950


def test_leaving_room_stops_updates(client, sio_client, card_pairs):
    client.post('/api/games/start', json={'sessionKey': 'quiet'})
    sio_client.emit('join_game', {'sessionKey': 'quiet'}, namespace='/ws')
    sio_client.emit('leave_game', {'sessionKey': 'quiet'}, namespace='/ws')
    sio_client.get_received('/ws')

    client.post('/api/games/quiet/submit', json={'cards': list(card_pairs('quiet')[0])})
    assert not any(e['name'] == 'state_update' for e in sio_client.get_received('/ws'))
