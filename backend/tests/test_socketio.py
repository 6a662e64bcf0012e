from app.services.smite.registry import get_session


def _create_run(client, difficulty='easy'):
    return client.post('/api/runs', json={'difficulty': difficulty}).get_json()['run_code']


def _names(events):
    return [e['name'] for e in events]


def test_socket_connect_and_join(sio_client, client):
    code = _create_run(client)
    assert sio_client.is_connected('/ws')

    sio_client.emit('join_run', {'run_code': code.lower()}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert 'joined' in _names(received)
    joined = next(e for e in received if e['name'] == 'joined')
    assert joined['args'][0] == {'room': f'run:{code}'}


def test_join_unknown_run_errors(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_run', {'run_code': 'ZZZZ'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert _names(received) == ['error']
    sio_client.emit('smite', {}, namespace='/ws')
    assert sio_client.get_received('/ws')[0]['args'][0] == {'message': 'run_code is required'}


def test_hover_smite_and_notifications(sio_client, client):
    code = _create_run(client)
    game = get_session(code)
    sio_client.emit('join_run', {'run_code': code}, namespace='/ws')
    sio_client.get_received('/ws')

    game.state.monster_hp = 1150
    sio_client.emit('hover', {'run_code': code, 'hovering': True}, namespace='/ws')
    sio_client.emit('smite', {'run_code': code}, namespace='/ws')
    ack = sio_client.get_received('/ws')
    assert ack[-1]['name'] == 'smite_ack'
    assert ack[-1]['args'][0]['scheduled'] is True

    game.timeline.advance(1)

    received = sio_client.get_received('/ws')
    names = _names(received)
    assert names == ['smite_effect', 'run_ended']
    ended = received[-1]['args'][0]
    assert ended['success'] is True
    assert ended['hp'] == 1150
    assert ended['score'] == 50
    assert ended['best_scores'] == [1150]
    assert ended['run_code'] == code


def test_decay_ticks_are_pushed(sio_client, client):
    code = _create_run(client, 'normal')
    game = get_session(code)
    sio_client.emit('join_run', {'run_code': code}, namespace='/ws')
    sio_client.get_received('/ws')

    game.timeline.run_until_idle()

    received = sio_client.get_received('/ws')
    updates = [e['args'][0] for e in received if e['name'] == 'hp_update']
    assert updates
    assert all(0 <= u['hp'] <= u['max_hp'] == 5000 for u in updates)
    assert received[-1]['name'] == 'run_ended'
    assert received[-1]['args'][0]['reason'] == 'below_threshold'


def test_owner_disconnect_ends_session(flask_app, sio_client, client):
    code = _create_run(client)

    from app import socketio as _sio
    host_client = _sio.test_client(flask_app, namespace='/ws')
    host_client.emit('join_run', {'run_code': code, 'is_session_owner': True}, namespace='/ws')

    sio_client.emit('join_run', {'run_code': code}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    host_client.disconnect(namespace='/ws')

    assert 'session_ended' in _names(sio_client.get_received('/ws'))
    assert get_session(code) is None


def test_ping(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    assert sio_client.get_received('/ws') == [{'name': 'pong', 'args': [{'n': 1}], 'namespace': '/ws'}]


def test_non_string_run_code_errors(sio_client):
    sio_client.get_received('/ws')
    for event in ('join_run', 'leave_run', 'hover', 'smite'):
        sio_client.emit(event, {'run_code': 123}, namespace='/ws')
        received = sio_client.get_received('/ws')
        assert received[0]['name'] == 'error'
        assert received[0]['args'][0] == {'message': 'run_code is required'}


def test_hover_must_be_boolean(sio_client, client):
    code = _create_run(client)
    game = get_session(code)
    sio_client.get_received('/ws')

    sio_client.emit('hover', {'run_code': code, 'hovering': 'false'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert received[0]['args'][0] == {'message': 'hovering must be true or false'}
    assert game.hovering is False

    sio_client.emit('hover', {'run_code': code, 'hovering': True}, namespace='/ws')
    assert sio_client.get_received('/ws') == []
    assert game.hovering is True


def test_owner_leave_then_disconnect_ends_session_once(flask_app, sio_client, client):
    code = _create_run(client)

    from app import socketio as _sio
    host_client = _sio.test_client(flask_app, namespace='/ws')
    host_client.emit('join_run', {'run_code': code, 'is_session_owner': True}, namespace='/ws')
    sio_client.emit('join_run', {'run_code': code}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    host_client.emit('leave_run', {'run_code': code}, namespace='/ws')
    host_client.disconnect(namespace='/ws')

    names = _names(sio_client.get_received('/ws'))
    assert names.count('session_ended') == 1
    assert get_session(code) is None
