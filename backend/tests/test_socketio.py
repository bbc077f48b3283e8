from wordchain import SESSION_EXTENSION


def _events(sio_client, name):
    return [pkt['args'][0] for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def test_connect_requires_a_name(connect):
    assert not connect(None).is_connected('/ws')
    assert not connect('   ').is_connected('/ws')


def test_connect_joins_lobby(flask_app, connect):
    host = connect('LIDER')
    assert host.is_connected('/ws')
    host.get_received('/ws')

    ana = connect('Ana')
    assert ana.is_connected('/ws')
    lobby = _events(host, 'lobby_state')[-1]
    assert [p['name'] for p in lobby['players']] == ['LIDER', 'Ana']
    session = flask_app.extensions[SESSION_EXTENSION]
    assert lobby['host_id'] == session.state.host_id
    assert lobby['host_id'] == lobby['players'][0]['id']


def test_only_host_starts_and_late_joiners_are_refused(flask_app, connect):
    session = flask_app.extensions[SESSION_EXTENSION]
    host = connect('LIDER')
    ana = connect('Ana')

    ana.emit('start_game', namespace='/ws')
    assert session.status == 'lobby'

    host.emit('start_game', namespace='/ws')
    assert session.status == 'playing'
    state = _events(ana, 'game_state')[-1]
    assert state['status'] == 'playing'
    assert state['turn'] == 1
    assert state['chain'] == [{'word': 'Futuro', 'player_id': None}]
    assert 30 in _events(host, 'timer')

    late = connect('Late')
    assert not late.is_connected('/ws')
    assert session.player_count == 2


def test_full_round_over_sockets(flask_app, connect, oracle):
    oracle.scores = {'passado': 80, 'carro': 10}
    session = flask_app.extensions[SESSION_EXTENSION]
    host = connect('LIDER')
    ana = connect('Ana')
    host.emit('start_game', namespace='/ws')
    ana.get_received('/ws')

    host.emit('submit_guess', 'Passado', namespace='/ws')
    ana.emit('submit_guess', {'word': 'Carro'}, namespace='/ws')

    received = ana.get_received('/ws')
    results = [pkt['args'][0] for pkt in received if pkt['name'] == 'round_result']
    assert len(results) == 1
    assert 'LIDER ("Passado"): 80% -> +7 points' in results[0]
    assert 'Ana ("Carro"): 10% -> +0 points' in results[0]

    states = [pkt['args'][0] for pkt in received if pkt['name'] == 'game_state']
    assert states[-1]['turn'] == 2
    assert states[-1]['chain'][-1]['word'] == 'Passado'
    assert oracle.calls == [('Futuro', ['Passado', 'Carro'])]
    assert session.state.turn == 2


def test_duplicate_and_out_of_turn_submissions_are_ignored(flask_app, connect):
    session = flask_app.extensions[SESSION_EXTENSION]
    host = connect('LIDER')
    ana = connect('Ana')

    ana.emit('submit_guess', 'Cedo', namespace='/ws')
    assert all(not p['submitted'] for p in session.snapshot()['players'])

    host.emit('start_game', namespace='/ws')
    ana.emit('submit_guess', 'Primeira', namespace='/ws')
    ana.emit('submit_guess', 'Segunda', namespace='/ws')
    players = {p['name']: p for p in session.snapshot()['players']}
    assert players['Ana']['last_guess'] == 'Primeira'
    assert session.state.turn == 1


def test_disconnect_leaves_lobby(flask_app, connect):
    session = flask_app.extensions[SESSION_EXTENSION]
    host = connect('LIDER')
    ana = connect('Ana')
    host.get_received('/ws')

    ana.disconnect(namespace='/ws')
    lobby = _events(host, 'lobby_state')[-1]
    assert [p['name'] for p in lobby['players']] == ['LIDER']
    assert session.player_count == 1

    host.disconnect(namespace='/ws')
    assert session.player_count == 0
    assert session.state.host_id is None
