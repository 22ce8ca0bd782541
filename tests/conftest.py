import pytest

from games.battle.app import create_app
from games.battle.config import BattleConfig

from helpers import SECRET, ManualScheduler, make_battle, make_token


@pytest.fixture
def battle():
    """(registry, scheduler, broadcaster, loop) wired on virtual time."""
    return make_battle()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def battle_app(scheduler):
    app, socketio = create_app(BattleConfig(jwt_secret=SECRET), scheduler=scheduler)
    app.config["TESTING"] = True
    return app, socketio


@pytest.fixture
def registry(battle_app):
    app, _ = battle_app
    return app.extensions["battle"]["registry"]


@pytest.fixture
def connect(battle_app):
    app, socketio = battle_app
    clients = []

    def _connect(user_id="u1", username="alice", auth=None, **kwargs):
        if auth is None:
            auth = {"token": make_token({"id": user_id, "username": username})}
        client = socketio.test_client(app, auth=auth, **kwargs)
        clients.append(client)
        return client

    yield _connect

    for client in clients:
        if client.is_connected():
            client.disconnect()
