import pytest
from starlette.websockets import WebSocketDisconnect

WS_PATH = "/ws/remote"


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def token(client, headers_for, alice):
    info = client.get("/api/remote-control/info", headers=headers_for(alice)).json()
    assert info["wsPath"] == WS_PATH
    return info["token"]


def auth(ws, token, device_type, name=None):
    message = {"type": "auth", "token": token, "deviceType": device_type}
    if name:
        message["deviceName"] = name
    ws.send_json(message)
    reply = ws.receive_json()
    assert reply["type"] == "auth_success"
    return reply["deviceId"]


def test_token_is_stable_per_user(client, headers_for, alice, token):
    again = client.get("/api/remote-control/info", headers=headers_for(alice)).json()["token"]
    assert again == token


def test_info_requires_auth(client):
    assert client.get("/api/remote-control/info").status_code == 401


def test_bad_token_closes_socket(client):
    with client.websocket_connect(WS_PATH) as ws:
        ws.send_json({"type": "auth", "token": "nope", "deviceType": "player"})
        assert ws.receive_json()["type"] == "auth_error"
        with pytest.raises(WebSocketDisconnect):
            ws.receive_json()


def test_unknown_device_type_rejected(client, token):
    with client.websocket_connect(WS_PATH) as ws:
        ws.send_json({"type": "auth", "token": token, "deviceType": "toaster"})
        assert ws.receive_json()["type"] == "auth_error"


def test_command_and_status_relay(client, token):
    with client.websocket_connect(WS_PATH) as player:
        player_id = auth(player, token, "player", name="Kitchen")

        with client.websocket_connect(WS_PATH) as controller:
            auth(controller, token, "controller")
            available = controller.receive_json()
            assert available["type"] == "available_players"
            assert [p["deviceId"] for p in available["players"]] == [player_id]
            assert available["players"][0]["name"] == "Kitchen"

            controller.send_json({
                "type": "command", "action": "volume", "targetDeviceId": player_id, "params": {"level": 40},
            })
            assert player.receive_json() == {"type": "command", "action": "volume", "params": {"level": 40}}

            player.send_json({"type": "status_update", "isPlaying": True, "volume": 40, "currentSong": {"id": 1}})
            status = controller.receive_json()
            assert status["type"] == "player_status"
            assert status["deviceId"] == player_id
            assert status["isPlaying"] is True
            assert status["volume"] == 40
            assert status["currentSong"] == {"id": 1}


def test_invalid_commands_report_errors(client, token):
    with client.websocket_connect(WS_PATH) as player:
        player_id = auth(player, token, "player")
        with client.websocket_connect(WS_PATH) as controller:
            auth(controller, token, "controller")
            controller.receive_json()

            controller.send_json({"type": "command", "action": "explode", "targetDeviceId": player_id})
            assert controller.receive_json()["type"] == "error"

            controller.send_json({"type": "command", "action": "play", "targetDeviceId": "missing"})
            assert controller.receive_json() == {"type": "error", "message": "Player not found"}

            controller.send_text("not json")
            assert controller.receive_json() == {"type": "error", "message": "Invalid JSON"}


def test_players_on_other_accounts_are_invisible(client, make_user, headers_for, token):
    bob = make_user("bob")
    bob_token = client.get("/api/remote-control/info", headers=headers_for(bob)).json()["token"]
    assert bob_token != token

    with client.websocket_connect(WS_PATH) as player:
        player_id = auth(player, token, "player")
        with client.websocket_connect(WS_PATH) as controller:
            auth(controller, bob_token, "controller")
            assert controller.receive_json()["players"] == []
            controller.send_json({"type": "command", "action": "pause", "targetDeviceId": player_id})
            assert controller.receive_json()["message"] == "Player not found"


def test_controller_sees_players_come_and_go(client, token):
    with client.websocket_connect(WS_PATH) as controller:
        auth(controller, token, "controller")
        assert controller.receive_json()["players"] == []

        with client.websocket_connect(WS_PATH) as player:
            player_id = auth(player, token, "player")
            joined = controller.receive_json()
            assert joined["type"] == "player_connected"
            assert joined["deviceId"] == player_id

        left = controller.receive_json()
        assert left == {"type": "player_disconnected", "deviceId": player_id}
