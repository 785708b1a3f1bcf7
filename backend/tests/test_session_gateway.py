import pytest
from dishka import Provider, Scope, provide
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from chatline.domain.ports.repositories import UserRepository
from chatline.fastapi_app import create_fastapi_app
from chatline.infrastructure.persistence import MemoryUserRepository
from chatline.setup.ioc import create_container


def _connect(client, token):
    return client.websocket_connect(f"/ws?token={token}")


def _ready(ws):
    """Round-trip a ping so the server side is registered before we go on."""
    ws.send_json({"type": "ping"})
    assert ws.receive_json() == {"type": "pong"}


def test_missing_or_bad_token_is_refused(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws"):
            pass
    assert exc.value.code == 1008

    with pytest.raises(WebSocketDisconnect) as exc:
        with _connect(client, "garbage"):
            pass
    assert exc.value.code == 1008


def test_header_credentials(client, auth):
    with client.websocket_connect("/ws", headers=auth(3)) as ws:
        _ready(ws)


def test_message_reaches_online_recipient_and_sender_gets_ack(client, token, auth):
    with _connect(client, token(3)) as ada, _connect(client, token(7)) as linus:
        _ready(ada)
        _ready(linus)

        linus.send_json(
            {"type": "submit", "receiver_id": 3, "content": "hi", "client_id": "tmp-1"}
        )
        ack = linus.receive_json()
        deliver = ada.receive_json()

        assert ack["type"] == "ack"
        assert ack["client_id"] == "tmp-1"
        assert deliver["type"] == "deliver"
        assert deliver["message"] == ack["message"]
        assert deliver["message"]["chat_id"] == "3_7"
        assert deliver["message"]["sender_id"] == 7

        # Nothing else was queued for either side
        _ready(ada)
        _ready(linus)

    history = client.get("/conversations/3_7/messages", headers=auth(3)).json()["messages"]
    assert [m["content"] for m in history] == ["hi"]


def test_offline_recipient_catches_up_from_history(client, token, auth):
    with _connect(client, token(7)) as linus:
        linus.send_json({"type": "submit", "receiver_id": 3, "content": "while away"})
        assert linus.receive_json()["type"] == "ack"

    with _connect(client, token(3)) as ada:
        _ready(ada)
        history = client.get("/conversations/3_7/messages", headers=auth(3)).json()
        assert [m["content"] for m in history["messages"]] == ["while away"]


def test_rest_submission_is_delivered_live(client, token, auth):
    with _connect(client, token(3)) as ada:
        _ready(ada)
        res = client.post("/messages", json={"receiver_id": 3, "content": "ping"}, headers=auth(9))
        assert res.status_code == 201

        deliver = ada.receive_json()
        assert deliver["type"] == "deliver"
        assert deliver["message"]["id"] == res.json()["id"]


def test_reconnect_routes_to_newest_session(client, token):
    with _connect(client, token(7)) as linus:
        _ready(linus)
        with _connect(client, token(3)) as first:
            _ready(first)
            with _connect(client, token(3)) as second:
                _ready(second)

                linus.send_json({"type": "submit", "receiver_id": 3, "content": "one"})
                assert linus.receive_json()["type"] == "ack"
                assert second.receive_json()["message"]["content"] == "one"

                # Closing the displaced session must not unregister the new one
                first.close()
                _ready(second)

                linus.send_json({"type": "submit", "receiver_id": 3, "content": "two"})
                assert linus.receive_json()["type"] == "ack"
                assert second.receive_json()["message"]["content"] == "two"


def test_error_frames(client, token):
    with _connect(client, token(7)) as linus:
        linus.send_json({"type": "submit", "receiver_id": 7, "content": "me", "client_id": "a"})
        error = linus.receive_json()
        assert error == {
            "type": "error",
            "code": "invalid_argument",
            "detail": "You cannot message yourself",
            "client_id": "a",
        }

        linus.send_json({"type": "submit", "receiver_id": 3, "client_id": "b"})
        assert linus.receive_json()["code"] == "invalid_argument"

        linus.send_json({"type": "submit", "receiver_id": 99, "content": "hi", "client_id": "c"})
        error = linus.receive_json()
        assert (error["code"], error["client_id"]) == ("not_found", "c")

        linus.send_json({"type": "submit", "receiver_id": 3, "media_ref": "../etc/passwd"})
        assert linus.receive_json()["code"] == "invalid_argument"

        linus.send_text("not json")
        error = linus.receive_json()
        assert error["code"] == "invalid_argument"
        assert error["client_id"] is None

        linus.send_json({"type": "shout"})
        assert linus.receive_json()["code"] == "invalid_argument"

        # The connection survives rejected frames
        _ready(linus)


def test_binary_frame_is_rejected_without_closing(client, token):
    with _connect(client, token(7)) as linus:
        linus.send_bytes(b"\x00\x01")
        error = linus.receive_json()
        assert (error["type"], error["code"]) == ("error", "invalid_argument")

        _ready(linus)


class UnreachableDirectory(MemoryUserRepository):
    async def get_by_id(self, user_id):
        raise ConnectionError("directory unreachable")


class UnreachableDirectoryProvider(Provider):
    @provide(scope=Scope.APP)
    def get_user_repository(self) -> UserRepository:
        return UnreachableDirectory()


def test_unexpected_handler_failure_becomes_error_frame(config, token):
    container = create_container(config, UnreachableDirectoryProvider())
    app = create_fastapi_app(config, container=container)

    with TestClient(app) as client, _connect(client, token(7)) as linus:
        linus.send_json({"type": "submit", "receiver_id": 3, "content": "hi", "client_id": "x"})
        error = linus.receive_json()
        assert error == {
            "type": "error",
            "code": "unavailable",
            "detail": "Message could not be processed",
            "client_id": "x",
        }

        _ready(linus)
