import asyncio
import json

from app.realtime.dispatcher import PROCESSING_ERROR, EventDispatcher
from app.realtime.heartbeat import Heartbeat
from app.realtime.registry import ConnectionRegistry
from app.services import cart as cart_service


def test_broadcast_skips_closed_and_excluded(fake_websocket):
    registry = ConnectionRegistry()
    sender, other, closed = fake_websocket(), fake_websocket(), fake_websocket()
    closed.close()
    registry.register("sender", sender)
    registry.register("other", other)
    registry.register("closed", closed)

    delivered = asyncio.run(registry.broadcast({"type": "hello"}, exclude="sender"))

    assert delivered == 1
    assert other.types() == ["hello"]
    assert sender.sent == []
    assert closed.sent == []


def test_broadcast_continues_after_failed_send(fake_websocket):
    registry = ConnectionRegistry()
    broken, healthy = fake_websocket(fail=True), fake_websocket()
    registry.register("broken", broken)
    registry.register("healthy", healthy)

    delivered = asyncio.run(registry.broadcast({"type": "hello"}))

    assert delivered == 1
    assert healthy.types() == ["hello"]


def test_send_to_unknown_client_is_a_no_op():
    registry = ConnectionRegistry()

    assert asyncio.run(registry.send("nobody", {"type": "hello"})) is False


def test_unregister_removes_client(fake_websocket):
    registry = ConnectionRegistry()
    registry.register("a", fake_websocket())

    assert "a" in registry
    registry.unregister("a")
    assert "a" not in registry
    assert len(registry) == 0
    assert registry.unregister("a") is None


def test_heartbeat_stops_after_disconnect(fake_websocket):
    registry = ConnectionRegistry()
    websocket = fake_websocket()
    registry.register("client", websocket)

    async def scenario():
        heartbeat = Heartbeat(registry, "client", interval=0.01)
        heartbeat.start()
        await asyncio.sleep(0.06)
        beats_while_open = websocket.types().count("heartbeat")

        registry.unregister("client")
        heartbeat.stop()
        websocket.sent.clear()
        await asyncio.sleep(0.06)
        return heartbeat, beats_while_open

    heartbeat, beats_while_open = asyncio.run(scenario())

    assert beats_while_open >= 2
    assert websocket.sent == []
    assert heartbeat.running is False


def test_heartbeat_ends_by_itself_when_client_closes(fake_websocket):
    registry = ConnectionRegistry()
    websocket = fake_websocket()
    registry.register("client", websocket)

    async def scenario():
        heartbeat = Heartbeat(registry, "client", interval=0.01)
        heartbeat.start()
        websocket.close()
        await asyncio.sleep(0.05)
        return heartbeat

    heartbeat = asyncio.run(scenario())

    assert heartbeat.running is False
    assert websocket.sent == []


def test_dispatcher_reports_unexpected_errors_to_sender(
    db_session, fake_websocket, monkeypatch
):
    registry = ConnectionRegistry()
    sender, other = fake_websocket(), fake_websocket()
    registry.register("sender", sender)
    registry.register("other", other)

    def explode(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(cart_service, "scan_product", explode)
    dispatcher = EventDispatcher(registry, db_session, "sender")

    asyncio.run(
        dispatcher.dispatch(json.dumps({"type": "scan", "barcode": "A", "cartId": "C"}))
    )

    assert sender.sent == [{"type": "error", "message": PROCESSING_ERROR}]
    assert other.sent == []


def test_dispatcher_rejects_non_object_json(db_session, fake_websocket):
    registry = ConnectionRegistry()
    sender = fake_websocket()
    registry.register("sender", sender)
    dispatcher = EventDispatcher(registry, db_session, "sender")

    asyncio.run(dispatcher.dispatch("[1, 2, 3]"))

    assert sender.sent == [{"type": "error", "message": PROCESSING_ERROR}]


def test_dispatcher_ignores_unknown_types(db_session, fake_websocket):
    registry = ConnectionRegistry()
    sender = fake_websocket()
    registry.register("sender", sender)
    dispatcher = EventDispatcher(registry, db_session, "sender")

    asyncio.run(dispatcher.dispatch(json.dumps({"type": "reboot"})))
    asyncio.run(dispatcher.dispatch(json.dumps({"barcode": "A"})))

    assert sender.sent == []
