from task_manager.events.bus import ChangeEvent, EventBus
from task_manager.events.feed import LiveCollection, merge_by_id


def test_bus_delivers_in_order_and_isolates_failures():
    bus = EventBus()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe("tasks", broken)
    bus.subscribe("tasks", lambda e: seen.append(e.doc_id))
    bus.publish("tasks", ChangeEvent.delete("t1"))
    bus.publish("users", ChangeEvent.delete("u1"))

    assert seen == ["t1"]


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    seen = []
    unsubscribe = bus.subscribe("tasks", seen.append)
    unsubscribe()
    unsubscribe()
    bus.publish("tasks", ChangeEvent.delete("t1"))
    assert seen == []


def test_live_collection_follows_changes():
    bus = EventBus()
    feed = LiveCollection(lambda d: d["id"], [{"id": "a", "v": 1}])
    stop = feed.follow(bus, "tasks")

    bus.publish("tasks", ChangeEvent.upsert("b", {"id": "b", "v": 1}))
    bus.publish("tasks", ChangeEvent.upsert("a", {"id": "a", "v": 2}))
    bus.publish("tasks", ChangeEvent.upsert("a", {"id": "a", "v": 2}))
    bus.publish("tasks", ChangeEvent.delete("missing"))
    bus.publish("tasks", ChangeEvent.delete("b"))

    assert feed.snapshot() == [{"id": "a", "v": 2}]
    assert "a" in feed and len(feed) == 1

    stop()
    bus.publish("tasks", ChangeEvent.delete("a"))
    assert feed.get("a") == {"id": "a", "v": 2}


def test_merge_by_id_dedupes_across_groups():
    merged = merge_by_id(lambda d: d["id"], [{"id": 1, "src": "uid"}], [{"id": 1, "src": "email"}, {"id": 2, "src": "email"}])
    assert merged == [{"id": 1, "src": "email"}, {"id": 2, "src": "email"}]
