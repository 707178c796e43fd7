import threading
from crfbatch.infrastructure.event_bus import EventBus
from crfbatch.domain.events import Event

class MockEvent(Event):
    message: str

class OtherEvent(Event):
    pass

def test_event_bus_subscribe_publish():
    bus = EventBus()
    received_events = []

    bus.subscribe(MockEvent, received_events.append)
    bus.publish(MockEvent(message="hello"))

    assert len(received_events) == 1
    assert received_events[0].message == "hello"

def test_event_bus_multiple_subscribers():
    bus = EventBus()
    results = {"a": False, "b": False}

    bus.subscribe(MockEvent, lambda e: results.update({"a": True}))
    bus.subscribe(MockEvent, lambda e: results.update({"b": True}))

    bus.publish(MockEvent(message="test"))

    assert results == {"a": True, "b": True}

def test_event_bus_decorator_subscribe():
    bus = EventBus()
    received = []

    @bus.subscribe(MockEvent)
    def on_event(event: MockEvent):
        received.append(event)

    bus.publish(MockEvent(message="decorator"))
    assert [e.message for e in received] == ["decorator"]

def test_event_bus_routes_by_type():
    bus = EventBus()
    received = []
    bus.subscribe(MockEvent, received.append)

    bus.publish(OtherEvent())

    assert received == []

def test_event_bus_publish_from_threads():
    bus = EventBus()
    counter = {"n": 0}

    def increment(event):
        # not atomic on its own; the bus serializes callbacks
        current = counter["n"]
        counter["n"] = current + 1

    bus.subscribe(MockEvent, increment)
    threads = [
        threading.Thread(target=lambda: [bus.publish(MockEvent(message="x")) for _ in range(200)])
        for _ in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert counter["n"] == 1600
