from leaddesk.services.events import EventBus, LEAD_UPDATED, CATEGORY_DELETED


def test_subscribers_receive_event_and_payload():
    bus = EventBus()
    received = []
    bus.subscribe(LEAD_UPDATED, lambda event, payload: received.append((event, payload)))

    delivered = bus.publish(LEAD_UPDATED, {"lead_id": 1})

    assert delivered == 1
    assert received == [(LEAD_UPDATED, {"lead_id": 1})]


def test_other_events_are_not_delivered():
    bus = EventBus()
    received = []
    bus.subscribe(LEAD_UPDATED, lambda event, payload: received.append(event))

    assert bus.publish(CATEGORY_DELETED, {}) == 0
    assert received == []


def test_wildcard_receives_everything():
    bus = EventBus()
    received = []
    bus.subscribe("*", lambda event, payload: received.append(event))

    bus.publish(LEAD_UPDATED, {})
    bus.publish(CATEGORY_DELETED, {})

    assert received == [LEAD_UPDATED, CATEGORY_DELETED]


def test_unsubscribe():
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe(LEAD_UPDATED, lambda event, payload: received.append(event))

    unsubscribe()
    unsubscribe()
    bus.publish(LEAD_UPDATED, {})

    assert received == []


def test_failing_subscriber_does_not_block_others():
    bus = EventBus()
    received = []

    def broken(event, payload):
        raise RuntimeError("boom")

    bus.subscribe(LEAD_UPDATED, broken)
    bus.subscribe(LEAD_UPDATED, lambda event, payload: received.append(payload))

    assert bus.publish(LEAD_UPDATED, {"lead_id": 2}) == 1
    assert received == [{"lead_id": 2}]


def test_clear():
    bus = EventBus()
    bus.subscribe(LEAD_UPDATED, lambda event, payload: None)

    bus.clear()

    assert bus.publish(LEAD_UPDATED, {}) == 0
