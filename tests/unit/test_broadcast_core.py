"""Tests for the history ring buffer and fan-out."""

import pytest

from agentviz.events.models import parse_event
from agentviz.hub import BroadcastCore, Subscriber, SubscriberState


def _record_many(core: BroadcastCore, make_event, count: int) -> list[dict[str, object]]:
    sent = []
    for n in range(1, count + 1):
        payload = make_event(n)
        core.record(parse_event(payload))
        sent.append(payload)
    return sent


def test_snapshot_keeps_insertion_order(make_event) -> None:
    core = BroadcastCore()
    sent = _record_many(core, make_event, 3)
    assert core.snapshot() == sent


def test_ring_buffer_evicts_oldest_first(make_event) -> None:
    core = BroadcastCore()
    sent = _record_many(core, make_event, 105)
    snapshot = core.snapshot()
    assert len(snapshot) == 100
    assert snapshot == sent[5:]
    assert snapshot[0]["id"] == make_event(6)["id"]
    assert core.recorded_total == 105


def test_small_capacity(make_event) -> None:
    core = BroadcastCore(capacity=2)
    sent = _record_many(core, make_event, 5)
    assert core.snapshot() == sent[-2:]
    assert len(core) == 2


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        BroadcastCore(capacity=0)


def test_snapshot_is_a_copy(make_event) -> None:
    core = BroadcastCore()
    _record_many(core, make_event, 1)
    first = core.snapshot()
    first[0]["tool"] = "mutated"
    first[0]["toolInput"]["command"] = "mutated"
    assert core.snapshot()[0]["tool"] == "Bash"
    assert core.snapshot()[0]["toolInput"] == {"command": "echo 1"}


def test_repeated_snapshots_are_identical(make_event) -> None:
    core = BroadcastCore()
    _record_many(core, make_event, 4)
    assert core.snapshot() == core.snapshot()


def test_join_receives_history_first(make_event) -> None:
    core = BroadcastCore()
    sent = _record_many(core, make_event, 3)
    subscriber = core.join()
    assert subscriber.state is SubscriberState.OPEN
    assert subscriber.pending() == [{"type": "history", "events": sent}]


def test_join_history_is_capped(make_event) -> None:
    core = BroadcastCore()
    _record_many(core, make_event, 130)
    subscriber = core.join()
    (history,) = subscriber.pending()
    assert history["type"] == "history"
    assert len(history["events"]) == 100
    assert history["events"] == core.snapshot()


def test_subscriber_before_events_gets_empty_history_then_live(make_event) -> None:
    core = BroadcastCore()
    subscriber = core.join()
    sent = _record_many(core, make_event, 3)
    messages = subscriber.pending()
    assert messages[0] == {"type": "history", "events": []}
    assert messages[1:] == [{"type": "event", "event": payload} for payload in sent]


def test_record_fans_out_to_every_subscriber(make_event) -> None:
    core = BroadcastCore()
    first, second = core.join(), core.join()
    for subscriber in (first, second):
        subscriber.pending()
    delivered = core.record(parse_event(make_event(1)))
    assert delivered == 2
    assert first.pending() == second.pending() == [{"type": "event", "event": make_event(1)}]


def test_left_subscriber_gets_nothing_more(make_event) -> None:
    core = BroadcastCore()
    staying, leaving = core.join(), core.join()
    assert core.subscriber_count == 2
    core.record(parse_event(make_event(1)))

    core.leave(leaving)
    assert core.subscriber_count == 1
    assert leaving.state is SubscriberState.CLOSED
    before = leaving.pending()

    assert core.record(parse_event(make_event(2))) == 1
    assert leaving.pending() == []
    assert len(before) == 2
    assert staying.pending()[-1] == {"type": "event", "event": make_event(2)}


def test_leave_is_idempotent() -> None:
    core = BroadcastCore()
    subscriber = core.join()
    core.leave(subscriber)
    core.leave(subscriber)
    assert core.subscriber_count == 0


def test_join_accepts_existing_subscriber() -> None:
    core = BroadcastCore()
    subscriber = Subscriber("sub_fixed")
    assert core.join(subscriber) is subscriber
    assert subscriber.id == "sub_fixed"


def test_close_drops_everyone(make_event) -> None:
    core = BroadcastCore()
    subscribers = [core.join() for _ in range(3)]
    core.close()
    assert core.subscriber_count == 0
    assert core.record(parse_event(make_event(1))) == 0
    assert all(s.state is SubscriberState.CLOSED for s in subscribers)
