from __future__ import annotations

import threading
from datetime import datetime

from office_register.core.enums import VisitChangeKind
from office_register.events.feed import ChangeFeed, PollingChangeFeed, VisitChange

AT = datetime(2026, 3, 2, 9, 0, 0)


def _change(visit_id=1):
    return VisitChange(kind=VisitChangeKind.INSERT, visit_id=visit_id, member_id=1, at=AT)


def test_publish_reaches_subscribers_until_cancelled():
    feed = ChangeFeed()
    seen = []
    sub = feed.subscribe(seen.append)

    feed.publish(_change(1))
    sub.cancel()
    sub.cancel()
    feed.publish(_change(2))

    assert [c.visit_id for c in seen] == [1]
    assert sub.active is False
    assert feed.subscriber_count == 0


def test_failing_subscriber_does_not_block_others():
    feed = ChangeFeed()
    seen = []

    def broken(change):
        raise RuntimeError("boom")

    feed.subscribe(broken)
    feed.subscribe(seen.append)

    feed.publish(_change())

    assert len(seen) == 1


def test_subscription_as_context_manager():
    feed = ChangeFeed()
    with feed.subscribe(lambda c: None):
        assert feed.subscriber_count == 1
    assert feed.subscriber_count == 0


def test_poll_once_publishes_only_when_marker_moves():
    markers = iter([(0, 0), (0, 0), (1, 1), (1, 1)])
    feed = PollingChangeFeed(lambda: next(markers), interval_seconds=60, clock=lambda: AT)
    seen = []
    feed._callbacks[1] = seen.append

    assert feed.poll_once() is False  # baseline
    assert feed.poll_once() is False
    assert feed.poll_once() is True
    assert feed.poll_once() is False

    assert len(seen) == 1
    assert seen[0].kind == VisitChangeKind.UPDATE
    assert seen[0].visit_id is None


def test_poll_failure_is_swallowed_and_logged():
    def marker():
        raise ConnectionError("db down")

    feed = PollingChangeFeed(marker, interval_seconds=60)

    assert feed.poll_once() is False


def test_poller_thread_follows_subscriber_count():
    feed = PollingChangeFeed(lambda: (0, 0), interval_seconds=60)

    sub = feed.subscribe(lambda c: None)
    thread = feed._thread
    assert thread is not None and thread.is_alive()

    sub.cancel()
    thread.join(timeout=2)

    assert feed._thread is None
    assert not thread.is_alive()


def test_stopped_poller_does_not_overwrite_reset_baseline():
    entered = threading.Event()
    release = threading.Event()
    calls = []

    def marker():
        calls.append(1)
        if len(calls) == 1:
            return (0, 0)
        entered.set()
        release.wait(timeout=5)
        return (5, 5)

    feed = PollingChangeFeed(marker, interval_seconds=0.01)
    sub = feed.subscribe(lambda c: None)
    thread = feed._thread
    assert entered.wait(timeout=5)

    # the old poller is mid-read when the last subscriber leaves
    threading.Timer(0.1, release.set).start()
    sub.cancel()

    assert not thread.is_alive()
    assert feed._last_marker is None
