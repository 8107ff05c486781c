"""Tests for ObserverRegistry and Subscription handles."""

from cascadex import ObserverRegistry


class TestRegistry:
    def test_count(self):
        r = ObserverRegistry()
        r.observe("x", print)
        r.observe("x", print)
        r.onchange(print)
        assert r.count("x") == 2
        assert r.count() == 1
        assert r.count("y") == 0

    def test_dispose_removes_subscription(self):
        r = ObserverRegistry()
        first = r.observe("x", print)
        second = r.observe("x", print)
        first.dispose()
        assert r.count("x") == 1
        second.dispose()
        assert r.count("x") == 0
        second.dispose()  # idempotent
        assert "disposed" in repr(second)

    def test_clear(self):
        r = ObserverRegistry()
        sub = r.observe("x", print)
        r.onchange(print)
        r.clear()
        assert not sub.active
        assert r.count("x") == 0
        assert r.count() == 0

    def test_dispatch_order_and_failures(self):
        r = ObserverRegistry()
        log = []

        def bad(v):
            raise ValueError(v)

        r.onchange(lambda state, changes: log.append(("onchange", changes)))
        r.observe("b", lambda v: log.append(("b", v)))
        r.observe("a", bad)
        r.observe("a", lambda v: log.append(("a", v)))
        errors = r.dispatch({"a": 1, "b": 2}, {"a": 1, "b": 2})
        assert [type(e) for e in errors] == [ValueError]
        assert log == [("a", 1), ("b", 2), ("onchange", {"a": 1, "b": 2})]

    def test_onchange_key_does_not_collide(self):
        r = ObserverRegistry()
        r.observe("*", print)
        assert r.count() == 0
