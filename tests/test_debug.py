"""Tests for the debug handle registry."""

import logging

from cascadex import Store
from cascadex import debug


class TestDebugRegistry:
    def setup_method(self):
        debug.clear()

    def teardown_method(self):
        debug.clear()

    def test_expose_and_lookup(self):
        s = Store({"x": 1})
        assert debug.expose(s) is s
        assert debug.lookup("store") is s
        assert debug.lookup("other") is None

    def test_named_handles(self):
        a, b = Store(), Store()
        debug.expose(a, "a")
        debug.expose(b, "b")
        assert debug.exposed() == {"a": a, "b": b}

    def test_conceal(self):
        debug.expose(Store(), "tmp")
        debug.conceal("tmp")
        debug.conceal("tmp")  # no error
        assert debug.lookup("tmp") is None

    def test_replacement_warns(self, caplog):
        debug.expose(Store())
        with caplog.at_level(logging.WARNING, logger="cascadex.debug"):
            debug.expose(Store())
        assert "replaced" in caplog.text
