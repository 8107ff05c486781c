"""Tests for DependencyGraph."""

import pytest

from cascadex import DependencyGraph, CyclicDependencyError, DuplicateDefinitionError


def _noop(*args):
    return None


def _diamond():
    g = DependencyGraph()
    g.define("c", ["a", "b"], _noop)
    g.define("d", ["c"], _noop)
    g.define("e", ["c", "d"], _noop)
    return g


class TestDefine:
    def test_define(self):
        g = DependencyGraph()
        d = g.define("c", ("a", "b"), _noop)
        assert d.dependencies == ("a", "b")
        assert "c" in g
        assert len(g) == 1

    def test_duplicate(self):
        g = DependencyGraph()
        g.define("c", ["a"], _noop)
        with pytest.raises(DuplicateDefinitionError):
            g.define("c", ["b"], _noop)

    def test_self_dependency_is_a_cycle(self):
        g = DependencyGraph()
        with pytest.raises(CyclicDependencyError) as exc:
            g.define("x", ["x"], _noop)
        assert exc.value.cycle == ["x", "x"]

    def test_transitive_cycle_leaves_graph_unchanged(self):
        g = DependencyGraph()
        g.define("b", ["a"], _noop)  # a not defined yet
        g.define("c", ["b"], _noop)
        with pytest.raises(CyclicDependencyError) as exc:
            g.define("a", ["c"], _noop)
        assert exc.value.cycle == ["a", "c", "b", "a"]
        assert "a" not in g
        assert g.dependents_of(["a"]) == {"b", "c"}

    def test_undefine(self):
        g = _diamond()
        g.undefine("e")
        assert "e" not in g
        assert g.dependents_of(["a"]) == {"c", "d"}


class TestQueries:
    def test_dependents_of(self):
        g = _diamond()
        assert g.dependents_of(["a"]) == {"c", "d", "e"}
        assert g.dependents_of(["d"]) == {"e"}
        assert g.dependents_of(["unrelated"]) == set()

    def test_evaluation_order_includes_dependencies(self):
        g = _diamond()
        assert g.evaluation_order(["e"]) == ("c", "d", "e")

    def test_evaluation_order_is_deterministic(self):
        g = _diamond()
        assert g.evaluation_order({"e", "d", "c"}) == ("c", "d", "e")
        assert g.evaluation_order(["d", "c"]) == ("c", "d")

    def test_dependencies_keep_declaration_order(self):
        g = _diamond()
        assert g.dependencies("e") == ("c", "d")
