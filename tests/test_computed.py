"""Tests for ComputationEngine."""

from cascadex import ComputationEngine, DependencyGraph, StateTable


def _setup(state):
    graph = DependencyGraph()
    table = StateTable(state, computed=graph)
    return graph, table, ComputationEngine(table, graph)


class TestComputationEngine:
    def test_evaluate_passes_dependencies_in_order(self):
        graph, table, engine = _setup({"a": 10, "b": 3})
        graph.define("diff", ["a", "b"], lambda a, b: a - b)
        assert engine.evaluate("diff") == 7
        assert table.get("diff") == 7

    def test_recompute_chain(self):
        graph, table, engine = _setup({"x": 1})
        graph.define("double", ["x"], lambda x: x * 2)
        graph.define("quad", ["double"], lambda d: d * 2)
        engine.evaluate("double")
        engine.evaluate("quad")

        changed = table.apply_raw({"x": 5})
        assert engine.recompute(changed) == {"double": 10, "quad": 20}
        assert table.get("quad") == 20

    def test_skips_when_intermediate_unchanged(self):
        graph, table, engine = _setup({"x": 1})
        calls = []
        graph.define("parity", ["x"], lambda x: x % 2)

        def label(p):
            calls.append(p)
            return "odd" if p else "even"

        graph.define("label", ["parity"], label)
        engine.evaluate("parity")
        engine.evaluate("label")
        assert calls == [1]

        changed = table.apply_raw({"x": 3})
        assert engine.recompute(changed) == {}
        assert calls == [1]  # parity stayed 1, label not re-derived

    def test_unrelated_change_recomputes_nothing(self):
        graph, table, engine = _setup({"x": 1, "y": 1})
        calls = []
        graph.define("double", ["x"], lambda x: calls.append(x) or x * 2)
        engine.evaluate("double")
        assert engine.recompute(table.apply_raw({"y": 2})) == {}
        assert calls == [1]

    def test_evaluating_flag(self):
        graph, table, engine = _setup({"x": 1})
        seen = []
        graph.define("probe", ["x"], lambda x: seen.append(engine.evaluating))
        assert not engine.evaluating
        engine.evaluate("probe")
        assert seen == [True]
        assert not engine.evaluating

    def test_composite_result_always_changes(self):
        graph, table, engine = _setup({"x": 1})
        shared = []
        graph.define("ref", ["x"], lambda x: shared)
        engine.evaluate("ref")
        assert engine.recompute(table.apply_raw({"x": 2})) == {"ref": shared}
