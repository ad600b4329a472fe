import pytest

from vsgraph.compiler.scheduler import live_node_ids, sort
from vsgraph.core.GraphPrimitives import Connection, FilterNode, Graph, OutputNode, SourceNode

from conftest import build_chain


def _ids(nodes):
    return [n.id for n in nodes]


class TestSort:

    def test_chain_order(self, source, crop, resize, output):
        graph = build_chain(source, crop, resize, output)
        assert _ids(sort(graph.nodes, graph.connections)) == ["source", "crop", "resize", "out0"]

    def test_insertion_order_does_not_matter_for_dependencies(self, source, crop, output):
        """Nodes added consumer-first are still ordered producer-first."""
        graph = Graph([output, crop, source])
        graph.connect_nodes(source, crop)
        graph.connect_nodes(crop, output)
        assert _ids(sort(graph.nodes, graph.connections)) == ["source", "crop", "out0"]

    def test_ties_broken_by_insertion_order(self, source):
        a = FilterNode("A", "std", "Crop", id="a")
        b = FilterNode("B", "std", "Crop", id="b")
        oa, ob = OutputNode(0, id="oa"), OutputNode(1, id="ob")
        graph = Graph([source, b, a, ob, oa])
        graph.connect_nodes(source, a)
        graph.connect_nodes(source, b)
        graph.connect_nodes(a, oa)
        graph.connect_nodes(b, ob)
        assert _ids(sort(graph.nodes, graph.connections)) == ["source", "b", "a", "ob", "oa"]

    def test_repeated_sorts_are_identical(self, source, crop, resize, output):
        graph = build_chain(source, crop, resize, output)
        first = sort(graph.nodes, graph.connections)
        assert all(sort(graph.nodes, graph.connections) == first for _ in range(5))

    def test_every_connection_respects_order(self, source, crop, resize, output):
        second = OutputNode(1, id="out1")
        graph = build_chain(source, crop, resize, output)
        graph.add_node(second)
        graph.connect_nodes(crop, second)
        order = _ids(sort(graph.nodes, graph.connections))
        for conn in graph.connections:
            assert order.index(conn.source_node_id) < order.index(conn.target_node_id)

    def test_orphans_left_out(self, source, crop, resize, output):
        """Nodes that feed no Output do not appear in the order."""
        spare = SourceNode(file_path="unused.mp4", id="spare")
        graph = build_chain(source, crop, output)
        graph.add_node(resize)
        graph.add_node(spare)
        graph.connect_nodes(spare, resize)
        assert _ids(sort(graph.nodes, graph.connections)) == ["source", "crop", "out0"]

    def test_unconnected_output_is_live(self, source, output):
        graph = Graph([source, output])
        assert _ids(sort(graph.nodes, graph.connections)) == ["out0"]

    def test_cycle_raises(self, source, output):
        f1 = FilterNode("F1", "std", "Crop", id="f1")
        f2 = FilterNode("F2", "std", "Crop", id="f2")
        connections = [
            Connection(f1.output_connector, f2.input_connector),
            Connection(f2.output_connector, f1.input_connector),
            Connection(f2.output_connector, output.input_connector),
        ]
        with pytest.raises(ValueError):
            sort([source, f1, f2, output], connections)


class TestLiveNodes:

    def test_live_set(self, source, crop, resize, output):
        graph = build_chain(source, crop, output)
        graph.add_node(resize)
        assert live_node_ids(graph.nodes, graph.connections) == {"source", "crop", "out0"}

    def test_no_outputs_means_nothing_live(self, source, crop):
        graph = build_chain(source, crop)
        assert live_node_ids(graph.nodes, graph.connections) == set()
