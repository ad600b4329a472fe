import pytest

from vsgraph.core.GraphPrimitives import FilterNode, Graph, OutputNode, Parameter, SourceNode


def build_chain(*nodes) -> Graph:
    """Graph with the given nodes connected one after another."""
    graph = Graph(nodes)
    for upstream, downstream in zip(nodes, nodes[1:]):
        graph.connect_nodes(upstream, downstream)
    return graph


@pytest.fixture
def source():
    return SourceNode(file_path="in.mp4", id="source")


@pytest.fixture
def crop():
    return FilterNode("Crop", "std", "Crop", (Parameter("left", 10),), id="crop")


@pytest.fixture
def resize():
    return FilterNode(
        "Resize", "resize", "Lanczos",
        (Parameter("width", 1280), Parameter("height", 720)),
        id="resize",
    )


@pytest.fixture
def output():
    return OutputNode(0, id="out0")


@pytest.fixture
def document():
    """A saved Source → Crop → Output graph, as the editor writes it."""
    return {
        "version": "1.0",
        "name": "Crop Test",
        "description": "",
        "createdAt": "2025-01-01T12:00:00",
        "nodes": [
            {"id": "s1", "type": "Source", "title": "Video Source", "x": 100, "y": 100,
             "filePath": "C:\\videos\\in.mp4", "sourcePlugin": "ffms2"},
            {"id": "f1", "type": "Filter", "title": "Crop", "x": 250, "y": 100,
             "filterType": "crop", "pluginNamespace": "std", "function": "Crop",
             "parameters": [
                 {"name": "left", "value": "10", "type": "int"},
                 {"name": "right", "value": "", "type": "int"},
             ]},
            {"id": "o1", "type": "Output", "title": "Output", "x": 400, "y": 100, "outputIndex": 0},
        ],
        "connections": [
            {"sourceNodeId": "s1", "sourceConnectorName": "clip",
             "targetNodeId": "f1", "targetConnectorName": "clip"},
            {"sourceNodeId": "f1", "sourceConnectorName": "clip",
             "targetNodeId": "o1", "targetConnectorName": "clip"},
        ],
    }
