from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

import keyword
import logging
import uuid

from .Types import NodeKind, ParameterKind, PortDirection


logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


def _is_python_name(text: Any) -> bool:
    """True when text can appear as a keyword argument or attribute name."""
    return isinstance(text, str) and text.isidentifier() and not keyword.iskeyword(text)


# Connectors are plain values. The owning node is referenced by id only,
# so nodes, connectors and connections never hold references to each other.
class Connector(NamedTuple):
    node_id: str
    name: str
    direction: PortDirection

    @property
    def id(self) -> str:
        tag = "in" if self.direction == PortDirection.INPUT else "out"
        return f"{self.node_id}:{tag}:{self.name}"

    def is_input(self) -> bool:
        return self.direction == PortDirection.INPUT

    def is_output(self) -> bool:
        return self.direction == PortDirection.OUTPUT

    def __repr__(self):
        return f"Connector({self.id})"


class Connection(NamedTuple):
    source: Connector   # output connector of the producing node
    target: Connector   # input connector of the consuming node

    @property
    def source_node_id(self) -> str:
        return self.source.node_id

    @property
    def target_node_id(self) -> str:
        return self.target.node_id

    def __repr__(self):
        return f"Connection({self.source.id} -> {self.target.id})"


@dataclass(frozen=True)
class Parameter:
    name: str
    value: Any = None
    kind: Optional[ParameterKind] = None

    def __post_init__(self):
        if not _is_python_name(self.name):
            raise ValueError(f"Parameter name must be an identifier, got {self.name!r}")
        kind = self.kind
        if kind is None:
            kind = ParameterKind.STRING if self.value is None else ParameterKind.infer(self.value)
        object.__setattr__(self, "kind", kind)
        # stored values always match the kind, e.g. "false" -> False for BOOL
        object.__setattr__(self, "value", kind.coerce(self.value))

    def is_set(self) -> bool:
        return self.value is not None


class _Connectors:
    """Connector accessors shared by every node variant."""

    INPUT_NAMES: ClassVar[Tuple[str, ...]] = ()
    OUTPUT_NAMES: ClassVar[Tuple[str, ...]] = ()

    @property
    def inputs(self) -> List[Connector]:
        return [Connector(self.id, n, PortDirection.INPUT) for n in self.INPUT_NAMES]

    @property
    def outputs(self) -> List[Connector]:
        return [Connector(self.id, n, PortDirection.OUTPUT) for n in self.OUTPUT_NAMES]

    @property
    def input_connector(self) -> Optional[Connector]:
        inputs = self.inputs
        return inputs[0] if inputs else None

    @property
    def output_connector(self) -> Optional[Connector]:
        outputs = self.outputs
        return outputs[0] if outputs else None

    def get_connector(self, name: str, direction: PortDirection) -> Optional[Connector]:
        pool = self.inputs if direction == PortDirection.INPUT else self.outputs
        return next((c for c in pool if c.name == name), None)


@dataclass(frozen=True)
class SourceNode(_Connectors):
    file_path: str = ""
    source_plugin: Optional[str] = None   # e.g. "ffms2", "lsmashsource"
    id: str = field(default_factory=_new_id)
    title: str = "Video Source"
    x: float = 0.0
    y: float = 0.0

    kind: ClassVar[NodeKind] = NodeKind.SOURCE
    OUTPUT_NAMES: ClassVar[Tuple[str, ...]] = ("clip",)


@dataclass(frozen=True)
class FilterNode(_Connectors):
    display_name: str
    plugin_namespace: str
    function_name: str
    parameters: Tuple[Parameter, ...] = ()
    id: str = field(default_factory=_new_id)
    x: float = 0.0
    y: float = 0.0

    kind: ClassVar[NodeKind] = NodeKind.FILTER
    INPUT_NAMES: ClassVar[Tuple[str, ...]] = ("clip",)
    OUTPUT_NAMES: ClassVar[Tuple[str, ...]] = ("clip",)

    def __post_init__(self):
        # the emitter writes core.<namespace>.<function>(...) verbatim
        for label, text in (("plugin namespace", self.plugin_namespace),
                            ("function name", self.function_name)):
            if not _is_python_name(text):
                raise ValueError(f"Filter {label} must be an identifier, got {text!r}")
        params = []
        for p in self.parameters:
            params.append(p if isinstance(p, Parameter) else Parameter(*p))
        names = [p.name for p in params]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate parameter names in {names}")
        object.__setattr__(self, "parameters", tuple(params))

    @property
    def title(self) -> str:
        return self.display_name

    def get_parameter(self, name: str) -> Optional[Parameter]:
        return next((p for p in self.parameters if p.name == name), None)


@dataclass(frozen=True)
class OutputNode(_Connectors):
    output_index: int = 0
    id: str = field(default_factory=_new_id)
    title: str = "Output"
    x: float = 0.0
    y: float = 0.0

    kind: ClassVar[NodeKind] = NodeKind.OUTPUT
    INPUT_NAMES: ClassVar[Tuple[str, ...]] = ("clip",)

    def __post_init__(self):
        if isinstance(self.output_index, bool) or not isinstance(self.output_index, int):
            raise ValueError(f"Output index must be an integer, got {self.output_index!r}")
        if self.output_index < 0:
            raise ValueError(f"Output index must be non-negative, got {self.output_index}")


Node = Union[SourceNode, FilterNode, OutputNode]


class Graph:
    """
    Arena holding the authored nodes (in insertion order) and the
    connections between them. Connections reference connectors, and
    connectors reference nodes by id.
    """

    def __init__(self, nodes: Iterable[Node] = (), connections: Iterable[Connection] = ()):
        self._nodes: Dict[str, Node] = {}
        self._connections: List[Connection] = []

        for node in nodes:
            self.add_node(node)
        for conn in connections:
            self.connect(conn.source, conn.target)

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def connections(self) -> List[Connection]:
        return list(self._connections)

    def __len__(self):
        return len(self._nodes)

    def add_node(self, node: Node) -> Node:
        if node.id in self._nodes:
            raise ValueError(f"Node with id '{node.id}' already exists in the graph")
        self._nodes[node.id] = node
        logger.debug("Graph: added %s node %s", node.kind.value, node.id)
        return node

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def replace_node(self, node: Node) -> None:
        # nodes are immutable; editing a node means swapping in a new value with the same id
        if node.id not in self._nodes:
            raise ValueError(f"Node with id '{node.id}' does not exist in the graph")
        self._nodes[node.id] = node

    def remove_node(self, node_id: str) -> None:
        if node_id not in self._nodes:
            raise ValueError(f"Node with id '{node_id}' does not exist in the graph")
        self.disconnect_node(node_id)
        del self._nodes[node_id]

    def connect(self, source: Connector, target: Connector) -> Connection:
        """
        Connect an output connector to an input connector.

        An input connector accepts a single connection; connecting into an
        already connected input replaces the previous connection.
        """
        if not source.is_output() or not target.is_input():
            raise ValueError("Invalid connection: must connect output to input")
        for connector in (source, target):
            node = self._nodes.get(connector.node_id)
            if node is None:
                raise ValueError(f"Connector {connector.id} references an unknown node")
            if node.get_connector(connector.name, connector.direction) is None:
                raise ValueError(f"Node '{node.id}' has no connector {connector.id}")

        existing = self.incoming(target)
        if existing is not None:
            logger.debug("Graph: replacing %r", existing)
            self._connections.remove(existing)

        conn = Connection(source, target)
        self._connections.append(conn)
        return conn

    def connect_nodes(self, from_node: Node, to_node: Node) -> Connection:
        if from_node.output_connector is None:
            raise ValueError(f"Node '{from_node.id}' has no output connector")
        if to_node.input_connector is None:
            raise ValueError(f"Node '{to_node.id}' has no input connector")
        return self.connect(from_node.output_connector, to_node.input_connector)

    def disconnect_node(self, node_id: str) -> int:
        before = len(self._connections)
        self._connections = [
            c for c in self._connections
            if c.source_node_id != node_id and c.target_node_id != node_id
        ]
        return before - len(self._connections)

    def incoming(self, target: Connector) -> Optional[Connection]:
        return next((c for c in self._connections if c.target == target), None)

    def outgoing(self, source: Connector) -> List[Connection]:
        return [c for c in self._connections if c.source == source]
