import logging
import math
from collections import defaultdict
from pathlib import Path as FilePath
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field

from avsim.domain import config
from avsim.domain.geometry import Vector2, in_direction, normalize, vector_between

logger = logging.getLogger(__name__)

class RoadGraphError(ValueError):
    """The road graph asset is inconsistent and cannot be used."""

class UnknownNodeError(IndexError):
    pass

class GraphNode(BaseModel):
    """A 2D node of the road graph. Identity is the id alone."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    x: float
    z: float
    to: Optional[Tuple[int, ...]] = None
    from_: Optional[Tuple[int, ...]] = Field(None, alias="from")

    @property
    def position(self) -> Vector2:
        return (self.x, self.z)

    def __eq__(self, other):
        if not isinstance(other, GraphNode):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

class Path:
    """Directed sequence of graph nodes, index 0 is closest to the vehicle."""

    def __init__(self, nodes: Sequence[GraphNode] = ()):
        self.nodes: Tuple[GraphNode, ...] = tuple(nodes)

    def __len__(self):
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def __getitem__(self, index):
        return self.nodes[index]

    def __eq__(self, other):
        if not isinstance(other, Path):
            return NotImplemented
        return self.nodes == other.nodes

    def __hash__(self):
        return hash(self.ids)

    def __repr__(self):
        return f"Path({list(self.ids)})"

    @property
    def ids(self) -> Tuple[int, ...]:
        return tuple(node.id for node in self.nodes)

    @property
    def points(self) -> List[Vector2]:
        return [node.position for node in self.nodes]

class RoadGraph:
    """Immutable directed road graph.

    Node records are frozen and keep every edge record in file order in
    their `to`/`from` lists. Graph queries go through a frozen networkx
    DiGraph built alongside.
    """

    def __init__(self, nodes: Sequence[GraphNode], network: nx.DiGraph):
        self._nodes = tuple(nodes)
        self.network = network

    @classmethod
    def build(cls, vertices: Sequence[Vector2], edges: Iterable[Tuple[int, int]]) -> "RoadGraph":
        network = nx.DiGraph()
        for node_id, (x, z) in enumerate(vertices):
            network.add_node(node_id, pos=(x, z))

        # every edge record counts for the heuristics, repeats included
        outgoing: Dict[int, List[int]] = defaultdict(list)
        incoming: Dict[int, List[int]] = defaultdict(list)
        for origin, destination in edges:
            if origin not in network or destination not in network:
                raise RoadGraphError(f"Edge {origin + 1} -> {destination + 1} references a missing vertex")
            if network.has_edge(origin, destination):
                logger.warning("Duplicate edge %d -> %d", origin + 1, destination + 1)
            network.add_edge(origin, destination)
            outgoing[origin].append(destination)
            incoming[destination].append(origin)
        nx.freeze(network)

        nodes = []
        for node_id, (x, z) in enumerate(vertices):
            to = tuple(outgoing[node_id]) or None
            from_ = tuple(incoming[node_id]) or None
            nodes.append(GraphNode(id=node_id, x=x, z=z, to=to, from_=from_))
        return cls(nodes, network)

    @property
    def nodes(self) -> Tuple[GraphNode, ...]:
        return self._nodes

    def __len__(self):
        return len(self._nodes)

    def get_node(self, node_id: int) -> GraphNode:
        if node_id < 0 or node_id >= len(self._nodes):
            raise UnknownNodeError(f"Road graph has no node {node_id}")
        return self._nodes[node_id]

    def successors(self, node_id: int) -> List[GraphNode]:
        return [self._nodes[i] for i in self.network.successors(node_id)]

    def predecessors(self, node_id: int) -> List[GraphNode]:
        return [self._nodes[i] for i in self.network.predecessors(node_id)]

    def edges(self) -> List[Tuple[int, int]]:
        return list(self.network.edges())

    def directional_search(self, origin: GraphNode, direction: Vector2, angle_radius: float, max_distance: float) -> List[GraphNode]:
        candidates = []
        for node in self._nodes:
            vector = vector_between(origin.position, node.position)
            # distance first, it rejects far more nodes than the angle test
            if math.hypot(*vector) < max_distance and node.id != origin.id:
                if in_direction(direction, vector, angle_radius):
                    candidates.append(node)
        return candidates

    def start_pose(self, node_id: int) -> Tuple[Vector2, Vector2]:
        """Position and heading for a vehicle placed on `node_id`."""
        node = self.get_node(node_id)
        if node.to:
            heading = vector_between(node.position, self._nodes[node.to[0]].position)
        elif node.from_:
            heading = vector_between(self._nodes[node.from_[0]].position, node.position)
        else:
            heading = (1.0, 0.0)
        return node.position, normalize(heading)

def parse_road_graph(lines: Iterable[str]) -> RoadGraph:
    vertices: List[Vector2] = []
    edges: List[Tuple[int, int]] = []
    for line_no, line in enumerate(lines, start=1):
        fields = line.split()
        if not fields:
            continue

        if fields[0] == "v":
            try:
                x = float(fields[1])
                z = float(fields[3])
            except (IndexError, ValueError):
                logger.warning("Skipping malformed vertex on line %d: %r", line_no, line.strip())
                continue
            vertices.append((x, z))
        elif fields[0] == "l":
            try:
                origin = int(fields[1])
                destination = int(fields[2])
            except (IndexError, ValueError):
                logger.warning("Skipping malformed edge on line %d: %r", line_no, line.strip())
                continue
            # obj indices are 1-based
            edges.append((origin - 1, destination - 1))

    return RoadGraph.build(vertices, edges)

def load_road_graph(path: Union[str, FilePath, None] = None) -> RoadGraph:
    path = FilePath(path) if path is not None else config.ROAD_GRAPH_PATH
    with open(path, encoding="utf-8") as f:
        graph = parse_road_graph(f)
    logger.info("Loaded road graph %s: %d nodes, %d edges", path.name, len(graph), graph.network.number_of_edges())
    return graph
