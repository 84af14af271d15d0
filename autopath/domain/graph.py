import logging
import networkx as nx
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from autopath.domain.errors import UnknownEdgeError, UnknownNodeError
from autopath.domain.models import Edge, Node

logger = logging.getLogger(__name__)

class RoadNetwork:
    """Undirected road graph holding mutable node and edge records.

    Records live on the networkx attribute dicts under the ``record`` key so that
    neighbour lookups go through ``graph.adj`` in O(degree). Neighbour order is
    the insertion order of the topology, which keeps planning deterministic.
    """

    def __init__(self):
        self.graph = nx.Graph()
        self._edge_index: Dict[str, Tuple[str, str]] = {}

    @classmethod
    def from_topology(cls, nodes: Iterable[Node], edges: Iterable[Edge]) -> "RoadNetwork":
        network = cls()
        for node in nodes:
            network.add_intersection(node)
        for edge in edges:
            network.add_road(edge)
        logger.debug("Road network loaded: %d nodes, %d edges",
                    network.graph.number_of_nodes(), network.graph.number_of_edges())
        return network

    def add_intersection(self, node: Node):
        self.graph.add_node(node.id, record=node)

    def add_road(self, edge: Edge):
        for end in (edge.source, edge.target):
            if end not in self.graph:
                raise UnknownNodeError(end)
        if edge.source == edge.target:
            raise ValueError(f"Edge {edge.id} is a self loop")
        if edge.id in self._edge_index:
            raise ValueError(f"Duplicate edge id: {edge.id}")
        if self.graph.has_edge(edge.source, edge.target):
            raise ValueError(f"Parallel edge between {edge.source} and {edge.target}")
        self.graph.add_edge(edge.source, edge.target, record=edge)
        self._edge_index[edge.id] = (edge.source, edge.target)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.graph

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edge_index

    def node(self, node_id: str) -> Node:
        try:
            return self.graph.nodes[node_id]["record"]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def edge(self, edge_id: str) -> Edge:
        try:
            u, v = self._edge_index[edge_id]
        except KeyError:
            raise UnknownEdgeError(edge_id) from None
        return self.graph.edges[u, v]["record"]

    def edge_between(self, u: str, v: str) -> Optional[Edge]:
        data = self.graph.get_edge_data(u, v)
        if data is None:
            return None
        return data["record"]

    def incident_edges(self, node_id: str) -> Iterator[Tuple[str, Edge]]:
        """Yields (neighbour id, edge) pairs for every road touching ``node_id``."""
        if node_id not in self.graph:
            raise UnknownNodeError(node_id)
        for neighbor, data in self.graph.adj[node_id].items():
            yield neighbor, data["record"]

    def neighbors(self, node_id: str) -> List[str]:
        return [neighbor for neighbor, _ in self.incident_edges(node_id)]

    def nodes(self) -> List[Node]:
        return [data["record"] for _, data in self.graph.nodes(data=True)]

    def edges(self) -> List[Edge]:
        return [self.graph.edges[u, v]["record"] for u, v in self._edge_index.values()]

    def max_speed_limit(self) -> float:
        return max((edge.limit for edge in self.edges()), default=0.0)

    def copy(self) -> "RoadNetwork":
        """Deep snapshot with independent node and edge records."""
        return RoadNetwork.from_topology(
            [node.model_copy(deep=True) for node in self.nodes()],
            [edge.model_copy(deep=True) for edge in self.edges()],
        )

    def to_weighted_graph(self, weight_fn) -> nx.Graph:
        """Plain networkx view with a ``weight`` attribute, for reference algorithms."""
        view = nx.Graph()
        view.add_nodes_from(self.graph.nodes)
        for edge in self.edges():
            view.add_edge(edge.source, edge.target, weight=weight_fn(edge))
        return view
