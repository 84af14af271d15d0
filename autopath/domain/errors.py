class RoutingError(Exception):
    """Base class for engine errors."""


class UnknownNodeError(RoutingError, ValueError):
    def __init__(self, node_id: str):
        super().__init__(f"Unknown node: {node_id}")
        self.node_id = node_id


class UnknownEdgeError(RoutingError, ValueError):
    def __init__(self, edge_id: str):
        super().__init__(f"Unknown edge: {edge_id}")
        self.edge_id = edge_id


class PathIntegrityError(RoutingError):
    """The committed path references a pair of nodes with no edge between them."""

    def __init__(self, u: str, v: str):
        super().__init__(f"No edge between {u} and {v}")
        self.u = u
        self.v = v
