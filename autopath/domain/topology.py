from typing import List, Tuple

from autopath.domain import config
from autopath.domain.models import Edge, Node

def grid_topology(
    rows: int = config.GRID_ROWS,
    cols: int = config.GRID_COLS,
    spacing_x: float = config.SPACING_X_KM,
    spacing_y: float = config.SPACING_Y_KM,
) -> Tuple[List[Node], List[Edge]]:
    """Default rows x cols grid, ids "1".."rows*cols" in row-major order.

    Every HIGHWAY_EVERY-th row carries highway-speed horizontal roads and every
    HIGHWAY_EVERY-th column highway-speed vertical roads.
    """
    if rows < 1 or cols < 1:
        raise ValueError("Grid needs at least one row and one column")

    nodes: List[Node] = []
    for r in range(rows):
        for c in range(cols):
            node_id = str(r * cols + c + 1)
            nodes.append(Node(id=node_id, x=c * spacing_x, y=r * spacing_y, label=node_id))

    edges: List[Edge] = []
    for r in range(rows):
        for c in range(cols):
            index = r * cols + c + 1
            if c < cols - 1:
                is_highway = r % config.HIGHWAY_EVERY == 0
                edges.append(_road(str(index), str(index + 1), spacing_x, is_highway))
            if r < rows - 1:
                is_highway = c % config.HIGHWAY_EVERY == 0
                edges.append(_road(str(index), str(index + cols), spacing_y, is_highway))
    return nodes, edges

def _road(source: str, target: str, length: float, is_highway: bool) -> Edge:
    base = config.HIGHWAY_SPEED if is_highway else config.LOCAL_SPEED
    return Edge(
        id=f"{source}-{target}",
        source=source,
        target=target,
        length=round(length, 2),
        limit=config.SPEED_LIMIT,
        base_speed=base,
        current_speed=base,
    )
