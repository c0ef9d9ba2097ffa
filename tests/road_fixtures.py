from avsim.domain.graph import RoadGraph, parse_road_graph

LANE_SPACING = 0.3
LANE_NODES = 12

def line_graph() -> RoadGraph:
    """Three nodes on the x axis, 0 -> 1 -> 2."""
    return parse_road_graph([
        "v 0.0 0.0 0.0",
        "v 1.0 0.0 0.0",
        "v 2.0 0.0 0.0",
        "l 1 2",
        "l 2 3",
    ])

def branch_graph() -> RoadGraph:
    """Node 0 forks into three nodes ahead: straight, left (-z) and right (+z)."""
    return parse_road_graph([
        "v 0.0 0.0 0.0",
        "v 1.0 0.0 0.0",
        "v 1.0 0.0 -0.5",
        "v 1.0 0.0 0.5",
        "l 1 2",
        "l 1 3",
        "l 1 4",
    ])

def two_lane_lines():
    """Straight two-lane road along +x.

    Nodes 0..11: driving lane on z = 0, edges pointing +x.
    Nodes 12..23: left lane on z = -0.3, starting two nodes further back,
    edges pointing -x (oncoming traffic).
    """
    lines = []
    for k in range(LANE_NODES):
        lines.append(f"v {k * LANE_SPACING:.2f} 0.0 0.0")
    for k in range(LANE_NODES):
        lines.append(f"v {(k - 2) * LANE_SPACING:.2f} 0.0 {-LANE_SPACING:.2f}")
    for k in range(1, LANE_NODES):
        lines.append(f"l {k} {k + 1}")
    for k in range(LANE_NODES + 1, 2 * LANE_NODES):
        lines.append(f"l {k + 1} {k}")
    return lines

def two_lane_graph() -> RoadGraph:
    return parse_road_graph(two_lane_lines())
