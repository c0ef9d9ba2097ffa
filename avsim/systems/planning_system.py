import logging
from typing import Dict, List, Optional, Sequence

from avsim.domain import config
from avsim.domain.geometry import Vector2, in_direction, length, normalize, vector_between
from avsim.domain.graph import GraphNode, Path, RoadGraph
from avsim.domain.models import IntersectionHeuristic

logger = logging.getLogger(__name__)

# x: x*cos(-45) - y*sin(-45), y: x*sin(-45) + y*cos(-45)
_COS_45 = 0.70710678

class PathPlanner:
    """Generates local paths for one vehicle on the road graph.

    The only state carried between calls is `current_node`, the origin of the
    edge the vehicle currently drives on, plus a cache of the matching node
    on the left lane which depends on static graph geometry only.
    """

    def __init__(self, graph: RoadGraph, start_node: GraphNode):
        self.graph = graph
        self.start_node = start_node
        self.current_node = start_node
        self._left_lane_cache: Dict[int, GraphNode] = {}

    def reset(self):
        self.current_node = self.start_node

    def generate_local_path(self, position: Vector2, direction: Vector2,
                            heuristic: IntersectionHeuristic = IntersectionHeuristic.MIDDLE,
                            lookahead: int = config.EGO_LOOKAHEAD,
                            origin: Optional[GraphNode] = None) -> Path:
        if origin is None:
            self._advance_tracking(position, direction, heuristic)
            origin = self.current_node

        nodes = [origin]
        direction_to_look = direction
        for _ in range(lookahead):
            next_node = self._next_node_in_direction(nodes[-1], direction_to_look, heuristic)
            if next_node is None:
                break
            direction_to_look = vector_between(nodes[-1].position, next_node.position)
            nodes.append(next_node)
        return Path(nodes)

    def generate_local_path_on_left_lane(self, position: Vector2, direction: Vector2,
                                         heuristic: IntersectionHeuristic = IntersectionHeuristic.MIDDLE,
                                         lookahead: int = config.EGO_LOOKAHEAD) -> Optional[Path]:
        if not self._advance_tracking(position, direction, heuristic):
            return None

        cached = self._left_lane_cache.get(self.current_node.id)
        if cached is not None:
            return self.generate_local_path(position, direction, heuristic, lookahead, origin=cached)

        next_node = self._next_node_in_direction(self.current_node, direction, heuristic)
        if next_node is None:
            return None

        lane_direction = normalize(vector_between(self.current_node.position, next_node.position))
        normal_left = (lane_direction[1], -lane_direction[0])
        search_ray = (_COS_45 * normal_left[0] + _COS_45 * normal_left[1],
                      -_COS_45 * normal_left[0] + _COS_45 * normal_left[1])

        chosen: Optional[List[GraphNode]] = None
        lowest_distance = config.LANE_SEARCH_RADIUS
        candidates = self.graph.directional_search(self.current_node, search_ray,
                                                   config.LANE_SEARCH_CONE, lowest_distance)
        for candidate in candidates:
            trial = self._trial_path(candidate, lane_direction, heuristic, lookahead + 1)
            if len(trial) >= (len(chosen) if chosen is not None else 2):
                distance = length(vector_between(self.current_node.position, trial[0].position))
                # strict: equal distances keep the earlier candidate in graph order
                if distance < lowest_distance:
                    chosen = trial
                    lowest_distance = distance

        if chosen is None:
            return self.generate_local_path(position, direction, heuristic, lookahead, origin=self.current_node)

        # the search hit sits behind the car, the path starts one node later
        nodes = chosen[1:]
        self._left_lane_cache[self.current_node.id] = nodes[0]
        return Path(nodes)

    def get_vector_to_path(self, position: Vector2, direction: Vector2, path: Path, min_distance: float) -> Optional[Vector2]:
        """Unit vector to the first path node farther than `min_distance` ahead."""
        for node in path:
            if node.id == self.current_node.id:
                continue
            vector = vector_between(position, node.position)
            if min_distance < length(vector) and in_direction(direction, vector, config.FORWARD_ANGLE):
                return normalize(vector)
        return None

    def _trial_path(self, seed: GraphNode, lane_direction: Vector2,
                    heuristic: IntersectionHeuristic, steps: int) -> List[GraphNode]:
        nodes = [seed]
        direction_to_look = lane_direction
        for index in range(steps):
            max_angle = config.LANE_FIRST_STEP_ANGLE if index == 0 else config.FORWARD_ANGLE
            next_node = self._next_node_in_direction(nodes[-1], direction_to_look, heuristic, max_angle)
            # reaching our own node means the seed lies on our lane
            if next_node is None or next_node.id == self.current_node.id:
                break
            direction_to_look = vector_between(nodes[-1].position, next_node.position)
            nodes.append(next_node)
        return nodes

    def _advance_tracking(self, position: Vector2, direction: Vector2, heuristic: IntersectionHeuristic) -> bool:
        last_node = self.current_node
        ahead = self._next_node_in_direction(last_node, direction, heuristic)
        if ahead is None:
            logger.warning("No next node in direction from node %d", last_node.id)
            return False

        while not in_direction(direction, vector_between(position, ahead.position), config.FORWARD_ANGLE):
            next_node = self._next_node_in_direction(ahead, direction, heuristic)
            if next_node is None:
                logger.warning("No next node in direction from node %d", ahead.id)
                return False
            last_node, ahead = ahead, next_node

        self.current_node = last_node
        return True

    def _next_node_in_direction(self, origin: GraphNode, direction: Vector2,
                                heuristic: IntersectionHeuristic,
                                max_angle: float = config.FORWARD_ANGLE) -> Optional[GraphNode]:
        # edge direction does not matter, outgoing edges are only preferred
        for node_ids in (origin.to, origin.from_):
            if not node_ids:
                continue
            preferred = self._choose_node(node_ids, heuristic)
            for node_id in [preferred, *node_ids]:
                node = self.graph.get_node(node_id)
                if in_direction(direction, vector_between(origin.position, node.position), max_angle):
                    return node
        return None

    @staticmethod
    def _choose_node(node_ids: Sequence[int], heuristic: IntersectionHeuristic) -> int:
        if heuristic == IntersectionHeuristic.MIDDLE:
            return node_ids[0]
        if heuristic == IntersectionHeuristic.RIGHT:
            return node_ids[-1]
        return node_ids[len(node_ids) // 2]
