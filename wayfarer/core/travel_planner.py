"""
Route Planner.

Weighted A* search over the world graph. Edge weight is the cost model's
pathfinding cost (distance plus a safety penalty per hazard level); the
heuristic is straight-line distance to the goal. A found path becomes a
TravelPlan with one segment per traversed route.
"""
import heapq
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from wayfarer.core import travel_costs
from wayfarer.core.world import WorldState
from wayfarer.models.travel import (
    PlanInvalidReason,
    TravelPlan,
    TravelSegment,
    TravelValidationFailure,
)

logger = logging.getLogger(__name__)


@dataclass
class PathNode:
    """A node in the route search."""
    system_id: int
    g_cost: float = 0.0  # Cost from origin
    h_cost: float = 0.0  # Heuristic (straight-line distance to goal)
    parent: Optional["PathNode"] = None

    @property
    def f_cost(self) -> float:
        """Total estimated cost."""
        return self.g_cost + self.h_cost

    def __lt__(self, other: "PathNode") -> bool:
        """For heap comparison. Ties break on system id so searches are repeatable."""
        return (self.f_cost, self.system_id) < (other.f_cost, other.system_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathNode):
            return False
        return self.system_id == other.system_id

    def __hash__(self) -> int:
        return hash(self.system_id)


class TravelPlanner:
    """Plans journeys for one ship over one world graph."""

    def __init__(
        self,
        world: WorldState,
        speed: float = travel_costs.DEFAULT_SPEED,
        efficiency: float = travel_costs.DEFAULT_EFFICIENCY,
        safety_weight: float = 1.0,
    ):
        self.world = world
        self.speed = speed if speed > 0 else travel_costs.DEFAULT_SPEED
        self.efficiency = efficiency if efficiency > 0 else travel_costs.DEFAULT_EFFICIENCY
        self.safety_weight = safety_weight if safety_weight > 0 else 1.0

    def plan_route(self, origin_id: int, destination_id: int) -> TravelPlan:
        """
        Plan a journey from origin to destination.

        Returns an invalid plan tagged same_location, invalid_location or
        no_route when no journey can be built.
        """
        if origin_id == destination_id:
            return TravelPlan.invalid(origin_id, destination_id, PlanInvalidReason.SAME_LOCATION)

        if self.world.get_system(origin_id) is None or self.world.get_system(destination_id) is None:
            return TravelPlan.invalid(origin_id, destination_id, PlanInvalidReason.INVALID_LOCATION)

        path = self._find_path(origin_id, destination_id)
        if len(path) < 2:
            logger.debug(f"No route from {origin_id} to {destination_id}")
            return TravelPlan.invalid(origin_id, destination_id, PlanInvalidReason.NO_ROUTE)

        segments = self._build_segments(path)
        plan = TravelPlan.from_segments(origin_id, destination_id, segments)
        logger.debug(
            f"Planned {origin_id} -> {destination_id}: {len(segments)} segments, "
            f"{plan.total_fuel_cost} fuel, {plan.total_days} days"
        )
        return plan

    def _find_path(self, start_id: int, goal_id: int) -> List[int]:
        goal = self.world.get_system(goal_id)

        start_node = PathNode(system_id=start_id)
        start_node.h_cost = travel_costs.heuristic(self.world.get_system(start_id), goal)

        open_set: List[PathNode] = [start_node]
        closed_set: Set[int] = set()
        node_map: Dict[int, PathNode] = {start_id: start_node}

        while open_set:
            current = heapq.heappop(open_set)

            if current.system_id in closed_set:
                continue

            closed_set.add(current.system_id)

            if current.system_id == goal_id:
                path = []
                node = current
                while node:
                    path.append(node.system_id)
                    node = node.parent
                path.reverse()
                return path

            for neighbor_id in self.world.get_neighbors(current.system_id):
                if neighbor_id in closed_set:
                    continue

                route = self.world.get_route(current.system_id, neighbor_id)
                if route is None:
                    continue

                new_g_cost = current.g_cost + travel_costs.pathfinding_cost(route, self.safety_weight)
                existing = node_map.get(neighbor_id)
                if existing is not None and new_g_cost >= existing.g_cost:
                    continue

                neighbor = PathNode(
                    system_id=neighbor_id,
                    g_cost=new_g_cost,
                    h_cost=travel_costs.heuristic(self.world.get_system(neighbor_id), goal),
                    parent=current,
                )
                node_map[neighbor_id] = neighbor
                heapq.heappush(open_set, neighbor)

        return []

    def _build_segments(self, path: List[int]) -> List[TravelSegment]:
        segments = []
        for from_id, to_id in zip(path, path[1:]):
            route = self.world.get_route(from_id, to_id)
            distance = route.distance if route else 0.0
            segments.append(TravelSegment(
                from_system_id=from_id,
                to_system_id=to_id,
                route=route,
                distance=distance,
                fuel_cost=travel_costs.fuel_cost(distance, self.efficiency),
                time_days=travel_costs.time_cost(distance, self.speed),
                encounter_chance=travel_costs.encounter_chance(
                    route,
                    self.world.get_system(from_id),
                    self.world.get_system(to_id),
                ),
                suggested_encounter_type=travel_costs.suggest_encounter_type(route),
            ))
        return segments

    # ==================== Validation ====================

    @staticmethod
    def validate(plan: Optional[TravelPlan], available_fuel: int) -> bool:
        """True only for a valid plan the fuel on hand can pay for."""
        return TravelPlanner.get_validation_failure(plan, available_fuel) == TravelValidationFailure.NONE

    @staticmethod
    def get_validation_failure(plan: Optional[TravelPlan], available_fuel: int) -> TravelValidationFailure:
        if plan is None:
            return TravelValidationFailure.NULL_PLAN
        if not plan.is_valid:
            return TravelValidationFailure.INVALID_PLAN
        if available_fuel < plan.total_fuel_cost:
            return TravelValidationFailure.INSUFFICIENT_FUEL
        return TravelValidationFailure.NONE

    # ==================== Convenience ====================

    def can_travel(self, origin_id: int, destination_id: int, available_fuel: int) -> bool:
        return self.validate(self.plan_route(origin_id, destination_id), available_fuel)

    def get_fuel_cost(self, origin_id: int, destination_id: int) -> int:
        """Fuel a journey would take, or -1 when it cannot be planned."""
        plan = self.plan_route(origin_id, destination_id)
        return plan.total_fuel_cost if plan.is_valid else -1

    def get_travel_block_reason(self, origin_id: int, destination_id: int, available_fuel: int) -> Optional[str]:
        """Human-readable reason a journey is not possible, or None."""
        plan = self.plan_route(origin_id, destination_id)
        if not plan.is_valid:
            return {
                PlanInvalidReason.SAME_LOCATION: "Already at destination",
                PlanInvalidReason.INVALID_LOCATION: "Unknown system",
                PlanInvalidReason.NO_ROUTE: "No route to destination",
            }.get(plan.invalid_reason, "Route unavailable")
        if available_fuel < plan.total_fuel_cost:
            return f"Need {plan.total_fuel_cost} fuel (have {available_fuel})"
        return None
