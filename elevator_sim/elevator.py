"""
Core elevator logic: the per-car state machine and its discrete stepping.
"""
import bisect
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from elevator_sim.exceptions import InvalidConfigurationError, OutOfRangeError
from elevator_sim.request import Direction, Request, RequestType

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ElevatorStatus:
    """Point-in-time view of one elevator."""
    id: int
    current_floor: int
    direction: Direction
    doors_open: bool
    destinations: Tuple[int, ...]
    pending_requests: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "current_floor": self.current_floor,
            "direction": self.direction.name,
            "doors": "OPEN" if self.doors_open else "CLOSED",
            "destinations": list(self.destinations),
            "pending_requests": self.pending_requests,
        }

@dataclass(eq=False)
class Elevator:
    """Represents a single elevator serving stops with a SCAN policy.

    The car keeps travelling in its current direction while committed stops
    remain ahead of it and only reverses once that side is exhausted.
    """

    id: int
    min_floor: int
    max_floor: int
    current_floor: int = field(init=False)
    direction: Direction = field(init=False, default=Direction.IDLE)
    doors_open: bool = field(init=False, default=False)

    def __post_init__(self):
        if self.min_floor < 0 or self.max_floor <= self.min_floor:
            raise InvalidConfigurationError(
                f"floor range [{self.min_floor}, {self.max_floor}] is invalid"
            )
        self.current_floor = self.min_floor
        # ascending, no duplicates
        self._destinations: List[int] = []
        self._pending: List[Request] = []
        self._lock = threading.Lock()

    @property
    def destination_floors(self) -> List[int]:
        """Committed stops in ascending order."""
        return list(self._destinations)

    @property
    def pending_requests(self) -> List[Request]:
        """Pickup requests not yet served, in arrival order."""
        return list(self._pending)

    def add_destination(self, floor: int) -> None:
        """Commit a stop selected from inside the car."""
        with self._lock:
            self._check_floor(floor, "Floor")
            self._add_destination(floor)

    def add_request(self, request: Request) -> None:
        """Record a pickup request routed to this car.

        Duplicate requests are ignored. A request for the floor the car is
        already at is activated straight away when the car is idle or heading
        the way the caller wants to go.
        """
        with self._lock:
            self._check_floor(request.floor, "Request floor")
            if request.kind == RequestType.DESTINATION:
                self._add_destination(request.floor)
                return
            if request in self._pending:
                logger.debug(f"Elevator {self.id} ignoring duplicate {request}")
                return
            self._pending.append(request)
            logger.debug(f"Elevator {self.id} accepted {request}")
            if request.floor == self.current_floor:
                self._activate_pending_at(self.current_floor)

    def step(self) -> bool:
        """Advance one tick.

        Returns True when the doors moved, the car changed floor, or the
        direction changed.
        """
        with self._lock:
            return self._step()

    def snapshot(self) -> ElevatorStatus:
        with self._lock:
            return ElevatorStatus(
                id=self.id,
                current_floor=self.current_floor,
                direction=self.direction,
                doors_open=self.doors_open,
                destinations=tuple(self._destinations),
                pending_requests=len(self._pending),
            )

    def status_line(self) -> str:
        status = self.snapshot()
        return (
            f"Elevator {status.id}: Floor {status.current_floor}, "
            f"Direction: {status.direction.name}, "
            f"Doors: {'OPEN' if status.doors_open else 'CLOSED'}, "
            f"Destinations: {list(status.destinations)}, "
            f"Pending Requests: {status.pending_requests}"
        )

    def __str__(self) -> str:
        return self.status_line()

    def _check_floor(self, floor: int, label: str) -> None:
        if not (self.min_floor <= floor <= self.max_floor):
            raise OutOfRangeError(
                f"{label} {floor} is out of range [{self.min_floor}, {self.max_floor}]"
            )

    def _add_destination(self, floor: int) -> None:
        if floor != self.current_floor:
            self._insert_destination(floor)

    def _insert_destination(self, floor: int) -> bool:
        index = bisect.bisect_left(self._destinations, floor)
        if index < len(self._destinations) and self._destinations[index] == floor:
            return False
        self._destinations.insert(index, floor)
        return True

    def _discard_destination(self, floor: int) -> None:
        index = bisect.bisect_left(self._destinations, floor)
        if index < len(self._destinations) and self._destinations[index] == floor:
            del self._destinations[index]

    def _activate_pending_at(self, floor: int) -> None:
        """Promote eligible pickups waiting at ``floor`` into committed stops."""
        for request in self._pending:
            if (request.floor == floor
                    and request.kind == RequestType.PICKUP
                    and self._serves(request)):
                if self._insert_destination(floor):
                    logger.debug(f"Elevator {self.id} activated pickup at floor {floor}")

    def _serves(self, request: Request) -> bool:
        # a car at either end floor can only leave one way
        if request.floor in (self.min_floor, self.max_floor):
            return True
        return request.wants(self.direction)

    def _nearest_above(self) -> Optional[int]:
        index = bisect.bisect_right(self._destinations, self.current_floor)
        if index < len(self._destinations):
            return self._destinations[index]
        return None

    def _nearest_below(self) -> Optional[int]:
        index = bisect.bisect_left(self._destinations, self.current_floor)
        if index > 0:
            return self._destinations[index - 1]
        return None

    def _has_work(self) -> bool:
        return bool(self._destinations) or bool(self._pending)

    def _should_stop_here(self) -> bool:
        index = bisect.bisect_left(self._destinations, self.current_floor)
        if index < len(self._destinations) and self._destinations[index] == self.current_floor:
            return True
        return any(
            req.floor == self.current_floor and self._serves(req)
            for req in self._pending
        )

    def _has_pending_ahead(self) -> bool:
        if self.direction == Direction.IDLE:
            return bool(self._pending)
        for req in self._pending:
            if req.direction != self.direction:
                continue
            if self.direction == Direction.UP and req.floor > self.current_floor:
                return True
            if self.direction == Direction.DOWN and req.floor < self.current_floor:
                return True
        return False

    def _next_direction(self) -> Direction:
        if self._destinations:
            above = self._nearest_above()
            below = self._nearest_below()
            if self.direction == Direction.UP:
                if above is not None:
                    return Direction.UP
                if below is not None:
                    return Direction.DOWN
            elif self.direction == Direction.DOWN:
                if below is not None:
                    return Direction.DOWN
                if above is not None:
                    return Direction.UP
            else:
                if above is not None and below is not None:
                    if above - self.current_floor <= self.current_floor - below:
                        return Direction.UP
                    return Direction.DOWN
                if above is not None:
                    return Direction.UP
                if below is not None:
                    return Direction.DOWN

        if self._pending:
            idle = self.direction == Direction.IDLE
            wants_up = any(
                req.floor > self.current_floor and (idle or req.direction == Direction.UP)
                for req in self._pending
            )
            wants_down = any(
                req.floor < self.current_floor and (idle or req.direction == Direction.DOWN)
                for req in self._pending
            )
            if self.direction == Direction.UP and wants_up:
                return Direction.UP
            if self.direction == Direction.DOWN and wants_down:
                return Direction.DOWN
            if idle:
                if wants_up:
                    return Direction.UP
                if wants_down:
                    return Direction.DOWN

        return Direction.IDLE

    def _open_doors(self) -> None:
        self.doors_open = True
        logger.debug(f"Elevator {self.id} doors open at floor {self.current_floor}")

    def _close_doors(self) -> None:
        self.doors_open = False
        logger.debug(f"Elevator {self.id} doors closed at floor {self.current_floor}")

    def _step(self) -> bool:
        action_taken = False

        # Serving a stop and moving never happen in the same tick.
        if self._should_stop_here():
            if not self.doors_open:
                self._open_doors()
                action_taken = True
            self._discard_destination(self.current_floor)
            self._pending = [
                req for req in self._pending
                if not (req.floor == self.current_floor and self._serves(req))
            ]
            if self.doors_open and not self._destinations and not self._has_pending_ahead():
                self._close_doors()
            return action_taken

        if self.doors_open and self._has_work():
            self._close_doors()
            action_taken = True

        if self._has_work():
            next_direction = self._next_direction()
            if next_direction != Direction.IDLE and next_direction != self.direction:
                logger.debug(
                    f"Elevator {self.id} changing direction "
                    f"{self.direction.name} -> {next_direction.name}"
                )
                self.direction = next_direction
                action_taken = True

            if self.direction == Direction.UP and self.current_floor < self.max_floor:
                self.current_floor += 1
                action_taken = True
            elif self.direction == Direction.DOWN and self.current_floor > self.min_floor:
                self.current_floor -= 1
                action_taken = True

            if self.current_floor == self.max_floor and self.direction == Direction.UP:
                self.direction = Direction.DOWN if self._has_work() else Direction.IDLE
            elif self.current_floor == self.min_floor and self.direction == Direction.DOWN:
                self.direction = Direction.UP if self._has_work() else Direction.IDLE

            logger.debug(
                f"Elevator {self.id} now at floor {self.current_floor} "
                f"heading {self.direction.name}"
            )
        else:
            if self.direction != Direction.IDLE:
                self.direction = Direction.IDLE
                action_taken = True
            if self.doors_open:
                self._close_doors()
                action_taken = True

        self._activate_pending_at(self.current_floor)
        return action_taken
