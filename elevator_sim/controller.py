"""
Manages a fleet of elevators and routes hall calls to the best-placed car.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import Any, Dict, List, Optional

from elevator_sim.elevator import Elevator
from elevator_sim.exceptions import (
    InvalidConfigurationError,
    InvalidDirectionError,
    OutOfRangeError,
)
from elevator_sim.request import Direction, Request, RequestType

logger = logging.getLogger(__name__)

class ElevatorController:
    """Thread-safe controller for a fixed roster of elevators.

    Every pickup call is scored against every car and handed to the lowest
    score, earliest car in fleet order on ties. Stepping the fleet may run the
    cars in parallel because no state is shared between them; routing and
    stepping are serialised so a call is always scored against a settled fleet.
    """

    def __init__(self, num_elevators: int, min_floor: int, max_floor: int,
                 step_workers: int = 1):
        if num_elevators < 1:
            raise InvalidConfigurationError("must have at least one elevator")
        if min_floor < 0 or max_floor <= min_floor:
            raise InvalidConfigurationError(
                f"floor range [{min_floor}, {max_floor}] is invalid"
            )
        self.min_floor = min_floor
        self.max_floor = max_floor
        self._elevators = [
            Elevator(id=i + 1, min_floor=min_floor, max_floor=max_floor)
            for i in range(num_elevators)
        ]
        self._lock = Lock()
        self._executor: Optional[ThreadPoolExecutor] = None
        if step_workers > 1 and num_elevators > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=min(step_workers, num_elevators),
                thread_name_prefix="elevator_step"
            )
        self.tick = 0

        logger.info(
            f"Initialized with {num_elevators} elevators serving floors "
            f"{min_floor}-{max_floor}"
        )

    @classmethod
    def from_config(cls, config) -> "ElevatorController":
        return cls(
            config.num_elevators,
            config.min_floor,
            config.max_floor,
            step_workers=config.step_workers,
        )

    @property
    def elevators(self) -> List[Elevator]:
        return list(self._elevators)

    def request_pickup(self, floor: int, direction: Direction) -> Elevator:
        """Route a hall call and return the elevator that accepted it."""
        self._validate_floor(floor)
        if direction not in (Direction.UP, Direction.DOWN):
            raise InvalidDirectionError("Pickup direction must be UP or DOWN")

        request = Request(floor, direction, RequestType.PICKUP)
        with self._lock:
            elevator = self._select_best_elevator(request)
            elevator.add_request(request)

        logger.info(f"Routed pickup at floor {floor} ({direction.name}) to elevator {elevator.id}")
        return elevator

    def add_destination(self, elevator_id: int, floor: int) -> Elevator:
        """Commit an in-cab stop on one elevator."""
        elevator = self.get_elevator(elevator_id)
        with self._lock:
            elevator.add_destination(floor)
        return elevator

    def score(self, elevator: Elevator, request_floor: int,
              request_direction: Direction) -> int:
        """Cost of sending ``elevator`` to a call; lower is better."""
        current_floor = elevator.current_floor
        direction = elevator.direction
        distance = abs(current_floor - request_floor)

        if direction == Direction.IDLE and current_floor == request_floor:
            return 0
        if (direction == Direction.UP and request_direction == Direction.UP
                and current_floor < request_floor):
            return distance * 2
        if (direction == Direction.DOWN and request_direction == Direction.DOWN
                and current_floor > request_floor):
            return distance * 2
        if direction == Direction.IDLE:
            return distance * 5
        return distance * 10

    def get_elevator(self, elevator_id: int) -> Elevator:
        if not (1 <= elevator_id <= len(self._elevators)):
            raise OutOfRangeError(
                f"Elevator ID {elevator_id} is out of range [1, {len(self._elevators)}]"
            )
        return self._elevators[elevator_id - 1]

    def step_all(self) -> List[bool]:
        """Advance every elevator one tick; results are in fleet order."""
        with self._lock:
            if self._executor is not None:
                results = list(self._executor.map(lambda e: e.step(), self._elevators))
            else:
                results = [elevator.step() for elevator in self._elevators]
            self.tick += 1
        return results

    def get_status(self) -> str:
        """Render one status line per elevator."""
        return "\n".join(elevator.status_line() for elevator in self._elevators)

    def get_system_status(self) -> Dict[str, Any]:
        """Get current system status."""
        with self._lock:
            elevators = [e.snapshot().to_dict() for e in self._elevators]
            tick = self.tick
        return {
            "elevators": elevators,
            "min_floor": self.min_floor,
            "max_floor": self.max_floor,
            "tick": tick,
        }

    def shutdown(self):
        """Release the stepping thread pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
        logger.info("Elevator controller shutdown completed")

    def _validate_floor(self, floor: int) -> None:
        if not (self.min_floor <= floor <= self.max_floor):
            raise OutOfRangeError(
                f"Floor {floor} is out of range [{self.min_floor}, {self.max_floor}]"
            )

    def _select_best_elevator(self, request: Request) -> Elevator:
        best_elevator = None
        best_score = None
        for elevator in self._elevators:
            score = self.score(elevator, request.floor, request.direction)
            logger.debug(f"Elevator {elevator.id} scores {score} for {request}")
            if best_score is None or score < best_score:
                best_score = score
                best_elevator = elevator
        return best_elevator
