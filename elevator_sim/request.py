"""
Value types shared by elevators and the controller.
"""
from enum import Enum, auto
from dataclasses import dataclass

from elevator_sim.exceptions import InvalidDirectionError, OutOfRangeError

class Direction(Enum):
    UP = auto()
    DOWN = auto()
    IDLE = auto()

    @classmethod
    def parse(cls, text: str) -> "Direction":
        """Convert case-insensitive text such as ``"up"`` into a Direction."""
        try:
            return cls[str(text).strip().upper()]
        except KeyError:
            raise InvalidDirectionError(f"Unknown direction '{text}'") from None

class RequestType(Enum):
    PICKUP = auto()
    DESTINATION = auto()

@dataclass(frozen=True)
class Request:
    """A hallway call (PICKUP) or an in-cab selection (DESTINATION).

    Requests compare and hash by value, so identical calls collapse into one.
    """

    floor: int
    direction: Direction
    kind: RequestType = RequestType.PICKUP

    def __post_init__(self):
        if self.floor < 0:
            raise OutOfRangeError(f"Floor {self.floor} cannot be negative")

    def wants(self, direction: Direction) -> bool:
        """True when an elevator travelling in ``direction`` may serve this call."""
        return direction == Direction.IDLE or self.direction == direction

    def __str__(self) -> str:
        return f"{self.kind.name} floor={self.floor} direction={self.direction.name}"
