"""Interactive text console for driving the elevator simulation."""
import argparse
import logging
import sys
import time
from typing import Callable, List, Optional, TextIO

from elevator_sim.config import Config
from elevator_sim.controller import ElevatorController
from elevator_sim.exceptions import ElevatorSimException
from elevator_sim.request import Direction

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  pickup <floor> <UP|DOWN>  - Request elevator pickup
  destination <elevator_id> <floor>  - Set destination inside elevator
  step  - Advance simulation one step
  auto <steps>  - Run automatic simulation for N steps
  status  - Show elevator statuses
  demo  - Run demo scenario
  help  - Show this message
  quit  - Exit"""


class ConsoleSession:
    """Reads commands line by line and renders the fleet after each one."""

    def __init__(self, controller: ElevatorController, stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None, step_delay: float = 0.0,
                 sleep: Callable[[float], None] = time.sleep):
        self.controller = controller
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.step_delay = step_delay
        self._sleep = sleep

    def write(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def run(self) -> None:
        self.write("=== Elevator Simulation ===")
        self.write(HELP_TEXT)
        self.write()

        while True:
            self.stdout.write("> ")
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                break
            if not self.execute(line):
                break

        self.write("Simulation ended.")

    def execute(self, line: str) -> bool:
        """Run one command; returns False when the session should end."""
        parts = line.split()
        if not parts:
            return True
        command, args = parts[0].lower(), parts[1:]

        if command in ("quit", "exit"):
            return False

        handler = {
            "pickup": self._pickup,
            "destination": self._destination,
            "step": self._step,
            "auto": self._auto,
            "status": self._status,
            "demo": self._demo,
            "help": self._help,
        }.get(command)
        if handler is None:
            self.write(f"Unknown command: {command}")
            return True

        try:
            handler(args)
        except ElevatorSimException as e:
            logger.debug(f"Command '{line.strip()}' rejected: {e.message}")
            self.write(f"Error: {e.message}")
        except ValueError as e:
            self.write(f"Error: {e}")
        return True

    def print_status(self) -> None:
        self.write(self.controller.get_status())

    def _pickup(self, args: List[str]) -> None:
        if len(args) != 2:
            self.write("Usage: pickup <floor> <UP|DOWN>")
            return
        floor = int(args[0])
        direction = Direction.parse(args[1])
        elevator = self.controller.request_pickup(floor, direction)
        self.write(
            f"Pickup requested: Floor {floor}, Direction: {direction.name} "
            f"(elevator {elevator.id})"
        )

    def _destination(self, args: List[str]) -> None:
        if len(args) != 2:
            self.write("Usage: destination <elevator_id> <floor>")
            return
        elevator_id, floor = int(args[0]), int(args[1])
        self.controller.add_destination(elevator_id, floor)
        self.write(f"Destination set: Elevator {elevator_id} -> Floor {floor}")

    def _step(self, args: List[str]) -> None:
        self.controller.step_all()
        self.print_status()

    def _auto(self, args: List[str]) -> None:
        if len(args) != 1:
            self.write("Usage: auto <number_of_steps>")
            return
        steps = int(args[0])
        if steps < 1:
            self.write("Usage: auto <number_of_steps>")
            return
        self.write(f"Running {steps} steps...")
        for i in range(steps):
            self.controller.step_all()
            self.print_status()
            self.write(f"--- Step {i + 1} completed ---")
            self.write()
            if self.step_delay > 0:
                self._sleep(self.step_delay)

    def _status(self, args: List[str]) -> None:
        self.print_status()

    def _help(self, args: List[str]) -> None:
        self.write(HELP_TEXT)

    def _run_steps(self, count: int) -> None:
        for i in range(count):
            self.controller.step_all()
            self.write(f"Step {i + 1}:")
            self.print_status()
            self.write()

    def _demo(self, args: List[str]) -> None:
        self.write("=== Running Demo Scenario ===")
        self.write()
        self.write("Initial state:")
        self.print_status()
        self.write()

        self.write("1. Requesting pickup from floor 2 going UP")
        self.controller.request_pickup(2, Direction.UP)
        self.print_status()
        self.write()

        self.write("2. Running 10 steps...")
        self._run_steps(10)

        self.write("3. Setting destination: Elevator 1 -> Floor 5")
        self.controller.add_destination(1, 5)
        self.print_status()
        self.write()

        self.write("4. Running 15 more steps...")
        self._run_steps(15)

        self.write("5. Requesting pickup from floor 3 going DOWN")
        self.controller.request_pickup(3, Direction.DOWN)
        self.print_status()
        self.write()

        self.write("6. Running 10 more steps...")
        self._run_steps(10)

        self.write("=== Demo Complete ===")


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("num_elevators", type=int, nargs="?", default=config.num_elevators,
                        help="Number of elevators in the fleet")
    parser.add_argument("min_floor", type=int, nargs="?", default=config.min_floor,
                        help="Lowest floor served")
    parser.add_argument("max_floor", type=int, nargs="?", default=config.max_floor,
                        help="Highest floor served")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    config = Config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    args = build_parser(config).parse_args(argv)

    try:
        controller = ElevatorController(
            args.num_elevators, args.min_floor, args.max_floor,
            step_workers=config.step_workers,
        )
    except ElevatorSimException as e:
        logger.error(e.message)
        return 2

    session = ConsoleSession(controller, step_delay=config.auto_step_delay)
    try:
        session.run()
    finally:
        controller.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
