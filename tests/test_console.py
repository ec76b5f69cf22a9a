import io
import pytest
from unittest.mock import Mock, patch

from elevator_sim import console
from elevator_sim.console import ConsoleSession

@pytest.fixture
def output():
    return io.StringIO()

@pytest.fixture
def session(controller, output):
    return ConsoleSession(controller, stdin=io.StringIO(), stdout=output)

class TestCommands:
    def test_pickup(self, session, controller, output):
        assert session.execute("pickup 2 up") is True
        assert "Pickup requested: Floor 2, Direction: UP (elevator 1)" in output.getvalue()
        assert len(controller.get_elevator(1).pending_requests) == 1

    @pytest.mark.parametrize("line, message", [
        ("pickup 20 up", "Error: Floor 20 is out of range [0, 10]"),
        ("pickup 2 sideways", "Error: Unknown direction 'sideways'"),
        ("pickup 2 idle", "Error: Pickup direction must be UP or DOWN"),
        ("pickup two up", "Error: invalid literal"),
        ("destination 3 5", "Error: Elevator ID 3 is out of range [1, 2]"),
        ("destination 1 11", "Error: Floor 11 is out of range [0, 10]"),
    ])
    def test_errors_keep_session_alive(self, session, line, message):
        assert session.execute(line) is True
        assert message in session.stdout.getvalue()

    @pytest.mark.parametrize("line, usage", [
        ("pickup 2", "Usage: pickup <floor> <UP|DOWN>"),
        ("destination 1", "Usage: destination <elevator_id> <floor>"),
        ("auto", "Usage: auto <number_of_steps>"),
        ("auto 0", "Usage: auto <number_of_steps>"),
        ("auto -3", "Usage: auto <number_of_steps>"),
    ])
    def test_usage(self, session, output, line, usage):
        session.execute(line)
        assert usage in output.getvalue()

    @pytest.mark.parametrize("line", ["auto 0", "auto -3"])
    def test_auto_rejects_non_positive_count(self, session, controller, line):
        session.execute(line)
        assert controller.tick == 0

    def test_destination(self, session, controller, output):
        session.execute("destination 2 5")
        assert "Destination set: Elevator 2 -> Floor 5" in output.getvalue()
        assert controller.get_elevator(2).destination_floors == [5]

    def test_step_prints_status(self, session, controller, output):
        controller.add_destination(1, 3)
        session.execute("step")
        assert "Elevator 1: Floor 1, Direction: UP" in output.getvalue()
        assert controller.tick == 1

    def test_auto_pauses_between_steps(self, controller, output):
        sleep = Mock()
        session = ConsoleSession(controller, stdin=io.StringIO(), stdout=output,
                                 step_delay=0.25, sleep=sleep)
        session.execute("auto 3")
        assert controller.tick == 3
        assert sleep.call_count == 3
        sleep.assert_called_with(0.25)
        assert "--- Step 3 completed ---" in output.getvalue()

    def test_status(self, session, output):
        session.execute("STATUS")
        assert "Elevator 2: Floor 0" in output.getvalue()

    def test_unknown_command(self, session, output):
        session.execute("jump 3")
        assert "Unknown command: jump" in output.getvalue()

    def test_blank_line(self, session, output):
        assert session.execute("   ") is True
        assert output.getvalue() == ""

    @pytest.mark.parametrize("line", ["quit", "exit", "QUIT"])
    def test_quit(self, session, line):
        assert session.execute(line) is False

    def test_demo(self, session, controller, output):
        session.execute("demo")
        text = output.getvalue()
        assert "=== Demo Complete ===" in text
        assert "Error" not in text
        assert controller.tick == 35

class TestRun:
    def test_run_until_quit(self, controller, output):
        stdin = io.StringIO("pickup 4 down\nauto 2\nquit\nstatus\n")
        ConsoleSession(controller, stdin=stdin, stdout=output).run()
        text = output.getvalue()
        assert text.startswith("=== Elevator Simulation ===")
        assert text.rstrip().endswith("Simulation ended.")
        assert controller.tick == 2

    def test_run_until_eof(self, controller, output):
        ConsoleSession(controller, stdin=io.StringIO("step\n"), stdout=output).run()
        assert "Simulation ended." in output.getvalue()
        assert controller.tick == 1

class TestMain:
    def test_invalid_fleet(self):
        assert console.main(["0", "0", "10"]) == 2

    def test_runs_session(self):
        with patch.object(console, "ConsoleSession") as session_cls:
            assert console.main(["3", "1", "8"]) == 0
        controller = session_cls.call_args[0][0]
        assert len(controller.elevators) == 3
        assert controller.min_floor == 1
        assert controller.max_floor == 8
        session_cls.return_value.run.assert_called_once()

    def test_parser_defaults_from_config(self):
        config = Mock(num_elevators=2, min_floor=0, max_floor=6)
        args = console.build_parser(config).parse_args([])
        assert (args.num_elevators, args.min_floor, args.max_floor) == (2, 0, 6)
