import dataclasses
import pytest

from elevator_sim.exceptions import InvalidDirectionError, OutOfRangeError
from elevator_sim.request import Direction, Request, RequestType

class TestDirection:
    @pytest.mark.parametrize("text, expected", [
        ("UP", Direction.UP),
        ("down", Direction.DOWN),
        (" Idle ", Direction.IDLE),
    ])
    def test_parse(self, text, expected):
        assert Direction.parse(text) == expected

    @pytest.mark.parametrize("text", ["sideways", "", "U"])
    def test_parse_rejects_unknown(self, text):
        with pytest.raises(InvalidDirectionError) as exc_info:
            Direction.parse(text)
        assert exc_info.value.status_code == 400

class TestRequest:
    def test_value_equality(self):
        assert Request(3, Direction.UP) == Request(3, Direction.UP, RequestType.PICKUP)
        assert Request(3, Direction.UP) != Request(3, Direction.DOWN)
        assert Request(3, Direction.UP) != Request(3, Direction.UP, RequestType.DESTINATION)
        assert len({Request(3, Direction.UP), Request(3, Direction.UP)}) == 1

    def test_immutable(self):
        request = Request(3, Direction.UP)
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.floor = 4

    def test_negative_floor(self):
        with pytest.raises(OutOfRangeError):
            Request(-1, Direction.DOWN)

    def test_wants(self):
        request = Request(3, Direction.UP)
        assert request.wants(Direction.UP)
        assert request.wants(Direction.IDLE)
        assert not request.wants(Direction.DOWN)

    def test_str(self):
        assert str(Request(3, Direction.UP)) == "PICKUP floor=3 direction=UP"
