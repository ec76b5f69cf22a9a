"""
REST API endpoints for driving the elevator simulation.
"""
from flask import Flask, request
from flask_restx import Api, Resource, fields, Namespace
from werkzeug.exceptions import HTTPException
from typing import Optional
from datetime import datetime
import logging

from elevator_sim.controller import ElevatorController
from elevator_sim.exceptions import ElevatorSimException
from elevator_sim.request import Direction

logger = logging.getLogger(__name__)

MAX_STEPS_PER_CALL = 1000

api = Api(
    title="Elevator Simulation API",
    version="1.0",
    description="Discrete-step elevator dispatch simulation",
    prefix="/api",
    doc="/docs"
)

elevator_ns = Namespace("elevator", description="Elevator operations")
health_ns = Namespace("health", description="Health check operations")
api.add_namespace(elevator_ns)
api.add_namespace(health_ns)

# Request/Response models
pickup_model = api.model("Pickup", {
    "floor": fields.Integer(required=True, min=0, example=2),
    "direction": fields.String(required=True, enum=["UP", "DOWN"], example="UP")
})

destination_model = api.model("Destination", {
    "floor": fields.Integer(required=True, min=0, example=5)
})

step_model = api.model("Step", {
    "steps": fields.Integer(min=1, max=MAX_STEPS_PER_CALL, example=1)
})

routing_response = api.model("RoutingResponse", {
    "message": fields.String(example="Pickup routed to elevator 1"),
    "elevator_id": fields.Integer(example=1)
})

elevator_status = api.model("ElevatorStatus", {
    "id": fields.Integer,
    "current_floor": fields.Integer,
    "direction": fields.String,
    "doors": fields.String,
    "destinations": fields.List(fields.Integer),
    "pending_requests": fields.Integer
})

system_status = api.model("SystemStatus", {
    "elevators": fields.List(fields.Nested(elevator_status)),
    "min_floor": fields.Integer,
    "max_floor": fields.Integer,
    "tick": fields.Integer
})


controller: Optional[ElevatorController] = None

def init_api(app: Flask, elevator_controller: ElevatorController) -> None:
    """Initialize the API with its controller."""
    global controller
    controller = elevator_controller
    api.init_app(app)

def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ElevatorSimException("Request body must be a JSON object", 400)
    return data

def _require_int(data: dict, key: str) -> int:
    value = data.get(key)
    if value is None:
        raise ElevatorSimException(f"'{key}' is required", 400)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ElevatorSimException(f"'{key}' must be an integer", 400)
    return value

@elevator_ns.route("/pickup")
class Pickup(Resource):
    @elevator_ns.expect(pickup_model)
    @elevator_ns.marshal_with(routing_response)
    def post(self):
        """Call an elevator to a floor."""
        data = _json_body()
        floor = _require_int(data, "floor")
        if data.get("direction") is None:
            raise ElevatorSimException("'direction' is required", 400)
        direction = Direction.parse(data["direction"])

        elevator = controller.request_pickup(floor, direction)
        return {
            "message": f"Pickup routed to elevator {elevator.id}",
            "elevator_id": elevator.id
        }

@elevator_ns.route("/<int:elevator_id>/destination")
class Destination(Resource):
    @elevator_ns.expect(destination_model)
    @elevator_ns.marshal_with(routing_response)
    def post(self, elevator_id):
        """Select a floor from inside an elevator."""
        floor = _require_int(_json_body(), "floor")
        elevator = controller.add_destination(elevator_id, floor)
        return {
            "message": f"Destination set: elevator {elevator.id} -> floor {floor}",
            "elevator_id": elevator.id
        }

@elevator_ns.route("/step")
class Step(Resource):
    @elevator_ns.expect(step_model)
    @elevator_ns.marshal_with(system_status)
    def post(self):
        """Advance the simulation by one or more ticks."""
        data = request.get_json(silent=True) or {}
        steps = data.get("steps", 1) if isinstance(data, dict) else 1
        if isinstance(steps, bool) or not isinstance(steps, int) \
                or not (1 <= steps <= MAX_STEPS_PER_CALL):
            raise ElevatorSimException(
                f"'steps' must be an integer between 1 and {MAX_STEPS_PER_CALL}", 400
            )
        for _ in range(steps):
            controller.step_all()
        return controller.get_system_status()

@elevator_ns.route("/status")
class SystemStatus(Resource):
    @elevator_ns.marshal_with(system_status)
    def get(self):
        """Get current system status."""
        return controller.get_system_status()

@elevator_ns.route("/<int:elevator_id>")
class ElevatorDetail(Resource):
    @elevator_ns.marshal_with(elevator_status)
    def get(self, elevator_id):
        """Get the status of one elevator."""
        return controller.get_elevator(elevator_id).snapshot().to_dict()

@health_ns.route("/health")
class HealthCheck(Resource):
    def get(self):
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat()
        }, 200

@api.errorhandler(ElevatorSimException)
def handle_error(error):
    """Handle simulation exceptions."""
    logger.warning(f"Request rejected: {error.message}")
    return {"error": error.message}, error.status_code

@api.errorhandler(Exception)
def handle_unexpected_error(error):
    """Handle unexpected errors."""
    if isinstance(error, HTTPException):
        return {"error": error.description}, error.code
    logger.exception("Unhandled error")
    return {"error": "Internal server error"}, 500
