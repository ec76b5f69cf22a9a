from flask import Flask
from flask import request as flask_request
from prometheus_client import Counter, Gauge, generate_latest, CONTENT_TYPE_LATEST
from flask_cors import CORS
from typing import Optional
from .api import init_api
from .config import Config
from .controller import ElevatorController

# Basic Prometheus metrics
REQUEST_COUNTER = Counter(
    'elevator_sim_requests_total', 'Total API requests', ['endpoint', 'method', 'status']
)
SIMULATION_TICK = Gauge('elevator_sim_tick', 'Completed simulation ticks')

def create_app(config: Optional[Config] = None,
               controller: Optional[ElevatorController] = None) -> Flask:
    """Application factory function."""
    app = Flask(__name__)
    CORS(app)

    # Initialize configuration
    config = config or Config()

    # Create the fleet
    controller = controller or ElevatorController.from_config(config)
    app.extensions['elevator_controller'] = controller

    # Initialize API
    init_api(app, controller)

    @app.after_request
    def _after_request(response):
        endpoint = flask_request.endpoint or 'unknown'
        REQUEST_COUNTER.labels(endpoint, flask_request.method, str(response.status_code)).inc()
        SIMULATION_TICK.set(controller.tick)
        return response

    @app.route('/metrics')
    def metrics():
        return generate_latest(), 200, {'Content-Type': CONTENT_TYPE_LATEST}

    return app
