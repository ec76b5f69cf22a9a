#!/usr/bin/env python3
"""
Main entry point for the elevator simulation API.
"""
import logging
from elevator_sim import create_app
from elevator_sim.config import Config

if __name__ == "__main__":
    config = Config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    app = create_app(config)
    app.run(host=config.api_host, port=config.api_port)
