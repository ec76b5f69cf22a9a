"""
Configuration management with environment variables.
"""
import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Simulation configuration."""

    def __init__(self):
        self.num_elevators = int(os.getenv("NUM_ELEVATORS", 1))
        self.min_floor = int(os.getenv("MIN_FLOOR", 0))
        self.max_floor = int(os.getenv("MAX_FLOOR", 10))
        self.step_workers = int(os.getenv("STEP_WORKERS", 1))
        self.auto_step_delay = float(os.getenv("AUTO_STEP_DELAY", 0.5))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.api_host = os.getenv("API_HOST", "0.0.0.0")
        self.api_port = int(os.getenv("API_PORT", 5000))
