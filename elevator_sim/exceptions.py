"""
Custom exceptions for the elevator simulation.
"""

class ElevatorSimException(Exception):
    """Base exception for all simulation errors."""
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

class OutOfRangeError(ElevatorSimException):
    """Floor number or elevator id outside the configured bounds."""
    def __init__(self, message: str):
        super().__init__(message, 400)

class InvalidDirectionError(ElevatorSimException):
    """Direction that cannot be used for a hall call."""
    def __init__(self, message: str):
        super().__init__(message, 400)

class InvalidConfigurationError(ElevatorSimException):
    """Fleet or floor range that cannot be constructed."""
    def __init__(self, message: str):
        super().__init__(f"Invalid configuration: {message}", 500)
