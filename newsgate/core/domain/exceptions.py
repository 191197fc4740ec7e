"""Base domain exceptions.

All domain errors inherit from DomainException and carry a stable ``error_code``
class attribute that is used in structured log events.
"""


class DomainException(Exception):
    """Base exception for all domain errors."""

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        self.message = message
        super().__init__(self.message)


class ConfigError(DomainException):
    """Raised when startup configuration is missing or unusable."""

    error_code = "CONFIG_ERROR"
