"""Screen transport exceptions."""

from newsgate.core.domain.exceptions import DomainException


class TransportNegotiationError(DomainException):
    """Raised when a client cannot be brought into 3270 block mode."""

    error_code = "TRANSPORT_NEGOTIATION"


class RenderExchangeError(DomainException):
    """Raised when a screen cannot be sent or its response cannot be read."""

    error_code = "RENDER_EXCHANGE"
