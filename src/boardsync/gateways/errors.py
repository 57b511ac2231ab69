"""Gateway exceptions."""


class GatewayError(Exception):
    """Base exception for persistence failures (transport or non-2xx)."""

    pass


class GatewayAuthError(GatewayError):
    """Authentication failed."""

    pass


class GatewayForbiddenError(GatewayError):
    """Permission denied."""

    pass


class GatewayNotFoundError(GatewayError):
    """Resource not found."""

    pass
