"""Persistence gateways for the authoritative board store."""

from .errors import (
    GatewayAuthError,
    GatewayError,
    GatewayForbiddenError,
    GatewayNotFoundError,
)
from .filesystem import FilesystemGateway
from .http import HttpGateway
from .protocol import GatewayProtocol

__all__ = [
    "FilesystemGateway",
    "GatewayAuthError",
    "GatewayError",
    "GatewayForbiddenError",
    "GatewayNotFoundError",
    "GatewayProtocol",
    "HttpGateway",
]
