"""Resource providers: the operation contract and its HTTP implementation."""

from .base import ResourceProvider
from .network import HTTPRequest, NetworkResourceProvider, Transport

__all__ = ["HTTPRequest", "NetworkResourceProvider", "ResourceProvider", "Transport"]
