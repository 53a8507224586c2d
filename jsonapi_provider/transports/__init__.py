"""Transports performing the HTTP calls of a network provider."""

from .http import HttpxTransport

__all__ = ["HttpxTransport"]
