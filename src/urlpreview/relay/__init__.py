"""Local relay service."""

from .server import RelayService, create_relay_app

__all__ = ["RelayService", "create_relay_app"]
