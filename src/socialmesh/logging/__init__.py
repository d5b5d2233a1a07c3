"""SocialMesh Logging: logging port and its structlog adapter."""

from socialmesh.logging.port import LoggingPort
from socialmesh.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
