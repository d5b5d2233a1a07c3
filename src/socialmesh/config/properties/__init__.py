"""Typed configuration property classes for each SocialMesh subsystem."""

from socialmesh.config.properties.security import JwtProperties, PasswordProperties, SecurityProperties
from socialmesh.config.properties.web import CorsProperties, WebProperties

__all__ = [
    "CorsProperties",
    "JwtProperties",
    "PasswordProperties",
    "SecurityProperties",
    "WebProperties",
]
