"""HTTP entry adapter."""

from .app import create_app
from .identity import header_identity_resolver
from .routes import get_engine, get_requester

__all__ = ["create_app", "get_engine", "get_requester", "header_identity_resolver"]
