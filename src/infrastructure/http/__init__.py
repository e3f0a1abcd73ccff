"""HTTP session helpers shared by network adapters."""

from .client import make_http_session

__all__ = ["make_http_session"]
