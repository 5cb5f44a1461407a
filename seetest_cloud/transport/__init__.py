"""HTTP transport and response classification for the cloud REST API."""

from .http_transport import HttpTransport, classify_response

__all__ = ["HttpTransport", "classify_response"]
