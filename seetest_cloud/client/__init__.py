"""Public client for the SeeTest Cloud device endpoints.

``CloudAPIClient`` is the entry point for library users; it wires the
HTTP transport to the query engine and wraps every device endpoint.
"""

from .cloud_client import CloudAPIClient, format_timestamp

__all__ = ["CloudAPIClient", "format_timestamp"]
